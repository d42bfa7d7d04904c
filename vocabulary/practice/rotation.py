# vocabulary/practice/rotation.py
"""
rotation.py – choose which section to practice next.

Sections are handed out in *cycles*: within one cycle every section is shown
once before any of them repeats. Progress is the user's completion records;
the current cycle is the ``cycle_number`` of the most recent record (1 when
there is none).
"""
from __future__ import annotations

import datetime as dt
import logging
import random
from dataclasses import dataclass
from typing import FrozenSet, Optional, Sequence

from ..errors import AuthenticationRequired
from ..storage.base import CompletionRow, SectionRow, VocabularyStore

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleState:
    number: int
    completed: FrozenSet[str]

    def unshown(self, sections: Sequence[SectionRow]) -> list[SectionRow]:
        return [s for s in sections if s.id not in self.completed]

    def exhausted(self, sections: Sequence[SectionRow]) -> bool:
        return bool(sections) and not self.unshown(sections)


def cycle_state(records: Sequence[CompletionRow]) -> CycleState:
    """*records* must be newest first, as every store returns them."""
    number = records[0].cycle_number if records else 1
    done = frozenset(r.section_id for r in records if r.cycle_number == number)
    return CycleState(number=number, completed=done)


@dataclass(frozen=True)
class Selection:
    section: Optional[SectionRow]
    cycle: Optional[int] = None          # None when nobody is signed in
    new_cycle: Optional[int] = None      # set only on rollover

    @property
    def started_new_cycle(self) -> bool:
        return self.new_cycle is not None

    @property
    def notice(self) -> Optional[str]:
        if self.new_cycle is None:
            return None
        return f"Starting cycle {self.new_cycle}. All sections are available again."


@dataclass(frozen=True)
class Completion:
    record: CompletionRow
    created: bool
    next: Selection


class SectionRotation:
    """
    Parameters
    ----------
    store
        Where sections and completion records come from.
    user
        The signed-in user, or ``None``. Without a user there is no rotation
        tracking: every pick is uniform over all sections.
    rng
        Source of randomness; pass a seeded ``random.Random`` for
        reproducible picks.
    """

    def __init__(self, store: VocabularyStore, user=None, rng: Optional[random.Random] = None):
        self.store = store
        self.user = user
        self.rng = rng or random.Random()

    def current_cycle(self) -> int:
        return cycle_state(self.store.list_completion_records()).number

    def select_next(self) -> Selection:
        """Read-only; a rollover is only reported, never written."""
        sections = self.store.list_sections()
        if not sections:
            return Selection(section=None)

        if self.user is None:
            return Selection(section=self.rng.choice(sections))

        state = cycle_state(self.store.list_completion_records())
        unshown = state.unshown(sections)
        if unshown:
            return Selection(section=self.rng.choice(unshown), cycle=state.number)

        new_cycle = state.number + 1
        log.info("rotation → all %s section(s) done in cycle %s, starting cycle %s",
                 len(sections), state.number, new_cycle)
        return Selection(section=self.rng.choice(sections), cycle=new_cycle, new_cycle=new_cycle)

    def mark_complete(self, section: SectionRow) -> Completion:
        """
        Record *section* as done in the active cycle, then pick the next one.

        Once every section is done in the current cycle, the write lands in
        the following cycle. A section already recorded in an unfinished
        cycle is not recorded twice; the existing record comes back with
        ``created=False``.
        """
        if self.user is None:
            raise AuthenticationRequired("Please sign in to track your progress.")

        with self.store.locked():
            sections = self.store.list_sections()
            state = cycle_state(self.store.list_completion_records())
            # a finished cycle is closed; the first write after it opens the next one
            cycle = state.number + 1 if state.exhausted(sections) else state.number
            record, created = self.store.create_completion_record(section, cycle)

        return Completion(record=record, created=created, next=self.select_next())


def todays_section(sections: Sequence[SectionRow], today: Optional[dt.date] = None) -> Optional[SectionRow]:
    """Fixed daily pick: day-of-year modulo the number of sections."""
    if not sections:
        return None
    today = today or dt.date.today()
    return sections[today.timetuple().tm_yday % len(sections)]
