"""
Store interface shared by the database and local implementations.

The practice code and the services only type against ``VocabularyStore``;
which concrete store they get is decided by whether a user is signed in
(see ``vocabulary.storage.store_for_request``).

A store is always scoped to one owner: a user for ``DatabaseStore``, a
browser session or a file for the local stores. Rows are plain frozen
dataclasses so both implementations hand back the same shape.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import ContextManager, List, Optional, Protocol, Sequence, Tuple

from ..practice.bulk import EntryDraft


@dataclass(frozen=True)
class SectionRow:
    id: str
    name: str
    created_at: dt.datetime
    entry_count: int = 0


@dataclass(frozen=True)
class EntryRow:
    id: str
    term: str
    meaning: str
    example: str
    section_id: str
    created_at: dt.datetime
    ordinal: int = 0


@dataclass(frozen=True)
class CompletionRow:
    id: str
    user_id: str
    section_id: str
    section_name: str
    cycle_number: int
    completed_at: dt.datetime


class VocabularyStore(Protocol):
    """
    Minimal persistence contract.

    Listing order:
        sections     newest first
        entries      newest batch first, pasted line order inside a batch
        completions  newest first (``completed_at`` descending)

    Every method may raise ``PersistenceError``.
    """

    def list_sections(self) -> List[SectionRow]: ...
    def get_section(self, section_id: str) -> Optional[SectionRow]: ...
    def create_section(self, name: str) -> SectionRow: ...

    def list_entries(self) -> List[EntryRow]: ...
    def list_entries_by_section(self, section_id: str) -> List[EntryRow]: ...
    def create_entries(self, section_id: str, drafts: Sequence[EntryDraft]) -> List[EntryRow]: ...

    def list_completion_records(self, cycle_number: Optional[int] = None) -> List[CompletionRow]: ...
    def create_completion_record(
        self, section: SectionRow, cycle_number: int
    ) -> Tuple[CompletionRow, bool]: ...

    def locked(self) -> ContextManager[None]:
        """Make a read-then-write sequence atomic for this owner."""
        ...
