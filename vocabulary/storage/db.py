# vocabulary/storage/db.py
"""
Django ORM store for signed-in users.
"""
from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from typing import List, Optional, Sequence, Tuple

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, models, transaction
from django.utils import timezone

from ..errors import PersistenceError
from ..models import CompletionRecord, Entry, Section
from ..practice.bulk import EntryDraft
from .base import CompletionRow, EntryRow, SectionRow

log = logging.getLogger(__name__)


def _wrap_db_errors(fn):
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except DatabaseError as exc:
            log.exception("store → %s failed", fn.__name__)
            raise PersistenceError(f"Could not {fn.__name__.replace('_', ' ')}.") from exc
    return wrapper


def _section_row(s: Section, entry_count: int = 0) -> SectionRow:
    return SectionRow(id=str(s.id), name=s.name, created_at=s.created_at, entry_count=entry_count)


def _entry_row(e: Entry) -> EntryRow:
    return EntryRow(
        id=str(e.id),
        term=e.term,
        meaning=e.meaning,
        example=e.example,
        section_id=str(e.section_id),
        created_at=e.created_at,
        ordinal=e.ordinal,
    )


def _completion_row(r: CompletionRecord) -> CompletionRow:
    return CompletionRow(
        id=str(r.id),
        user_id=str(r.user_id),
        section_id=str(r.section_id),
        section_name=r.section_name,
        cycle_number=r.cycle_number,
        completed_at=r.completed_at,
    )


class DatabaseStore:
    """All reads and writes are filtered by ``user``."""

    def __init__(self, user):
        self.user = user

    # ── sections ─────────────────────────────────────────────────────
    @_wrap_db_errors
    def list_sections(self) -> List[SectionRow]:
        qs = (
            Section.objects.filter(user=self.user)
            .annotate(n_entries=models.Count("entries"))
            .order_by("-created_at")
        )
        return [_section_row(s, s.n_entries) for s in qs]

    @_wrap_db_errors
    def get_section(self, section_id: str) -> Optional[SectionRow]:
        try:
            s = (
                Section.objects.filter(user=self.user, pk=section_id)
                .annotate(n_entries=models.Count("entries"))
                .first()
            )
        except (DjangoValidationError, ValueError):
            # not a UUID
            return None
        return _section_row(s, s.n_entries) if s else None

    @_wrap_db_errors
    def create_section(self, name: str) -> SectionRow:
        s = Section.objects.create(user=self.user, name=name)
        log.info("section created → %r (user=%s)", s.name, self.user.pk)
        return _section_row(s)

    # ── entries ──────────────────────────────────────────────────────
    @_wrap_db_errors
    def list_entries(self) -> List[EntryRow]:
        qs = Entry.objects.filter(user=self.user).order_by("-created_at", "ordinal")
        return [_entry_row(e) for e in qs]

    @_wrap_db_errors
    def list_entries_by_section(self, section_id: str) -> List[EntryRow]:
        try:
            qs = Entry.objects.filter(user=self.user, section_id=section_id).order_by("-created_at", "ordinal")
            return [_entry_row(e) for e in qs]
        except (DjangoValidationError, ValueError):
            return []

    @_wrap_db_errors
    def create_entries(self, section_id: str, drafts: Sequence[EntryDraft]) -> List[EntryRow]:
        now = timezone.now()
        objs = [
            Entry(
                user=self.user,
                section_id=section_id,
                term=d.term,
                meaning=d.meaning,
                example=d.example,
                created_at=now,
                ordinal=i,
            )
            for i, d in enumerate(drafts)
        ]
        with transaction.atomic():
            Entry.objects.bulk_create(objs)
        log.info("entries created → %s in section %s", len(objs), section_id)
        return [_entry_row(e) for e in objs]

    # ── completion records ───────────────────────────────────────────
    @_wrap_db_errors
    def list_completion_records(self, cycle_number: Optional[int] = None) -> List[CompletionRow]:
        qs = CompletionRecord.objects.filter(user=self.user)
        if cycle_number is not None:
            qs = qs.filter(cycle_number=cycle_number)
        return [_completion_row(r) for r in qs.order_by("-completed_at", "-cycle_number")]

    @_wrap_db_errors
    def create_completion_record(self, section: SectionRow, cycle_number: int) -> Tuple[CompletionRow, bool]:
        lookup = dict(user=self.user, section_id=section.id, cycle_number=cycle_number)
        try:
            with transaction.atomic():
                obj, created = CompletionRecord.objects.get_or_create(
                    **lookup, defaults={"section_name": section.name},
                )
        except IntegrityError:
            # lost a race against the unique constraint; the winner's row stands
            obj, created = CompletionRecord.objects.get(**lookup), False
        if created:
            log.info("completion recorded → %r cycle=%s (user=%s)", section.name, cycle_number, self.user.pk)
        return _completion_row(obj), created

    @contextmanager
    def locked(self):
        """
        One transaction with the owner's user row locked, so concurrent
        completions for the same user serialize on the cycle decision.
        """
        with transaction.atomic():
            try:
                User = get_user_model()
                list(User.objects.select_for_update().filter(pk=self.user.pk).values_list("pk", flat=True))
            except DatabaseError as exc:
                log.exception("store → lock failed")
                raise PersistenceError("Could not lock practice state.") from exc
            yield
