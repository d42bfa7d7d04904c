# vocabulary/storage/local.py
"""
Device-scoped stores for people who are not signed in.

``LocalStore`` keeps JSON-compatible rows in any mutable mapping and mirrors
``DatabaseStore`` exactly: same row types, same ordering, same filtering.
Two backings are provided:

* ``SessionStore``  – the Django session of an anonymous browser
* ``JsonFileStore`` – a JSON file on disk, used by the management commands
"""
from __future__ import annotations

import json
import logging
import threading
import uuid
from pathlib import Path
from typing import Any, Dict, List, MutableMapping, Optional, Sequence, Tuple

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from ..errors import PersistenceError
from ..practice.bulk import EntryDraft
from .base import CompletionRow, EntryRow, SectionRow

log = logging.getLogger(__name__)

SECTIONS_KEY = "vocabulary-sections"
ENTRIES_KEY = "vocabulary-entries"
COMPLETIONS_KEY = "section-practice-sessions"

LOCAL_USER_ID = "local"


def _ts(raw: str):
    d = parse_datetime(raw or "")
    if d is None:
        raise ValueError(f"bad timestamp {raw!r}")
    return d


def _newest_first(rows: List[dict], field: str, tie=None) -> List[dict]:
    """
    Order rows by ``field`` descending. Equal timestamps fall back to
    ``tie(row)`` descending, then to the most recently appended row.
    """
    indexed = list(enumerate(rows))
    indexed.sort(
        key=lambda ir: (_ts(ir[1][field]), tie(ir[1]) if tie else 0, ir[0]),
        reverse=True,
    )
    return [r for _, r in indexed]


class LocalStore:
    def __init__(self, data: Optional[MutableMapping[str, Any]] = None, user_id: str = LOCAL_USER_ID):
        self.data: MutableMapping[str, Any] = {} if data is None else data
        self.user_id = user_id
        self._lock = threading.RLock()

    # ── backing helpers ──────────────────────────────────────────────
    def _rows(self, key: str) -> List[Dict[str, Any]]:
        """Rows under *key* for reading; the backing mapping is left untouched."""
        rows = self.data.get(key, [])
        if not isinstance(rows, list):
            raise PersistenceError(f"Local store is corrupt ({key}).")
        return rows

    def _writable_rows(self, key: str) -> List[Dict[str, Any]]:
        rows = self._rows(key)
        if key not in self.data:
            self.data[key] = rows
        return rows

    def _commit(self) -> None:
        """Hook for backings that must be told about writes."""

    def _read(self, fn):
        try:
            return fn()
        except (KeyError, TypeError, ValueError) as exc:
            log.exception("local store → read failed")
            raise PersistenceError("Local store is unreadable.") from exc

    # ── sections ─────────────────────────────────────────────────────
    def list_sections(self) -> List[SectionRow]:
        def go():
            counts: Dict[str, int] = {}
            for e in self._rows(ENTRIES_KEY):
                counts[e["section_id"]] = counts.get(e["section_id"], 0) + 1
            return [
                SectionRow(id=s["id"], name=s["name"], created_at=_ts(s["created_at"]),
                           entry_count=counts.get(s["id"], 0))
                for s in _newest_first(self._rows(SECTIONS_KEY), "created_at")
            ]
        return self._read(go)

    def get_section(self, section_id: str) -> Optional[SectionRow]:
        for s in self.list_sections():
            if s.id == section_id:
                return s
        return None

    def create_section(self, name: str) -> SectionRow:
        with self._lock:
            row = {"id": uuid.uuid4().hex, "name": name, "created_at": timezone.now().isoformat()}
            self._writable_rows(SECTIONS_KEY).append(row)
            self._commit()
        log.info("section created locally → %r", name)
        return SectionRow(id=row["id"], name=name, created_at=_ts(row["created_at"]))

    # ── entries ──────────────────────────────────────────────────────
    @staticmethod
    def _entry_row(e: dict) -> EntryRow:
        return EntryRow(
            id=e["id"],
            term=e["term"],
            meaning=e["meaning"],
            example=e["example"],
            section_id=e["section_id"],
            created_at=_ts(e["created_at"]),
            ordinal=int(e.get("ordinal", 0)),
        )

    def list_entries(self) -> List[EntryRow]:
        return self._read(lambda: [
            self._entry_row(e)
            for e in _newest_first(self._rows(ENTRIES_KEY), "created_at",
                                    tie=lambda e: -int(e.get("ordinal", 0)))
        ])

    def list_entries_by_section(self, section_id: str) -> List[EntryRow]:
        return [e for e in self.list_entries() if e.section_id == section_id]

    def create_entries(self, section_id: str, drafts: Sequence[EntryDraft]) -> List[EntryRow]:
        now = timezone.now().isoformat()
        new = [
            {
                "id": uuid.uuid4().hex,
                "term": d.term,
                "meaning": d.meaning,
                "example": d.example,
                "section_id": section_id,
                "created_at": now,
                "ordinal": i,
            }
            for i, d in enumerate(drafts)
        ]
        with self._lock:
            self._writable_rows(ENTRIES_KEY).extend(new)
            self._commit()
        log.info("entries created locally → %s in section %s", len(new), section_id)
        return [self._entry_row(e) for e in new]

    # ── completion records ───────────────────────────────────────────
    @staticmethod
    def _completion_row(r: dict) -> CompletionRow:
        return CompletionRow(
            id=r["id"],
            user_id=r["user_id"],
            section_id=r["section_id"],
            section_name=r["section_name"],
            cycle_number=int(r["cycle_number"]),
            completed_at=_ts(r["completed_at"]),
        )

    def list_completion_records(self, cycle_number: Optional[int] = None) -> List[CompletionRow]:
        rows = self._read(lambda: [
            self._completion_row(r)
            for r in _newest_first(self._rows(COMPLETIONS_KEY), "completed_at",
                                    tie=lambda r: int(r["cycle_number"]))
        ])
        if cycle_number is not None:
            rows = [r for r in rows if r.cycle_number == cycle_number]
        return rows

    def create_completion_record(self, section: SectionRow, cycle_number: int) -> Tuple[CompletionRow, bool]:
        with self._lock:
            for r in self.list_completion_records(cycle_number):
                if r.section_id == section.id:
                    return r, False
            row = {
                "id": uuid.uuid4().hex,
                "user_id": self.user_id,
                "section_id": section.id,
                "section_name": section.name,
                "cycle_number": cycle_number,
                "completed_at": timezone.now().isoformat(),
            }
            self._writable_rows(COMPLETIONS_KEY).append(row)
            self._commit()
        log.info("completion recorded locally → %r cycle=%s", section.name, cycle_number)
        return self._completion_row(row), True

    def locked(self):
        return self._lock


class SessionStore(LocalStore):
    """Rows live in ``request.session``; anonymous users only."""

    def __init__(self, session):
        super().__init__(session, user_id=LOCAL_USER_ID)
        self.session = session

    def _commit(self) -> None:
        # in-place list mutations are invisible to the session machinery
        self.session.modified = True


class JsonFileStore(LocalStore):
    """Rows live in a JSON file that is rewritten after every write."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(self._load(), user_id=LOCAL_USER_ID)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            log.exception("local store → cannot read %s", self.path)
            raise PersistenceError(f"Cannot read local store {self.path}.") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"Local store {self.path} is not a JSON object.")
        return data

    def _commit(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(dict(self.data), indent=2), encoding="utf-8")
        except OSError as exc:
            log.exception("local store → cannot write %s", self.path)
            raise PersistenceError(f"Cannot write local store {self.path}.") from exc
