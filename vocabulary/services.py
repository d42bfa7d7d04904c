# vocabulary/services.py
"""
User actions over a store. Input is validated here, before anything is
written, so a rejected action never leaves partial state behind.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import SectionNotFound, ValidationError
from .practice.bulk import EntryDraft, parse_entries
from .storage.base import EntryRow, SectionRow, VocabularyStore

log = logging.getLogger(__name__)

FORMAT_HINT = "term | meaning | example"


def _text(value, what: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{what} must be text")
    return value


def find_section(store: VocabularyStore, section_id: Optional[str]) -> SectionRow:
    if not section_id:
        raise ValidationError("Please select a section")
    section = store.get_section(str(section_id))
    if section is None:
        raise SectionNotFound(f"Section {section_id} does not exist")
    return section


def find_section_by_name(store: VocabularyStore, name: str) -> Optional[SectionRow]:
    """Case-insensitive lookup, the same comparison the duplicate check uses."""
    wanted = (name or "").strip().lower()
    for s in store.list_sections():
        if s.name.lower() == wanted:
            return s
    return None


def create_section(store: VocabularyStore, name: Optional[str]) -> SectionRow:
    name = _text(name, "Section name").strip()
    if not name:
        raise ValidationError("Please enter a section name")
    # caller-side check only; the store itself accepts duplicates
    if find_section_by_name(store, name) is not None:
        raise ValidationError("A section with this name already exists")
    return store.create_section(name)


def preview_entries(text: Optional[str]) -> List[EntryDraft]:
    return parse_entries(_text(text, "Entries"))


def add_entries(store: VocabularyStore, section_id: Optional[str], text: Optional[str]) -> Tuple[SectionRow, List[EntryRow]]:
    """
    Parse *text* and append every valid line to the section as one batch.

    Raises
    ------
    ValidationError
        no section selected, empty text, or no line in ``term | meaning | example`` form
    SectionNotFound
        the section id is unknown to this store
    PersistenceError
        the batch could not be written (nothing is written in that case)
    """
    section = find_section(store, section_id)
    text = _text(text, "Entries")
    if not text.strip():
        raise ValidationError("Please enter vocabulary entries")

    drafts = parse_entries(text)
    if not drafts:
        raise ValidationError(f"No valid entries found. Please use format: {FORMAT_HINT}")

    rows = store.create_entries(section.id, drafts)
    log.info("bulk add → %s entr%s to %r", len(rows), "y" if len(rows) == 1 else "ies", section.name)
    return section, rows


def search_sections(store: VocabularyStore, query: Optional[str]) -> List[SectionRow]:
    """Sections whose name contains *query*, ignoring case. No query matches all."""
    needle = (query or "").lower()
    return [s for s in store.list_sections() if needle in s.name.lower()]


def section_totals(sections: Sequence[SectionRow]) -> Dict[str, int]:
    return {
        "sections": len(sections),
        "entries": sum(s.entry_count for s in sections),
        "sections_with_entries": sum(1 for s in sections if s.entry_count > 0),
    }
