# vocabulary/practice/bulk.py
"""
bulk.py – turn pasted text into vocabulary drafts.

Grammar, one entry per line:

    term | meaning | example

Whitespace around each field is insignificant. Lines that are blank or that
do not split into exactly three fields are dropped without an error.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List

DELIMITER = "|"
FIELD_COUNT = 3


@dataclass(frozen=True)
class EntryDraft:
    term: str
    meaning: str
    example: str

    def as_dict(self) -> dict:
        return asdict(self)


def parse_entries(text: str) -> List[EntryDraft]:
    """
    Parse *text* into drafts, preserving line order.

    Never raises; an input with no valid line yields ``[]`` and the caller
    decides how to report that.
    """
    drafts: list[EntryDraft] = []
    # only "\n" ends a line; other separators stay inside a field
    for line in (text or "").split("\n"):
        if not line.strip():
            continue
        parts = [p.strip() for p in line.split(DELIMITER)]
        if len(parts) != FIELD_COUNT:
            continue
        drafts.append(EntryDraft(*parts))
    return drafts


def count_valid_entries(text: str) -> int:
    return len(parse_entries(text))
