"""Extraction of candidate chemical entries from reaction text."""
from .entry_extractor import (
    ROLE_KEYWORDS,
    UNIT_PATTERNS,
    EntryExtractor,
    extract,
)
from .records import entries_from_records, entry_from_record

__all__ = [
    "EntryExtractor",
    "extract",
    "UNIT_PATTERNS",
    "ROLE_KEYWORDS",
    "entries_from_records",
    "entry_from_record",
]
