"""
Adapter for entries produced by an alternative extractor.

A language-model extraction pass answers with records shaped like
``{"name", "casNumber", "smiles", "amount": {"value", "unit"}, "role"}``.
This module turns such records into ChemicalEntry values so they can flow
through resolution exactly like parsed entries.
"""
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from reaction_analyzer.matching.types import Amount, ChemicalEntry, Role
from reaction_analyzer.normalization.quantity_normalizer import UNIT_CONVERSIONS

_UNIT_ALIASES = {unit.lower(): unit for unit in UNIT_CONVERSIONS}


def _first(record: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _parse_amount(raw: Any) -> Optional[Amount]:
    if not isinstance(raw, dict):
        return None
    unit = _UNIT_ALIASES.get(str(raw.get('unit', '')).strip().lower())
    if unit is None:
        return None
    try:
        value = float(raw.get('value'))
    except (TypeError, ValueError):
        return None
    return Amount(value=value, unit=unit)


def entry_from_record(record: Dict[str, Any]) -> Optional[ChemicalEntry]:
    """
    Convert one extractor record; returns None if it names nothing.

    Unknown roles fall back to reagent, unusable amounts to None.
    """
    if not isinstance(record, dict):
        return None

    name = _first(record, 'name', 'identifier')
    cas_number = _first(record, 'casNumber', 'cas_number')
    smiles = _first(record, 'smiles')
    identifier = name or cas_number or smiles
    if identifier is None:
        return None

    return ChemicalEntry(
        raw_text=_first(record, 'raw', 'raw_text') or identifier,
        identifier=identifier,
        cas_number=cas_number,
        smiles=smiles,
        amount=_parse_amount(record.get('amount')),
        role=Role.parse(record.get('role')),
    )


def entries_from_records(records: Iterable[Dict[str, Any]]) -> List[ChemicalEntry]:
    """Convert extractor records, skipping those without any identifier."""
    entries = []
    for record in records or []:
        entry = entry_from_record(record)
        if entry is None:
            logger.debug(f"Skipping extractor record without identifier: {record!r}")
            continue
        entries.append(entry)
    return entries
