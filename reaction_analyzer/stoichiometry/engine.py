"""
Stoichiometry engine.

Given resolved entries, computes moles, picks the limiting reagent,
expresses every entry in equivalents of it and estimates the theoretical
yield under 1:1 stoichiometry.

Limiting-reagent candidates are entries with role ``reagent`` only;
solvents, catalysts and products still receive equivalents.
"""

import logging
from typing import Iterable, List, Optional

from reaction_analyzer.matching.types import (
    AnalyzedEntry,
    ResolvedEntry,
    Role,
    StoichiometryResult,
    TheoreticalYield,
    extend,
)
from reaction_analyzer.normalization.quantity_normalizer import to_moles

logger = logging.getLogger(__name__)


def with_moles(entry: ResolvedEntry) -> AnalyzedEntry:
    """Copy ``entry`` into an AnalyzedEntry with its mole count."""
    moles = to_moles(entry.amount, entry.molar_mass, entry.density)
    return extend(AnalyzedEntry, entry, moles=moles, equivalents=None)


def find_limiting_reagent(entries: List[AnalyzedEntry]) -> Optional[AnalyzedEntry]:
    """
    First reagent (input order) holding the smallest non-null mole count.

    Returns None when no reagent has a mole count.
    """
    candidates = [e for e in entries if e.role is Role.REAGENT and e.moles is not None]
    if not candidates:
        return None
    min_moles = min(e.moles for e in candidates)
    for entry in candidates:
        if entry.moles == min_moles:
            return entry
    return None


def compute_equivalents(moles: Optional[float], min_moles: Optional[float]) -> Optional[float]:
    """``moles / min_moles`` when both are non-null and non-zero."""
    if not moles or not min_moles:
        return None
    return moles / min_moles


def compute_theoretical_yield(entries: List[AnalyzedEntry],
                              limiting: Optional[AnalyzedEntry]) -> Optional[TheoreticalYield]:
    """
    Theoretical yield assuming 1:1 stoichiometry.

    The first product entry with a molar mass is the preferred basis;
    without one, the limiting reagent's own molar mass is used.

    Returns:
        TheoreticalYield, or None without a limiting mole count or basis
    """
    if limiting is None or limiting.moles is None:
        return None
    min_moles = limiting.moles

    product = next(
        (e for e in entries if e.role is Role.PRODUCT and e.molar_mass), None
    )
    if product is not None:
        return TheoreticalYield(
            mass_grams=min_moles * product.molar_mass,
            description=(
                f"Theoretical yield of {product.display_name} assuming 1:1 "
                f"stoichiometry based on {limiting.display_name}."
            ),
            basis='product',
        )

    if limiting.molar_mass:
        return TheoreticalYield(
            mass_grams=min_moles * limiting.molar_mass,
            description=(
                f"Theoretical yield assuming 1:1 stoichiometry based on "
                f"{limiting.display_name}."
            ),
            basis='limiting_reagent',
        )
    return None


def analyze(entries: Iterable[ResolvedEntry]) -> StoichiometryResult:
    """
    Run the stoichiometric analysis.

    Args:
        entries: Resolved (or already analyzed) entries in input order

    Returns:
        StoichiometryResult with every entry, the limiting reagent and yield
    """
    analyzed = [with_moles(entry) for entry in entries]
    limiting = find_limiting_reagent(analyzed)
    min_moles = limiting.moles if limiting is not None else None

    reagents = tuple(
        extend(AnalyzedEntry, entry, equivalents=compute_equivalents(entry.moles, min_moles))
        for entry in analyzed
    )
    if limiting is not None:
        index = next(i for i, entry in enumerate(analyzed) if entry is limiting)
        limiting = reagents[index]

    theoretical_yield = compute_theoretical_yield(list(reagents), limiting)

    if limiting is None:
        logger.debug("No reagent with a mole count, no limiting reagent chosen")
    else:
        logger.debug(f"Limiting reagent: {limiting.display_name} ({limiting.moles:.6g} mol)")

    return StoichiometryResult(
        reagents=reagents,
        limiting_reagent=limiting,
        theoretical_yield=theoretical_yield,
    )
