"""Stoichiometric reasoning: limiting reagent, equivalents, theoretical yield."""
from .engine import (
    analyze,
    compute_equivalents,
    compute_theoretical_yield,
    find_limiting_reagent,
    with_moles,
)

__all__ = [
    "analyze",
    "compute_equivalents",
    "compute_theoretical_yield",
    "find_limiting_reagent",
    "with_moles",
]
