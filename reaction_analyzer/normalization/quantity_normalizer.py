"""
Quantity normalization module.

Converts a declared amount (value + unit) into moles using the resolved
molar mass and, for volumes, the density.
"""

import math
from typing import Optional

from reaction_analyzer.matching.types import Amount

# Volumes without a known density are treated as 1 g/mL.
DEFAULT_DENSITY = 1.0


def _from_mol(value, molar_mass, density):
    return value


def _from_mmol(value, molar_mass, density):
    return value * 0.001


def _from_g(value, molar_mass, density):
    return value / molar_mass


def _from_mg(value, molar_mass, density):
    return value / 1000 / molar_mass


def _from_ml(value, molar_mass, density):
    return (value * (density if density is not None else DEFAULT_DENSITY)) / molar_mass


# unit -> converter(value, molar_mass, density)
UNIT_CONVERSIONS = {
    'mol': _from_mol,
    'mmol': _from_mmol,
    'g': _from_g,
    'mg': _from_mg,
    'mL': _from_ml,
}


def to_moles(amount: Optional[Amount],
             molar_mass: Optional[float],
             density: Optional[float] = None) -> Optional[float]:
    """
    Convert an amount into moles.

    Args:
        amount: Declared amount (None if the entry had no quantity)
        molar_mass: Molar mass in g/mol
        density: Density in g/mL, only used for ``mL`` amounts

    Returns:
        Finite non-negative mole count, or None when the amount or molar
        mass is missing/zero, the unit is unknown, or the result would be
        negative or not finite.

    Examples:
        >>> round(to_moles(Amount(5, 'g'), 58.44), 4)
        0.0856
        >>> to_moles(Amount(5, 'L'), 58.44) is None
        True
    """
    if amount is None or not molar_mass:
        return None

    converter = UNIT_CONVERSIONS.get(amount.unit)
    if converter is None:
        return None

    try:
        moles = float(converter(float(amount.value), float(molar_mass), density))
    except (TypeError, ValueError, ZeroDivisionError, OverflowError):
        return None

    if not math.isfinite(moles) or moles < 0:
        return None
    return moles
