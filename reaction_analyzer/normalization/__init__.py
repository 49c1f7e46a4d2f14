"""
Normalization package for reaction entries.

Provides CAS number handling and conversion of heterogeneous quantity units
into moles.
"""

from .cas_extractor import CASExtractor, is_cas_number
from .quantity_normalizer import UNIT_CONVERSIONS, DEFAULT_DENSITY, to_moles

__all__ = [
    'CASExtractor',
    'is_cas_number',
    'UNIT_CONVERSIONS',
    'DEFAULT_DENSITY',
    'to_moles',
]
