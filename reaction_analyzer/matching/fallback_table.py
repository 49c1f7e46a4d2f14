"""
Local fallback compound table.

Read-only reference data consulted when no remote lookup is configured or
the remote lookup fails. Loaded once at import time and never mutated.
"""

from dataclasses import dataclass
from typing import Tuple

from reaction_analyzer.matching.types import ResolvedCompound


@dataclass(frozen=True)
class FallbackCompound:
    """A table row: the compound record plus its lower-case synonyms."""
    compound: ResolvedCompound
    synonyms: Tuple[str, ...]

    @property
    def canonical_name(self) -> str:
        return self.compound.canonical_name

    @property
    def cas_number(self) -> str:
        return self.compound.cas_number


FALLBACK_COMPOUNDS: Tuple[FallbackCompound, ...] = (
    FallbackCompound(
        compound=ResolvedCompound(
            canonical_name='Acetic acid',
            cas_number='64-19-7',
            molar_mass=60.052,
            density=1.049,
            boiling_point=118.1,
            melting_point=16.6,
            solubility='Miscible',
            smiles='CC(=O)O',
        ),
        synonyms=('acetic acid', 'ethanoic acid', 'ethansäure', 'essigsäure', 'acoh'),
    ),
    FallbackCompound(
        compound=ResolvedCompound(
            canonical_name='Sodium chloride',
            cas_number='7647-14-5',
            molar_mass=58.44,
            density=2.165,
            boiling_point=1465,
            melting_point=801,
            solubility='357 g/L (25 °C, water)',
            smiles='[Na+].[Cl-]',
        ),
        synonyms=('sodium chloride', 'nacl', 'kochsalz', 'table salt'),
    ),
    FallbackCompound(
        compound=ResolvedCompound(
            canonical_name='Ethanol',
            cas_number='64-17-5',
            molar_mass=46.07,
            density=0.789,
            boiling_point=78.37,
            melting_point=-114.1,
            solubility='Miscible with water',
            smiles='CCO',
        ),
        synonyms=('ethanol', 'ethyl alcohol', 'c2h5oh', 'etoh'),
    ),
    FallbackCompound(
        compound=ResolvedCompound(
            canonical_name='Hydrochloric acid',
            cas_number='7647-01-0',
            molar_mass=36.46,
            density=1.2,
            boiling_point=-85,
            melting_point=-114,
            solubility='Freely soluble in water',
            smiles='Cl',
        ),
        synonyms=('hydrochloric acid', 'hcl', 'chlorwasserstoff', 'salzsäure'),
    ),
    FallbackCompound(
        compound=ResolvedCompound(
            canonical_name='Water',
            cas_number='7732-18-5',
            molar_mass=18.015,
            density=1.0,
            boiling_point=100,
            melting_point=0,
            solubility='Unlimited (self)',
            smiles='O',
        ),
        synonyms=('water', 'h2o', 'wasser'),
    ),
    FallbackCompound(
        compound=ResolvedCompound(
            canonical_name='Sodium hydroxide',
            cas_number='1310-73-2',
            molar_mass=39.997,
            density=2.13,
            boiling_point=1388,
            melting_point=318,
            solubility='1110 g/L (20 °C, water)',
            smiles='[OH-].[Na+]',
        ),
        synonyms=('sodium hydroxide', 'naoh', 'caustic soda', 'natriumhydroxid'),
    ),
    FallbackCompound(
        compound=ResolvedCompound(
            canonical_name='Acetone',
            cas_number='67-64-1',
            molar_mass=58.08,
            density=0.7845,
            boiling_point=56.05,
            melting_point=-94.7,
            solubility='Miscible with water',
            smiles='CC(=O)C',
        ),
        synonyms=('acetone', 'propanone', 'propan-2-one', 'aceton'),
    ),
    FallbackCompound(
        compound=ResolvedCompound(
            canonical_name='Methanol',
            cas_number='67-56-1',
            molar_mass=32.04,
            density=0.792,
            boiling_point=64.7,
            melting_point=-97.6,
            solubility='Miscible with water',
            smiles='CO',
        ),
        synonyms=('methanol', 'methyl alcohol', 'meoh'),
    ),
)


def canonical_names(table: Tuple[FallbackCompound, ...] = FALLBACK_COMPOUNDS) -> Tuple[str, ...]:
    """All canonical names in table order."""
    return tuple(row.canonical_name for row in table)
