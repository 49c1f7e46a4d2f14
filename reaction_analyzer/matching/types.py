"""
Type definitions for reaction analysis.

Defines the staged entry records (raw -> resolved -> analyzed), the resolved
compound record and the tagged resolution outcome shared by all modules.
Every record is immutable; later stages are built by copying the previous
stage and extending it.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Tuple, Dict, Any


class Role(Enum):
    """Role of a chemical within the reaction."""
    REAGENT = "reagent"
    SOLVENT = "solvent"
    CATALYST = "catalyst"
    PRODUCT = "product"

    @classmethod
    def parse(cls, value: Any) -> 'Role':
        """Map free text to a role, defaulting to REAGENT."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.REAGENT


class ResolutionStatus(Enum):
    """Outcome categories of compound resolution."""
    RESOLVED = "resolved"
    AMBIGUOUS = "ambiguous"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Amount:
    """Declared quantity of a chemical (value + unit)."""
    value: float
    unit: str

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "unit": self.unit}


@dataclass(frozen=True)
class ResolvedCompound:
    """
    Canonical compound record.

    Produced once per lookup key and never mutated afterwards. Thermophysical
    properties are optional; ``density`` is in g/mL, temperatures in °C.
    """
    canonical_name: str
    cas_number: Optional[str] = None
    molar_mass: Optional[float] = None
    density: Optional[float] = None
    boiling_point: Optional[float] = None
    melting_point: Optional[float] = None
    solubility: Optional[str] = None
    smiles: Optional[str] = None
    source: str = "fallback"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "canonical_name": self.canonical_name,
            "cas_number": self.cas_number,
            "molar_mass": self.molar_mass,
            "density": self.density,
            "boiling_point": self.boiling_point,
            "melting_point": self.melting_point,
            "solubility": self.solubility,
            "smiles": self.smiles,
            "source": self.source,
        }


@dataclass(frozen=True)
class ResolutionOutcome:
    """
    Tagged result of resolving one identifier.

    ``compound`` is set only for RESOLVED; ``suggestions`` only carries
    names for AMBIGUOUS and NOT_FOUND.
    """
    status: ResolutionStatus
    compound: Optional[ResolvedCompound] = None
    suggestions: Tuple[str, ...] = ()

    @classmethod
    def resolved(cls, compound: ResolvedCompound) -> 'ResolutionOutcome':
        return cls(status=ResolutionStatus.RESOLVED, compound=compound)

    @classmethod
    def ambiguous(cls, suggestions) -> 'ResolutionOutcome':
        return cls(status=ResolutionStatus.AMBIGUOUS, suggestions=tuple(suggestions))

    @classmethod
    def not_found(cls, suggestions=()) -> 'ResolutionOutcome':
        return cls(status=ResolutionStatus.NOT_FOUND, suggestions=tuple(suggestions))

    @property
    def is_resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "compound": self.compound.to_dict() if self.compound else None,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class ChemicalEntry:
    """
    A candidate chemical entry extracted from reaction text.

    Attributes:
        raw_text: Original segment text (provenance, never rewritten)
        identifier: Best-effort name/synonym used as resolution key
        cas_number: CAS registry number found in the segment, if any
        smiles: SMILES-like token, only detected when no CAS number is present
        amount: Declared quantity, if a unit and a number were found
        role: Inferred role, defaults to reagent
    """
    raw_text: str
    identifier: str
    cas_number: Optional[str] = None
    smiles: Optional[str] = None
    amount: Optional[Amount] = None
    role: Role = Role.REAGENT

    @property
    def lookup_key(self) -> str:
        """CAS number first, then identifier, then SMILES."""
        return self.cas_number or self.identifier or self.smiles or ""

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, Amount):
                value = value.to_dict()
            elif isinstance(value, tuple):
                value = list(value)
            result[f.name] = value
        return result


@dataclass(frozen=True)
class ResolvedEntry(ChemicalEntry):
    """ChemicalEntry enriched with the fields of its resolution outcome."""
    canonical_name: Optional[str] = None
    molar_mass: Optional[float] = None
    density: Optional[float] = None
    boiling_point: Optional[float] = None
    melting_point: Optional[float] = None
    solubility: Optional[str] = None
    status: ResolutionStatus = ResolutionStatus.NOT_FOUND
    suggestions: Tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        return self.canonical_name or self.identifier


@dataclass(frozen=True)
class AnalyzedEntry(ResolvedEntry):
    """ResolvedEntry with its molar amount and equivalents."""
    moles: Optional[float] = None
    equivalents: Optional[float] = None


def extend(cls, base, **extra):
    """
    Build a ``cls`` record from every field of ``base`` plus ``extra``.

    Used to move an entry to its next stage without mutating it.
    """
    values = {f.name: getattr(base, f.name) for f in fields(base)}
    values.update(extra)
    return cls(**values)


@dataclass(frozen=True)
class TheoreticalYield:
    """Maximum product mass under 1:1 stoichiometry."""
    mass_grams: float
    description: str
    basis: str = "product"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mass_grams": self.mass_grams,
            "description": self.description,
            "basis": self.basis,
        }


@dataclass(frozen=True)
class StoichiometryResult:
    """Complete output of the stoichiometry engine."""
    reagents: Tuple[AnalyzedEntry, ...] = ()
    limiting_reagent: Optional[AnalyzedEntry] = None
    theoretical_yield: Optional[TheoreticalYield] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reagents": [r.to_dict() for r in self.reagents],
            "limiting_reagent": self.limiting_reagent.to_dict() if self.limiting_reagent else None,
            "theoretical_yield": self.theoretical_yield.to_dict() if self.theoretical_yield else None,
        }
