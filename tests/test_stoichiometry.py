"""
Tests for the stoichiometry engine.
"""

import pytest

from reaction_analyzer.matching.types import (
    AnalyzedEntry,
    Amount,
    ResolutionStatus,
    ResolvedEntry,
    Role,
)
from reaction_analyzer.stoichiometry import (
    analyze,
    compute_equivalents,
    compute_theoretical_yield,
    find_limiting_reagent,
    with_moles,
)


def resolved(identifier, value=None, unit=None, molar_mass=None, role=Role.REAGENT,
             density=None, canonical_name=None):
    """Build a ResolvedEntry the way the resolution engine would."""
    return ResolvedEntry(
        raw_text=identifier,
        identifier=identifier,
        amount=Amount(value, unit) if unit else None,
        role=role,
        canonical_name=canonical_name or identifier,
        molar_mass=molar_mass,
        density=density,
        status=ResolutionStatus.RESOLVED if molar_mass else ResolutionStatus.NOT_FOUND,
    )


# ============================================================================
# MOLES AND EQUIVALENTS
# ============================================================================

class TestMolesAndEquivalents:
    """Tests for per-entry mole counts and equivalents."""

    def test_with_moles(self):
        entry = with_moles(resolved("NaCl", 5, "g", 58.44))
        assert isinstance(entry, AnalyzedEntry)
        assert entry.moles == pytest.approx(5 / 58.44)
        assert entry.equivalents is None

    def test_with_moles_uses_density(self):
        entry = with_moles(resolved("Ethanol", 10, "mL", 46.07, density=0.789))
        assert entry.moles == pytest.approx(10 * 0.789 / 46.07)

    def test_with_moles_missing_molar_mass(self):
        assert with_moles(resolved("Unobtainium", 3, "g")).moles is None

    @pytest.mark.parametrize("moles,min_moles,expected", [
        (0.002, 0.001, 2.0),
        (0.001, 0.001, 1.0),
        (None, 0.001, None),
        (0.002, None, None),
        (0.0, 0.001, None),
        (0.002, 0.0, None),
    ])
    def test_compute_equivalents(self, moles, min_moles, expected):
        result = compute_equivalents(moles, min_moles)
        if expected is None:
            assert result is None
        else:
            assert result == pytest.approx(expected)


# ============================================================================
# LIMITING REAGENT
# ============================================================================

class TestLimitingReagent:
    """Tests for limiting reagent selection."""

    def test_smallest_reagent_wins(self):
        result = analyze([
            resolved("NaCl", 5, "g", 58.44),
            resolved("AcOH", 1, "mmol", 60.052),
        ])
        assert result.limiting_reagent.identifier == "AcOH"
        assert result.limiting_reagent.moles == pytest.approx(0.001)

    def test_only_reagents_are_candidates(self):
        result = analyze([
            resolved("NaCl", 5, "g", 58.44),
            resolved("Pd", 0.1, "mmol", 106.42, role=Role.CATALYST),
            resolved("Water", 0.01, "mmol", 18.015, role=Role.SOLVENT),
            resolved("Product", 0.01, "mmol", 100.0, role=Role.PRODUCT),
        ])
        assert result.limiting_reagent.identifier == "NaCl"

    def test_tie_goes_to_first_in_input_order(self):
        entries = [
            resolved("A", 1, "mmol", 10.0),
            resolved("B", 1, "mmol", 20.0),
        ]
        assert analyze(entries).limiting_reagent.identifier == "A"
        assert analyze(list(reversed(entries))).limiting_reagent.identifier == "B"

    def test_no_mole_counts(self):
        result = analyze([
            resolved("Unobtainium", 3, "g"),
            resolved("NaCl", molar_mass=58.44),
        ])
        assert result.limiting_reagent is None
        assert result.theoretical_yield is None
        assert all(entry.equivalents is None for entry in result.reagents)

    def test_find_limiting_reagent_empty(self):
        assert find_limiting_reagent([]) is None

    def test_limiting_reagent_carries_equivalents(self):
        result = analyze([resolved("NaCl", 5, "g", 58.44), resolved("AcOH", 1, "mmol", 60.052)])
        assert result.limiting_reagent.equivalents == pytest.approx(1.0)
        assert result.limiting_reagent in result.reagents

    def test_equivalents_for_every_role(self):
        result = analyze([
            resolved("AcOH", 1, "mmol", 60.052),
            resolved("Water", 2, "mmol", 18.015, role=Role.SOLVENT),
            resolved("Pd", 0.5, "mmol", 106.42, role=Role.CATALYST),
        ])
        assert [e.equivalents for e in result.reagents] == pytest.approx([1.0, 2.0, 0.5])


# ============================================================================
# THEORETICAL YIELD
# ============================================================================

class TestTheoreticalYield:
    """Tests for the 1:1 theoretical yield estimate."""

    def test_product_basis(self):
        result = analyze([
            resolved("AcOH", 1, "mol", 60.052, canonical_name="Acetic acid"),
            resolved("Ester", None, None, 100.0, role=Role.PRODUCT, canonical_name="Ethyl ester"),
        ])
        assert result.theoretical_yield.mass_grams == pytest.approx(100.0)
        assert result.theoretical_yield.basis == "product"
        assert "Ethyl ester" in result.theoretical_yield.description
        assert "Acetic acid" in result.theoretical_yield.description

    @pytest.mark.parametrize("entries,limiting,expected_grams", [
        (
            [resolved("A", 1, "mol", 10.0), resolved("B", 2, "mol", 20.0),
             resolved("P", role=Role.PRODUCT, molar_mass=100.0)],
            "A", 100.0,
        ),
        (
            [resolved("A", 3, "mol", 10.0), resolved("B", 0.5, "mol", 20.0),
             resolved("P", role=Role.PRODUCT, molar_mass=100.0)],
            "B", 50.0,
        ),
    ])
    def test_product_yield_from_smallest_reagent(self, entries, limiting, expected_grams):
        result = analyze(entries)
        assert result.limiting_reagent.identifier == limiting
        assert result.theoretical_yield.basis == "product"
        assert result.theoretical_yield.mass_grams == pytest.approx(expected_grams)

    def test_product_without_molar_mass_is_skipped(self):
        result = analyze([
            resolved("AcOH", 1, "mol", 60.052),
            resolved("Mystery", role=Role.PRODUCT),
            resolved("Ester", role=Role.PRODUCT, molar_mass=88.11),
        ])
        assert result.theoretical_yield.mass_grams == pytest.approx(88.11)

    def test_self_yield_without_product(self):
        result = analyze([
            resolved("NaCl", 5, "g", 58.44, canonical_name="Sodium chloride"),
        ])
        assert result.theoretical_yield.mass_grams == pytest.approx(5.0)
        assert result.theoretical_yield.basis == "limiting_reagent"
        assert "Sodium chloride" in result.theoretical_yield.description

    def test_no_limiting_reagent_no_yield(self):
        assert compute_theoretical_yield([], None) is None

    def test_self_yield_without_molar_mass(self):
        limiting = AnalyzedEntry(raw_text="X", identifier="X", moles=0.1)
        assert compute_theoretical_yield([limiting], limiting) is None


# ============================================================================
# IMMUTABILITY
# ============================================================================

class TestStagedRecords:
    """Tests that analysis copies entries rather than mutating them."""

    def test_input_entries_unchanged(self):
        entry = resolved("NaCl", 5, "g", 58.44)
        result = analyze([entry])
        assert not hasattr(entry, "moles")
        assert result.reagents[0].raw_text == entry.raw_text

    def test_order_and_length_preserved(self):
        entries = [resolved(name, 1, "mmol", 10.0) for name in ["A", "B", "C", "D"]]
        result = analyze(entries)
        assert [e.identifier for e in result.reagents] == ["A", "B", "C", "D"]

    def test_to_dict(self):
        data = analyze([resolved("NaCl", 5, "g", 58.44)]).to_dict()
        assert data["limiting_reagent"]["identifier"] == "NaCl"
        assert data["reagents"][0]["amount"] == {"value": 5, "unit": "g"}
        assert data["reagents"][0]["status"] == "resolved"
