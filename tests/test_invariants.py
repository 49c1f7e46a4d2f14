"""
Invariant Test Suite for the reaction analyzer.

These tests encode the system's structural guarantees as executable
assertions rather than checking individual functions:

  1. Mole counts are finite and non-negative (or None)
  2. Conversions are monotonic in the declared value
  3. Equivalents exist only with both mole counts
  4. Limiting reagent candidates are reagents only
  5. Outcome suggestions are populated for unresolved identifiers
  6. Rule tables and reference data are immutable constants
  7. Remote failures never escape the resolution engine

Run:  pytest tests/test_invariants.py -v
"""

import math

import pytest

from reaction_analyzer.extraction.entry_extractor import ROLE_KEYWORDS, UNIT_PATTERNS
from reaction_analyzer.matching.fallback_table import FALLBACK_COMPOUNDS
from reaction_analyzer.matching.resolution_engine import ResolutionEngine
from reaction_analyzer.matching.types import Amount, ResolutionStatus, Role
from reaction_analyzer.normalization.quantity_normalizer import UNIT_CONVERSIONS, to_moles
from reaction_analyzer.pipeline import analyze_reaction
from reaction_analyzer.remote.base_api import APIError, RateLimitExceeded
from tests.fixtures.fake_remote import FakeResponse
from tests.fixtures.test_data import SAMPLE_REACTIONS

UNITS = sorted(UNIT_CONVERSIONS)


# ============================================================================
# 1-2. MOLE COUNTS
# ============================================================================

class TestMoleInvariants:

    @pytest.mark.parametrize("unit", UNITS)
    def test_monotonic_in_value(self, unit):
        values = [0.001, 0.5, 1, 2, 10, 250, 1e4]
        moles = [to_moles(Amount(v, unit), 58.44, 0.9) for v in values]
        assert all(a < b for a, b in zip(moles, moles[1:])), f"{unit}: {moles}"

    @pytest.mark.parametrize("unit", UNITS)
    def test_zero_only_for_zero_value(self, unit):
        assert to_moles(Amount(0, unit), 58.44) == 0
        assert to_moles(Amount(1e-6, unit), 58.44) > 0

    @pytest.mark.parametrize("value", [-1, math.inf, -math.inf, math.nan, 1e308])
    @pytest.mark.parametrize("unit", UNITS)
    def test_never_nan_or_negative(self, unit, value):
        moles = to_moles(Amount(value, unit), 1e-300, 1e10)
        assert moles is None or (math.isfinite(moles) and moles >= 0)

    @pytest.mark.parametrize("text", SAMPLE_REACTIONS)
    def test_analyzed_moles_finite(self, text):
        for entry in analyze_reaction(text).reagents:
            assert entry.moles is None or (math.isfinite(entry.moles) and entry.moles >= 0)


# ============================================================================
# 3-4. EQUIVALENTS AND LIMITING REAGENT
# ============================================================================

class TestStoichiometryInvariants:

    @pytest.mark.parametrize("text", SAMPLE_REACTIONS + [
        "1 mmol AcOH, 2 mmol Water (solvent), 0.1 mmol NaOH catalyst",
        "0 g NaCl, 1 mmol AcOH",
    ])
    def test_equivalents_require_both_mole_counts(self, text):
        report = analyze_reaction(text)
        limiting_moles = report.limiting_reagent.moles if report.limiting_reagent else None
        for entry in report.reagents:
            if entry.equivalents is not None:
                assert entry.moles and limiting_moles

    def test_limiting_reagent_is_a_reagent(self):
        report = analyze_reaction(
            "0.01 mmol NaOH catalyst, 1 g Water (solvent), 5 g NaCl, 1 mmol AcOH"
        )
        assert report.limiting_reagent.role is Role.REAGENT
        assert report.limiting_reagent.canonical_name == "Acetic acid"
        assert len(report.reagents) == 4

    def test_limiting_reagent_has_smallest_reagent_moles(self):
        report = analyze_reaction("5 g NaCl, 1 mmol AcOH, 10 mL Ethanol, 0.5 mol Acetone")
        reagent_moles = [
            e.moles for e in report.reagents
            if e.role is Role.REAGENT and e.moles is not None
        ]
        assert report.limiting_reagent.moles == min(reagent_moles)


# ============================================================================
# 5. OUTCOME SUGGESTIONS
# ============================================================================

class TestOutcomeInvariants:

    @pytest.mark.parametrize("identifier", ["acid", "sodium", "Unobtainium", "xyz", "NaCl", "64-19-7"])
    def test_unresolved_outcomes_carry_suggestions(self, offline_engine, identifier):
        outcome = offline_engine.resolve(identifier)
        if outcome.status is ResolutionStatus.RESOLVED:
            assert outcome.compound is not None
            assert outcome.suggestions == ()
        else:
            assert outcome.suggestions

    @pytest.mark.parametrize("identifier", ["acid", "NaCl", "Unobtainium", ""])
    def test_idempotent_without_remote(self, offline_engine, identifier):
        assert offline_engine.resolve(identifier) == offline_engine.resolve(identifier)

    def test_entries_do_not_alias(self):
        report = analyze_reaction("1 g NaCl, 2 g NaCl")
        first, second = report.reagents
        assert first is not second
        assert first.moles != second.moles


# ============================================================================
# 6. IMMUTABLE REFERENCE DATA
# ============================================================================

class TestReferenceData:

    def test_rule_tables_are_tuples(self):
        assert isinstance(UNIT_PATTERNS, tuple)
        assert isinstance(ROLE_KEYWORDS, tuple)
        assert isinstance(FALLBACK_COMPOUNDS, tuple)

    def test_fallback_rows_consistent(self):
        cas_numbers = [row.cas_number for row in FALLBACK_COMPOUNDS]
        assert len(set(cas_numbers)) == len(cas_numbers)
        for row in FALLBACK_COMPOUNDS:
            assert row.compound.molar_mass > 0
            assert row.synonyms
            assert all(s == s.lower() for s in row.synonyms)

    def test_every_unit_rule_has_a_conversion(self):
        assert {unit for unit, _ in UNIT_PATTERNS} == set(UNIT_CONVERSIONS)

    def test_analysis_leaves_table_untouched(self):
        before = [row.compound.to_dict() for row in FALLBACK_COMPOUNDS]
        analyze_reaction("5 g NaCl, 1 mmol AcOH, 2 g acid")
        assert [row.compound.to_dict() for row in FALLBACK_COMPOUNDS] == before


# ============================================================================
# 7. REMOTE FAILURE CONTAINMENT
# ============================================================================

class TestRemoteContainment:

    @pytest.mark.parametrize("failure", [
        APIError("down"),
        RateLimitExceeded("slow down"),
        TimeoutError("timed out"),
        RuntimeError("unexpected"),
        FakeResponse(status_code=500),
        FakeResponse(None),
        FakeResponse({"PropertyTable": None}),
    ])
    def test_remote_failure_never_escapes(self, fake_fetch_factory, failure):
        engine = ResolutionEngine(fetch=fake_fetch_factory({"/": failure}))
        report = analyze_reaction("5 g NaCl, 1 mmol AcOH", engine=engine)

        assert [r.status for r in report.reagents] == [ResolutionStatus.RESOLVED] * 2
        assert report.limiting_reagent.canonical_name == "Acetic acid"
