"""
Tests for batch analysis over DataFrames.
"""

import json

import pandas as pd
import pytest

from reaction_analyzer.batch import (
    RESULT_COLUMNS,
    analyze_frame,
    detect_text_column,
    load_input_file,
    report_to_json,
    summarize_report,
)
from reaction_analyzer.matching.resolution_engine import ResolutionEngine
from reaction_analyzer.pipeline import analyze_reaction
from tests.fixtures.test_data import SAMPLE_REACTIONS


@pytest.fixture
def reactions_df() -> pd.DataFrame:
    return pd.DataFrame({
        "id": list(range(len(SAMPLE_REACTIONS))),
        "Reaction": SAMPLE_REACTIONS,
    })


class TestAnalyzeFrame:
    """Tests for analyze_frame."""

    def test_result_columns_appended(self, reactions_df):
        result = analyze_frame(reactions_df, "Reaction", show_progress=False)

        assert list(result.columns) == ["id", "Reaction"] + RESULT_COLUMNS
        assert len(result) == len(reactions_df)

    def test_row_values(self, reactions_df):
        result = analyze_frame(reactions_df, "Reaction", show_progress=False)
        first = result.iloc[0]

        assert first["limiting_reagent"] == "Acetic acid"
        assert first["theoretical_yield_g"] == pytest.approx(0.060052)
        assert first["n_entries"] == 2
        assert first["n_unresolved"] == 0
        assert first["warnings"] == ""

    def test_unresolved_row(self, reactions_df):
        result = analyze_frame(reactions_df, "Reaction", show_progress=False)
        last = result.iloc[-1]

        assert last["n_unresolved"] == 1
        assert "Unobtainium" in last["warnings"]
        assert pd.isna(last["limiting_reagent"])

    def test_blank_rows_skipped(self):
        df = pd.DataFrame({"text": ["5 g NaCl", None, "  "]})
        result = analyze_frame(df, "text", show_progress=False)

        assert list(result["n_entries"]) == [1, 0, 0]

    def test_input_not_modified(self, reactions_df):
        before = reactions_df.copy()
        analyze_frame(reactions_df, "Reaction", show_progress=False)
        pd.testing.assert_frame_equal(reactions_df, before)

    def test_missing_column_raises(self, reactions_df):
        with pytest.raises(ValueError, match="not found"):
            analyze_frame(reactions_df, "procedure", show_progress=False)

    def test_shared_engine(self, reactions_df, fake_fetch_factory):
        fetch = fake_fetch_factory({"/": ConnectionError("offline")})
        engine = ResolutionEngine(fetch=fetch)
        result = analyze_frame(reactions_df, "Reaction", engine=engine, show_progress=False)

        assert result.iloc[0]["limiting_reagent"] == "Acetic acid"
        assert fetch.calls


class TestBatchHelpers:
    """Tests for file loading and report flattening."""

    def test_detect_text_column(self, reactions_df):
        assert detect_text_column(reactions_df) == "Reaction"
        assert detect_text_column(pd.DataFrame({"foo": []})) is None

    def test_load_csv(self, temp_dir, reactions_df):
        path = temp_dir / "reactions.csv"
        reactions_df.to_csv(path, index=False)
        loaded = load_input_file(path)
        assert list(loaded["Reaction"]) == SAMPLE_REACTIONS

    def test_load_excel(self, temp_dir, reactions_df):
        path = temp_dir / "reactions.xlsx"
        reactions_df.to_excel(path, index=False, engine="openpyxl")
        loaded = load_input_file(path)
        assert len(loaded) == len(SAMPLE_REACTIONS)

    def test_load_unsupported(self, temp_dir):
        path = temp_dir / "reactions.txt"
        path.write_text("5 g NaCl", encoding="utf-8")
        with pytest.raises(ValueError):
            load_input_file(path)

    def test_load_missing(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_input_file(temp_dir / "missing.csv")

    def test_summarize_report(self):
        summary = summarize_report(analyze_reaction("5 g NaCl, 2 g acid"))
        assert summary["limiting_reagent"] == "Sodium chloride"
        assert summary["n_entries"] == 2
        assert summary["n_unresolved"] == 1

    def test_report_to_json(self):
        data = json.loads(report_to_json(analyze_reaction("1 mmol Essigsäure")))
        assert data["reagents"][0]["canonical_name"] == "Acetic acid"
        assert "Essigsäure" in report_to_json(analyze_reaction("1 mmol Essigsäure"))
