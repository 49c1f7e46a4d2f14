"""
Batch reaction analysis over tabular input.

Runs ``analyze_reaction`` for every row of a pandas DataFrame and collects a
summary row per reaction. A single engine (and therefore a single
rate-limited fetcher) is shared across rows.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import pandas as pd
from tqdm import tqdm

from reaction_analyzer.matching import build_engine
from reaction_analyzer.matching.resolution_engine import ResolutionEngine
from reaction_analyzer.pipeline import AnalysisReport, analyze_reaction

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    'limiting_reagent',
    'theoretical_yield_g',
    'n_entries',
    'n_unresolved',
    'warnings',
]

# Common column names for reaction descriptions
TEXT_COLUMN_CANDIDATES = ['reaction', 'reaction_text', 'text', 'description', 'procedure']


def detect_text_column(df: pd.DataFrame) -> Optional[str]:
    """Return the first column whose name looks like a reaction description."""
    columns_lower = {str(col).lower(): col for col in df.columns}
    for candidate in TEXT_COLUMN_CANDIDATES:
        if candidate in columns_lower:
            logger.info(f"Auto-detected text column: '{columns_lower[candidate]}'")
            return columns_lower[candidate]
    return None


def load_input_file(file_path: Union[str, Path]) -> pd.DataFrame:
    """
    Load a CSV or Excel file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the format is unsupported
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Input file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix in ['.xlsx', '.xls']:
        df = pd.read_excel(file_path)
    elif suffix == '.csv':
        df = pd.read_csv(file_path)
    else:
        raise ValueError(f"Unsupported file format: {file_path.suffix}")

    logger.info(f"Loaded {len(df)} rows, {len(df.columns)} columns from {file_path}")
    return df


def summarize_report(report: AnalysisReport) -> Dict[str, Any]:
    """Flatten one report into the batch result columns."""
    limiting = report.limiting_reagent
    return {
        'limiting_reagent': limiting.display_name if limiting else None,
        'theoretical_yield_g': (
            report.theoretical_yield.mass_grams if report.theoretical_yield else None
        ),
        'n_entries': len(report.reagents),
        'n_unresolved': len(report.warnings),
        'warnings': '; '.join(report.warnings),
    }


def analyze_frame(df: pd.DataFrame,
                  text_column: str,
                  fetch: Optional[Callable[[str], Any]] = None,
                  engine: Optional[ResolutionEngine] = None,
                  show_progress: bool = True) -> pd.DataFrame:
    """
    Analyze every reaction description in ``df[text_column]``.

    Args:
        df: Input rows
        text_column: Column holding the reaction text
        fetch: Remote lookup capability (ignored when ``engine`` is given)
        engine: Pre-built ResolutionEngine shared by all rows
        show_progress: Display a tqdm progress bar

    Returns:
        Copy of ``df`` with the RESULT_COLUMNS appended

    Raises:
        ValueError: If ``text_column`` is not in ``df``
    """
    if text_column not in df.columns:
        raise ValueError(
            f"Column '{text_column}' not found.\n"
            f"Available columns: {', '.join(map(str, df.columns))}"
        )

    engine = engine or build_engine(fetch=fetch)
    rows = []

    for text in tqdm(df[text_column].tolist(), desc="Analyzing reactions",
                     disable=not show_progress):
        # Skip empty/null values
        if pd.isna(text) or str(text).strip() == '':
            rows.append({
                'limiting_reagent': None,
                'theoretical_yield_g': None,
                'n_entries': 0,
                'n_unresolved': 0,
                'warnings': '',
            })
            continue

        report = analyze_reaction(str(text), engine=engine, collect_trace=False)
        rows.append(summarize_report(report))

    results = pd.DataFrame(rows, columns=RESULT_COLUMNS, index=df.index)
    output = pd.concat([df.drop(columns=RESULT_COLUMNS, errors='ignore'), results], axis=1)

    unresolved = int(output['n_unresolved'].sum()) if len(output) else 0
    logger.info(f"Analyzed {len(output)} reactions ({unresolved} unresolved entries)")
    return output


def report_to_json(report: AnalysisReport, indent: int = 2) -> str:
    """Serialize a report as JSON."""
    return json.dumps(report.to_dict(), indent=indent, ensure_ascii=False)
