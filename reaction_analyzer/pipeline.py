"""
End-to-end reaction analysis.

Wires extraction, resolution, quantity normalization and stoichiometry:

    text -> entries -> resolved entries (concurrent) -> analysis report

A non-empty list of pre-extracted entries (e.g. from a language-model
extractor) takes precedence over the rule-based extractor.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from reaction_analyzer.extraction.entry_extractor import EntryExtractor
from reaction_analyzer.extraction.records import entries_from_records
from reaction_analyzer.matching import build_engine
from reaction_analyzer.matching.resolution_engine import ResolutionEngine
from reaction_analyzer.matching.types import (
    AnalyzedEntry,
    ChemicalEntry,
    ResolutionStatus,
    TheoreticalYield,
)
from reaction_analyzer.stoichiometry.engine import analyze

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisReport:
    """
    Output of one analysis request.

    Attributes:
        reagents: Every analyzed entry in input order
        limiting_reagent: Chosen limiting reagent (None if undetermined)
        theoretical_yield: Yield estimate (None if undetermined)
        warnings: One message per entry that did not resolve
        steps: Ordered diagnostic trace (empty when tracing is off)
    """
    reagents: Tuple[AnalyzedEntry, ...] = ()
    limiting_reagent: Optional[AnalyzedEntry] = None
    theoretical_yield: Optional[TheoreticalYield] = None
    warnings: Tuple[str, ...] = ()
    steps: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "reagents": [r.to_dict() for r in self.reagents],
            "limiting_reagent": self.limiting_reagent.to_dict() if self.limiting_reagent else None,
            "theoretical_yield": self.theoretical_yield.to_dict() if self.theoretical_yield else None,
            "warnings": list(self.warnings),
            "steps": list(self.steps),
        }


def build_warning(entry: AnalyzedEntry) -> str:
    """Human-readable warning for an unresolved entry."""
    message = f"{entry.identifier} could not be identified unambiguously"
    if entry.suggestions:
        message += f" (did you mean: {', '.join(entry.suggestions)}?)"
    return message


def _coerce_entries(extracted: Iterable[Union[ChemicalEntry, Dict[str, Any]]]) -> List[ChemicalEntry]:
    entries = []
    for item in extracted:
        if isinstance(item, ChemicalEntry):
            entries.append(item)
        else:
            entries.extend(entries_from_records([item]))
    return entries


def analyze_reaction(text: Optional[str],
                     extracted_entries: Optional[Iterable[Union[ChemicalEntry, Dict[str, Any]]]] = None,
                     fetch: Optional[Callable[[str], Any]] = None,
                     config: Optional[Dict[str, Any]] = None,
                     engine: Optional[ResolutionEngine] = None,
                     extractor: Optional[EntryExtractor] = None,
                     collect_trace: bool = True) -> AnalysisReport:
    """
    Analyze a free-text reaction description.

    Args:
        text: Reaction description, e.g. "5 g NaCl, 1 mmol AcOH"
        extracted_entries: Entries (or extractor records) from an alternative
            extractor; used instead of the rule-based extractor when non-empty
        fetch: Remote lookup capability (ignored when ``engine`` is given)
        config: Full configuration dict used to build the engine
        engine: Pre-built ResolutionEngine
        extractor: Pre-built EntryExtractor
        collect_trace: Record the diagnostic trace

    Returns:
        AnalysisReport
    """
    steps: Optional[list] = [] if collect_trace else None

    entries = _coerce_entries(extracted_entries or [])
    if entries:
        if steps is not None:
            steps.append(f"Using {len(entries)} pre-extracted entries.")
    else:
        entries = (extractor or EntryExtractor()).extract(text or '')
        if steps is not None:
            steps.append(f"Text parser extracted {len(entries)} entries.")

    # A fetcher built here from config is closed here; injected ones are not.
    owns_fetch = engine is None and fetch is None
    engine = engine or build_engine(config, fetch=fetch)
    try:
        resolved = engine.resolve_all(entries, trace=steps)
    finally:
        if owns_fetch and hasattr(engine.fetch, 'close'):
            engine.fetch.close()
    result = analyze(resolved)

    warnings = tuple(
        build_warning(entry) for entry in result.reagents
        if entry.status is not ResolutionStatus.RESOLVED
    )
    if warnings:
        logger.info(f"{len(warnings)} of {len(result.reagents)} entries unresolved")

    return AnalysisReport(
        reagents=result.reagents,
        limiting_reagent=result.limiting_reagent,
        theoretical_yield=result.theoretical_yield,
        warnings=warnings,
        steps=tuple(steps or ()),
    )
