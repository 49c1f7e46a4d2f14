"""
Compound resolution package.

Provides tiered resolution of chemical identifiers using:
- PubChem PUG REST lookup (when a fetch capability is available)
- Local fallback table (CAS, exact synonym, substring synonym)

The resolution engine tries these strategies in order and converts any
remote failure into a fall-through to the local table.
"""

import logging
from typing import Any, Callable, Dict, Optional

from reaction_analyzer.matching.fallback_matcher import FallbackMatcher
from reaction_analyzer.matching.fallback_table import FALLBACK_COMPOUNDS, FallbackCompound
from reaction_analyzer.matching.pubchem_lookup import PubChemLookup, build_pubchem_urls
from reaction_analyzer.matching.resolution_engine import ResolutionEngine
from reaction_analyzer.matching.types import ResolutionOutcome, ResolutionStatus, ResolvedCompound

_logger = logging.getLogger(__name__)


def build_engine(
    config: Optional[Dict[str, Any]] = None,
    fetch: Optional[Callable[[str], Any]] = None,
) -> ResolutionEngine:
    """
    Build a ResolutionEngine from configuration.

    When ``fetch`` is None and ``resolution.enable_remote`` is set, a
    rate-limited PubChemFetcher is created from the ``pubchem`` section.
    With remote lookup disabled the engine runs on the fallback table only.

    Args:
        config: Full configuration dict (ConfigManager.get_all_config())
        fetch: Remote lookup capability to inject instead of building one

    Returns:
        Fully-wired ResolutionEngine instance.
    """
    config = config or {}
    resolution_cfg = config.get('resolution', {})
    pubchem_cfg = config.get('pubchem', {})

    if fetch is None and resolution_cfg.get('enable_remote', False):
        from reaction_analyzer.remote.pubchem import create_fetcher
        fetch = create_fetcher(pubchem_cfg)

    if fetch is None:
        _logger.info("No remote lookup configured, running on the fallback table only")

    kwargs = {'fetch': fetch, 'max_workers': resolution_cfg.get('max_workers', 8)}
    if pubchem_cfg.get('base_url'):
        kwargs['base_url'] = pubchem_cfg['base_url']
    return ResolutionEngine(**kwargs)


__all__ = [
    "FallbackMatcher",
    "FallbackCompound",
    "FALLBACK_COMPOUNDS",
    "PubChemLookup",
    "build_pubchem_urls",
    "ResolutionEngine",
    "ResolutionOutcome",
    "ResolutionStatus",
    "ResolvedCompound",
    "build_engine",
]
