"""
PubChem PUG REST fetcher.

PubChem asks anonymous clients to stay at or below 5 requests per second;
the defaults below respect that.
"""
from typing import Any, Dict, Optional

from loguru import logger

from .base_api import HttpFetcher

PUBCHEM_BASE = "https://pubchem.ncbi.nlm.nih.gov/rest/pug"
DEFAULT_USER_AGENT = "Reaction-Analyzer/1.0 (stoichiometry)"


class PubChemFetcher(HttpFetcher):
    """
    Fetcher tuned for PubChem.

    Rate limit: 5 requests/second (no auth)
    """

    BASE_URL = PUBCHEM_BASE

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT, **kwargs):
        kwargs.setdefault("rate_limit_calls", 5)
        kwargs.setdefault("rate_limit_period", 1)
        headers = dict(kwargs.pop("headers", None) or {})
        headers.setdefault("User-Agent", user_agent)
        super().__init__(headers=headers, **kwargs)


def create_fetcher(pubchem_config: Optional[Dict[str, Any]] = None) -> PubChemFetcher:
    """
    Build a PubChemFetcher from the ``pubchem`` config section.

    Args:
        pubchem_config: Mapping with timeout/max_retries/rate limit keys

    Returns:
        Configured PubChemFetcher
    """
    cfg = pubchem_config or {}
    fetcher = PubChemFetcher(
        user_agent=cfg.get("user_agent", DEFAULT_USER_AGENT),
        timeout=cfg.get("timeout", 15),
        max_retries=cfg.get("max_retries", 3),
        retry_base_delay=cfg.get("retry_base_delay", 1.0),
        rate_limit_calls=cfg.get("rate_limit_calls", 5),
        rate_limit_period=cfg.get("rate_limit_period", 1),
    )
    logger.info("PubChem fetcher ready")
    return fetcher
