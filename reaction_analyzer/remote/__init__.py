"""Remote lookup capabilities (HTTP fetchers) for compound resolution."""
from .base_api import APIError, HttpFetcher, RateLimitExceeded, exponential_backoff_retry
from .pubchem import PUBCHEM_BASE, PubChemFetcher, create_fetcher

__all__ = [
    # Fetchers
    "HttpFetcher",
    "PubChemFetcher",
    "create_fetcher",
    "PUBCHEM_BASE",
    # Exceptions
    "APIError",
    "RateLimitExceeded",
    "exponential_backoff_retry",
]
