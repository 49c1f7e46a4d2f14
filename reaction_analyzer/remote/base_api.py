"""
Base HTTP fetcher with retry logic and rate limiting.

A fetcher is the remote lookup capability handed to the resolution engine:
a callable taking a URL and returning a ``requests.Response`` (which carries
``ok``, ``status_code`` and ``json()``).
"""
import time
from functools import wraps
from typing import Callable, Dict, Optional

import requests
from loguru import logger
from ratelimit import limits, sleep_and_retry


class APIError(Exception):
    """Custom exception for API-related errors."""

    pass


class RateLimitExceeded(APIError):
    """Exception raised when rate limit is exceeded."""

    pass


def exponential_backoff_retry(
    max_retries: int = 3, base_delay: float = 1.0, max_delay: float = 60.0
) -> Callable:
    """
    Decorator for exponential backoff retry logic.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay in seconds
        max_delay: Maximum delay between retries

    Returns:
        Decorated function with retry logic
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except (requests.RequestException, APIError) as e:
                    last_exception = e

                    if attempt == max_retries:
                        logger.error(f"Max retries ({max_retries}) exceeded: {e}")
                        raise

                    delay = min(base_delay * (2**attempt), max_delay)
                    logger.warning(
                        f"Attempt {attempt + 1} failed: {e}. Retrying in {delay:.1f}s..."
                    )
                    time.sleep(delay)

            raise last_exception

        return wrapper

    return decorator


class HttpFetcher:
    """
    Rate-limited, retrying GET fetcher.

    Provides:
    - Session management with connection pooling
    - Rate limiting (``ratelimit``) shared by all threads using the fetcher
    - Exponential backoff on timeouts, 5xx and 429 responses
    - Client errors (4xx) returned as-is so callers can read ``response.ok``
    """

    def __init__(
        self,
        timeout: float = 15,
        max_retries: int = 3,
        retry_base_delay: float = 1.0,
        rate_limit_calls: int = 5,
        rate_limit_period: float = 1,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts
            retry_base_delay: First backoff delay in seconds
            rate_limit_calls: Allowed calls per period
            rate_limit_period: Rate limit period in seconds
            headers: Extra default headers
            session: Pre-built session (mainly for tests)
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.source_name = self.__class__.__name__.replace("Fetcher", "").lower()

        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if headers:
            self.session.headers.update(headers)

        limited = sleep_and_retry(
            limits(calls=rate_limit_calls, period=rate_limit_period)(self._make_request)
        )
        self._request = exponential_backoff_retry(
            max_retries=max_retries, base_delay=retry_base_delay
        )(limited)

        logger.debug(
            f"Initialized {self.source_name} fetcher "
            f"({rate_limit_calls} calls/{rate_limit_period}s, timeout {timeout}s)"
        )

    def __call__(self, url: str) -> requests.Response:
        """Fetch ``url``; raises APIError once retries are exhausted."""
        return self._request(url)

    def _make_request(self, url: str) -> requests.Response:
        """
        Make a single GET request with error handling.

        Raises:
            APIError: On timeouts, connection failures and 5xx responses
            RateLimitExceeded: On HTTP 429
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.Timeout as e:
            raise APIError(f"Request timeout for {url}: {e}")
        except requests.RequestException as e:
            raise APIError(f"Request failed for {url}: {e}")

        if response.status_code == 429:
            raise RateLimitExceeded(f"Rate limit exceeded for {url}")
        if response.status_code >= 500:
            raise APIError(f"HTTP error {response.status_code} for {url}")
        if not response.ok:
            logger.debug(f"{self.source_name}: HTTP {response.status_code} for {url}")
        return response

    def close(self):
        """Close the session and cleanup resources."""
        self.session.close()
        logger.debug(f"Closed {self.source_name} fetcher session")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
