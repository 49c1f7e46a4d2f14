"""
Pytest configuration and shared fixtures for reaction analyzer tests.

Provides:
- Extractors, matchers and engines wired to the local fallback table
- A scripted fake fetch capability for the PubChem tier
- Temporary directories and configuration files
"""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from reaction_analyzer.extraction.entry_extractor import EntryExtractor
from reaction_analyzer.matching.fallback_matcher import FallbackMatcher
from reaction_analyzer.matching.resolution_engine import ResolutionEngine
from reaction_analyzer.normalization.cas_extractor import CASExtractor
from tests.fixtures.fake_remote import FakeFetch


# ============================================================================
# FAKE REMOTE LOOKUP
# ============================================================================

@pytest.fixture(scope="function")
def fake_fetch_factory() -> Callable[..., FakeFetch]:
    """Build FakeFetch instances from a route mapping."""
    return FakeFetch


# ============================================================================
# EXTRACTION / NORMALIZATION FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def extractor() -> EntryExtractor:
    """Fresh entry extractor with the default rule tables."""
    return EntryExtractor()


@pytest.fixture(scope="function")
def cas_extractor() -> CASExtractor:
    """Fresh CAS extractor instance."""
    return CASExtractor()


# ============================================================================
# MATCHING FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def fallback_matcher() -> FallbackMatcher:
    """Fallback matcher over the built-in compound table."""
    return FallbackMatcher()


@pytest.fixture(scope="function")
def offline_engine(fallback_matcher) -> ResolutionEngine:
    """Resolution engine without a fetch capability (fallback table only)."""
    return ResolutionEngine(fetch=None, fallback_matcher=fallback_matcher, max_workers=4)


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test file operations."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def config_file(temp_dir) -> Path:
    """YAML config overriding a few keys; the rest comes from defaults."""
    path = temp_dir / "analyzer_config.yaml"
    path.write_text(
        "pubchem:\n"
        "  timeout: 5\n"
        "  max_retries: 1\n"
        "resolution:\n"
        "  enable_remote: false\n"
        "  max_workers: 2\n",
        encoding="utf-8",
    )
    return path
