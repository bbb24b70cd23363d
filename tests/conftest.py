"""
Pytest configuration and common fixtures for Nominatim client tests.

All fixtures follow camelCase naming convention.
"""

from pathlib import Path
from typing import Generator

import pytest

from lib.nominatim import IdentificationMethod
from tests.golden.nominatim import ReplayTransport, loadAllScenarios

# ============================================================================
# Identification Fixtures
# ============================================================================


@pytest.fixture
def userAgent() -> str:
    """Application name used to identify test clients."""
    return "Example Application Name"


@pytest.fixture
def userAgentIdent(userAgent) -> IdentificationMethod:
    """User-Agent identification for test clients."""
    return IdentificationMethod.fromUserAgent(userAgent)


# ============================================================================
# Transport Fixtures
# ============================================================================


@pytest.fixture
def replayTransport() -> ReplayTransport:
    """
    Transport replaying all recorded Nominatim exchanges.

    Requests which don't match any recording fail with ValueError,
    so no real network calls are possible.

    Returns:
        ReplayTransport: Transport for NominatimClient(transport=...)
    """
    return ReplayTransport(loadAllScenarios())


# ============================================================================
# Filesystem Fixtures
# ============================================================================


@pytest.fixture
def workDir(tmp_path: Path, monkeypatch) -> Generator[Path, None, None]:
    """Empty working directory, so no local .env or config is picked up."""
    monkeypatch.chdir(tmp_path)
    yield tmp_path
