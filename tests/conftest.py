"""Shared test fixtures for Moisa test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from moisa.domain.entities.playback import PlayRequest
from moisa.domain.entities.stremio import Candidate, ListingContext
from moisa.infrastructure.config import AppConfig

ADDON_BASE = "https://moisa.example"
TORRSERVER = "http://host:9090"

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def candidate() -> Candidate:
    """Minimal valid Candidate (series episode inside a season pack)."""
    return Candidate(
        info_hash="ABCD",
        name="Torrentio\n1080p",
        title="Show.S02.1080p.WEB\n👤 42",
        filename="Show.S02E05.1080p.mkv",
        file_index=2,
    )


@pytest.fixture()
def series_context() -> ListingContext:
    return ListingContext(
        media_type="series",
        media_id="tt0000001:2:5",
        torrserver_base=TORRSERVER,
        addon_base=ADDON_BASE,
        season=2,
        episode=5,
    )


@pytest.fixture()
def movie_context() -> ListingContext:
    return ListingContext(
        media_type="movie",
        media_id="tt0000002",
        torrserver_base=TORRSERVER,
        addon_base=ADDON_BASE,
    )


@pytest.fixture()
def play_request() -> PlayRequest:
    return PlayRequest(
        info_hash="ABCD",
        media_type="series",
        media_id="tt0000001:2:5",
        season=2,
        episode=5,
        filename="Show.S02E05.1080p.mkv",
        file_index=2,
        torrserver=TORRSERVER,
    )


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def app_config() -> AppConfig:
    """Validated config with test-friendly upstreams."""
    return AppConfig.model_validate(
        {
            "environment": "test",
            "torrentio": {
                "base_url": "https://torrentio.test",
                "path_prefix": "qualityfilter=cam",
                "timeout_ms": 2_000,
            },
            "torrserver": {"url": "http://127.0.0.1:8090"},
        }
    )


# ---------------------------------------------------------------------------
# Mock port fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_indexer() -> AsyncMock:
    """Mock IndexerClientPort returning no candidates."""
    indexer = AsyncMock()
    indexer.fetch_candidates = AsyncMock(return_value=[])
    return indexer
