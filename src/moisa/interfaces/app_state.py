"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from moisa.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from moisa.application.use_cases.stremio_play import StremioPlayUseCase
    from moisa.application.use_cases.stremio_stream import StremioStreamUseCase
    from moisa.domain.ports import IndexerClientPort


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient

    # Domain Ports
    indexer: IndexerClientPort

    # Stremio
    stremio_stream_uc: StremioStreamUseCase
    stremio_play_uc: StremioPlayUseCase
