"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from moisa.application.use_cases.stremio_play import StremioPlayUseCase
from moisa.application.use_cases.stremio_stream import StremioStreamUseCase
from moisa.infrastructure.stremio.stream_converter import convert_candidates
from moisa.infrastructure.torrentio.client import HttpxTorrentioClient
from moisa.infrastructure.torrserver.play_resolver import resolve_play_url
from moisa.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP Client (required by the Torrentio client)
        2. Torrentio client
        3. Stremio use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) HTTP client (timeouts are set per Torrentio request)
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.torrentio.timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )
    log.info("http_client_initialized", user_agent=config.http_user_agent)

    # 2) Torrentio client
    state.indexer = HttpxTorrentioClient(
        http_client=state.http_client,
        base_url=config.torrentio.base_url,
        path_prefix=config.torrentio.path_prefix,
        timeout_seconds=config.torrentio.timeout_seconds,
    )
    log.info(
        "torrentio_client_initialized",
        base_url=config.torrentio.base_url,
        timeout_ms=config.torrentio.timeout_ms,
    )

    # 3) Stremio use cases
    state.stremio_stream_uc = StremioStreamUseCase(
        indexer=state.indexer,
        config=config.stremio,
        default_torrserver=config.torrserver.url,
        convert_fn=convert_candidates,
    )
    state.stremio_play_uc = StremioPlayUseCase(
        default_torrserver=config.torrserver.url,
        resolve_fn=resolve_play_url,
    )

    log.info(
        "app_startup_complete",
        torrserver=config.torrserver.url,
        public_base_url=config.stremio.public_base_url,
    )

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete")
