"""Stremio play use case: resolve a deferred /play request at playback time."""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional

import structlog

from moisa.domain.entities.playback import PlayRequest

_ResolveFn = Callable[..., Optional[str]]

log = structlog.get_logger(__name__)


class StremioPlayUseCase:
    """Turns a decoded PlayRequest into a direct TorrServer URL.

    TorrServer base precedence: the ``torrserver`` carried by the /play URL,
    then the per-request addon config, then the configured default.
    """

    def __init__(
        self,
        *,
        default_torrserver: str | None,
        resolve_fn: _ResolveFn,
    ) -> None:
        self._default_torrserver = default_torrserver
        self._resolve = resolve_fn

    def execute(
        self,
        request: PlayRequest,
        *,
        torrserver_fallback: str | None = None,
    ) -> str | None:
        """Return the redirect target, or None when it cannot be resolved."""
        torrserver_base = (
            request.torrserver or torrserver_fallback or self._default_torrserver
        )
        log.info(
            "stremio_play_request",
            type=request.media_type,
            id=request.media_id,
            info_hash=request.info_hash,
            torrserver=torrserver_base,
            season=request.season,
            episode=request.episode,
            filename=request.filename,
            file_index=request.file_index,
        )

        direct_url = self._resolve(
            torrserver_base,
            request.media_type,
            request.media_id,
            request.info_hash,
            filename=request.filename,
            file_index=request.file_index,
        )
        if direct_url is None:
            log.warning(
                "stremio_play_unresolved",
                type=request.media_type,
                id=request.media_id,
                info_hash=request.info_hash,
                torrserver=torrserver_base,
            )
        return direct_url
