"""Stremio stream listing use case.

type + id -> Torrentio candidates -> deferred /play listings.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

import structlog

from moisa.domain.entities.playback import IndexerUnavailableError
from moisa.domain.entities.stremio import (
    Candidate,
    ListingContext,
    ListingResult,
    StreamExtra,
    StreamListing,
)
from moisa.domain.ports.indexer import IndexerClientPort
from moisa.infrastructure.common.parsers import parse_int


class _StremioConfig(Protocol):
    """Configuration values consumed by StremioStreamUseCase."""

    public_base_url: str | None
    max_streams: int


_ConvertFn = Callable[[list[Candidate], ListingContext], list[StreamListing]]

log = structlog.get_logger(__name__)


def extract_season_episode(
    media_id: str, extra: StreamExtra
) -> tuple[int | None, int | None]:
    """Season/episode for a series id like ``tt0000001:2:5``.

    The last two ``:`` segments win; the explicit extra values only fill
    whatever is still unset.
    """
    season: int | None = None
    episode: int | None = None

    parts = media_id.split(":")
    if len(parts) >= 3:
        season = parse_int(parts[-2])
        episode = parse_int(parts[-1])

    if season is None:
        season = parse_int(extra.season)
    if episode is None:
        episode = parse_int(extra.episode)

    return season, episode


class StremioStreamUseCase:
    """Builds the stream list for a movie or episode.

    Every failure inside the pipeline ends as a failed ``ListingResult``;
    ``execute`` never raises.
    """

    def __init__(
        self,
        *,
        indexer: IndexerClientPort,
        config: _StremioConfig,
        default_torrserver: str | None,
        convert_fn: _ConvertFn,
    ) -> None:
        self._indexer = indexer
        self._config = config
        self._default_torrserver = default_torrserver
        self._convert = convert_fn

    async def execute(
        self,
        media_type: str,
        media_id: str,
        extra: StreamExtra | None = None,
    ) -> ListingResult:
        extra = extra or StreamExtra()
        try:
            return await self._build(media_type, media_id, extra)
        except IndexerUnavailableError as exc:
            log.warning(
                "stremio_indexer_unavailable",
                type=media_type,
                id=media_id,
                url=exc.url,
            )
            return ListingResult.failure("indexer_unavailable")
        except Exception:
            log.error(
                "stremio_stream_handler_error",
                type=media_type,
                id=media_id,
                exc_info=True,
            )
            return ListingResult.failure("internal_error")

    async def _build(
        self, media_type: str, media_id: str, extra: StreamExtra
    ) -> ListingResult:
        torrserver_base = extra.torrserver or self._default_torrserver
        if not torrserver_base:
            log.warning("stremio_no_torrserver_configured", type=media_type, id=media_id)
            return ListingResult.failure("no_torrserver")

        addon_base = self._config.public_base_url or extra.addon_base
        log.info(
            "stremio_bases_resolved",
            type=media_type,
            id=media_id,
            torrserver=torrserver_base,
            addon_base=addon_base,
        )

        season: int | None = None
        episode: int | None = None
        if media_type == "series":
            season, episode = extract_season_episode(media_id, extra)

        candidates = await self._indexer.fetch_candidates(
            media_type,
            media_id,
            path_prefix=extra.torrentio_path_prefix,
        )
        if not candidates:
            log.warning("stremio_no_candidates", type=media_type, id=media_id)
            return ListingResult.success([])

        context = ListingContext(
            media_type=media_type,
            media_id=media_id,
            torrserver_base=torrserver_base,
            addon_base=addon_base,
            season=season,
            episode=episode,
        )
        listings = self._convert(candidates[: self._config.max_streams], context)

        if not listings:
            log.warning("stremio_no_valid_candidates", type=media_type, id=media_id)
        else:
            log.info(
                "stremio_stream_response",
                type=media_type,
                id=media_id,
                candidates=len(candidates),
                streams_returned=len(listings),
            )
        return ListingResult.success(listings)
