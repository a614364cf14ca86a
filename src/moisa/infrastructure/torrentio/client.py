"""Torrentio indexer client (async httpx implementation)."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from moisa.domain.entities.playback import IndexerUnavailableError
from moisa.domain.entities.stremio import Candidate
from moisa.infrastructure.torrentio.schema import TorrentioStream

log = structlog.get_logger(__name__)


class HttpxTorrentioClient:
    """Fetches stream candidates from Torrentio.

    Implements ``IndexerClientPort`` from domain.ports.indexer. One request
    per call, no retries, no caching.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        base_url: str,
        path_prefix: str,
        timeout_seconds: float,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._path_prefix = path_prefix
        self._timeout = timeout_seconds

    def build_url(
        self, media_type: str, media_id: str, path_prefix: str | None = None
    ) -> str:
        """Build the Torrentio stream URL; the override wins over the default prefix."""
        prefix = (path_prefix or self._path_prefix).strip("/")
        segments = [self._base_url]
        if prefix:
            segments.append(prefix)
        segments.append(f"stream/{quote(media_type, safe='')}")
        segments.append(f"{quote(media_id, safe=':')}.json")
        return "/".join(segments)

    async def fetch_candidates(
        self,
        media_type: str,
        media_id: str,
        *,
        path_prefix: str | None = None,
    ) -> list[Candidate]:
        url = self.build_url(media_type, media_id, path_prefix)
        log.info("torrentio_request", type=media_type, id=media_id, url=url)

        try:
            resp = await self._http.get(url, timeout=self._timeout)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            log.warning(
                "torrentio_unavailable",
                type=media_type,
                id=media_id,
                url=url,
                error=str(exc) or type(exc).__name__,
            )
            raise IndexerUnavailableError(media_type, media_id, url) from exc

        streams = self._extract_streams(resp)
        if streams is None:
            log.warning("torrentio_no_streams_array", type=media_type, id=media_id)
            return []

        candidates = self._parse_streams(streams, media_type, media_id)
        log.info(
            "torrentio_response",
            type=media_type,
            id=media_id,
            count=len(candidates),
        )
        return candidates

    @staticmethod
    def _extract_streams(resp: httpx.Response) -> list[Any] | None:
        """Return the raw ``streams`` list, or None for a malformed body."""
        try:
            data = resp.json()
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        streams = data.get("streams")
        return streams if isinstance(streams, list) else None

    @staticmethod
    def _parse_streams(
        streams: list[Any], media_type: str, media_id: str
    ) -> list[Candidate]:
        candidates: list[Candidate] = []
        for index, raw in enumerate(streams):
            if not isinstance(raw, dict):
                log.debug(
                    "torrentio_stream_not_object",
                    type=media_type,
                    id=media_id,
                    index=index,
                )
                continue
            try:
                candidates.append(TorrentioStream.model_validate(raw).to_candidate())
            except ValidationError:
                log.debug(
                    "torrentio_stream_invalid",
                    type=media_type,
                    id=media_id,
                    index=index,
                    exc_info=True,
                )
        return candidates
