"""Port for torrent indexer lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from moisa.domain.entities.stremio import Candidate


@runtime_checkable
class IndexerClientPort(Protocol):
    """Async interface for fetching torrent candidates for a media item."""

    async def fetch_candidates(
        self,
        media_type: str,
        media_id: str,
        *,
        path_prefix: str | None = None,
    ) -> list[Candidate]:
        """Return candidates in indexer order.

        Returns an empty list for a malformed body. Raises
        ``IndexerUnavailableError`` when the indexer cannot be reached.
        """
        ...
