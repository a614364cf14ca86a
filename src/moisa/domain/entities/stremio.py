"""Domain entities for the Stremio stream listing.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

StremioContentType = Literal["movie", "series"]


@dataclass(frozen=True)
class Candidate:
    """A single torrent returned by the indexer for a media item."""

    info_hash: str | None = None
    name: str | None = None
    title: str | None = None
    filename: str | None = None  # behaviorHints.filename
    file_index: int | None = None  # 0-based, indexer convention


@dataclass(frozen=True)
class StreamListing:
    """Stremio protocol Stream object pointing at the deferred /play URL."""

    name: str
    title: str
    url: str


@dataclass(frozen=True)
class StreamExtra:
    """Per-request overrides for a stream listing request.

    ``season``/``episode`` are kept raw; the use case parses them.
    """

    torrserver: str | None = None
    torrentio_path_prefix: str | None = None
    season: str | None = None
    episode: str | None = None
    addon_base: str | None = None  # inferred from the incoming request


@dataclass(frozen=True)
class ListingContext:
    """Everything the transformer needs besides the candidate itself."""

    media_type: str
    media_id: str
    torrserver_base: str | None = None
    addon_base: str | None = None
    season: int | None = None
    episode: int | None = None


@dataclass(frozen=True)
class ListingResult:
    """Outcome of a listing request.

    A failed result always carries an empty listing list so callers can
    render it without branching.
    """

    listings: list[StreamListing] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, listings: list[StreamListing]) -> ListingResult:
        return cls(listings=list(listings))

    @classmethod
    def failure(cls, reason: str) -> ListingResult:
        return cls(listings=[], error=reason)
