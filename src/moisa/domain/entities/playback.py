"""Playback request entity and domain errors."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlayRequest:
    """Parameters carried by a deferred /play URL.

    Created fresh for every playback click, never persisted.
    """

    info_hash: str
    media_type: str
    media_id: str
    season: int | None = None
    episode: int | None = None
    filename: str | None = None
    file_index: int | None = None  # 0-based, as supplied by the indexer
    torrserver: str | None = None


class MoisaError(Exception):
    """Base error for Moisa domain/usecases."""


class IndexerUnavailableError(MoisaError):
    """The indexer could not be reached or answered with an error status."""

    def __init__(self, media_type: str, media_id: str, url: str) -> None:
        super().__init__(f"indexer unavailable for {media_type}/{media_id}: {url}")
        self.media_type = media_type
        self.media_id = media_id
        self.url = url


class InvalidPlayRequestError(MoisaError):
    """A /play URL lacks one of the required parameters."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"missing required parameters: {', '.join(missing)}")
        self.missing = missing
