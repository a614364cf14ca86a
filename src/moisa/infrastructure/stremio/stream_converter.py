"""Convert Torrentio candidates into Stremio stream listings."""

from __future__ import annotations

import structlog

from moisa.domain.entities.playback import PlayRequest
from moisa.domain.entities.stremio import Candidate, ListingContext, StreamListing
from moisa.infrastructure.stremio.play_url import encode_play_url

log = structlog.get_logger(__name__)

_LABEL = "Moisa"
_DEFAULT_TITLE = "Moisa stream"


def _build_name(candidate: Candidate) -> str:
    if candidate.name:
        return candidate.name
    if candidate.filename:
        return f"{_LABEL} • {candidate.filename}"
    return _LABEL


def _build_title(candidate: Candidate) -> str:
    return candidate.title or candidate.filename or candidate.name or _DEFAULT_TITLE


def candidate_to_listing(
    candidate: Candidate,
    context: ListingContext,
    index: int = 0,
) -> StreamListing | None:
    """Build one listing whose URL points back at this addon's /play route.

    Nothing is resolved against TorrServer here; that happens only when the
    user starts playback. Returns None when the candidate has no info hash or
    the addon base URL is unknown.
    """
    if not candidate.info_hash:
        log.warning(
            "candidate_skipped_no_info_hash",
            type=context.media_type,
            id=context.media_id,
            index=index,
        )
        return None

    if not context.addon_base:
        log.warning(
            "candidate_skipped_no_addon_base",
            type=context.media_type,
            id=context.media_id,
            index=index,
        )
        return None

    url = encode_play_url(
        PlayRequest(
            info_hash=candidate.info_hash,
            media_type=context.media_type,
            media_id=context.media_id,
            season=context.season,
            episode=context.episode,
            filename=candidate.filename,
            file_index=candidate.file_index,
            torrserver=context.torrserver_base,
        ),
        context.addon_base,
    )
    if url is None:
        log.warning(
            "play_url_build_failed",
            type=context.media_type,
            id=context.media_id,
            index=index,
        )
        return None

    return StreamListing(
        name=_build_name(candidate),
        title=_build_title(candidate),
        url=url,
    )


def convert_candidates(
    candidates: list[Candidate], context: ListingContext
) -> list[StreamListing]:
    """Convert candidates in order, dropping the ones that were rejected."""
    listings: list[StreamListing] = []
    for index, candidate in enumerate(candidates):
        listing = candidate_to_listing(candidate, context, index)
        if listing is not None:
            listings.append(listing)
    return listings
