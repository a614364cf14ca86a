"""Translate a play request into a direct TorrServer ``/stream`` URL."""

from __future__ import annotations

from urllib.parse import quote

import structlog

log = structlog.get_logger(__name__)

DEFAULT_FILENAME = "video"

# Characters encodeURIComponent leaves untouched besides -_.~
_URI_COMPONENT_SAFE = "!*'()"


def _encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def torrserver_file_index(media_type: str, file_index: int | None) -> int:
    """Pick the 1-based TorrServer file index.

    Movies always use 1: they are conventionally single-file and Torrentio's
    ``fileIdx`` is unreliable for them. For series the 0-based Torrentio
    index is shifted by one. 0 lets TorrServer choose.
    """
    if media_type == "movie":
        return 1
    if file_index is not None:
        return file_index + 1
    return 0


def resolve_play_url(
    torrserver_base: str | None,
    media_type: str,
    media_id: str,
    info_hash: str | None,
    filename: str | None = None,
    file_index: int | None = None,
) -> str | None:
    """Compute the direct TorrServer playback URL.

    Pure computation: nothing checks that the server is reachable or that a
    file exists at that index. Returns None when the TorrServer base or the
    info hash is missing.
    """
    if not torrserver_base or not info_hash:
        return None

    base = torrserver_base.rstrip("/")
    safe_name = _encode_component(filename or DEFAULT_FILENAME)
    index = torrserver_file_index(media_type, file_index)

    direct_url = (
        f"{base}/stream/{safe_name}"
        f"?link={_encode_component(info_hash)}&index={index}&play"
    )

    log.info(
        "play_url_resolved",
        type=media_type,
        id=media_id,
        info_hash=info_hash,
        requested_file_index=file_index,
        resolved_index=index,
        torrserver=base,
        direct_url=direct_url,
    )
    return direct_url
