"""Encode/decode the deferred ``/play`` URL handed out in stream listings.

Query parameters: ``infoHash``, ``type``, ``id`` (required), ``torrserver``,
``filename``, ``season``, ``episode``, ``fileIndex`` (optional).
"""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit

from moisa.domain.entities.playback import InvalidPlayRequestError, PlayRequest
from moisa.infrastructure.common.parsers import parse_int

PLAY_PATH = "/play"

_REQUIRED = ("infoHash", "type", "id")


def encode_play_url(request: PlayRequest, addon_base: str | None) -> str | None:
    """Build ``<addon_base>/play?...`` for a play request.

    Returns None when the addon base or the info hash is unknown.
    """
    if not addon_base or not request.info_hash:
        return None

    base = addon_base.rstrip("/")
    params: list[tuple[str, str]] = [
        ("infoHash", request.info_hash),
        ("type", request.media_type),
        ("id", request.media_id),
    ]
    if request.torrserver:
        params.append(("torrserver", request.torrserver))
    if request.filename:
        params.append(("filename", request.filename))
    if request.season is not None:
        params.append(("season", str(request.season)))
    if request.episode is not None:
        params.append(("episode", str(request.episode)))
    if request.file_index is not None:
        params.append(("fileIndex", str(request.file_index)))

    return f"{base}{PLAY_PATH}?{urlencode(params)}"


def decode_play_query(query: Mapping[str, str]) -> PlayRequest:
    """Parse /play query parameters into a PlayRequest.

    Raises:
        InvalidPlayRequestError: ``infoHash``, ``type`` or ``id`` is missing.
    """
    missing = [key for key in _REQUIRED if not query.get(key)]
    if missing:
        raise InvalidPlayRequestError(missing)

    return PlayRequest(
        info_hash=query["infoHash"],
        media_type=query["type"],
        media_id=query["id"],
        season=parse_int(query.get("season")),
        episode=parse_int(query.get("episode")),
        filename=query.get("filename") or None,
        file_index=parse_int(query.get("fileIndex")),
        torrserver=query.get("torrserver") or None,
    )


def decode_play_url(url: str) -> PlayRequest:
    """Parse a full /play URL (as produced by ``encode_play_url``)."""
    query = dict(parse_qsl(urlsplit(url).query, keep_blank_values=True))
    return decode_play_query(query)
