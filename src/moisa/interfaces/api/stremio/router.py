"""Stremio addon API endpoints (manifest, stream, play)."""

from __future__ import annotations

import base64
import binascii
from typing import Any, Optional, cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from moisa.domain.entities.playback import InvalidPlayRequestError
from moisa.domain.entities.stremio import StreamExtra, StreamListing
from moisa.infrastructure.stremio.play_url import decode_play_query
from moisa.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["stremio"])

_ADDON_ID = "org.stremio.moisa.addon"
_ADDON_VERSION = "1.1.1"
_CONTENT_TYPES = ("movie", "series")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Origin, X-Requested-With, Content-Type, Accept",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
}


class AddonUserConfig(BaseModel):
    """Settings carried in the ``config=<base64 JSON>`` query parameter."""

    model_config = ConfigDict(extra="ignore")

    torrserver: Optional[str] = None
    torrentio_path_prefix: Optional[str] = Field(
        default=None, alias="torrentioPathPrefix"
    )


def _build_manifest() -> dict[str, Any]:
    """Build the Stremio addon manifest."""
    return {
        "id": _ADDON_ID,
        "version": _ADDON_VERSION,
        "name": "Moisa",
        "description": (
            "Simple addon: fetches torrents from Torrentio and redirects "
            "playback to a local TorrServer instance."
        ),
        "resources": ["stream"],
        "types": list(_CONTENT_TYPES),
        "idPrefixes": ["tt"],
        "catalogs": [],
        "behaviorHints": {
            "configurable": True,
        },
    }


def _decode_addon_config(raw: str | None) -> AddonUserConfig | None:
    """Decode ``config=<base64 JSON>``; anything unreadable is ignored."""
    if not raw:
        return None
    normalized = raw.strip().replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        payload = base64.b64decode(normalized)
        return AddonUserConfig.model_validate_json(payload)
    except (binascii.Error, ValidationError, ValueError):
        log.debug("stremio_config_undecodable", exc_info=True)
        return None


def _request_base_url(request: Request) -> str:
    """Externally visible origin of this addon, as seen by the client."""
    proto = request.headers.get("x-forwarded-proto", "").split(",")[0].strip()
    scheme = proto or request.url.scheme
    host = request.headers.get("host") or request.url.netloc or "localhost"
    return f"{scheme}://{host}"


def _format_stream(listing: StreamListing) -> dict[str, str]:
    """Convert a StreamListing dataclass to Stremio JSON format."""
    return {
        "name": listing.name,
        "title": listing.title,
        "url": listing.url,
    }


@router.get("/")
@router.get("/manifest.json")
async def stremio_manifest() -> JSONResponse:
    """Serve the Stremio addon manifest."""
    return JSONResponse(content=_build_manifest(), headers=CORS_HEADERS)


@router.get("/stream/{content_type}/{stream_id}.json")
async def stremio_stream(
    request: Request,
    content_type: str,
    stream_id: str,
) -> JSONResponse:
    """List Torrentio candidates for a movie or episode as /play links."""
    state = cast(AppState, request.app.state)

    if content_type not in _CONTENT_TYPES:
        return JSONResponse(content={"streams": []}, headers=CORS_HEADERS)

    query = request.query_params
    cfg = _decode_addon_config(query.get("config"))
    extra = StreamExtra(
        torrserver=(cfg and cfg.torrserver) or query.get("torrserver") or None,
        torrentio_path_prefix=(cfg and cfg.torrentio_path_prefix)
        or query.get("torrentioPathPrefix")
        or None,
        season=query.get("season"),
        episode=query.get("episode"),
        addon_base=_request_base_url(request),
    )

    log.info(
        "stremio_stream_request",
        type=content_type,
        id=stream_id,
        torrserver=extra.torrserver,
        torrentio_path_prefix=extra.torrentio_path_prefix,
        addon_base=extra.addon_base,
    )

    result = await state.stremio_stream_uc.execute(content_type, stream_id, extra)
    if not result.ok:
        log.info(
            "stremio_stream_empty",
            type=content_type,
            id=stream_id,
            reason=result.error,
        )

    return JSONResponse(
        content={"streams": [_format_stream(s) for s in result.listings]},
        headers=CORS_HEADERS,
    )


@router.get("/play")
async def stremio_play(request: Request) -> Response:
    """Resolve a deferred /play link and redirect to TorrServer."""
    state = cast(AppState, request.app.state)
    query = request.query_params

    try:
        play_request = decode_play_query(query)
    except InvalidPlayRequestError as exc:
        log.warning("stremio_play_invalid", missing=exc.missing)
        return JSONResponse(
            status_code=400,
            content={"err": "missing required parameters", "missing": exc.missing},
            headers=CORS_HEADERS,
        )

    cfg = _decode_addon_config(query.get("config"))

    try:
        direct_url = state.stremio_play_uc.execute(
            play_request,
            torrserver_fallback=cfg.torrserver if cfg else None,
        )
    except Exception:
        log.error(
            "stremio_play_handler_error",
            type=play_request.media_type,
            id=play_request.media_id,
            info_hash=play_request.info_hash,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"err": "play handler error"},
            headers=CORS_HEADERS,
        )

    if direct_url is None:
        return JSONResponse(
            status_code=404,
            content={"err": "unable to resolve stream"},
            headers=CORS_HEADERS,
        )

    log.info(
        "stremio_play_redirect",
        type=play_request.media_type,
        id=play_request.media_id,
        info_hash=play_request.info_hash,
        location=direct_url,
    )
    return RedirectResponse(url=direct_url, status_code=302, headers=CORS_HEADERS)
