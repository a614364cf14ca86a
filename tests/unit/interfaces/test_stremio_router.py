"""Tests for Stremio addon router endpoints."""

from __future__ import annotations

import base64
import json
from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from moisa.application.use_cases.stremio_play import StremioPlayUseCase
from moisa.domain.entities.stremio import ListingResult, StreamExtra, StreamListing
from moisa.infrastructure.torrserver.play_resolver import resolve_play_url
from moisa.interfaces.api.stremio.router import (
    AddonUserConfig,
    _decode_addon_config,
    router,
)

_PLAY_QUERY = "infoHash=ABCD&type=series&id=tt0000001%3A2%3A5&fileIndex=2"


def _encode_config(payload: dict[str, str]) -> str:
    raw = json.dumps(payload).encode()
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


def _make_app(
    *,
    stremio_stream_uc: AsyncMock | None = None,
    stremio_play_uc: object | None = None,
    prefix: str = "",
) -> FastAPI:
    """Create a minimal FastAPI app with the stremio router."""
    app = FastAPI()
    app.include_router(router, prefix=prefix)

    if stremio_stream_uc is None:
        stremio_stream_uc = AsyncMock()
        stremio_stream_uc.execute = AsyncMock(return_value=ListingResult.success([]))
    app.state.stremio_stream_uc = stremio_stream_uc
    app.state.stremio_play_uc = stremio_play_uc or StremioPlayUseCase(
        default_torrserver="http://127.0.0.1:8090",
        resolve_fn=resolve_play_url,
    )
    return app


class TestDecodeAddonConfig:
    def test_decodes_urlsafe_without_padding(self) -> None:
        raw = _encode_config(
            {"torrserver": "http://ts:8090", "torrentioPathPrefix": "sort=size"}
        )
        cfg = _decode_addon_config(raw)
        assert cfg == AddonUserConfig(
            torrserver="http://ts:8090", torrentioPathPrefix="sort=size"
        )

    def test_unknown_keys_ignored(self) -> None:
        cfg = _decode_addon_config(_encode_config({"other": "x"}))
        assert cfg is not None
        assert cfg.torrserver is None

    def test_garbage_is_ignored(self) -> None:
        assert _decode_addon_config("%%%not-base64") is None
        assert _decode_addon_config(base64.b64encode(b"not json").decode()) is None
        assert _decode_addon_config(None) is None
        assert _decode_addon_config("") is None


class TestManifest:
    def test_manifest(self) -> None:
        client = TestClient(_make_app())
        resp = client.get("/manifest.json")

        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == "org.stremio.moisa.addon"
        assert body["resources"] == ["stream"]
        assert body["types"] == ["movie", "series"]
        assert body["idPrefixes"] == ["tt"]
        assert body["catalogs"] == []
        assert body["behaviorHints"]["configurable"] is True

    def test_root_serves_manifest(self) -> None:
        client = TestClient(_make_app())
        assert client.get("/").json() == client.get("/manifest.json").json()

    def test_cors_headers(self) -> None:
        client = TestClient(_make_app())
        resp = client.get("/manifest.json")
        assert resp.headers["access-control-allow-origin"] == "*"
        assert "GET" in resp.headers["access-control-allow-methods"]


class TestStreamEndpoint:
    def test_returns_listings(self) -> None:
        uc = AsyncMock()
        uc.execute = AsyncMock(
            return_value=ListingResult.success(
                [StreamListing(name="n", title="t", url="https://x/play?infoHash=h")]
            )
        )
        client = TestClient(_make_app(stremio_stream_uc=uc))

        resp = client.get("/stream/movie/tt0000002.json")

        assert resp.status_code == 200
        assert resp.json() == {
            "streams": [{"name": "n", "title": "t", "url": "https://x/play?infoHash=h"}]
        }
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_passes_request_context(self) -> None:
        uc = AsyncMock()
        uc.execute = AsyncMock(return_value=ListingResult.success([]))
        client = TestClient(_make_app(stremio_stream_uc=uc))

        client.get(
            "/stream/series/tt0000001:2:5.json",
            params={"torrserver": "http://q:1", "season": "2", "episode": "5"},
        )

        uc.execute.assert_awaited_once_with(
            "series",
            "tt0000001:2:5",
            StreamExtra(
                torrserver="http://q:1",
                torrentio_path_prefix=None,
                season="2",
                episode="5",
                addon_base="http://testserver",
            ),
        )

    def test_config_beats_plain_query(self) -> None:
        uc = AsyncMock()
        uc.execute = AsyncMock(return_value=ListingResult.success([]))
        client = TestClient(_make_app(stremio_stream_uc=uc))
        cfg = _encode_config(
            {"torrserver": "http://cfg:2", "torrentioPathPrefix": "sort=size"}
        )

        client.get(
            "/stream/movie/tt1.json",
            params={"config": cfg, "torrserver": "http://q:1"},
        )

        extra = uc.execute.await_args.args[2]
        assert extra.torrserver == "http://cfg:2"
        assert extra.torrentio_path_prefix == "sort=size"

    def test_forwarded_proto_used_for_addon_base(self) -> None:
        uc = AsyncMock()
        uc.execute = AsyncMock(return_value=ListingResult.success([]))
        client = TestClient(_make_app(stremio_stream_uc=uc))

        client.get(
            "/stream/movie/tt1.json",
            headers={"x-forwarded-proto": "https", "host": "moisa.fun"},
        )

        extra = uc.execute.await_args.args[2]
        assert extra.addon_base == "https://moisa.fun"

    def test_unsupported_type_returns_empty(self) -> None:
        uc = AsyncMock()
        client = TestClient(_make_app(stremio_stream_uc=uc))

        resp = client.get("/stream/channel/tt1.json")

        assert resp.json() == {"streams": []}
        uc.execute.assert_not_called()

    def test_failure_result_returns_empty(self) -> None:
        uc = AsyncMock()
        uc.execute = AsyncMock(return_value=ListingResult.failure("indexer_unavailable"))
        client = TestClient(_make_app(stremio_stream_uc=uc))

        resp = client.get("/stream/movie/tt1.json")

        assert resp.status_code == 200
        assert resp.json() == {"streams": []}


class TestPlayEndpoint:
    def test_redirects_to_torrserver(self) -> None:
        client = TestClient(_make_app(), follow_redirects=False)

        resp = client.get(f"/play?{_PLAY_QUERY}&torrserver=http%3A%2F%2Fhost%3A9090")

        assert resp.status_code == 302
        assert (
            resp.headers["location"]
            == "http://host:9090/stream/video?link=ABCD&index=3&play"
        )
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_non_decimal_file_index_lets_server_pick(self) -> None:
        client = TestClient(_make_app(), follow_redirects=False)

        resp = client.get(
            "/play?infoHash=ABCD&type=series&id=tt1%3A1%3A1&fileIndex=2_0"
            "&torrserver=http%3A%2F%2Fhost%3A9090"
        )

        assert resp.status_code == 302
        assert (
            resp.headers["location"]
            == "http://host:9090/stream/video?link=ABCD&index=0&play"
        )

    def test_uses_config_torrserver_as_fallback(self) -> None:
        client = TestClient(_make_app(), follow_redirects=False)
        cfg = _encode_config({"torrserver": "http://cfg:2"})

        resp = client.get(f"/play?{_PLAY_QUERY}&config={cfg}")

        assert resp.headers["location"].startswith("http://cfg:2/stream/")

    def test_missing_parameters(self) -> None:
        client = TestClient(_make_app())

        resp = client.get("/play?type=movie")

        assert resp.status_code == 400
        assert resp.json() == {
            "err": "missing required parameters",
            "missing": ["infoHash", "id"],
        }

    def test_unresolvable_returns_404(self) -> None:
        play_uc = StremioPlayUseCase(default_torrserver=None, resolve_fn=resolve_play_url)
        client = TestClient(_make_app(stremio_play_uc=play_uc))

        resp = client.get(f"/play?{_PLAY_QUERY}")

        assert resp.status_code == 404
        assert resp.json() == {"err": "unable to resolve stream"}

    def test_unexpected_error_returns_500(self) -> None:
        play_uc = MagicMock()
        play_uc.execute.side_effect = RuntimeError("boom")
        client = TestClient(_make_app(stremio_play_uc=play_uc))

        resp = client.get(f"/play?{_PLAY_QUERY}")

        assert resp.status_code == 500
        assert resp.json() == {"err": "play handler error"}


class TestServerlessPrefix:
    def test_prefixed_routes(self) -> None:
        client = TestClient(_make_app(prefix="/api/moisa"), follow_redirects=False)

        assert client.get("/api/moisa/manifest.json").status_code == 200
        resp = client.get(
            f"/api/moisa/play?{_PLAY_QUERY}&torrserver=http%3A%2F%2Fhost%3A9090"
        )
        assert resp.status_code == 302
