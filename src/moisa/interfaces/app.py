"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from moisa.infrastructure.config import AppConfig
from moisa.interfaces.api.stremio.router import CORS_HEADERS
from moisa.interfaces.api.stremio.router import router as stremio_router
from moisa.interfaces.app_state import AppState
from moisa.interfaces.composition import lifespan

log = structlog.get_logger(__name__)

# Serverless deployments expose the addon below this path as well.
SERVERLESS_PREFIX = "/api/moisa"


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration ONLY, NO resource initialization.

    Resources (HTTP client, Torrentio client, use cases) are created in lifespan().
    """
    app = FastAPI(
        title="Moisa",
        description="Stremio addon relaying Torrentio results to TorrServer",
        version="1.1.1",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    app.include_router(stremio_router)
    app.include_router(stremio_router, prefix=SERVERLESS_PREFIX)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        """Liveness probe, returns 200 as long as the process is running."""
        return {"status": "ok"}

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404, content={"err": "not found"}, headers=CORS_HEADERS
            )
        return await http_exception_handler(request, exc)

    @app.middleware("http")
    async def answer_preflight(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        # Stremio Web preflights addon requests on any path.
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)
        return await call_next(request)

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
