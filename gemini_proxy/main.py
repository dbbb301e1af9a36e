from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response
from starlette.endpoints import HTTPEndpoint

from .config import API_KEY_ENV_VAR, Settings, get_settings
from .upstream import GeminiUpstream, UpstreamFailure

logger = logging.getLogger("gemini-proxy")
logging.basicConfig(level=logging.INFO)

ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


class GenerateEndpoint(HTTPEndpoint):
    """Forward the request body to Gemini with the server-held API key.

    Mounted as a class endpoint so the route matches every HTTP method;
    anything without a handler below ends in method_not_allowed.
    """

    async def options(self, request: Request) -> Response:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    async def method_not_allowed(self, request: Request) -> Response:
        return JSONResponse(
            {"error": "Method Not Allowed"},
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            headers={"Allow": "POST"},
        )

    async def post(self, request: Request) -> Response:
        settings: Settings = request.app.state.settings
        if not settings.gemini_api_key:
            logger.error(f"{API_KEY_ENV_VAR} is not configured")
            return JSONResponse(
                {"error": f"Server misconfigured: missing {API_KEY_ENV_VAR} environment variable"},
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        # The body is opaque: it goes upstream without being parsed.
        body = await request.body()
        result = await request.app.state.upstream.generate(settings.gemini_api_key, body)

        if isinstance(result, UpstreamFailure):
            return JSONResponse(
                {"error": "Failed to contact Gemini API", "details": result.reason},
                status_code=status.HTTP_502_BAD_GATEWAY,
            )

        logger.info(f"Proxied request to Gemini: upstream status {result.status_code}")
        # Raw header instead of media_type, so text/* keeps upstream's exact value.
        return Response(
            content=result.body,
            status_code=result.status_code,
            headers={"Content-Type": result.content_type},
        )


def create_app(settings: Optional[Settings] = None, upstream: Optional[GeminiUpstream] = None) -> FastAPI:
    settings = settings or get_settings()
    upstream = upstream or GeminiUpstream.from_settings(settings)
    logger.setLevel(settings.log_level.upper())

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.upstream = upstream

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):  # type: ignore[override]
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = settings.allowed_origin
        response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
        response.headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
        if settings.allowed_origin != "*":
            response.headers.add_vary_header("Origin")
        return response

    @app.get("/healthz")
    async def health() -> dict:
        return {"status": "ok"}

    app.add_route("/api/generate", GenerateEndpoint, include_in_schema=False)

    return app


app = create_app()
