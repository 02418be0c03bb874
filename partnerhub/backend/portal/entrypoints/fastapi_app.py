# portal/entrypoints/fastapi_app.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..domain.errors import GatewayError
from .api.errors import gateway_error_response
from .api.routers import categories, health, listings, relay

log = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="PartnerHub - Listings Gateway")

    @app.exception_handler(GatewayError)
    async def _gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
        return gateway_error_response(exc)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        # Every path answers with JSON, even on bugs.
        log.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Server error", "message": str(exc)})

    # Routers
    app.include_router(health.router)
    app.include_router(listings.router)
    app.include_router(categories.router)
    app.include_router(relay.router)

    return app
