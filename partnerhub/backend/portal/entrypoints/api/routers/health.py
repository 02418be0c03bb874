# portal/entrypoints/api/routers/health.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from ..deps import get_gateway, require_api_key
from ....adapters.clients.credentials import credential_presence
from ....adapters.clients.http_dispatch import redact
from ....config import settings
from ....schemas import StatusOut
from ....service_layer.gateway import ListingsGateway

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/status", response_model=StatusOut, response_model_exclude_none=True)
async def upstream_status(gateway: ListingsGateway = Depends(get_gateway)) -> StatusOut:
    """Always 200: the body says whether the listings provider is reachable."""
    return await gateway.status()


@router.get("/debug/config", dependencies=[Depends(require_api_key)])
def debug_config() -> dict[str, Any]:
    """
    IMPORTANT: This reads the *running server's* settings, not your shell's.
    Safe to expose because we redact secrets.
    """
    return {
        "ENV": settings.ENV,
        "VAULTRE_API_URL": settings.VAULTRE_API_URL,
        "VAULTRE_API_TOKEN": redact(settings.VAULTRE_API_TOKEN),
        "VAULTRE_API_KEY": redact(settings.VAULTRE_API_KEY),
        "RELAY_BASE_URL": settings.RELAY_BASE_URL,
        "HTTP_TIMEOUT_S": settings.HTTP_TIMEOUT_S,
        "HTTP_MAX_RETRIES": settings.HTTP_MAX_RETRIES,
        "FALLBACK_ENDPOINTS": sorted(settings.fallback_endpoints()),
        "CREDENTIALS_PRESENT": credential_presence(settings),
        "API_KEY_SET": bool(settings.API_KEY),
    }


@router.get("/debug/routes", dependencies=[Depends(require_api_key)])
def debug_routes(request: Request) -> dict[str, Any]:
    """Shows what this running server has actually mounted."""
    routes: list[str] = []
    for r in request.app.routes:
        methods = getattr(r, "methods", None)
        path = getattr(r, "path", None)
        if path:
            if methods:
                routes.append(f"{sorted(list(methods))} {path}")
            else:
                routes.append(path)
    return {"count": len(routes), "routes": sorted(routes)}
