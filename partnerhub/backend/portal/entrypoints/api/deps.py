# portal/entrypoints/api/deps.py
from __future__ import annotations

from fastapi import Header, HTTPException

from ...config import settings
from ...service_layer.gateway import ListingsGateway


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    if settings.API_KEY:
        if not x_api_key or x_api_key != settings.API_KEY:
            raise HTTPException(status_code=401, detail="Invalid API key")


def get_gateway() -> ListingsGateway:
    # Built per request: credentials are resolved on every call, nothing is shared.
    return ListingsGateway(cfg=settings)
