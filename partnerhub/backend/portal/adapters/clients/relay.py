# portal/adapters/clients/relay.py
from __future__ import annotations

from typing import Any

import httpx

from ...config import Settings, settings as default_settings
from ...domain.errors import ConfigurationFault
from ...domain.parsing import is_blank
from .http_dispatch import QueryParams, RawResponse, dispatch


def clean_relay_path(path: str | None) -> str:
    """Leading slashes are dropped so the relay URL never gets a double slash."""
    return (path or "").lstrip("/")


class RelayClient:
    """
    Pass-through to the relay tier. The relay holds the upstream credentials
    itself, so nothing secret is attached here.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        cfg: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cfg = cfg or default_settings
        url = base_url if base_url is not None else self.cfg.RELAY_BASE_URL
        if is_blank(url):
            raise ConfigurationFault(["RELAY_BASE_URL"])
        self.base_url = str(url).strip().rstrip("/")
        self.transport = transport

    def build_url(self, path: str | None) -> str:
        return f"{self.base_url}/{clean_relay_path(path)}"

    async def forward(
        self,
        method: str,
        path: str | None,
        *,
        params: QueryParams | None = None,
        body: Any | None = None,
    ) -> RawResponse:
        method = method.upper()
        return await dispatch(
            method,
            self.build_url(path),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            params=params or None,
            json=body if method != "GET" else None,
            cfg=self.cfg,
            transport=self.transport,
        )
