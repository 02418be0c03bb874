# portal/adapters/clients/vaultre.py
from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import Settings, settings as default_settings
from ...domain.errors import UpstreamError
from ...domain.listing import determine_status
from ...domain.types import Credentials
from .credentials import resolve_credentials
from .http_dispatch import RawResponse, dispatch

log = logging.getLogger(__name__)


def unwrap_listing_detail(data: Any) -> Any:
    """
    Detail responses arrive as the listing itself, {data: listing} or
    {property: listing}. Anything else is returned untouched.
    """
    if not isinstance(data, dict):
        return data
    if data.get("id") is not None:
        return data
    for key in ("data", "property"):
        inner = data.get(key)
        if isinstance(inner, dict) and inner.get("id") is not None:
            return inner
    log.info("unknown listing detail structure, keys=%s", sorted(data.keys())[:20])
    return data


class VaultReClient:
    """
    Direct VaultRE client. Every call attaches the bearer token and API key.
    Returns decoded bodies; envelope reconciliation is left to the normalizer.
    """

    def __init__(
        self,
        *,
        credentials: Credentials | None = None,
        cfg: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cfg = cfg or default_settings
        # Resolving here means a missing secret surfaces before any I/O.
        self.credentials = credentials if credentials is not None else resolve_credentials(self.cfg)
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.credentials.token}",
            "x-api-key": self.credentials.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _url(self, path: str) -> str:
        return f"{self.credentials.base_url}/{path.lstrip('/')}"

    async def request(self, method: str, path: str, *, params: dict[str, Any] | None = None) -> RawResponse:
        return await dispatch(
            method,
            self._url(path),
            headers=self._headers(),
            params=params,
            cfg=self.cfg,
            transport=self.transport,
        )

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        resp = await self.request("GET", path, params=params)
        try:
            return resp.json()
        except ValueError:
            return None

    async def search_sale(self, params: dict[str, str]) -> Any:
        """
        Sale listing search. Some accounts don't expose /properties/sale; a 404
        there is retried once against the generic /properties listing.
        """
        try:
            return await self._get_json("/properties/sale", params)
        except UpstreamError as e:
            if e.status_code != 404:
                raise
            log.info("/properties/sale not available (404), falling back to /properties")
            return await self._get_json("/properties", params)

    async def get_property(self, listing_id: str) -> Any:
        resp = await self.request("GET", f"/properties/{listing_id}")
        try:
            raw = resp.json()
        except ValueError as e:
            # A 2xx that isn't JSON is still a broken answer for a detail lookup.
            log.error("listing %s: non-JSON detail body content type=%r", listing_id, resp.content_type)
            raise UpstreamError(
                502,
                resp.text[:500] or None,
                reason="Listing detail was not JSON",
                url=resp.url,
            ) from e
        data = unwrap_listing_detail(raw)
        if isinstance(data, dict):
            status = determine_status(data)
            if status:
                data["status"] = status
        return data

    async def get_categories(self) -> Any:
        return await self._get_json("/categories/property")

    async def probe(self) -> RawResponse:
        """Cheap reachability check; the raw response carries status and body."""
        return await self.request("GET", "/properties", params={"limit": 1})
