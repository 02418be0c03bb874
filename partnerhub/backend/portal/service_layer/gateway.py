# portal/service_layer/gateway.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ..adapters.clients.credentials import credential_presence
from ..adapters.clients.http_dispatch import QueryParams, RawResponse
from ..adapters.clients.relay import RelayClient
from ..adapters.clients.vaultre import VaultReClient
from ..config import Settings, settings as default_settings
from ..domain.errors import ConfigurationFault, GatewayError, UpstreamError, UpstreamUnreachable
from ..domain.query import translate
from ..domain.search import filter_listings, presentable_listings
from ..domain.types import EndpointKind, ListingFilter
from ..schemas import CanonicalPage, StatusOut
from .fallback import fallback, fallback_categories
from .normalize import NormalizedBody, ShapeKind, extract_categories, normalize

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoriesResult:
    categories: list[Any]
    fallback: bool


@dataclass(frozen=True)
class RelayResult:
    response: RawResponse
    # None when the relay answered with something other than JSON.
    normalized: NormalizedBody | None


class ListingsGateway:
    """
    Single entry point for every listing read. Owns the fallback policy:
    endpoint kinds listed in FALLBACK_ENDPOINTS substitute sample data on
    configuration, network and upstream errors; all others re-raise.
    """

    def __init__(
        self,
        *,
        cfg: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cfg = cfg or default_settings
        self.transport = transport

    def falls_back(self, kind: EndpointKind) -> bool:
        return kind.value in self.cfg.fallback_endpoints()

    def _client(self) -> VaultReClient:
        return VaultReClient(cfg=self.cfg, transport=self.transport)

    def _recover(self, kind: EndpointKind, err: GatewayError) -> None:
        """Re-raise unless this endpoint kind recovers locally."""
        if not self.falls_back(kind):
            raise err
        log.warning("%s: using fallback data after %s", kind.value, err)

    # -------------------------
    # Listings
    # -------------------------

    async def search_sale(self, f: ListingFilter) -> CanonicalPage:
        kind = EndpointKind.search
        try:
            client = self._client()
            raw = await client.search_sale(translate(f))
        except (ConfigurationFault, UpstreamUnreachable, UpstreamError) as e:
            self._recover(kind, e)
            return fallback(kind)

        result = normalize(raw)
        if result.shape == ShapeKind.unrecognized and self.falls_back(kind):
            log.warning("search: unreadable upstream body, using fallback data")
            return fallback(kind)
        return result.page

    async def search_text(
        self,
        f: ListingFilter,
        query: str | None,
        *,
        presentable_only: bool = False,
    ) -> CanonicalPage:
        page = await self.search_sale(f)
        listings = presentable_listings(page) if presentable_only else page.properties
        matched = filter_listings(listings, query)
        return CanonicalPage(
            properties=matched,
            totalItems=len(matched),
            totalPages=page.totalPages,
            urls=page.urls,
        )

    async def get_listing(self, listing_id: str) -> Any:
        kind = EndpointKind.detail
        try:
            return await self._client().get_property(listing_id)
        except (ConfigurationFault, UpstreamUnreachable, UpstreamError) as e:
            self._recover(kind, e)
            for item in fallback(EndpointKind.search).properties:
                if str(item.get("id")) == str(listing_id):
                    return item
            raise

    # -------------------------
    # Auxiliary endpoints
    # -------------------------

    async def categories(self) -> CategoriesResult:
        kind = EndpointKind.categories
        try:
            raw = await self._client().get_categories()
        except (ConfigurationFault, UpstreamUnreachable, UpstreamError) as e:
            self._recover(kind, e)
            return CategoriesResult(categories=fallback_categories(), fallback=True)

        cats = extract_categories(raw)
        if cats is None:
            if not self.falls_back(kind):
                return CategoriesResult(categories=[], fallback=False)
            log.warning("categories: unreadable upstream body, using fallback data")
            return CategoriesResult(categories=fallback_categories(), fallback=True)
        return CategoriesResult(categories=cats, fallback=False)

    async def status(self) -> StatusOut:
        """Health probe. Always produces a report; the caller never sees an exception."""
        base = {"apiUrl": self.cfg.VAULTRE_API_URL, "env": self.cfg.ENV}
        try:
            resp = await self._client().probe()
        except ConfigurationFault:
            return StatusOut(
                status="error",
                connected=False,
                message="Missing API configuration",
                details=credential_presence(self.cfg),
                **base,
            )
        except UpstreamUnreachable as e:
            return StatusOut(status="error", connected=False, message=e.reason, **base)
        except UpstreamError as e:
            return StatusOut(
                status="error",
                connected=False,
                statusCode=e.status_code,
                responseBody=e.body,
                **base,
            )

        try:
            body: Any = resp.json()
        except ValueError:
            body = resp.text or None
        return StatusOut(status="online", connected=True, statusCode=resp.status_code, responseBody=body, **base)

    # -------------------------
    # Relay tier
    # -------------------------

    def _relay(self) -> RelayClient:
        return RelayClient(cfg=self.cfg, transport=self.transport)

    async def relay(
        self,
        method: str,
        path: str | None,
        params: QueryParams | None = None,
        body: Any | None = None,
    ) -> RelayResult:
        resp = await self._relay().forward(method, path, params=params, body=body)
        if not resp.is_json:
            log.error("relay returned non-JSON content type=%r", resp.content_type)
            return RelayResult(response=resp, normalized=None)
        try:
            data = resp.json()
        except ValueError:
            log.error("relay returned unparseable JSON body")
            return RelayResult(response=resp, normalized=None)
        result = normalize(data)
        log.info("relay response shape=%s", result.shape.value)
        return RelayResult(response=resp, normalized=result)

    async def relay_raw(
        self,
        method: str,
        path: str | None,
        params: QueryParams | None = None,
        body: Any | None = None,
    ) -> RawResponse:
        resp = await self._relay().forward(method, path, params=params, body=body)
        log.info("relay-raw response content type=%r length=%d", resp.content_type, len(resp.content))
        return resp
