# portal/entrypoints/api/routers/listings.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Response

from ....config import settings
from ....domain.errors import GatewayError
from ....domain.query import filter_from_query
from ....schemas import CanonicalPage
from ....service_layer.fallback import fallback_page
from ....service_layer.gateway import ListingsGateway
from ..deps import get_gateway
from ..errors import gateway_error_response

router = APIRouter(tags=["listings"])


def _filter_params(
    status: str | None = Query(default=None, description="listing,conditional,unconditional"),
    propertyType: str | None = Query(default=None),
    minPrice: str | None = Query(default=None),
    maxPrice: str | None = Query(default=None),
    minBedrooms: str | None = Query(default=None),
    minBathrooms: str | None = Query(default=None),
    suburb: str | None = Query(default=None),
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    published: str | None = Query(default=None),
    sort: str | None = Query(default=None),
    sortOrder: str | None = Query(default=None),
) -> dict[str, Any]:
    # Kept as strings on purpose: bad numbers are the upstream's to reject.
    return {
        "status": status,
        "propertyType": propertyType,
        "minPrice": minPrice,
        "maxPrice": maxPrice,
        "minBedrooms": minBedrooms,
        "minBathrooms": minBathrooms,
        "suburb": suburb,
        "page": page,
        "limit": limit,
        "published": published,
        "sort": sort,
        "sortOrder": sortOrder,
    }


@router.get("/listings/sale", response_model=CanonicalPage, response_model_exclude_none=True)
async def listings_sale(
    response: Response,
    params: dict[str, Any] = Depends(_filter_params),
    gateway: ListingsGateway = Depends(get_gateway),
):
    try:
        page = await gateway.search_sale(filter_from_query(params))
    except GatewayError as e:
        return gateway_error_response(e)

    response.headers["Cache-Control"] = settings.SEARCH_CACHE_CONTROL
    return page


@router.get("/listings/search", response_model=CanonicalPage, response_model_exclude_none=True)
async def listings_search(
    q: str | None = Query(default=None),
    presentable: bool = Query(default=False),
    params: dict[str, Any] = Depends(_filter_params),
    gateway: ListingsGateway = Depends(get_gateway),
):
    try:
        return await gateway.search_text(filter_from_query(params), q, presentable_only=presentable)
    except GatewayError as e:
        return gateway_error_response(e)


@router.get("/mock", response_model=CanonicalPage, response_model_exclude_none=True)
def mock_listings() -> CanonicalPage:
    return fallback_page()


@router.get("/listings/{listing_id}")
async def listing_detail(listing_id: str, gateway: ListingsGateway = Depends(get_gateway)):
    try:
        return await gateway.get_listing(listing_id)
    except GatewayError as e:
        return gateway_error_response(e)
