# portal/entrypoints/api/routers/categories.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from ....schemas import CategoriesOut
from ....service_layer.gateway import ListingsGateway
from ..deps import get_gateway

router = APIRouter(tags=["categories"])


@router.get("/categories", response_model=CategoriesOut)
async def listing_categories(gateway: ListingsGateway = Depends(get_gateway)) -> CategoriesOut:
    # Errors on this path either fall back to sample categories or propagate to
    # the app-level handler, depending on FALLBACK_ENDPOINTS.
    result = await gateway.categories()
    return CategoriesOut(categories=result.categories, fallback=result.fallback)
