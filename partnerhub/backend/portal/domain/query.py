# portal/domain/query.py
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .parsing import is_blank
from .types import ACTIVE_STATUSES, DEFAULT_PAGE_SIZE, ListingFilter

DEFAULT_STATUS = ",".join(s.value for s in ACTIVE_STATUSES)

# ListingFilter attribute -> upstream query parameter, in the order they are sent.
_PASSTHROUGH: tuple[tuple[str, str], ...] = (
    ("property_type", "propertyType"),
    ("min_price", "minPrice"),
    ("max_price", "maxPrice"),
    ("min_bedrooms", "minBedrooms"),
    ("min_bathrooms", "minBathrooms"),
    ("suburb", "suburb"),
    ("page", "page"),
    ("sort", "sort"),
    ("sort_order", "sortOrder"),
)

# Incoming request query parameter -> ListingFilter attribute.
_REQUEST_PARAMS: dict[str, str] = {
    "status": "status",
    "propertyType": "property_type",
    "minPrice": "min_price",
    "maxPrice": "max_price",
    "minBedrooms": "min_bedrooms",
    "minBathrooms": "min_bathrooms",
    "suburb": "suburb",
    "page": "page",
    "limit": "page_size",
    "pagesize": "page_size",
    "pageSize": "page_size",
    "published": "published",
    "sort": "sort",
    "sortOrder": "sort_order",
}


def _param_text(v: Any) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    return str(v)


def join_status(status: str | Iterable[str] | None) -> str:
    """
    Comma-join a status selection. Known statuses come out in canonical order,
    unknown ones keep their given order after them. Empty selection => default set.
    """
    if status is None:
        return DEFAULT_STATUS

    parts = status.split(",") if isinstance(status, str) else [str(s) for s in status]
    seen: list[str] = []
    for p in parts:
        p = p.strip()
        if p and p not in seen:
            seen.append(p)

    if not seen:
        return DEFAULT_STATUS

    known = [s.value for s in ACTIVE_STATUSES if s.value in seen]
    unknown = [s for s in seen if s not in known]
    return ",".join(known + unknown)


def translate(f: ListingFilter) -> dict[str, str]:
    """
    Map a ListingFilter onto upstream query parameters.

    Defaults: status => full active set, pagesize => 50, published => true.
    Everything else is sent only when present and non-empty; values are not
    validated locally.
    """
    params: dict[str, str] = {"status": join_status(f.status)}

    for attr, key in _PASSTHROUGH:
        v = getattr(f, attr)
        if is_blank(v):
            continue
        params[key] = _param_text(v)

    params["pagesize"] = _param_text(DEFAULT_PAGE_SIZE if is_blank(f.page_size) else f.page_size)
    params["published"] = _param_text(True if is_blank(f.published) else f.published)
    return params


def filter_from_query(query: Mapping[str, Any]) -> ListingFilter:
    """Build a ListingFilter from request query parameters (unknown keys are ignored)."""
    values: dict[str, Any] = {}
    for key, attr in _REQUEST_PARAMS.items():
        v = query.get(key)
        if is_blank(v) or attr in values:
            continue
        values[attr] = v

    status = values.pop("status", None)
    if status is not None:
        values["status"] = tuple(p.strip() for p in str(status).split(",") if p.strip()) or None

    return ListingFilter(**values)
