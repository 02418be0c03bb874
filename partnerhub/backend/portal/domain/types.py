# portal/domain/types.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ListingStatus(str, Enum):
    listing = "listing"
    conditional = "conditional"
    unconditional = "unconditional"


# Canonical order used whenever a status set is joined for the upstream.
ACTIVE_STATUSES: tuple[ListingStatus, ...] = (
    ListingStatus.listing,
    ListingStatus.conditional,
    ListingStatus.unconditional,
)

DEFAULT_PAGE_SIZE = 50


class EndpointKind(str, Enum):
    search = "search"
    detail = "detail"
    categories = "categories"
    status = "status"


@dataclass(frozen=True)
class Credentials:
    base_url: str
    token: str
    api_key: str


@dataclass(frozen=True)
class ListingFilter:
    """
    Client-facing listing search filter. Values stay as the caller gave them;
    numeric fields are not validated here (the upstream rejects bad values).
    """

    status: tuple[str, ...] | None = None
    property_type: str | None = None
    min_price: int | str | None = None
    max_price: int | str | None = None
    min_bedrooms: int | str | None = None
    min_bathrooms: int | str | None = None
    suburb: str | None = None
    page: int | str | None = None
    page_size: int | str | None = None
    published: bool | str | None = None
    sort: str | None = None
    sort_order: str | None = None
