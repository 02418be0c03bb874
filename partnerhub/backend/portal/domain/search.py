# portal/domain/search.py
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .parsing import as_text, get_nested

UNNAMED_TITLE = "Unnamed Property"


def searchable_texts(listing: dict[str, Any]) -> list[str]:
    """
    Every free-text representation a listing may carry. Upstream payloads are
    inconsistent: address can be a string or an object, suburb a string or {name},
    property type flat or nested under type.name.
    """
    address = listing.get("address")
    candidates: list[Any] = [
        listing.get("title"),
        listing.get("heading"),
        listing.get("displayAddress"),
        get_nested(listing, "type.name"),
        listing.get("propertyType"),
        listing.get("description"),
    ]
    if isinstance(address, str):
        candidates.append(address)
    elif isinstance(address, dict):
        candidates.append(address.get("fullAddress"))
        candidates.append(address.get("displayAddress"))
        suburb = address.get("suburb")
        candidates.append(suburb.get("name") if isinstance(suburb, dict) else suburb)

    return [t for t in (as_text(c) for c in candidates) if t]


def matches(listing: dict[str, Any], query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return any(needle in text.lower() for text in searchable_texts(listing))


def _listings_of(page_or_listings: Mapping[str, Any] | Iterable[Any] | Any) -> list[Any]:
    if hasattr(page_or_listings, "properties"):
        return list(page_or_listings.properties)
    if isinstance(page_or_listings, Mapping):
        props = page_or_listings.get("properties")
        return list(props) if isinstance(props, list) else []
    return list(page_or_listings)


def filter_listings(page_or_listings: Any, query: str | None) -> list[dict[str, Any]]:
    """
    Second-pass text filter over an already fetched page. Case-insensitive
    substring, OR across all searchable fields. Empty query => listings unchanged.
    """
    listings = _listings_of(page_or_listings)
    if not query or not query.strip():
        return listings
    return [x for x in listings if isinstance(x, dict) and matches(x, query)]


def has_presentable_content(listing: dict[str, Any]) -> bool:
    """A real title (heading, or a title that isn't the placeholder) and at least one image or photo."""
    heading = as_text(listing.get("heading"))
    title = as_text(listing.get("title"))
    has_title = bool(heading) or (bool(title) and title != UNNAMED_TITLE)

    has_images = any(
        isinstance(listing.get(k), list) and len(listing[k]) > 0
        for k in ("images", "photos")
    )
    return has_title and has_images


def presentable_listings(page_or_listings: Any) -> list[dict[str, Any]]:
    return [x for x in _listings_of(page_or_listings) if isinstance(x, dict) and has_presentable_content(x)]
