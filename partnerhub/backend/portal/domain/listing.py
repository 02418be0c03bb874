# portal/domain/listing.py
from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from .parsing import as_text, get_nested, is_blank

PRICE_ON_APPLICATION = "Price on application"

STATUS_LABELS: dict[str, str] = {
    "listing": "For Sale",
    "conditional": "Under Offer",
    "unconditional": "Sold",
}

# Sale-history entries that define the active/final state of a listing.
SIGNIFICANT_STATUSES: set[str] = {
    "listing",
    "live",
    "conditional",
    "unconditional",
    "settled",
    "withdrawn",
}


def _money(x: Any) -> str | None:
    """Numeric price => '$1,234,567'. Zero and non-numeric values are 'not set'."""
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        return None
    if not x:
        return None
    return f"${x:,.0f}" if float(x).is_integer() else f"${x:,.2f}"


def display_price(listing: dict[str, Any]) -> str:
    """
    Fixed precedence: displayPrice > searchPrice > price > priceText > "Price on application".
    """
    shown = as_text(listing.get("displayPrice"))
    if shown and shown.strip():
        return shown

    for key in ("searchPrice", "price"):
        money = _money(listing.get(key))
        if money:
            return money

    text = as_text(listing.get("priceText"))
    if text and text.strip():
        return text

    return PRICE_ON_APPLICATION


def status_label(listing: dict[str, Any]) -> str:
    status = listing.get("status")
    if is_blank(status):
        return "Not specified"
    return STATUS_LABELS.get(str(status).lower(), str(status))


def property_type_name(listing: dict[str, Any]) -> str:
    nested = as_text(get_nested(listing, "type.name"))
    if nested and nested.strip():
        return nested
    flat = as_text(listing.get("propertyType"))
    if flat and flat.strip():
        return flat
    return "Property"


def display_address(listing: dict[str, Any]) -> str | None:
    """Best single-line address: displayAddress, then the address object's own strings."""
    top = as_text(listing.get("displayAddress"))
    if top and top.strip():
        return top

    address = listing.get("address")
    if isinstance(address, str):
        return address or None
    if not isinstance(address, dict):
        return None

    for key in ("displayAddress", "fullAddress"):
        v = as_text(address.get(key))
        if v and v.strip():
            return v

    parts: list[str] = []
    street = as_text(address.get("street"))
    if street:
        parts.append(street.strip())
    suburb = suburb_name(listing, title_case=False)
    if suburb:
        parts.append(suburb)
    state = as_text(address.get("state"))
    postcode = address.get("postcode")
    tail = " ".join(str(x).strip() for x in (state, postcode) if not is_blank(x))
    if tail:
        parts.append(tail)
    return ", ".join(p for p in parts if p) or None


def _title_case(s: str) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), s.lower())


def suburb_name(listing: dict[str, Any], *, title_case: bool = True) -> str | None:
    """
    Suburb from either address.suburb (string) or address.suburb.name (object).
    Falls back to parsing 'street, Suburb NSW 2026' style display addresses.
    """
    address = listing.get("address")
    suburb: str | None = None

    if isinstance(address, dict):
        raw = address.get("suburb")
        if isinstance(raw, str):
            suburb = raw
        elif isinstance(raw, dict):
            suburb = as_text(raw.get("name"))

    if not suburb:
        line = as_text(listing.get("displayAddress"))
        if line is None and isinstance(address, dict):
            line = as_text(address.get("displayAddress")) or as_text(address.get("fullAddress"))
        if line and "," in line:
            location = line.split(",", 1)[1].strip()
            m = re.match(r"^(.*?)\s+[A-Z]{2,3}\b", location)
            suburb = m.group(1).strip() if m and m.group(1) else location

    if not suburb or not suburb.strip():
        return None
    suburb = suburb.strip()
    return _title_case(suburb) if title_case else suburb


def listing_images(listing: dict[str, Any]) -> list[dict[str, Any]]:
    """Ordered {id, url} images; photos are preferred over images when both are present."""
    out: list[dict[str, Any]] = []
    for key in ("photos", "images"):
        seq = listing.get(key)
        if not isinstance(seq, list):
            continue
        for img in seq:
            if isinstance(img, dict) and isinstance(img.get("url"), str) and img["url"]:
                out.append({"id": str(img.get("id") or ""), "url": img["url"]})
    return out


def primary_image_url(listing: dict[str, Any]) -> str | None:
    images = listing_images(listing)
    return images[0]["url"] if images else None


def external_link(listing: dict[str, Any]) -> str | None:
    direct = as_text(listing.get("externalLink"))
    if direct:
        return direct
    links = listing.get("externalLinks")
    if isinstance(links, list) and links and isinstance(links[0], dict):
        return as_text(links[0].get("url"))
    return None


def _modified_ts(entry: dict[str, Any]) -> float:
    raw = entry.get("modified")
    if not isinstance(raw, str) or not raw:
        return 0.0
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).timestamp()
    except ValueError:
        return 0.0


def determine_status(payload: dict[str, Any]) -> str | None:
    """
    Status for a listing detail payload:
      1. flat 'status' field
      2. most recently modified *significant* saleHistory entry
      3. most recently modified saleHistory entry of any kind
      4. saleLife.status
    """
    flat = as_text(payload.get("status"))
    if flat:
        return flat.lower()

    history = payload.get("saleHistory")
    entries = [e for e in history if isinstance(e, dict)] if isinstance(history, list) else []

    if not entries:
        life = as_text(get_nested(payload, "saleLife.status"))
        return life.lower() if life else None

    significant = [
        e for e in entries
        if isinstance(e.get("status"), str) and e["status"].lower() in SIGNIFICANT_STATUSES
    ]
    pool = significant or entries
    latest = sorted(pool, key=_modified_ts, reverse=True)[0]
    status = as_text(latest.get("status"))
    return status.lower() if status else None
