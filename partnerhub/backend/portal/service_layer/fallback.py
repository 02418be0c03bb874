# portal/service_layer/fallback.py
from __future__ import annotations

import copy
from typing import Any

from ..domain.types import EndpointKind
from ..schemas import CanonicalPage

# Fixed sample data served whenever live data can't be obtained.
# Ids are stable; every listing carries the fields the portal renders.
_SAMPLE_LISTINGS: list[dict[str, Any]] = [
    {
        "id": "1001",
        "title": "Modern Beachfront Villa",
        "heading": "Modern Beachfront Villa",
        "status": "listing",
        "price": 2500000,
        "bedrooms": 4,
        "bathrooms": 3,
        "carSpaces": 2,
        "propertyType": "House",
        "address": {
            "street": "123 Beach Road",
            "suburb": "Bondi",
            "state": "NSW",
            "postcode": "2026",
            "fullAddress": "123 Beach Road, Bondi NSW 2026",
        },
        "images": [{"id": "1001-1", "url": "https://placehold.co/800x450?text=Beachfront+Villa"}],
        "description": "Four-bedroom villa with direct beach access.",
    },
    {
        "id": "1002",
        "title": "City Apartment with Views",
        "heading": "City Apartment with Views",
        "status": "listing",
        "price": 1200000,
        "bedrooms": 2,
        "bathrooms": 2,
        "carSpaces": 1,
        "propertyType": "Apartment",
        "address": {
            "street": "42 Park Avenue, Unit 1505",
            "suburb": "Sydney",
            "state": "NSW",
            "postcode": "2000",
            "fullAddress": "Unit 1505, 42 Park Avenue, Sydney NSW 2000",
        },
        "images": [{"id": "1002-1", "url": "https://placehold.co/800x450?text=City+Apartment"}],
        "description": "Two-bedroom apartment with harbour outlook.",
    },
    {
        "id": "1003",
        "title": "Mountain Retreat",
        "heading": "Mountain Retreat",
        "status": "conditional",
        "priceText": "Offers over $950,000",
        "bedrooms": 3,
        "bathrooms": 1,
        "carSpaces": 2,
        "propertyType": "House",
        "address": {
            "street": "7 Ridge Street",
            "suburb": "Leura",
            "state": "NSW",
            "postcode": "2780",
            "fullAddress": "7 Ridge Street, Leura NSW 2780",
        },
        "images": [{"id": "1003-1", "url": "https://placehold.co/800x450?text=Mountain+Retreat"}],
        "description": "Weatherboard cottage on a quiet street.",
    },
]

_SAMPLE_CATEGORIES: list[dict[str, Any]] = [
    {"id": "residential", "name": "Residential", "count": 45},
    {"id": "commercial", "name": "Commercial", "count": 12},
    {"id": "rural", "name": "Rural", "count": 8},
    {"id": "land", "name": "Land", "count": 15},
]


def fallback_listings() -> list[dict[str, Any]]:
    return copy.deepcopy(_SAMPLE_LISTINGS)


def fallback_page() -> CanonicalPage:
    listings = fallback_listings()
    return CanonicalPage(properties=listings, totalItems=len(listings), totalPages=1)


def fallback_categories() -> list[dict[str, Any]]:
    return copy.deepcopy(_SAMPLE_CATEGORIES)


def fallback(kind: EndpointKind | str) -> CanonicalPage:
    """Sample page for an endpoint kind: categories for the category endpoint, listings otherwise."""
    if EndpointKind(kind) == EndpointKind.categories:
        cats = fallback_categories()
        return CanonicalPage(properties=cats, totalItems=len(cats), totalPages=1)
    return fallback_page()
