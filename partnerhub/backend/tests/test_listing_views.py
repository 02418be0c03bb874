# tests/test_listing_views.py
from portal.domain.listing import (
    PRICE_ON_APPLICATION,
    determine_status,
    display_address,
    display_price,
    external_link,
    primary_image_url,
    property_type_name,
    status_label,
    suburb_name,
)


def test_price_precedence():
    assert display_price({"price": 750000, "priceText": "Auction"}) == "$750,000"
    assert display_price({"priceText": "Auction"}) == "Auction"
    assert display_price({}) == PRICE_ON_APPLICATION

    full = {"displayPrice": "Offers over $1.2m", "searchPrice": 1200000, "price": 1100000, "priceText": "x"}
    assert display_price(full) == "Offers over $1.2m"
    assert display_price({"searchPrice": 1200000, "price": 1100000}) == "$1,200,000"


def test_zero_or_blank_prices_fall_through():
    assert display_price({"displayPrice": "  ", "searchPrice": 0, "price": 900000}) == "$900,000"
    assert display_price({"price": 0, "priceText": ""}) == PRICE_ON_APPLICATION


def test_status_labels():
    assert status_label({"status": "listing"}) == "For Sale"
    assert status_label({"status": "conditional"}) == "Under Offer"
    assert status_label({"status": "unconditional"}) == "Sold"
    assert status_label({"status": "withdrawn"}) == "withdrawn"
    assert status_label({}) == "Not specified"


def test_property_type_prefers_nested_name():
    assert property_type_name({"type": {"id": 1, "name": "Townhouse"}, "propertyType": "House"}) == "Townhouse"
    assert property_type_name({"propertyType": "House"}) == "House"
    assert property_type_name({}) == "Property"


def test_suburb_from_string_object_or_display_address():
    assert suburb_name({"address": {"suburb": "BONDI BEACH"}}) == "Bondi Beach"
    assert suburb_name({"address": {"suburb": {"name": "leura", "postcode": "2780"}}}) == "Leura"
    assert suburb_name({"displayAddress": "12 Smith St, Paddington NSW 2021"}) == "Paddington"
    assert suburb_name({"address": {}}) is None


def test_display_address_variants():
    assert display_address({"displayAddress": "1 A St, Bondi"}) == "1 A St, Bondi"
    assert display_address({"address": "5 Main Rd, Leura"}) == "5 Main Rd, Leura"
    structured = {"address": {"street": "123 Beach Road", "suburb": "Bondi", "state": "NSW", "postcode": "2026"}}
    assert display_address(structured) == "123 Beach Road, Bondi, NSW 2026"


def test_images_and_links():
    listing = {
        "images": [{"id": "i1", "url": "https://img/1.jpg"}],
        "photos": [{"id": "p1", "url": "https://img/p.jpg"}],
        "externalLinks": [{"id": 1, "url": "https://portal/listing/1"}],
    }
    assert primary_image_url(listing) == "https://img/p.jpg"
    assert external_link(listing) == "https://portal/listing/1"
    assert primary_image_url({}) is None
    assert external_link({"externalLinks": []}) is None


def test_determine_status_prefers_flat_status():
    assert determine_status({"status": "Listing", "saleHistory": [{"status": "settled"}]}) == "listing"


def test_determine_status_uses_latest_significant_history_entry():
    payload = {
        "saleHistory": [
            {"status": "listing", "modified": "2024-01-01T00:00:00Z"},
            {"status": "appraisal", "modified": "2024-06-01T00:00:00Z"},
            {"status": "Conditional", "modified": "2024-03-01T00:00:00Z"},
        ]
    }
    assert determine_status(payload) == "conditional"


def test_determine_status_falls_back_to_any_history_then_sale_life():
    only_prospects = {
        "saleHistory": [
            {"status": "prospect", "modified": "2024-01-01T00:00:00Z"},
            {"status": "appraisal", "modified": "2024-02-01T00:00:00Z"},
        ]
    }
    assert determine_status(only_prospects) == "appraisal"
    assert determine_status({"saleLife": {"status": "Live"}}) == "live"
    assert determine_status({}) is None
