import json
from datetime import datetime, timezone

from app.models.collection import Collection
from app.models.property import Property
from app.services.mapper import (
    ListingTags,
    build_property_changes,
    build_property_row,
    format_amount,
    map_db_collection_to_collection,
    map_property_to_product,
)


def _property(**overrides) -> Property:
    values = dict(
        id="prop_1",
        handle="sunny-pg-room",
        title="Sunny PG Room",
        description="Near market",
        property_type="PG",
        price=5000.0,
        currency_code="INR",
        address="12 Station Road",
        city="Mandsaur",
        images=json.dumps(["https://img.example.com/1.jpg", {"url": "https://img.example.com/2.jpg"}]),
        tags=None,
        amenities=json.dumps(["WiFi"]),
        available_for_sale=True,
        status="approved",
        user_id="user-a",
        contact_number="9876543210",
        view_count=3,
        leads_count=1,
    )
    values.update(overrides)
    return Property(**values)


def test_format_amount():
    assert format_amount(5000.0) == "5000"
    assert format_amount(5500.5) == "5500.5"
    assert format_amount(7250.25) == "7250.25"
    assert format_amount(None) == "0"


def test_maps_listing_to_single_variant_product():
    product = map_property_to_product(_property())

    assert product.price_range.min_variant_price.amount == "5000"
    assert product.price_range.max_variant_price == product.price_range.min_variant_price
    assert product.currency_code == "INR"
    assert [v.id for v in product.variants] == ["prop_1_default"]
    assert product.variants[0].title == "Default Title"
    assert product.variants[0].available_for_sale is True
    assert [img.url for img in product.images] == [
        "https://img.example.com/1.jpg",
        "https://img.example.com/2.jpg",
    ]
    assert product.featured_image == product.images[0]
    assert product.images[0].alt_text == "Sunny PG Room"
    assert product.seo.title == "Sunny PG Room"
    assert product.seo.description == "Near market"
    assert product.category_id == "12 Station Road"
    assert product.amenities == ["WiFi"]
    assert product.view_count == 3


def test_tags_fall_back_to_columns():
    product = map_property_to_product(_property(tags=None))
    assert product.tags == ["PG", "Mandsaur", "12 Station Road"]

    stored = map_property_to_product(_property(tags=json.dumps(["Flat", "Neemuch", "Main Road"])))
    assert stored.tags == ["Flat", "Neemuch", "Main Road"]


def test_missing_fields_map_to_defaults():
    product = map_property_to_product(
        _property(images=None, amenities="not json", description=None, view_count=None)
    )
    assert product.images == []
    assert product.featured_image is None
    assert product.amenities == []
    assert product.description == ""
    assert product.view_count == 0


def test_listing_tags_positions():
    tags = ListingTags.from_list(["PG"])
    assert tags == ListingTags(category="PG", city="", address="")
    assert tags.to_list() == ["PG", "", ""]


def test_collection_defaults():
    updated = datetime(2026, 1, 1, tzinfo=timezone.utc)
    collection = map_db_collection_to_collection(
        Collection(id="col_pgs", handle="pgs", title="PGs", description=None, path=None, seo=None, updated_at=updated)
    )
    assert collection.path == "/search/pgs"
    assert collection.seo.title == "PGs"
    assert collection.seo.description == ""
    assert collection.updated_at == updated


def test_collection_keeps_stored_seo():
    collection = map_db_collection_to_collection(
        Collection(
            id="col_flats",
            handle="flats",
            title="Flats",
            description="Whole flats",
            path="/flats",
            seo=json.dumps({"title": "Flats for rent", "description": "Family flats"}),
        )
    )
    assert collection.path == "/flats"
    assert collection.seo.title == "Flats for rent"


def test_build_property_row_defaults():
    row = build_property_row(
        handle="sunny-pg-room",
        title="Sunny PG Room",
        description="Near market",
        price=5000.0,
        address="12 Station Road",
        city="Mandsaur",
        locality="Gandhi Nagar",
        property_type="PG",
        images=["https://img.example.com/1.jpg"],
        contact_number="9876543210",
        amenities=["WiFi"],
        user_id="user-a",
    )
    assert row.status == "pending"
    assert row.available_for_sale is True
    assert json.loads(row.tags) == ["PG", "Mandsaur", "12 Station Road"]
    assert json.loads(row.images) == [
        {"url": "https://img.example.com/1.jpg", "altText": "Sunny PG Room", "width": 800, "height": 600}
    ]


def test_build_property_changes_rebuilds_derived_columns():
    current = _property()
    values = build_property_changes(current, {"location": "Neemuch", "amenities": ["AC"], "price": 6000.0})

    assert values["city"] == "Neemuch"
    assert "location" not in values
    assert json.loads(values["amenities"]) == ["AC"]
    assert json.loads(values["tags"]) == ["PG", "Neemuch", "12 Station Road"]
    assert values["price"] == 6000.0
