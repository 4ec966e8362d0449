import pytest
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError
from app.schemas.property import PropertyCreate
from app.utils.validation import sanitize, slugify, validate, validate_field


def _create_payload(**overrides) -> dict:
    payload = {
        "title": "Sunny PG Room",
        "description": "Close to the bus stand",
        "price": 5000,
        "address": "12 Station Road",
        "location": "Mandsaur",
        "type": "PG",
        "images": ["https://img.example.com/1.jpg"],
        "contactNumber": "9876543210",
    }
    payload.update(overrides)
    return payload


@pytest.mark.parametrize(
    "value,kind,expected",
    [
        ("hello", "string", True),
        ("x" * 1001, "string", False),
        (42, "string", False),
        (None, "string", False),
        (5000, "number", True),
        (49.5, "number", True),
        (float("nan"), "number", False),
        (float("inf"), "number", False),
        (True, "number", False),
        ("5000", "number", False),
        ("https://img.example.com/a.jpg", "url", True),
        ("http://example.com", "url", True),
        ("ftp://example.com/file", "url", False),
        ("javascript:alert(1)", "url", False),
        ("not a url", "url", False),
        ("123e4567-e89b-12d3-a456-426614174000", "uuid", True),
        ("prop_123", "uuid", False),
        (False, "boolean", True),
        ([], "array", True),
    ],
)
def test_validate_kinds(value, kind, expected):
    assert validate(value, kind) is expected


def test_validate_respects_explicit_max_length():
    assert validate("x" * 1500, "string", max_length=5000)
    assert not validate("x" * 201, "string", max_length=200)


def test_validate_unknown_kind_is_programming_error():
    with pytest.raises(ValueError):
        validate("x", "email")


def test_validate_field_rejects_short_title():
    with pytest.raises(ValidationError) as exc_info:
        validate_field("title", "ab")
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Invalid title parameter"


def test_validate_field_optional_allows_none():
    validate_field("locality", None, required=False)


def test_sanitize_strips_script_blocks():
    assert sanitize("<script>alert(1)</script>Nice room") == "Nice room"


def test_sanitize_strips_event_handlers_and_unknown_tags():
    assert sanitize('<img src=x onerror=alert(1)>hi') == "hi"
    assert sanitize("<b>Bold</b> PG") == "Bold PG"


def test_sanitize_escapes_remaining_markup_characters():
    assert sanitize('Tom\'s "best" room') == "Tom&#39;s &quot;best&quot; room"
    assert sanitize("<p>ok</p>") == "&lt;p&gt;ok&lt;/p&gt;"


def test_sanitize_recurses_and_leaves_other_types():
    cleaned = sanitize({"title": "<script>x</script>A", "tags": ["<iframe>y</iframe>B"], "price": 10})
    assert cleaned == {"title": "A", "tags": ["B"], "price": 10}


def test_sanitize_never_truncates():
    assert len(sanitize("a" * 5000)) == 5000


def test_slugify():
    assert slugify("Sunny PG Room!") == "sunny-pg-room"
    assert slugify("  --  ") == ""


def test_property_create_accepts_valid_payload():
    model = PropertyCreate.model_validate(_create_payload())
    assert model.property_type.value == "PG"
    assert model.contact_number == "9876543210"


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "x" * 201},
        {"title": "ab"},
        {"price": 0},
        {"price": -10},
        {"images": []},
        {"images": ["ftp://img.example.com/1.jpg"]},
        {"type": "Villa"},
        {"contactNumber": "9" * 21},
        {"description": "x" * 5001},
    ],
)
def test_property_create_rejects_out_of_bounds(overrides):
    with pytest.raises(PydanticValidationError):
        PropertyCreate.model_validate(_create_payload(**overrides))
