"""Input validation and sanitization for untrusted request fields.

Validation decides whether a value is acceptable and never alters it.
Sanitization is defense in depth for values that already passed
validation; it is not a substitute for rejecting bad input.
"""

import math
import re
import uuid
from typing import Any, Final, Optional
from urllib.parse import urlparse

from app.exceptions import ValidationError

DEFAULT_MAX_LENGTH: Final[int] = 1000

# Per-field bounds (min, max) enforced as hard rejects.
FIELD_LIMITS: Final[dict[str, tuple[int, int]]] = {
    "title": (3, 200),
    "description": (1, 5000),
    "address": (1, 500),
    "location": (1, 200),
    "locality": (0, 200),
    "contact_number": (1, 20),
    "handle": (1, 200),
    "query": (0, DEFAULT_MAX_LENGTH),
}

MAX_IMAGES: Final[int] = 20

_SAFE_TAGS: Final[frozenset[str]] = frozenset({"br", "p", "strong", "em", "ul", "ol", "li"})

_BLOCK_PATTERNS: Final[tuple[re.Pattern, ...]] = (
    re.compile(r"<script\b[^>]*>[\s\S]*?</script>", re.IGNORECASE),
    re.compile(r"<iframe\b[^>]*>[\s\S]*?</iframe>", re.IGNORECASE),
    re.compile(r"<object\b[^>]*>[\s\S]*?</object>", re.IGNORECASE),
    re.compile(r"<embed\b[^>]*>", re.IGNORECASE),
    re.compile(r"<form\b[^>]*>[\s\S]*?</form>", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
    re.compile(r"data:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
)
_TAG_RE: Final[re.Pattern] = re.compile(r"<[^>]*>")
_TAG_NAME_RE: Final[re.Pattern] = re.compile(r"</?([a-zA-Z]+)")
_CONTROL_RE: Final[re.Pattern] = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_ESCAPES: Final[dict[str, str]] = {
    "<": "&lt;",
    ">": "&gt;",
    "'": "&#39;",
    '"': "&quot;",
}
_ESCAPE_RE: Final[re.Pattern] = re.compile(r"[<>'\"]")


def validate(value: Any, kind: str, *, max_length: Optional[int] = None) -> bool:
    """Return True when ``value`` is an acceptable ``kind``.

    Supported kinds: ``string``, ``number``, ``url``, ``uuid``, ``boolean``
    and ``array``. ``None`` is never valid.
    """
    if value is None:
        return False

    if kind == "string":
        limit = DEFAULT_MAX_LENGTH if max_length is None else max_length
        return isinstance(value, str) and len(value) <= limit
    if kind == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return not math.isnan(value) and math.isfinite(value)
    if kind == "url":
        if not isinstance(value, str) or len(value) > (max_length or 2048):
            return False
        try:
            parsed = urlparse(value)
        except ValueError:
            return False
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)
    if kind == "uuid":
        if not isinstance(value, str):
            return False
        try:
            uuid.UUID(value)
        except ValueError:
            return False
        return True
    if kind == "boolean":
        return isinstance(value, bool)
    if kind == "array":
        return isinstance(value, list)
    raise ValueError(f"Unknown validation kind: {kind}")


def validate_field(name: str, value: Any, *, required: bool = True) -> None:
    """Validate a bounded text field, raising ``ValidationError`` on failure."""
    low, high = FIELD_LIMITS[name]
    if value is None and not required:
        return
    if not validate(value, "string", max_length=high):
        raise ValidationError(f"Invalid {name} parameter")
    if len(value.strip()) < max(low, 1 if required else 0):
        raise ValidationError(f"Invalid {name} parameter")


def ensure_text(name: str, value: Any, *, required: bool = True) -> Any:
    """Pydantic-friendly wrapper: raises ``ValueError`` instead of an HTTP error."""
    try:
        validate_field(name, value, required=required)
    except ValidationError as exc:
        raise ValueError(exc.detail) from None
    return value


def _strip_tag(match: re.Match) -> str:
    tag = match.group(0)
    name = _TAG_NAME_RE.match(tag)
    if name and name.group(1).lower() in _SAFE_TAGS:
        return tag
    return ""


def sanitize(value: Any) -> Any:
    """Strip markup and script vectors from strings, recursing into lists and dicts."""
    if isinstance(value, str):
        cleaned = _CONTROL_RE.sub("", value)
        for pattern in _BLOCK_PATTERNS:
            cleaned = pattern.sub("", cleaned)
        cleaned = _TAG_RE.sub(_strip_tag, cleaned)
        return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(0)], cleaned)
    if isinstance(value, list):
        return [sanitize(item) for item in value]
    if isinstance(value, dict):
        return {sanitize(key): sanitize(item) for key, item in value.items()}
    return value


def slugify(text: str) -> str:
    """Lowercase, collapse non-alphanumerics to single dashes, trim dashes."""
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").strip().lower())
    return slug.strip("-")
