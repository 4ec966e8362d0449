"""Utils package initialization."""

from app.utils.logging import get_logger, setup_logging
from app.utils.security import (
    client_identity,
    create_access_token,
    decode_access_token,
    get_current_user,
    get_optional_user,
    require_admin_secret,
    require_cron_secret,
)
from app.utils.validation import sanitize, validate, validate_field

__all__ = [
    # Security
    "client_identity",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "get_optional_user",
    "require_admin_secret",
    "require_cron_secret",
    # Logging
    "get_logger",
    "setup_logging",
    # Validation
    "sanitize",
    "validate",
    "validate_field",
]
