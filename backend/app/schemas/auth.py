"""Authentication schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenPayload(BaseModel):
    """Claims read from the auth provider's access token."""
    sub: str  # User ID
    email: Optional[str] = None
    role: Optional[str] = None
    exp: Optional[datetime] = None


class CurrentUser(BaseModel):
    """The authenticated caller."""
    id: str
    email: Optional[str] = None


class CSRFTokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    csrf_token: str = Field(..., alias="csrfToken")
