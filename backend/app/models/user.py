"""User model mirroring accounts from the auth provider."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class UserStatus(str, Enum):
    """Account standing."""
    ACTIVE = "active"
    SUSPENDED = "suspended"


class User(Base):
    """Local profile row; the id is the auth provider's subject."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=UserStatus.ACTIVE.value, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<User {self.id} ({self.status})>"

    @property
    def is_suspended(self) -> bool:
        """Check if the account has been suspended by moderators."""
        return self.status == UserStatus.SUSPENDED.value
