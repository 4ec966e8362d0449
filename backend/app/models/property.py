"""Property model for rental listings."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class PropertyType(str, Enum):
    """Kinds of rentable unit."""
    PG = "PG"
    FLAT = "Flat"
    ROOM = "Room"
    HOSTEL = "Hostel"


class PropertyStatus(str, Enum):
    """Moderation lifecycle status."""
    PENDING = "pending"
    APPROVED = "approved"
    INACTIVE = "inactive"


COUNTER_FIELDS = ("view_count", "leads_count")


def new_property_id() -> str:
    return f"prop_{uuid.uuid4().hex}"


class Property(Base):
    """A rentable listing owned by a single user."""

    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_property_id)
    handle: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Basic Information. Free text is Text since sanitizing can expand it past its validated length.
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    property_type: Mapped[str] = mapped_column(String(20), nullable=False, default=PropertyType.ROOM.value)

    # Pricing
    price: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")

    # Location
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    city: Mapped[str] = mapped_column(Text, nullable=False, default="", index=True)
    locality: Mapped[Optional[str]] = mapped_column(Text, nullable=True, index=True)

    # JSON arrays stored as text for SQLite compatibility
    images: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    amenities: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Status
    available_for_sale: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), default=PropertyStatus.PENDING.value, index=True)

    # Ownership
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    contact_number: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Analytics
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    leads_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Property {self.title} ({self.city})>"
