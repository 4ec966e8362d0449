import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

# Point the app at a throwaway SQLite file before anything imports settings.
_DB_PATH = Path(tempfile.mkdtemp(prefix="rentals-tests-")) / "rentals.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["SERVICE_DATABASE_URL"] = ""
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["OPENAI_API_KEY"] = ""
os.environ["ADMIN_API_SECRET"] = ""
os.environ["CRON_SECRET"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from app.database import Base
from app.main import app
from app.models.collection import Collection
from app.models.property import PropertyStatus
from app.models.user import User
from app.services.mapper import build_property_row
from app.services.registry import build_services
from app.utils.security import create_access_token

sync_engine = create_engine(f"sqlite:///{_DB_PATH}")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(sync_engine)
    Base.metadata.create_all(sync_engine)
    yield


@pytest.fixture(autouse=True)
def services():
    app.state.services = build_services()
    yield app.state.services


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def auth_headers():
    def _headers(user_id: str = "user-a", email: str = "owner@example.com") -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id, email=email)}"}

    return _headers


@pytest.fixture
def csrf_headers(client, auth_headers):
    """Bearer plus a CSRF token issued to the same user."""

    def _headers(user_id: str = "user-a") -> dict:
        headers = auth_headers(user_id)
        response = client.get("/csrf-token", headers=headers)
        assert response.status_code == 200
        return {**headers, "X-CSRF-Token": response.json()["csrfToken"]}

    return _headers


@pytest.fixture
def make_property():
    """Insert a listing directly and return its id and handle."""

    def _make(
        *,
        title: str = "Sunny PG Room",
        handle: str | None = None,
        price: float = 5000.0,
        property_type: str = "PG",
        city: str = "Mandsaur",
        address: str = "12 Station Road",
        user_id: str = "user-a",
        available: bool = True,
        status: str = PropertyStatus.PENDING.value,
        amenities: list[str] | None = None,
        created_at: datetime | None = None,
        view_count: int = 0,
        leads_count: int = 0,
    ) -> dict:
        row = build_property_row(
            handle=handle or title.lower().replace(" ", "-"),
            title=title,
            description=f"{title} description",
            price=price,
            address=address,
            city=city,
            locality=None,
            property_type=property_type,
            images=["https://img.example.com/1.jpg"],
            contact_number="9876543210",
            amenities=amenities or [],
            user_id=user_id,
        )
        row.available_for_sale = available
        row.status = status
        row.view_count = view_count
        row.leads_count = leads_count
        if created_at is not None:
            row.created_at = created_at
        with Session(sync_engine, expire_on_commit=False) as session:
            session.add(row)
            session.commit()
            return {"id": row.id, "handle": row.handle}

    return _make


@pytest.fixture
def make_collection():
    def _make(handle: str, title: str, description: str = "") -> None:
        with Session(sync_engine) as session:
            session.add(Collection(id=f"col_{handle}", handle=handle, title=title, description=description))
            session.commit()

    return _make


@pytest.fixture
def make_user():
    def _make(user_id: str, status: str = "active") -> None:
        with Session(sync_engine) as session:
            session.add(
                User(
                    id=user_id,
                    email=f"{user_id}@example.com",
                    status=status,
                    created_at=datetime.now(timezone.utc),
                    updated_at=datetime.now(timezone.utc),
                )
            )
            session.commit()

    return _make
