from datetime import datetime, timedelta, timezone

from app.config import settings


def test_admin_routes_fail_closed_without_configured_secret(client, make_property):
    listing = make_property()
    response = client.patch(
        f"/admin/properties/{listing['id']}",
        json={"status": "approved"},
        headers={"X-Admin-Secret": ""},
    )
    assert response.status_code == 401


def test_admin_rejects_wrong_secret(client, make_property, monkeypatch):
    monkeypatch.setattr(settings, "admin_api_secret", "admin-secret")
    listing = make_property()

    response = client.patch(
        f"/admin/properties/{listing['id']}",
        json={"status": "approved"},
        headers={"X-Admin-Secret": "guess"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Admin access required"


def test_admin_moderates_listing(client, make_property, monkeypatch):
    monkeypatch.setattr(settings, "admin_api_secret", "admin-secret")
    listing = make_property()
    headers = {"X-Admin-Secret": "admin-secret"}

    response = client.patch(
        f"/admin/properties/{listing['id']}",
        json={"status": "approved", "available_for_sale": False},
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["status"] == "approved"
    assert body["data"]["availableForSale"] is False
    assert body["data"]["userId"] == "user-a"


def test_admin_update_requires_a_field(client, make_property, monkeypatch):
    monkeypatch.setattr(settings, "admin_api_secret", "admin-secret")
    listing = make_property()

    response = client.patch(
        f"/admin/properties/{listing['id']}",
        json={"userId": "user-b"},
        headers={"X-Admin-Secret": "admin-secret"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "No valid fields to update"

    bad_status = client.patch(
        f"/admin/properties/{listing['id']}",
        json={"status": "featured"},
        headers={"X-Admin-Secret": "admin-secret"},
    )
    assert bad_status.status_code == 422


def test_admin_delete(client, make_property, monkeypatch):
    monkeypatch.setattr(settings, "admin_api_secret", "admin-secret")
    listing = make_property()
    headers = {"X-Admin-Secret": "admin-secret"}

    assert client.delete(f"/admin/properties/{listing['id']}", headers=headers).json() == {"success": True}
    assert client.delete(f"/admin/properties/{listing['id']}", headers=headers).status_code == 404


def test_cron_requires_secret(client, monkeypatch):
    assert client.get("/cron/archive-properties").status_code == 401

    monkeypatch.setattr(settings, "cron_secret", "cron-secret")
    response = client.get("/cron/archive-properties", headers={"Authorization": "Bearer wrong"})
    assert response.status_code == 401


def test_cron_archives_old_approved_listings(client, make_property, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "cron-secret")
    now = datetime.now(timezone.utc)
    old = make_property(title="Old Approved", status="approved", created_at=now - timedelta(days=90))
    make_property(title="New Approved", status="approved", created_at=now - timedelta(days=5))
    make_property(title="Old Pending", status="pending", created_at=now - timedelta(days=90))

    response = client.get("/cron/archive-properties", headers={"Authorization": "Bearer cron-secret"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Archived 1 properties older than 60 days.",
        "archivedIds": [old["id"]],
    }
    titles = [p["title"] for p in client.get("/products").json()]
    assert sorted(titles) == ["New Approved", "Old Pending"]

    owner_view = {p["title"]: p for p in client.get("/products/user/user-a").json()}
    assert owner_view["Old Approved"]["status"] == "inactive"
    assert owner_view["Old Approved"]["availableForSale"] is False
