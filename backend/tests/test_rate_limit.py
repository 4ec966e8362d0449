import pytest
from starlette.requests import Request

from app.exceptions import RateLimitExceeded
from app.services.rate_limit import RateLimiter
from app.services.registry import build_services
from app.main import app
from app.utils.security import client_identity


def _request(headers: dict, client=("10.0.0.9", 5000)) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
            "client": client,
        }
    )


def test_budget_then_reject_then_next_window(clock):
    limiter = RateLimiter({"general": 3}, window_seconds=60, clock=clock)
    for _ in range(3):
        limiter.check("1.2.3.4", "general")

    with pytest.raises(RateLimitExceeded) as exc_info:
        limiter.check("1.2.3.4", "general")
    assert exc_info.value.status_code == 429

    clock.advance(60)
    limiter.check("1.2.3.4", "general")


def test_budgets_are_per_identity_and_route_class(clock):
    limiter = RateLimiter({"general": 1, "create": 1}, clock=clock)
    limiter.check("1.2.3.4", "general")
    limiter.check("5.6.7.8", "general")
    limiter.check("1.2.3.4", "create")

    with pytest.raises(RateLimitExceeded):
        limiter.check("1.2.3.4", "create")


def test_unknown_route_class_raises():
    limiter = RateLimiter({"general": 1})
    with pytest.raises(KeyError):
        limiter.check("1.2.3.4", "uploads")


def test_reset_clears_windows(clock):
    limiter = RateLimiter({"auth": 1}, clock=clock)
    limiter.check("1.2.3.4", "auth")
    limiter.reset()
    limiter.check("1.2.3.4", "auth")


def test_client_identity_prefers_proxy_headers():
    assert client_identity(_request({"cf-connecting-ip": "198.51.100.1"})) == "198.51.100.1"
    assert client_identity(_request({"x-forwarded-for": "203.0.113.7, 10.0.0.1"})) == "203.0.113.7"
    assert client_identity(_request({"x-real-ip": "192.0.2.5"})) == "192.0.2.5"


def test_client_identity_ignores_garbage_headers():
    assert client_identity(_request({"x-forwarded-for": "not-an-ip"})) == "10.0.0.9"
    assert client_identity(_request({}, client=None)) == "unknown"


def test_auth_route_class_limits_csrf_endpoint(client):
    for _ in range(10):
        assert client.get("/csrf-token").status_code == 200

    response = client.get("/csrf-token")
    assert response.status_code == 429
    assert response.json() == {"detail": "Too many requests. Please try again later."}

    # Another caller still has its own budget.
    assert client.get("/csrf-token", headers={"X-Forwarded-For": "203.0.113.9"}).status_code == 200


def test_configured_budgets_are_injectable(client):
    app.state.services = build_services(rate_limiter=RateLimiter({"general": 1, "auth": 1, "create": 1, "admin_write": 1}))
    assert client.get("/products").status_code == 200
    assert client.get("/products").status_code == 429


def test_elapsed_windows_are_pruned(clock):
    limiter = RateLimiter({"general": 5}, window_seconds=60, clock=clock)
    limiter.check("1.2.3.4", "general")
    limiter.check("5.6.7.8", "general")
    assert len(limiter) == 2

    clock.advance(60)
    limiter.check("9.9.9.9", "general")
    assert len(limiter) == 1
