def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_health_reports_ai_state(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["ai"] == "disabled"
