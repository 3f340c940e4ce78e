"""Test that the FastAPI app can be imported and the health endpoints work."""
from fastapi.testclient import TestClient
from compass.main import app


def test_health_endpoint():
    """Test that GET /health returns 200 and {"status": "ok"}."""
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_api_health_endpoint_sets_build_header():
    client = TestClient(app)
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "X-Compass-Build" in response.headers


def test_server_id_endpoint():
    client = TestClient(app)
    body = client.get("/api/_debug/server-id").json()
    assert body["server_id"].startswith("compass-backend::")
    assert "build_id" in body


def test_protected_routes_require_bearer_token():
    client = TestClient(app)
    response = client.get("/api/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "Missing Authorization header"
