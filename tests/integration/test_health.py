"""Health, status and response header checks."""

from unittest.mock import patch

from src.setlist_studio import __version__
from src.setlist_studio.api.http.deps import get_song_service


def test_health(client):
    response = client.get("/health")

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == "Healthy"
    assert body["service"] == "Setlist Studio"
    assert body["version"] == __version__
    assert "timestamp" in body


def test_simple_health_endpoints(client):
    assert client.get("/health/simple").json() == {"status": "Healthy"}
    assert client.get("/api/health/simple").json() == {"status": "Healthy"}


def test_status_and_ping(client):
    status = client.get("/api/status").json()
    ping = client.get("/api/status/ping").json()

    assert status["environment"] == "Test"
    assert status["status"] == "Healthy"
    assert ping["status"] == "Pong"


def test_ready(client):
    response = client.get("/health/ready")

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == "Healthy"
    assert body["checks"]["database"]["initialized"] is True
    assert body["checks"]["session_storage"]["status"] == "Healthy"


def test_ready_reports_database_failure(client):
    database_service = client.app.state.app_dependencies.database_service
    with patch.object(database_service, "health_check", return_value=False):
        response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["checks"]["database"]["status"] == "Unhealthy"


def test_security_headers(client):
    response = client.get("/health")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["referrer-policy"] == "strict-origin-when-cross-origin"
    assert "frame-ancestors 'none'" in response.headers["content-security-policy"]
    assert "camera=()" in response.headers["permissions-policy"]
    assert "strict-transport-security" not in response.headers
    assert response.headers["x-request-id"]


def test_request_id_is_echoed(client):
    response = client.get("/health/simple", headers={"X-Request-ID": "req-123"})
    assert response.headers["x-request-id"] == "req-123"


def test_unhandled_error_returns_request_id(auth_client, log_messages):
    def broken_song_service():
        raise RuntimeError("database exploded")

    auth_client.app.dependency_overrides[get_song_service] = broken_song_service
    try:
        response = auth_client.get("/api/songs", headers={"X-Request-ID": "req-500"})
    finally:
        auth_client.app.dependency_overrides.pop(get_song_service, None)

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal Server Error", "request_id": "req-500"}
    assert response.headers["x-request-id"] == "req-500"
    errors = [r for r in log_messages if r["level"] == "ERROR"]
    assert [r["message"] for r in errors] == ["request.error"]
    assert errors[0]["exception"] is not None
