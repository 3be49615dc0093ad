"""API health endpoint tests."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from services.api_gateway.app import app, main

client = TestClient(app)


def test_health_ok() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "healthy"
    assert payload["notifications"] is True
    assert payload["storage"] == "memory"


def test_ready_ok() -> None:
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready"}


def test_version_ok() -> None:
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": "1.0.0"}


def test_service_info_ok() -> None:
    response = client.get("/")
    assert response.status_code == 200
    payload = response.json()
    assert payload["service"] == "Alert API Backend"
    assert payload["status"] == "healthy"
    assert payload["version"] == "1.0.0"


def test_stats_ok() -> None:
    response = client.get("/api/stats")
    assert response.status_code == 200
    payload = response.json()
    assert payload["server"] == "Alert API Backend"
    assert payload["uptime"] >= 0
    assert payload["environment"] == "development"


def test_main_runs_uvicorn_with_configured_address() -> None:
    with patch("services.api_gateway.app.uvicorn.run") as run:
        main()

    run.assert_called_once_with(
        "services.api_gateway.app:app",
        host="0.0.0.0",
        port=3000,
        log_config=None,
    )


def test_unknown_path_returns_404() -> None:
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Not found", "path": "/api/does-not-exist"}
