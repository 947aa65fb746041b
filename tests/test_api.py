import logging

from fastapi.testclient import TestClient

from peakstream.app import create_app
from peakstream.config.settings import Settings


def test_home(client: TestClient):
    response = client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "running"
    assert body["emission_interval_ms"] == 10


def test_health(client: TestClient):
    body = client.get("/health").json()

    assert body["status"] == "ok"
    assert body["active_sessions"] == 0
    assert body["sensor_count"] == 3


def test_sensors(client: TestClient):
    body = client.get("/sensors").json()

    assert body["count"] == 3
    assert [s["id"] for s in body["sensors"]] == [1, 2, 3]
    assert all(s["length"] > 0 for s in body["sensors"])


def test_sessions_empty(client: TestClient):
    assert client.get("/sessions").json() == {"count": 0, "sessions": []}


def test_errors_are_logged(client: TestClient, caplog):
    with caplog.at_level(logging.WARNING, logger="peakstream"):
        response = client.get("/missing")

    assert response.status_code == 404
    assert "GET /missing - Status: 404" in caplog.text


def test_error_log_includes_duration(client: TestClient, caplog):
    with caplog.at_level(logging.WARNING, logger="peakstream"):
        client.get("/nowhere")

    record = next(r for r in caplog.records if "/nowhere" in r.getMessage())
    assert record.levelno == logging.WARNING
    assert record.getMessage().endswith(" ms)")


def test_successful_requests_logged_at_debug(client: TestClient, caplog):
    with caplog.at_level(logging.DEBUG, logger="peakstream"):
        client.get("/health")

    records = [r for r in caplog.records if "GET /health - Status: 200" in r.getMessage()]
    assert [r.levelno for r in records] == [logging.DEBUG]


def test_app_applies_configured_log_level():
    app_logger = logging.getLogger("peakstream")
    previous = app_logger.level
    try:
        create_app(Settings(log_level="debug"))

        assert app_logger.level == logging.DEBUG
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
    finally:
        app_logger.setLevel(previous)
