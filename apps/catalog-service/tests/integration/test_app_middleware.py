import logging
import uuid

from fastapi import FastAPI
from fastapi.testclient import TestClient

from catalog.api.errors import register_exception_handlers
from catalog.context import RequestContextFilter, is_uuid


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "car-catalog-service"}


def test_request_id_is_echoed(client):
    request_id = str(uuid.uuid4())
    r = client.get("/health", headers={"x-request-id": request_id})
    assert r.headers["x-request-id"] == request_id
    assert r.headers["x-correlation-id"] == request_id


def test_request_id_is_generated_when_missing_or_invalid(client):
    r = client.get("/health", headers={"x-request-id": "bogus"})
    assert is_uuid(r.headers["x-request-id"])
    assert r.headers["x-request-id"] != "bogus"


def test_correlation_id_is_propagated(client):
    r = client.get("/health", headers={"x-correlation-id": "trace-42"})
    assert r.headers["x-correlation-id"] == "trace-42"
    assert r.headers["x-correlation-id"] != r.headers["x-request-id"]


def test_unknown_route_uses_error_envelope(client):
    r = client.get("/api/v1/nowhere")
    assert r.status_code == 404
    body = r.json()
    assert body["success"] is False
    assert body["error"]["errorCode"] == 2000
    assert body["error"]["statusCode"] == 404
    assert is_uuid(body["error"]["id"])


def test_method_not_allowed_uses_error_envelope(client):
    r = client.patch("/health")
    assert r.status_code == 405
    assert r.json()["error"]["errorCode"] == 1000


def test_unhandled_exception_renders_unexpected_error(caplog):
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    client = TestClient(app, raise_server_exceptions=False)
    with caplog.at_level(logging.ERROR, logger="catalog.api.errors"):
        r = client.get("/boom")
    assert r.status_code == 500
    error = r.json()["error"]
    assert error["errorCode"] == 1001
    assert error["message"] == "An unexpected error occurred"
    assert "kaboom" not in r.text
    assert any(error["id"] in record.getMessage() for record in caplog.records)


def test_traffic_log(client, caplog):
    with caplog.at_level(logging.DEBUG, logger="catalog.traffic"):
        client.get("/health")
    messages = [r.getMessage() for r in caplog.records if r.name == "catalog.traffic"]
    assert any(m.startswith("GET /health | Status: 200 | Duration: ") for m in messages)


def test_cors_preflight(client):
    r = client.options(
        "/api/v1/cars",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_service_logs_carry_request_context(client, user, auth_headers, caplog):
    request_id = str(uuid.uuid4())
    caplog.handler.addFilter(RequestContextFilter())
    with caplog.at_level(logging.INFO, logger="catalog.services.users_service"):
        r = client.patch(
            "/api/v1/users/me",
            json={"firstName": "Jane", "lastName": "Doe"},
            headers={**auth_headers(user), "x-request-id": request_id, "x-correlation-id": "trace-7"},
        )
    assert r.status_code == 200
    records = [rec for rec in caplog.records if rec.getMessage() == f"Profile updated: {user.id}"]
    assert len(records) == 1
    assert records[0].request_id == request_id
    assert records[0].correlation_id == "trace-7"
    assert records[0].user_id == str(user.id)


def test_log_context_defaults_outside_requests():
    record = logging.LogRecord("catalog", logging.INFO, __file__, 1, "idle", None, None)
    assert RequestContextFilter().filter(record) is True
    assert (record.request_id, record.correlation_id, record.user_id) == ("-", "-", "-")
