"""
Name: Audit Events Endpoint Tests

Responsibilities:
  - Validate POST /v1/audit-events status codes and bodies (201/400/500)
  - Validate metadata comes from the connection, never from payload/headers
  - Validate cold-start provisioning happens before serving
"""

import json
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from audit_ingest.api.main import create_app
from audit_ingest.application.usecases import RecordAuditEventUseCase
from audit_ingest.container import (
    get_in_memory_store,
    get_record_audit_event_use_case,
)
from audit_ingest.domain.errors import ProvisioningError, StoreUnavailableError

pytestmark = pytest.mark.unit

URL = "/v1/audit-events"
SCENARIO_1 = {"eventType": "LOGIN", "userId": "u1", "action": "SIGN_IN", "resource": "session"}


@pytest.fixture
def client():
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def test_scenario_records_event(client):
    res = client.post(URL, json=SCENARIO_1)

    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Audit event recorded successfully"
    assert body["eventId"]

    stored = get_in_memory_store().get_event(body["eventId"])
    assert stored.event_type == "LOGIN"
    assert stored.user_id == "u1"
    assert stored.action == "SIGN_IN"
    assert stored.resource == "session"
    assert stored.details == {}
    assert stored.metadata.environment == "test"


def test_scenario_missing_fields_is_rejected_without_write(client):
    store = get_in_memory_store()

    res = client.post(URL, json={"eventType": "LOGIN"})

    assert res.status_code == 400
    assert res.json() == {
        "message": "Missing required fields: eventType, userId, action, resource"
    }
    assert store.put_calls == 0


def test_scenario_store_failure_returns_500():
    app = create_app()
    store = MagicMock()
    store.put_event.side_effect = StoreUnavailableError("Audit store unavailable.")
    app.dependency_overrides[get_record_audit_event_use_case] = (
        lambda: RecordAuditEventUseCase(store, "test")
    )

    with TestClient(app) as client:
        res = client.post(URL, json=SCENARIO_1)

    assert res.status_code == 500
    assert res.json() == {
        "message": "Internal server error",
        "error": "Audit store unavailable.",
    }
    store.put_event.assert_called_once()


def test_scenario_table_is_provisioned_before_first_request():
    store = get_in_memory_store()
    assert store.ensure_calls == 0

    with TestClient(create_app()) as client:
        assert store.ensure_calls == 1
        res = client.post(URL, json=SCENARIO_1)

    assert res.status_code == 201


def test_provisioning_failure_prevents_startup(monkeypatch):
    provisioner = MagicMock()
    provisioner.ensure_table.side_effect = ProvisioningError("no table")
    monkeypatch.setattr(
        "audit_ingest.api.main.get_table_provisioner", lambda: provisioner
    )
    app = create_app()

    with pytest.raises(ProvisioningError):
        with TestClient(app):
            pass

    assert app.state.table_ready is False


@pytest.mark.parametrize("content", [b"", b"   "])
def test_missing_body(client, content):
    res = client.post(URL, content=content, headers={"Content-Type": "application/json"})

    assert res.status_code == 400
    assert res.json() == {"message": "Request body is required"}


def test_invalid_json(client):
    res = client.post(URL, content=b"{oops", headers={"Content-Type": "application/json"})

    assert res.status_code == 400
    assert res.json() == {"message": "Request body must be valid JSON"}


def test_metadata_is_server_authoritative(client):
    payload = dict(
        SCENARIO_1,
        metadata={"ipAddress": "6.6.6.6", "environment": "prod"},
        ipAddress="6.6.6.6",
        environment="prod",
    )

    res = client.post(
        URL,
        json=payload,
        headers={"User-Agent": "audit-client/1.0", "X-Forwarded-For": "6.6.6.6"},
    )

    stored = get_in_memory_store().get_event(res.json()["eventId"])
    assert stored.metadata.ip_address == "testclient"
    assert stored.metadata.user_agent == "audit-client/1.0"
    assert stored.metadata.environment == "test"


def test_identical_payloads_are_two_records(client):
    first = client.post(URL, json=SCENARIO_1).json()["eventId"]
    second = client.post(URL, json=SCENARIO_1).json()["eventId"]

    assert first != second
    assert len(get_in_memory_store().list_events()) == 2


def test_details_are_stored(client):
    res = client.post(URL, json=dict(SCENARIO_1, details={"ip": "x", "n": [1, 2]}))

    stored = get_in_memory_store().get_event(res.json()["eventId"])
    assert stored.details == {"ip": "x", "n": [1, 2]}


def test_oversized_body_is_rejected(monkeypatch):
    monkeypatch.setenv("MAX_BODY_BYTES", "64")

    with TestClient(create_app()) as client:
        res = client.post(URL, json=dict(SCENARIO_1, details={"pad": "x" * 200}))

    assert res.status_code == 413
    assert "maximum allowed size" in res.json()["message"]
    assert get_in_memory_store().put_calls == 0


def test_response_carries_request_id(client):
    res = client.post(URL, json=SCENARIO_1, headers={"X-Request-Id": "req-123"})

    assert res.headers["X-Request-Id"] == "req-123"


def test_body_matches_compact_json(client):
    res = client.post(URL, json={"eventType": "LOGIN"})

    assert res.content == json.dumps(
        {"message": "Missing required fields: eventType, userId, action, resource"},
        separators=(",", ":"),
    ).encode("utf-8")
