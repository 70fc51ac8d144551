"""
Name: Shared Ingestion Entry Tests

Responsibilities:
  - Validate result -> (status, body) mapping used by every transport
  - Validate nothing escapes the boundary
"""

import json
from unittest.mock import MagicMock

import pytest

from audit_ingest.application.usecases import (
    AuditError,
    AuditErrorCode,
    RecordAuditEventResult,
    RecordAuditEventUseCase,
)
from audit_ingest.domain import CallerContext
from audit_ingest.infrastructure.dynamodb import DynamoDBAuditEventStore
from audit_ingest.interfaces import handle_ingestion, present_result

pytestmark = pytest.mark.unit

PAYLOAD = {"eventType": "LOGIN", "userId": "u1", "action": "SIGN_IN", "resource": "session"}


def test_success_is_201_with_event_id(use_case):
    res = handle_ingestion(json.dumps(PAYLOAD), CallerContext(), use_case)

    assert res.status_code == 201
    assert res.body == {"message": "Audit event recorded successfully", "eventId": "evt-1"}


@pytest.mark.parametrize(
    "raw, message",
    [
        (None, "Request body is required"),
        ("[1]", "Request body must be a JSON object"),
        ('{"eventType": "LOGIN"}', "Missing required fields: eventType, userId, action, resource"),
    ],
)
def test_client_errors_are_400_without_writes(use_case, store, raw, message):
    res = handle_ingestion(raw, CallerContext(), use_case)

    assert res.status_code == 400
    assert res.body == {"message": message}
    assert store.put_calls == 0


def test_unparsable_body_is_rejected_before_field_validation(use_case, store):
    res = handle_ingestion('{"eventType": ', CallerContext(), use_case)

    assert res.body == {"message": "Request body must be valid JSON"}
    assert store.put_calls == 0


@pytest.mark.parametrize("number", ["1e200", "1e-200", "1" + "0" * 40])
def test_unstorable_details_number_is_400_before_reaching_dynamodb(number):
    client = MagicMock()
    use_case = RecordAuditEventUseCase(DynamoDBAuditEventStore(client, "AuditEvents"), "dev")
    raw = json.dumps(PAYLOAD)[:-1] + ', "details": {"n": ' + number + "}}"

    res = handle_ingestion(raw, CallerContext(), use_case)

    assert res.status_code == 400
    assert "storable range" in res.body["message"]
    assert "error" not in res.body
    client.put_item.assert_not_called()


def test_unexpected_exception_becomes_500():
    use_case = MagicMock()
    use_case.execute.side_effect = KeyError("metadata")

    res = handle_ingestion(json.dumps(PAYLOAD), CallerContext(), use_case)

    assert res.status_code == 500
    assert res.body["message"] == "Internal server error"
    assert "metadata" in res.body["error"]


@pytest.mark.parametrize(
    "code",
    [
        AuditErrorCode.STORE_UNAVAILABLE,
        AuditErrorCode.STORE_CONFLICT,
        AuditErrorCode.STORE_ERROR,
        AuditErrorCode.INTERNAL_ERROR,
    ],
)
def test_server_errors_are_500_with_diagnostic(code):
    result = RecordAuditEventResult(
        error=AuditError(code=code, message="Internal server error", diagnostic="why")
    )

    res = present_result(result)

    assert res.status_code == 500
    assert res.body == {"message": "Internal server error", "error": "why"}


def test_empty_result_is_server_error():
    assert present_result(RecordAuditEventResult()).status_code == 500
