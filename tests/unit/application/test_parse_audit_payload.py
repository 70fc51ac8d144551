"""
Name: Audit Payload Parsing Tests

Responsibilities:
  - Classify missing / malformed / incomplete bodies as client errors
  - Ensure required-field check is joint and strings are kept verbatim
"""

import json

import pytest

from audit_ingest.application.usecases.ingestion import (
    INVALID_JSON_MESSAGE,
    MISSING_BODY_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    NOT_AN_OBJECT_MESSAGE,
    AuditErrorCode,
    parse_audit_payload,
)
from audit_ingest.domain import CallerContext

pytestmark = pytest.mark.unit

VALID = {"eventType": "LOGIN", "userId": "u1", "action": "SIGN_IN", "resource": "session"}


def _body(**overrides) -> str:
    data = dict(VALID)
    data.update(overrides)
    return json.dumps(data)


@pytest.mark.parametrize("raw", [None, "", "   \n", b""])
def test_missing_body(raw):
    input_data, error = parse_audit_payload(raw)

    assert input_data is None
    assert error.code is AuditErrorCode.MISSING_BODY
    assert error.message == MISSING_BODY_MESSAGE


@pytest.mark.parametrize(
    "raw", ["{not json", b"\xff\xfe", '{"eventType": NaN}', '{"a": Infinity}']
)
def test_unparsable_body(raw):
    _, error = parse_audit_payload(raw)

    assert error.code is AuditErrorCode.INVALID_BODY
    assert error.message == INVALID_JSON_MESSAGE


@pytest.mark.parametrize("raw", ["[]", "null", '"text"', "42"])
def test_body_must_be_object(raw):
    _, error = parse_audit_payload(raw)

    assert error.code is AuditErrorCode.INVALID_BODY
    assert error.message == NOT_AN_OBJECT_MESSAGE


@pytest.mark.parametrize("field", list(VALID))
def test_any_missing_required_field_reports_all_four(field):
    data = dict(VALID)
    del data[field]

    _, error = parse_audit_payload(json.dumps(data))

    assert error.code is AuditErrorCode.MISSING_FIELDS
    assert error.message == MISSING_FIELDS_MESSAGE
    assert error.message == "Missing required fields: eventType, userId, action, resource"


@pytest.mark.parametrize("value", ["", "   ", 5, None, ["x"]])
def test_blank_or_non_string_required_field_counts_as_missing(value):
    _, error = parse_audit_payload(_body(userId=value))

    assert error.code is AuditErrorCode.MISSING_FIELDS


def test_resource_type_and_id_do_not_replace_resource():
    data = dict(VALID)
    del data["resource"]
    data.update(resourceType="Document", resourceId="42")

    _, error = parse_audit_payload(json.dumps(data))

    assert error.code is AuditErrorCode.MISSING_FIELDS


@pytest.mark.parametrize(
    "overrides",
    [{"details": []}, {"details": "x"}, {"status": 1}, {"errorMessage": {"a": 1}}],
)
def test_invalid_optional_fields(overrides):
    _, error = parse_audit_payload(_body(**overrides))

    assert error.code is AuditErrorCode.INVALID_FIELD


@pytest.mark.parametrize("number", ["1e200", "1e-200", "1" + "0" * 40])
def test_details_number_the_store_cannot_hold_is_a_client_error(number):
    raw = json.dumps(VALID)[:-1] + ', "details": {"n": ' + number + "}}"

    input_data, error = parse_audit_payload(raw)

    assert input_data is None
    assert error.code is AuditErrorCode.INVALID_FIELD
    assert error.code.is_client_error
    assert "storable range" in error.message


def test_valid_payload_builds_input_verbatim():
    caller = CallerContext(source_ip="10.0.0.1", user_agent="curl/8")
    raw = _body(
        eventType="  LOGIN ",
        details={"b": 1, "a": {"c": [1, 2]}},
        status="SUCCESS",
        errorMessage=None,
        unknown="ignored",
    ).encode("utf-8")

    input_data, error = parse_audit_payload(raw, caller)

    assert error is None
    assert input_data.event_type == "  LOGIN "
    assert input_data.user_id == "u1"
    assert input_data.resource == "session"
    assert input_data.details == {"b": 1, "a": {"c": [1, 2]}}
    assert input_data.status == "SUCCESS"
    assert input_data.error_message is None
    assert input_data.caller == caller


def test_null_details_default_to_empty_mapping():
    input_data, error = parse_audit_payload(_body(details=None))

    assert error is None
    assert input_data.details == {}


def test_payload_metadata_fields_are_not_carried():
    input_data, _ = parse_audit_payload(
        _body(metadata={"ipAddress": "6.6.6.6", "environment": "prod"}, ipAddress="6.6.6.6")
    )

    assert input_data.caller == CallerContext()
    assert "metadata" not in input_data.details
