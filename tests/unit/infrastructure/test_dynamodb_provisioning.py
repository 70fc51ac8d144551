"""
Name: DynamoDB Table Provisioning Tests

Responsibilities:
  - Validate describe -> create -> wait sequence on cold start
  - Validate concurrent creation is treated as success
  - Validate fatal failures raise ProvisioningError
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, WaiterError

from audit_ingest.domain import ProvisioningOutcome
from audit_ingest.domain.errors import ProvisioningError
from audit_ingest.infrastructure.dynamodb import DynamoDBTableProvisioner

pytestmark = pytest.mark.unit

EXPECTED_KEY_SCHEMA = [
    {"AttributeName": "id", "KeyType": "HASH"},
    {"AttributeName": "timestamp", "KeyType": "RANGE"},
]


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


def _table(status: str = "ACTIVE", key_schema=None) -> dict:
    return {
        "Table": {
            "TableName": "AuditEvents",
            "TableStatus": status,
            "KeySchema": key_schema or EXPECTED_KEY_SCHEMA,
            "AttributeDefinitions": [
                {"AttributeName": "id", "AttributeType": "S"},
                {"AttributeName": "timestamp", "AttributeType": "S"},
            ],
        }
    }


def _provisioner(client, **kwargs) -> DynamoDBTableProvisioner:
    return DynamoDBTableProvisioner(
        client, "AuditEvents", wait_delay_seconds=1, wait_max_attempts=3, **kwargs
    )


def test_existing_table_is_used_as_is():
    client = MagicMock()
    client.describe_table.return_value = _table()

    assert _provisioner(client).ensure_table() is ProvisioningOutcome.EXISTS
    client.create_table.assert_not_called()
    client.get_waiter.assert_not_called()


def test_missing_table_is_created_with_composite_key():
    client = MagicMock()
    client.describe_table.side_effect = _client_error(
        "ResourceNotFoundException", "DescribeTable"
    )

    outcome = _provisioner(client).ensure_table()

    assert outcome is ProvisioningOutcome.CREATED
    client.create_table.assert_called_once_with(
        TableName="AuditEvents",
        KeySchema=EXPECTED_KEY_SCHEMA,
        AttributeDefinitions=[
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": "timestamp", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    client.get_waiter.assert_called_once_with("table_exists")
    client.get_waiter.return_value.wait.assert_called_once_with(
        TableName="AuditEvents", WaiterConfig={"Delay": 1, "MaxAttempts": 3}
    )


def test_concurrent_creation_counts_as_success():
    client = MagicMock()
    client.describe_table.side_effect = _client_error(
        "ResourceNotFoundException", "DescribeTable"
    )
    client.create_table.side_effect = _client_error(
        "ResourceInUseException", "CreateTable"
    )

    outcome = _provisioner(client).ensure_table()

    assert outcome is ProvisioningOutcome.CREATED_CONCURRENTLY
    client.get_waiter.return_value.wait.assert_called_once()


def test_table_still_creating_is_awaited():
    client = MagicMock()
    client.describe_table.return_value = _table(status="CREATING")

    assert _provisioner(client).ensure_table() is ProvisioningOutcome.EXISTS
    client.get_waiter.return_value.wait.assert_called_once()


def test_other_lookup_failures_are_fatal():
    client = MagicMock()
    client.describe_table.side_effect = _client_error(
        "AccessDeniedException", "DescribeTable"
    )

    with pytest.raises(ProvisioningError):
        _provisioner(client).ensure_table()
    client.create_table.assert_not_called()


def test_unreachable_endpoint_is_fatal():
    client = MagicMock()
    client.describe_table.side_effect = EndpointConnectionError(
        endpoint_url="http://localhost:8000"
    )

    with pytest.raises(ProvisioningError):
        _provisioner(client).ensure_table()


def test_create_failure_is_fatal():
    client = MagicMock()
    client.describe_table.side_effect = _client_error(
        "ResourceNotFoundException", "DescribeTable"
    )
    client.create_table.side_effect = _client_error("LimitExceededException", "CreateTable")

    with pytest.raises(ProvisioningError):
        _provisioner(client).ensure_table()


def test_waiter_timeout_is_fatal():
    client = MagicMock()
    client.describe_table.side_effect = _client_error(
        "ResourceNotFoundException", "DescribeTable"
    )
    client.get_waiter.return_value.wait.side_effect = WaiterError(
        name="TableExists", reason="Max attempts exceeded", last_response={}
    )

    with pytest.raises(ProvisioningError, match="did not become active"):
        _provisioner(client).ensure_table()


def test_auto_create_disabled_fails_on_missing_table():
    client = MagicMock()
    client.describe_table.side_effect = _client_error(
        "ResourceNotFoundException", "DescribeTable"
    )

    with pytest.raises(ProvisioningError, match="auto-create is disabled"):
        _provisioner(client, auto_create=False).ensure_table()
    client.create_table.assert_not_called()


def test_key_schema_mismatch_is_fatal():
    client = MagicMock()
    client.describe_table.return_value = _table(
        key_schema=[{"AttributeName": "eventId", "KeyType": "HASH"}]
    )

    with pytest.raises(ProvisioningError, match="key schema"):
        _provisioner(client).ensure_table()
