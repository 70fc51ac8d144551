"""
===============================================================================
CRC CARD — infrastructure/dynamodb/provisioning.py
===============================================================================

Clase:
  DynamoDBTableProvisioner

Responsabilidades:
  - Confirmar en el arranque que la tabla de auditoría existe y es usable.
  - Crearla (PAY_PER_REQUEST, id HASH + timestamp RANGE) si falta.
  - Tolerar la carrera entre dos cold starts que crean la misma tabla.
  - Fallar fuerte (ProvisioningError) si no hay tabla utilizable.

Colaboradores:
  - api.main (lifespan) y functions.http_handler (bootstrap)
  - crosscutting.metrics.record_provisioning_outcome
===============================================================================
"""

from __future__ import annotations

from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from ...crosscutting.logger import logger
from ...crosscutting.metrics import record_provisioning_outcome
from ...domain.audit import PARTITION_KEY, SORT_KEY
from ...domain.repositories import ProvisioningOutcome
from ...domain.errors import ProvisioningError

KEY_SCHEMA = [
    {"AttributeName": PARTITION_KEY, "KeyType": "HASH"},
    {"AttributeName": SORT_KEY, "KeyType": "RANGE"},
]
ATTRIBUTE_DEFINITIONS = [
    {"AttributeName": PARTITION_KEY, "AttributeType": "S"},
    {"AttributeName": SORT_KEY, "AttributeType": "S"},
]


def _error_code(exc: ClientError) -> str:
    return str((exc.response.get("Error") or {}).get("Code") or "")


class DynamoDBTableProvisioner:
    """Implementa AuditTableProvisioner contra DynamoDB."""

    def __init__(
        self,
        client,
        table_name: str,
        *,
        auto_create: bool = True,
        wait_delay_seconds: int = 2,
        wait_max_attempts: int = 30,
    ) -> None:
        self._client = client
        self._table_name = table_name
        self._auto_create = auto_create
        self._waiter_config = {
            "Delay": wait_delay_seconds,
            "MaxAttempts": wait_max_attempts,
        }

    def ensure_table(self) -> ProvisioningOutcome:
        try:
            outcome = self._ensure()
        except ProvisioningError:
            record_provisioning_outcome("failed")
            raise
        record_provisioning_outcome(outcome.value)
        logger.info(
            "Audit table ready",
            extra={"table": self._table_name, "outcome": outcome.value},
        )
        return outcome

    def _ensure(self) -> ProvisioningOutcome:
        try:
            response = self._client.describe_table(TableName=self._table_name)
        except ClientError as exc:
            if _error_code(exc) != "ResourceNotFoundException":
                raise ProvisioningError(
                    f"Could not describe table {self._table_name}: {exc}"
                ) from exc
            return self._create()
        except BotoCoreError as exc:
            raise ProvisioningError(
                f"Could not describe table {self._table_name}: {exc}"
            ) from exc

        table = response.get("Table") or {}
        self._check_key_schema(table)
        if table.get("TableStatus") == "CREATING":
            self._wait_until_active()
        return ProvisioningOutcome.EXISTS

    def _create(self) -> ProvisioningOutcome:
        if not self._auto_create:
            raise ProvisioningError(
                f"Table {self._table_name} does not exist and auto-create is disabled"
            )

        logger.info("Creating audit table", extra={"table": self._table_name})
        outcome = ProvisioningOutcome.CREATED
        try:
            self._client.create_table(
                TableName=self._table_name,
                KeySchema=KEY_SCHEMA,
                AttributeDefinitions=ATTRIBUTE_DEFINITIONS,
                BillingMode="PAY_PER_REQUEST",
            )
        except ClientError as exc:
            if _error_code(exc) != "ResourceInUseException":
                raise ProvisioningError(
                    f"Could not create table {self._table_name}: {exc}"
                ) from exc
            # Otro cold start la creó primero.
            outcome = ProvisioningOutcome.CREATED_CONCURRENTLY
        except BotoCoreError as exc:
            raise ProvisioningError(
                f"Could not create table {self._table_name}: {exc}"
            ) from exc

        self._wait_until_active()
        return outcome

    def _wait_until_active(self) -> None:
        try:
            self._client.get_waiter("table_exists").wait(
                TableName=self._table_name, WaiterConfig=self._waiter_config
            )
        except (WaiterError, ClientError, BotoCoreError) as exc:
            raise ProvisioningError(
                f"Table {self._table_name} did not become active: {exc}"
            ) from exc

    def _check_key_schema(self, table: dict) -> None:
        schema = {
            (k.get("AttributeName"), k.get("KeyType"))
            for k in table.get("KeySchema") or []
        }
        expected = {(k["AttributeName"], k["KeyType"]) for k in KEY_SCHEMA}
        if schema != expected:
            raise ProvisioningError(
                f"Table {self._table_name} has key schema {sorted(schema)}, "
                f"expected {sorted(expected)}"
            )

        types = {
            d.get("AttributeName"): d.get("AttributeType")
            for d in table.get("AttributeDefinitions") or []
        }
        for name in (PARTITION_KEY, SORT_KEY):
            if types.get(name, "S") != "S":
                raise ProvisioningError(
                    f"Table {self._table_name} key attribute {name} must be a string"
                )
