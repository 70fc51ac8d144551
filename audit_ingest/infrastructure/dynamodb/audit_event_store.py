"""
===============================================================================
CRC CARD — infrastructure/dynamodb/audit_event_store.py
===============================================================================

Clase:
  DynamoDBAuditEventStore (Adapter)

Responsabilidades:
  - Implementar AuditEventStore contra DynamoDB (cliente de bajo nivel).
  - Escribir el evento completo en UN put condicional (nunca pisa un item).
  - Serializar details como árbol tipado (float -> Decimal, M/L/S/N/BOOL/NULL).
  - Encapsular boto3 (NO filtrar ClientError).

Colaboradores:
  - domain.repositories.AuditEventStore (port)
  - domain.errors (errores tipados)
  - boto3.dynamodb.types.TypeSerializer

Decisiones de diseño:
  - Cliente inyectable (tests con MagicMock, sin red).
  - Mapeo explícito de errores (ClientError -> StoreError).
===============================================================================
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from ...crosscutting.logger import logger
from ...crosscutting.metrics import observe_store_write_duration
from ...crosscutting.timing import Timer
from ...domain.audit import PARTITION_KEY, AuditEvent
from ...domain.errors import (
    StoreConfigurationError,
    StoreConflictError,
    StoreError,
    StoreNotFoundError,
    StorePermissionError,
    StoreUnavailableError,
)

_CONDITION_FAILED = "ConditionalCheckFailedException"
_NOT_FOUND_CODES = {"ResourceNotFoundException"}
_PERMISSION_CODES = {
    "AccessDeniedException",
    "UnrecognizedClientException",
    "InvalidSignatureException",
    "ExpiredTokenException",
    "MissingAuthenticationTokenException",
}
_UNAVAILABLE_CODES = {
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
    "ServiceUnavailable",
    "InternalServerError",
}


def to_dynamodb_value(value: Any) -> Any:
    """Convierte floats a Decimal (TypeSerializer no acepta float)."""
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, dict):
        return {k: to_dynamodb_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_dynamodb_value(v) for v in value]
    return value


class DynamoDBAuditEventStore:
    """Adapter DynamoDB del store de auditoría."""

    def __init__(self, client, table_name: str) -> None:
        self._table_name = (table_name or "").strip()
        if not self._table_name:
            raise StoreConfigurationError("DynamoDB table name is required.")
        if client is None:
            raise StoreConfigurationError("DynamoDB client is required.")
        self._client = client
        self._serializer = TypeSerializer()

    @property
    def table_name(self) -> str:
        return self._table_name

    def serialize(self, event: AuditEvent) -> dict[str, dict]:
        item = to_dynamodb_value(event.to_item())
        return {name: self._serializer.serialize(v) for name, v in item.items()}

    def put_event(self, event: AuditEvent) -> None:
        """
        Put atómico con `attribute_not_exists(#id)`.

        Una colisión de (id, timestamp) se reporta como StoreConflictError,
        nunca como sobrescritura silenciosa.
        """
        item = self.serialize(event)
        timer = Timer().start()
        try:
            self._client.put_item(
                TableName=self._table_name,
                Item=item,
                ConditionExpression="attribute_not_exists(#id)",
                ExpressionAttributeNames={"#id": PARTITION_KEY},
            )
        except Exception as exc:
            raise self._map_store_error(exc, event=event) from exc
        finally:
            timer.stop()
            observe_store_write_duration(timer.elapsed_seconds)

    def _map_store_error(self, exc: Exception, *, event: AuditEvent) -> StoreError:
        """
        Traduce errores del SDK a errores del subsistema.

        Regla:
          - Infra (boto3) queda encapsulada.
          - Capas superiores trabajan con StoreError.
        """
        if isinstance(
            exc, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)
        ):
            logger.warning(
                "Audit store unavailable",
                extra={"table": self._table_name, "event_id": event.id},
            )
            return StoreUnavailableError("Audit store unavailable (timeout/connection).")

        if isinstance(exc, ClientError):
            code = str((exc.response.get("Error") or {}).get("Code") or "")

            if code == _CONDITION_FAILED:
                return StoreConflictError(event.id, event.timestamp)

            if code in _NOT_FOUND_CODES:
                return StoreNotFoundError(self._table_name)

            if code in _PERMISSION_CODES:
                return StorePermissionError(
                    f"Permission denied on audit store. code={code}"
                )

            if code in _UNAVAILABLE_CODES:
                return StoreUnavailableError(
                    f"Audit store temporarily unavailable. code={code}"
                )

            logger.exception(
                "Audit store ClientError",
                extra={"table": self._table_name, "code": code},
            )
            return StoreError(f"Audit store write failed. code={code}")

        logger.exception("Audit store error", extra={"table": self._table_name})
        return StoreError(f"Audit store write failed: {exc}")
