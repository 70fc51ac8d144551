"""
===============================================================================
TARJETA CRC — domain/audit.py
===============================================================================

Módulo:
    Modelos de Auditoría (Dominio)

Responsabilidades:
    - Definir AuditEvent (inmutable) y su metadata server-side.
    - Definir CallerContext: lo que el transporte sabe del cliente (IP, UA).
    - Definir el layout persistido (to_item) y el formato del sort key.

Colaboradores:
    - domain.repositories.AuditEventStore: persiste eventos.
    - application.usecases.ingestion.record_audit_event: construye eventos.
    - infrastructure.dynamodb: serializa to_item() a atributos DynamoDB.

Notas:
    - Auditoría es append-only (no se edita ni se borra).
    - metadata SIEMPRE la completa el servidor.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Final

from .details import DetailValue

PARTITION_KEY: Final[str] = "id"
SORT_KEY: Final[str] = "timestamp"

DEFAULT_ENVIRONMENT: Final[str] = "dev"

# Orden estable: es el orden en que se reportan en el mensaje de error.
REQUIRED_FIELDS: Final[tuple[str, ...]] = ("eventType", "userId", "action", "resource")


def format_timestamp(moment: datetime) -> str:
    """
    ISO-8601 UTC con milisegundos y sufijo Z: 2024-01-01T00:00:00.000Z

    Mismo formato que Date.toISOString(), así el sort key ordena igual
    sin importar qué entrada escribió el item.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


@dataclass(frozen=True, slots=True)
class CallerContext:
    """Datos del cliente derivados del transporte, nunca del payload."""

    source_ip: str = ""
    user_agent: str = ""


@dataclass(frozen=True, slots=True)
class EventMetadata:
    """Bloque server-authoritative de cada evento."""

    ip_address: str
    user_agent: str
    environment: str

    def to_item(self) -> dict[str, str]:
        return {
            "ipAddress": self.ip_address,
            "userAgent": self.user_agent,
            "environment": self.environment,
        }


@dataclass(frozen=True, slots=True)
class AuditEvent:
    """Evento de auditoría inmutable: quién hizo qué, sobre qué, cuándo."""

    id: str
    timestamp: str
    event_type: str
    user_id: str
    action: str
    resource: str
    metadata: EventMetadata
    details: dict[str, DetailValue] = field(default_factory=dict)
    status: str | None = None
    error_message: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return self.id, self.timestamp

    def to_item(self) -> dict[str, Any]:
        """Layout persistido (camelCase, igual que el contrato HTTP)."""
        item: dict[str, Any] = {
            PARTITION_KEY: self.id,
            SORT_KEY: self.timestamp,
            "eventType": self.event_type,
            "userId": self.user_id,
            "action": self.action,
            "resource": self.resource,
            "details": self.details,
            "metadata": self.metadata.to_item(),
        }
        if self.status is not None:
            item["status"] = self.status
        if self.error_message is not None:
            item["errorMessage"] = self.error_message
        return item
