"""
===============================================================================
AUDIT INGESTION RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Proveer tipos consistentes de resultados y errores para la ingesta de
    eventos de auditoría, compartidos por todas las entradas (HTTP hosteado,
    función API Gateway, consumidor de cola).

Why (Context / Intención):
    - El parser y el use case devuelven resultados tipados en lugar de
      propagar excepciones.
    - Una sola tabla código -> status HTTP evita que las entradas diverjan.

-------------------------------------------------------------------------------
CRC CARD (Module-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Responsibilities:
    - AuditErrorCode: categorías estables (client vs server).
    - AuditError: contrato mínimo de error (mensaje público + diagnóstico).
    - RecordAuditEventResult: éxito (event) o falla (error), nunca ambos.

Collaborators:
    - domain.audit.AuditEvent
    - interfaces.ingestion.present_result (mapeo a status/body)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ....domain.audit import AuditEvent


class AuditErrorCode(str, Enum):
    """
    Códigos:
      - MISSING_BODY / INVALID_BODY / MISSING_FIELDS / INVALID_FIELD: 400.
      - STORE_UNAVAILABLE / STORE_CONFLICT / STORE_ERROR / INTERNAL_ERROR: 500.
    """

    MISSING_BODY = "MISSING_BODY"
    INVALID_BODY = "INVALID_BODY"
    MISSING_FIELDS = "MISSING_FIELDS"
    INVALID_FIELD = "INVALID_FIELD"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    STORE_CONFLICT = "STORE_CONFLICT"
    STORE_ERROR = "STORE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def is_client_error(self) -> bool:
        return self in _CLIENT_ERRORS


_CLIENT_ERRORS = frozenset(
    {
        AuditErrorCode.MISSING_BODY,
        AuditErrorCode.INVALID_BODY,
        AuditErrorCode.MISSING_FIELDS,
        AuditErrorCode.INVALID_FIELD,
    }
)


@dataclass(frozen=True)
class AuditError:
    """
    Campos:
      - code: categoría estable
      - message: mensaje para el caller (errores de cliente)
      - diagnostic: texto de la falla subyacente (errores de servidor)
    """

    code: AuditErrorCode
    message: str
    diagnostic: str | None = None


@dataclass
class RecordAuditEventResult:
    """
    Contrato:
      - Éxito: event != None y error == None
      - Falla:  event == None y error != None
    """

    event: AuditEvent | None = None
    error: AuditError | None = None

    @property
    def event_id(self) -> str | None:
        return self.event.id if self.event is not None else None
