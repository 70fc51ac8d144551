"""
===============================================================================
USE CASE: Record Audit Event (Enrich + Persist)
===============================================================================

Business Goal:
    Dado un evento validado y el contexto del caller, construir el AuditEvent
    completo e inmutable y persistirlo exactamente una vez.

Why (Context / Intención):
    - id y timestamp los genera el servidor: el caller nunca elige la clave.
    - El timestamp se captura UNA vez y se usa como campo y como sort key.
    - metadata (IP, user agent, environment) es server-authoritative.
    - Sin reintentos: un intento de escritura por llamada (at-most-once).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    RecordAuditEventUseCase

Responsibilities:
    - Re-chequear los cuatro campos requeridos (cero escrituras si faltan).
    - Generar id (uuid4) y timestamp (reloj inyectable).
    - Construir metadata desde CallerContext + environment del proceso.
    - Emitir un único put al AuditEventStore.
    - Traducir fallas del store a AuditError (STORE_*), nunca excepciones.

Collaborators:
    - domain.repositories.AuditEventStore
    - domain.errors (StoreError y subclases)
    - crosscutting.metrics / crosscutting.timing
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Final, Optional
from uuid import uuid4

from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_audit_event_outcome
from ....crosscutting.timing import Timer
from ....domain.audit import (
    DEFAULT_ENVIRONMENT,
    REQUIRED_FIELDS,
    AuditEvent,
    CallerContext,
    EventMetadata,
    format_timestamp,
)
from ....domain.details import DetailValue
from ....domain.errors import (
    INTERNAL_ERROR_MESSAGE,
    StoreConflictError,
    StoreError,
    StoreUnavailableError,
)
from ....domain.repositories import AuditEventStore
from .audit_results import AuditError, AuditErrorCode, RecordAuditEventResult

MISSING_FIELDS_MESSAGE: Final[str] = "Missing required fields: " + ", ".join(
    REQUIRED_FIELDS
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_event_id() -> str:
    return str(uuid4())


def is_present(value: object) -> bool:
    """Un campo requerido cuenta solo si es string con contenido no blanco."""
    return isinstance(value, str) and bool(value.strip())


@dataclass(frozen=True)
class RecordAuditEventInput:
    """
    DTO de entrada (campos del caller ya parseados).

    Notas:
      - Los strings se guardan tal cual (sin trim).
      - caller viene del transporte, nunca del payload.
    """

    event_type: str
    user_id: str
    action: str
    resource: str
    details: dict[str, DetailValue] = field(default_factory=dict)
    status: str | None = None
    error_message: str | None = None
    caller: CallerContext = field(default_factory=CallerContext)

    def missing_fields(self) -> list[str]:
        values = (self.event_type, self.user_id, self.action, self.resource)
        return [
            name for name, value in zip(REQUIRED_FIELDS, values) if not is_present(value)
        ]


class RecordAuditEventUseCase:
    """
    Use Case (Application Service / Command):
        Enriquece el evento y lo escribe en el store keyed.
    """

    def __init__(
        self,
        store: AuditEventStore,
        environment: str | None = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._store = store
        self._environment = (environment or "").strip() or DEFAULT_ENVIRONMENT
        self._clock = clock or _utc_now
        self._id_factory = id_factory or _new_event_id

    @property
    def environment(self) -> str:
        return self._environment

    def execute(self, input_data: RecordAuditEventInput) -> RecordAuditEventResult:
        # ---------------------------------------------------------------------
        # 1) Campos requeridos (también se validan en el borde).
        # ---------------------------------------------------------------------
        if input_data.missing_fields():
            record_audit_event_outcome("rejected")
            return RecordAuditEventResult(
                error=AuditError(
                    code=AuditErrorCode.MISSING_FIELDS,
                    message=MISSING_FIELDS_MESSAGE,
                )
            )

        # ---------------------------------------------------------------------
        # 2) Identidad + timestamp (capturado una sola vez).
        # ---------------------------------------------------------------------
        event = self._build_event(input_data)

        # ---------------------------------------------------------------------
        # 3) Un único intento de escritura.
        # ---------------------------------------------------------------------
        timer = Timer().start()
        try:
            self._store.put_event(event)
        except StoreError as exc:
            timer.stop()
            error = self._store_error(exc)
            record_audit_event_outcome("failed")
            logger.error(
                "Audit event write failed",
                extra={
                    "event_id": event.id,
                    "event_type": event.event_type,
                    "code": error.code.value,
                    "error": str(exc),
                    "write_ms": timer.elapsed_ms,
                },
            )
            return RecordAuditEventResult(error=error)
        except Exception as exc:
            timer.stop()
            record_audit_event_outcome("failed")
            logger.exception(
                "Unexpected error writing audit event",
                extra={"event_id": event.id, "event_type": event.event_type},
            )
            return RecordAuditEventResult(
                error=AuditError(
                    code=AuditErrorCode.INTERNAL_ERROR,
                    message=INTERNAL_ERROR_MESSAGE,
                    diagnostic=str(exc) or exc.__class__.__name__,
                )
            )

        timer.stop()
        record_audit_event_outcome("recorded")
        logger.info(
            "Audit event recorded",
            extra={
                "event_id": event.id,
                "event_type": event.event_type,
                "environment": event.metadata.environment,
                "write_ms": timer.elapsed_ms,
            },
        )
        return RecordAuditEventResult(event=event)

    def _build_event(self, input_data: RecordAuditEventInput) -> AuditEvent:
        caller = input_data.caller
        return AuditEvent(
            id=self._id_factory(),
            timestamp=format_timestamp(self._clock()),
            event_type=input_data.event_type,
            user_id=input_data.user_id,
            action=input_data.action,
            resource=input_data.resource,
            details=dict(input_data.details or {}),
            metadata=EventMetadata(
                ip_address=caller.source_ip or "",
                user_agent=caller.user_agent or "",
                environment=self._environment,
            ),
            status=input_data.status,
            error_message=input_data.error_message,
        )

    @staticmethod
    def _store_error(exc: StoreError) -> AuditError:
        if isinstance(exc, StoreUnavailableError):
            code = AuditErrorCode.STORE_UNAVAILABLE
        elif isinstance(exc, StoreConflictError):
            code = AuditErrorCode.STORE_CONFLICT
        else:
            code = AuditErrorCode.STORE_ERROR
        return AuditError(
            code=code, message=INTERNAL_ERROR_MESSAGE, diagnostic=str(exc)
        )
