"""
===============================================================================
TARJETA CRC — interfaces/ingestion.py (Entrada compartida de ingesta)
===============================================================================

Responsabilidades:
  - Ejecutar parse -> validación -> use case para UNA invocación.
  - Mapear RecordAuditEventResult a (status, body) con un único criterio,
    así el router FastAPI y la función API Gateway responden idéntico.
  - Capturar cualquier excepción inesperada y convertirla en 500 (nada
    se filtra al transporte).

Colaboradores:
  - application.usecases.ingestion (parse_audit_payload, RecordAuditEventUseCase)
  - crosscutting.error_responses (envelope {"message", "error"})
  - interfaces.api.http.routers.audit_events / functions.http_handler
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final

from ..application.usecases.ingestion import (
    INTERNAL_ERROR_MESSAGE,
    RecordAuditEventResult,
    RecordAuditEventUseCase,
    parse_audit_payload,
)
from ..application.usecases.ingestion.parse_payload import RawBody
from ..crosscutting.error_responses import error_body
from ..crosscutting.logger import logger
from ..crosscutting.metrics import record_audit_event_outcome
from ..domain.audit import CallerContext

SUCCESS_MESSAGE: Final[str] = "Audit event recorded successfully"


@dataclass(frozen=True)
class IngestionResponse:
    """Respuesta neutral al transporte."""

    status_code: int
    body: dict[str, Any]


def present_result(result: RecordAuditEventResult) -> IngestionResponse:
    """Result -> (status, body). 201 / 400 / 500."""
    if result.error is None and result.event is not None:
        return IngestionResponse(
            status_code=201,
            body={"message": SUCCESS_MESSAGE, "eventId": result.event.id},
        )

    error = result.error
    if error is not None and error.code.is_client_error:
        return IngestionResponse(status_code=400, body=error_body(error.message))

    diagnostic = error.diagnostic if error is not None else "No result produced"
    return IngestionResponse(
        status_code=500,
        body=error_body(INTERNAL_ERROR_MESSAGE, diagnostic or INTERNAL_ERROR_MESSAGE),
    )


def handle_ingestion(
    raw_body: RawBody,
    caller: CallerContext,
    use_case: RecordAuditEventUseCase,
) -> IngestionResponse:
    """
    Procesa una invocación completa.

    Cero escrituras ante error de cliente; un intento de escritura si no.
    """
    try:
        input_data, parse_error = parse_audit_payload(raw_body, caller)
        if parse_error is not None:
            record_audit_event_outcome("rejected")
            logger.info(
                "Audit event rejected",
                extra={"code": parse_error.code.value, "reason": parse_error.message},
            )
            return present_result(RecordAuditEventResult(error=parse_error))

        return present_result(use_case.execute(input_data))
    except Exception as exc:
        logger.exception("Unhandled error during audit ingestion")
        return IngestionResponse(
            status_code=500,
            body=error_body(
                INTERNAL_ERROR_MESSAGE, str(exc) or exc.__class__.__name__
            ),
        )
