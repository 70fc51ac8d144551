"""
===============================================================================
TARJETA CRC — functions/queue_handler.py (Lambda consumidor SQS)
===============================================================================

Responsabilidades:
  - Procesar cada record SQS con el mismo parser y use case que HTTP.
  - Desenvolver el envelope SNS ({"Message": "<json>"}) cuando existe.
  - Reportar solo fallas de servidor en batchItemFailures (se reentregan).
  - Errores de cliente: log + métrica, sin reentrega (nunca van a pasar).

Colaboradores:
  - application.usecases.ingestion (parse_audit_payload, RecordAuditEventUseCase)
  - functions._bootstrap.ensure_ready
  - crosscutting.metrics.record_queue_record
===============================================================================
"""

from __future__ import annotations

import json
from typing import Any, Final

from ..application.usecases.ingestion import (
    AuditError,
    RecordAuditEventUseCase,
    parse_audit_payload,
)
from ..container import get_record_audit_event_use_case
from ..context import clear_context, set_request_context
from ..crosscutting.logger import logger
from ..crosscutting.metrics import record_audit_event_outcome, record_queue_record
from ..domain.audit import CallerContext
from ._bootstrap import ensure_ready

QUEUE_CALLER: Final[CallerContext] = CallerContext(source_ip="", user_agent="sqs")


def unwrap_record_body(body: str | None) -> str | None:
    """
    Devuelve el payload del evento.

    Si el body es un envelope SNS (objeto con "Message" string y "Type" o
    "TopicArn"), devuelve el Message; si no, el body tal cual.
    """
    if not body:
        return body
    try:
        envelope = json.loads(body)
    except ValueError:
        return body
    if (
        isinstance(envelope, dict)
        and isinstance(envelope.get("Message"), str)
        and ("TopicArn" in envelope or envelope.get("Type") == "Notification")
    ):
        return envelope["Message"]
    return body


def process_record(record: dict[str, Any], use_case: RecordAuditEventUseCase) -> str:
    """
    Procesa un record. Devuelve "recorded", "rejected" o "failed".

    Nunca lanza: una excepción inesperada cuenta como "failed".
    """
    message_id = record.get("messageId", "")
    try:
        payload = unwrap_record_body(record.get("body"))
        input_data, error = parse_audit_payload(payload, QUEUE_CALLER)
        if error is not None:
            record_audit_event_outcome("rejected")
        else:
            result = use_case.execute(input_data)
            error = result.error
    except Exception:
        logger.exception(
            "Unhandled error processing queue record",
            extra={"message_id": message_id},
        )
        return "failed"

    if error is None:
        return "recorded"
    return _classify(error, message_id)


def _classify(error: AuditError, message_id: str) -> str:
    if error.code.is_client_error:
        logger.error(
            "Queue record rejected",
            extra={
                "message_id": message_id,
                "code": error.code.value,
                "reason": error.message,
            },
        )
        return "rejected"
    logger.error(
        "Queue record failed",
        extra={
            "message_id": message_id,
            "code": error.code.value,
            "error": error.diagnostic,
        },
    )
    return "failed"


def handler(event: dict[str, Any], context: Any = None) -> dict:
    """Entry point configurado en Lambda: audit_ingest.functions.queue_handler.handler"""
    ensure_ready()

    records = (event or {}).get("Records") or []
    set_request_context(
        request_id=getattr(context, "aws_request_id", None) or "",
        method="SQS",
        path="audit-events-queue",
    )

    failures: list[dict[str, str]] = []
    try:
        use_case = get_record_audit_event_use_case()
        for record in records:
            outcome = process_record(record, use_case)
            record_queue_record(outcome)
            if outcome == "failed":
                failures.append({"itemIdentifier": record.get("messageId", "")})

        logger.info(
            "Queue batch processed",
            extra={"records": len(records), "failed": len(failures)},
        )
        return {"batchItemFailures": failures}
    finally:
        clear_context()


__all__ = ["handler", "process_record", "unwrap_record_body"]
