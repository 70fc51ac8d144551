"""
===============================================================================
TARJETA CRC — functions/http_handler.py (Lambda detrás de API Gateway)
===============================================================================

Responsabilidades:
  - Adaptar eventos API Gateway (REST v1 y HTTP API v2) a handle_ingestion.
  - Derivar CallerContext de requestContext (nunca del body ni de headers).
  - Decodificar bodies base64 (isBase64Encoded).
  - Devolver el mismo status/body que el servicio FastAPI.

Colaboradores:
  - interfaces.ingestion.handle_ingestion
  - functions._bootstrap.ensure_ready (contrato de tabla en cold start)
  - context (request_id, method, path) + crosscutting.metrics
===============================================================================
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from ..container import get_record_audit_event_use_case
from ..context import clear_context, set_request_context
from ..crosscutting.logger import logger
from ..crosscutting.metrics import record_request_metrics
from ..crosscutting.timing import Timer
from ..domain.audit import CallerContext
from ..interfaces.ingestion import IngestionResponse, handle_ingestion
from ._bootstrap import ensure_ready

ENDPOINT = "/v1/audit-events"


def caller_from_event(event: dict[str, Any]) -> CallerContext:
    """
    v1: requestContext.identity.{sourceIp,userAgent}
    v2: requestContext.http.{sourceIp,userAgent}
    """
    request_context = event.get("requestContext") or {}
    identity = request_context.get("identity") or request_context.get("http") or {}
    return CallerContext(
        source_ip=identity.get("sourceIp") or "",
        user_agent=identity.get("userAgent") or "",
    )


def body_from_event(event: dict[str, Any]) -> str | bytes | None:
    body = event.get("body")
    if body is None or not event.get("isBase64Encoded"):
        return body
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError):
        # R: Se entrega tal cual; el parser lo rechaza como JSON inválido.
        return body


def _method_and_path(event: dict[str, Any]) -> tuple[str, str]:
    http = (event.get("requestContext") or {}).get("http") or {}
    method = event.get("httpMethod") or http.get("method") or "POST"
    path = event.get("path") or event.get("rawPath") or ENDPOINT
    return method, path


def to_api_gateway_response(response: IngestionResponse, request_id: str) -> dict:
    return {
        "statusCode": response.status_code,
        "headers": {
            "Content-Type": "application/json",
            "X-Request-Id": request_id,
        },
        "body": json.dumps(response.body, ensure_ascii=False, separators=(",", ":")),
    }


def handler(event: dict[str, Any], context: Any = None) -> dict:
    """Entry point configurado en Lambda: audit_ingest.functions.http_handler.handler"""
    ensure_ready()

    event = event or {}
    request_id = (
        getattr(context, "aws_request_id", None)
        or (event.get("requestContext") or {}).get("requestId")
        or ""
    )
    method, path = _method_and_path(event)
    set_request_context(request_id=request_id, method=method, path=path)

    timer = Timer().start()
    status_code = 500
    try:
        response = handle_ingestion(
            body_from_event(event),
            caller_from_event(event),
            get_record_audit_event_use_case(),
        )
        status_code = response.status_code
        return to_api_gateway_response(response, request_id)
    finally:
        timer.stop()
        record_request_metrics(
            endpoint=ENDPOINT,
            method=method,
            status_code=status_code,
            latency_seconds=timer.elapsed_seconds,
        )
        logger.info(
            "invocation completada",
            extra={"status_code": status_code, "latency_ms": timer.elapsed_ms},
        )
        clear_context()


__all__ = ["handler"]
