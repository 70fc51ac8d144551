"""
===============================================================================
TARJETA CRC — application/usecases/ingestion/parse_payload.py
===============================================================================

Responsabilidades:
  - Convertir el body crudo (bytes/str/None) en RecordAuditEventInput.
  - Clasificar errores de cliente: body ausente, JSON inválido, no-objeto,
    campos opcionales con tipo incorrecto, campos requeridos faltantes.
  - Ignorar claves top-level desconocidas.

Colaboradores:
  - interfaces.ingestion.handle_ingestion (HTTP + función)
  - functions.queue_handler (registros SQS)
  - domain.details.normalize_details
===============================================================================
"""

from __future__ import annotations

import json
from typing import Any, Final, Optional, Tuple, Union

from ....domain.audit import CallerContext
from ....domain.details import InvalidDetailsError, normalize_details
from .audit_results import AuditError, AuditErrorCode
from .record_audit_event import MISSING_FIELDS_MESSAGE, RecordAuditEventInput, is_present

MISSING_BODY_MESSAGE: Final[str] = "Request body is required"
INVALID_JSON_MESSAGE: Final[str] = "Request body must be valid JSON"
NOT_AN_OBJECT_MESSAGE: Final[str] = "Request body must be a JSON object"

_OPTIONAL_STRING_FIELDS: Final[tuple[str, ...]] = ("status", "errorMessage")

RawBody = Union[bytes, bytearray, str, None]
ParseResult = Tuple[Optional[RecordAuditEventInput], Optional[AuditError]]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _client_error(code: AuditErrorCode, message: str) -> ParseResult:
    return None, AuditError(code=code, message=message)


def parse_audit_payload(
    raw: RawBody, caller: CallerContext | None = None
) -> ParseResult:
    """
    Devuelve (input, None) o (None, error). Nunca lanza por input del caller.
    """
    if raw is None:
        return _client_error(AuditErrorCode.MISSING_BODY, MISSING_BODY_MESSAGE)

    if isinstance(raw, (bytes, bytearray)):
        try:
            text = bytes(raw).decode("utf-8")
        except UnicodeDecodeError:
            return _client_error(AuditErrorCode.INVALID_BODY, INVALID_JSON_MESSAGE)
    else:
        text = raw

    if not text.strip():
        return _client_error(AuditErrorCode.MISSING_BODY, MISSING_BODY_MESSAGE)

    try:
        payload = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return _client_error(AuditErrorCode.INVALID_BODY, INVALID_JSON_MESSAGE)

    if not isinstance(payload, dict):
        return _client_error(AuditErrorCode.INVALID_BODY, NOT_AN_OBJECT_MESSAGE)

    return parse_audit_mapping(payload, caller)


def parse_audit_mapping(
    payload: dict[str, Any], caller: CallerContext | None = None
) -> ParseResult:
    """Valida un objeto JSON ya decodificado."""
    for name in _OPTIONAL_STRING_FIELDS:
        value = payload.get(name)
        if value is not None and not isinstance(value, str):
            return _client_error(
                AuditErrorCode.INVALID_FIELD, f"{name} must be a string"
            )

    try:
        details = normalize_details(payload.get("details"))
    except InvalidDetailsError as exc:
        return _client_error(AuditErrorCode.INVALID_FIELD, str(exc))

    required = [payload.get(name) for name in ("eventType", "userId", "action", "resource")]
    if not all(is_present(value) for value in required):
        return _client_error(AuditErrorCode.MISSING_FIELDS, MISSING_FIELDS_MESSAGE)

    event_type, user_id, action, resource = required
    return (
        RecordAuditEventInput(
            event_type=event_type,
            user_id=user_id,
            action=action,
            resource=resource,
            details=details,
            status=payload.get("status"),
            error_message=payload.get("errorMessage"),
            caller=caller or CallerContext(),
        ),
        None,
    )
