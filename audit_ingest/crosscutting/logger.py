"""
===============================================================================
MÓDULO: Logger estructurado (JSON) con contexto de request
===============================================================================

Una línea JSON por evento de log: CloudWatch (Lambda) y cualquier colector
de stdout (servicio hosteado) la indexan sin parsers extra.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + setup_logger()

Responsabilidades:
  - Serializar LogRecord -> JSON (nivel, logger, mensaje, módulo, línea, pid).
  - Agregar request_id / method / path de la invocación en curso.
  - Ocultar credenciales AWS y tokens que lleguen por `extra`.
  - Recortar valores enormes (un `details` gigante no debe inundar los logs).

Colaboradores:
  - audit_ingest/context.py (ContextVars)
  - crosscutting/config.py (LOG_LEVEL, LOG_JSON)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Final

from pydantic import ValidationError

from ..context import get_context_dict

SERVICE_NAME: Final[str] = "audit-ingest"

# Atributos estándar de un LogRecord: todo lo demás vino por `extra`.
_STANDARD_ATTRS: Final[frozenset[str]] = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

_REDACTED: Final[str] = "***REDACTADO***"
_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset(
    {
        "authorization",
        "password",
        "secret",
        "token",
        "api_key",
        "x-api-key",
        "aws_access_key_id",
        "aws_secret_access_key",
        "aws_session_token",
        "credentials",
    }
)
_MAX_STRING: Final[int] = 4_000
_MAX_DEPTH: Final[int] = 4


def redact(value: Any, *, key: str | None = None, depth: int = 0) -> Any:
    """Copia JSON-safe de `value` con claves sensibles ocultas y tamaños acotados."""
    if key is not None and key.lower() in _SENSITIVE_KEYS:
        return _REDACTED
    if depth > _MAX_DEPTH:
        return "***TRUNCADO***"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return value if len(value) <= _MAX_STRING else value[:_MAX_STRING] + "…"
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, dict):
        return {
            str(k): redact(v, key=str(k), depth=depth + 1) for k, v in value.items()
        }
    if isinstance(value, (list, tuple, set)):
        return [redact(v, key=key, depth=depth + 1) for v in value]
    return str(value)


class JSONFormatter(logging.Formatter):
    """Formatter JSON de una línea."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": record.process,
        }
        entry.update(get_context_dict())

        for attr, value in record.__dict__.items():
            if attr not in _STANDARD_ATTRS:
                entry[attr] = redact(value, key=attr)

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(entry, ensure_ascii=False, default=str, separators=(",", ":"))


def _logging_preferences() -> tuple[str, bool]:
    # Settings inválidos no deben dejarnos sin logs: el error real lo
    # reporta el arranque cuando llama a get_settings().
    try:
        from .config import get_settings

        settings = get_settings()
    except ValidationError:
        return "INFO", True
    return (settings.log_level or "INFO").upper(), settings.log_json


def setup_logger(name: str = SERVICE_NAME) -> logging.Logger:
    """
    Configura el logger del servicio.

    Idempotente: un contenedor Lambda caliente reimporta sin duplicar handlers.
    """
    level, use_json = _logging_preferences()
    log = logging.getLogger(name)
    resolved = logging.getLevelName(level)
    log.setLevel(resolved if isinstance(resolved, int) else logging.INFO)

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)

    return log


logger = setup_logger()
