"""
===============================================================================
TARJETA CRC — api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones HTTP de la aplicación al envelope {"message", "error"}.
  - Fail-safe: cualquier excepción no tipada -> 500 (con logging y stacktrace).

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, app_exception_handler
  - crosscutting.config.get_settings (para decidir nivel de detalle)
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    app_exception_handler,
    internal_error,
)
from ..crosscutting.logger import logger


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler para excepciones no tipadas.

    - Log completo (stacktrace).
    - En producción el diagnóstico se reduce al nombre de la excepción.
    """
    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": _request_id_from(request), "error": str(exc)},
    )

    if get_settings().is_production():
        diagnostic = exc.__class__.__name__
    else:
        diagnostic = str(exc) or exc.__class__.__name__

    return await app_exception_handler(request, internal_error(diagnostic))


def register_exception_handlers(app) -> None:
    """Exception genérica se registra al final como fallback."""
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
