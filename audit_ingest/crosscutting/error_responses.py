"""
===============================================================================
MÓDULO: Respuestas de error estándar (envelope {"message", "error"})
===============================================================================

Objetivo
--------
Uniformar TODOS los errores HTTP con el mismo envelope que devuelve la función
de ingesta, para que un cliente no distinga si habló con el servicio hosteado
o con API Gateway + función:

    {"message": "<texto>"}                      -> 4xx
    {"message": "Internal server error",
     "error": "<diagnóstico>"}                  -> 5xx

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  AppHTTPException + handlers

Responsabilidades:
  - Definir catálogo de códigos de error (ErrorCode) para logs/métricas
  - Construir el payload (ErrorBody)
  - Proveer factories de errores frecuentes
  - Proveer handlers (FastAPI) que devuelven JSON

Colaboradores:
  - crosscutting/middleware.py (413 por body excedido)
  - api/exception_handlers.py (fallback de excepciones no controladas)
===============================================================================
"""

from __future__ import annotations

from enum import Enum

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..domain.errors import INTERNAL_ERROR_MESSAGE
from .logger import logger


class ErrorCode(str, Enum):
    # 4xx
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class ErrorBody(BaseModel):
    """
    Envelope de error compartido por el router y las funciones.

    - message: texto estable para el cliente
    - error: diagnóstico opcional (solo en 5xx)
    """

    message: str
    error: str | None = None


OPENAPI_ERROR_RESPONSES = {
    "400": {"description": "Bad Request", "model": ErrorBody},
    "413": {"description": "Payload Too Large", "model": ErrorBody},
    "500": {"description": "Internal Server Error", "model": ErrorBody},
}


class AppHTTPException(HTTPException):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      AppHTTPException

    Responsabilidades:
      - Adjuntar un ErrorCode estable (para logs)
      - Transportar diagnóstico opcional para 5xx

    Colaboradores:
      - app_exception_handler()
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        error: str | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.error = error


# ---------------------------------------------------------------------------
# Factories de error (helpers)
# ---------------------------------------------------------------------------
def payload_too_large(max_size: str) -> AppHTTPException:
    return AppHTTPException(
        413,
        ErrorCode.PAYLOAD_TOO_LARGE,
        f"Request body exceeds the maximum allowed size ({max_size})",
    )


def internal_error(error: str | None = None) -> AppHTTPException:
    return AppHTTPException(
        500, ErrorCode.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE, error=error
    )


def service_unavailable(service: str) -> AppHTTPException:
    return AppHTTPException(
        503,
        ErrorCode.SERVICE_UNAVAILABLE,
        "Service temporarily unavailable",
        error=service,
    )


def error_body(message: str, error: str | None = None) -> dict[str, str]:
    """Serializa el envelope omitiendo `error` cuando no aplica."""
    return ErrorBody(message=message, error=error).model_dump(exclude_none=True)


# ---------------------------------------------------------------------------
# Handlers FastAPI
# ---------------------------------------------------------------------------
async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Handler para AppHTTPException (propaga headers opcionales)."""
    logger.warning(
        "HTTP error response",
        extra={"code": exc.code.value, "status_code": exc.status_code},
    )
    headers = getattr(exc, "headers", None)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), exc.error),
        headers=headers,
    )
