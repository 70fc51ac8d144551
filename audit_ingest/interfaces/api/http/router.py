"""
===============================================================================
TARJETA CRC — router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye en FastAPI (app.include_router).
  - Centralizar responses de error para OpenAPI.

Notas:
  - Este router se incluye desde api/main.py con prefix="/v1".
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers.audit_events import router as audit_events_router


def build_router() -> APIRouter:
    """Construye el router raíz v1 (testeable sin side effects)."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
    api_router.include_router(audit_events_router)
    return api_router


router = build_router()

__all__ = ["router", "build_router"]
