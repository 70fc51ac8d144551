"""
===============================================================================
TARJETA CRC — schemas/audit_events.py
===============================================================================

Módulo:
    Schemas HTTP para eventos de auditoría (solo documentación OpenAPI)

Responsabilidades:
    - Describir el body aceptado y las respuestas del endpoint de ingesta.
    - NO validan: la validación real vive en parse_audit_payload, compartida
      con la función API Gateway.
===============================================================================
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuditEventReq(BaseModel):
    """Evento enviado por el cliente. Claves desconocidas se ignoran."""

    model_config = ConfigDict(populate_by_name=True)

    event_type: str = Field(..., alias="eventType", examples=["USER_LOGIN"])
    user_id: str = Field(..., alias="userId", examples=["u-123"])
    action: str = Field(..., examples=["login"])
    resource: str = Field(..., examples=["auth"])
    details: dict[str, Any] | None = None
    status: str | None = None
    error_message: str | None = Field(default=None, alias="errorMessage")


class AuditEventCreatedRes(BaseModel):
    message: str = Field(..., examples=["Audit event recorded successfully"])
    event_id: str = Field(..., alias="eventId")


def audit_event_request_body() -> dict[str, Any]:
    """requestBody para openapi_extra (el endpoint lee el body crudo)."""
    return {
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": AuditEventReq.model_json_schema(by_alias=True)
                }
            },
        }
    }
