"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/audit_events.py
===============================================================================

Name:
    Audit Events Router

Responsibilities:
    - POST /audit-events: leer el body crudo y delegar en handle_ingestion.
    - Derivar CallerContext del socket (request.client) y del User-Agent.
    - Ejecutar el use case bloqueante fuera del event loop.

Collaborators:
    - interfaces.ingestion.handle_ingestion
    - container.get_record_audit_event_use_case
    - schemas.audit_events (OpenAPI)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ....ingestion import handle_ingestion
from .....application.usecases import RecordAuditEventUseCase
from .....container import get_record_audit_event_use_case
from .....domain.audit import CallerContext
from ..schemas.audit_events import AuditEventCreatedRes, audit_event_request_body

router = APIRouter(tags=["audit-events"])


def caller_from_request(request: Request) -> CallerContext:
    """
    IP del peer directo. X-Forwarded-For NO se usa: lo controla el cliente.
    """
    client = request.client
    return CallerContext(
        source_ip=client.host if client is not None and client.host else "",
        user_agent=request.headers.get("user-agent", ""),
    )


@router.post(
    "/audit-events",
    status_code=201,
    response_model=AuditEventCreatedRes,
    openapi_extra=audit_event_request_body(),
)
async def record_audit_event(
    request: Request,
    use_case: RecordAuditEventUseCase = Depends(get_record_audit_event_use_case),
) -> JSONResponse:
    raw_body = await request.body()
    outcome = await run_in_threadpool(
        handle_ingestion, raw_body, caller_from_request(request), use_case
    )
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)
