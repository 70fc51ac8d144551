"""
===============================================================================
MÓDULO: Middlewares HTTP del servicio hosteado
===============================================================================

RequestContextMiddleware
  Correlación por request: X-Request-Id entrante (o uno nuevo), contexto para
  logs, header en la respuesta, una métrica y una línea de log por request.

BodyLimitMiddleware (ASGI puro)
  Corta con 413 antes de que el body llegue al router. Cubre Content-Length
  declarado y bodies chunked. Un item DynamoDB no puede superar 400KB.

Colaboradores:
  - audit_ingest/context.py
  - crosscutting/metrics.py, crosscutting/timing.py
  - crosscutting/error_responses.py (mensaje del 413)
===============================================================================
"""

from __future__ import annotations

import json
import uuid
from typing import Awaitable, Callable, Final

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..context import clear_context, set_request_context
from .error_responses import payload_too_large
from .logger import logger
from .metrics import record_request_metrics
from .timing import Timer

REQUEST_ID_HEADER: Final[str] = "X-Request-Id"
_MAX_REQUEST_ID_LENGTH: Final[int] = 128

# Probes y scraping: métricas sí, log por request no.
_UNLOGGED_PATHS: Final[frozenset[str]] = frozenset({"/healthz", "/readyz", "/metrics"})


def resolve_request_id(raw: str | None) -> str:
    """Respeta el id del caller si es razonable; si no, genera un UUID4."""
    candidate = (raw or "").strip()
    if candidate and len(candidate) <= _MAX_REQUEST_ID_LENGTH:
        return candidate
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        path, method = request.url.path, request.method
        set_request_context(request_id=request_id, method=method, path=path)
        request.state.request_id = request_id

        status_code = 500
        timer = Timer().start()
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception:
            logger.exception("Request aborted by unhandled exception")
            raise
        finally:
            timer.stop()
            record_request_metrics(
                endpoint=path,
                method=method,
                status_code=status_code,
                latency_seconds=timer.elapsed_seconds,
            )
            if path not in _UNLOGGED_PATHS:
                logger.info(
                    "Request handled",
                    extra={"status_code": status_code, "latency_ms": timer.elapsed_ms},
                )
            clear_context()


class _BodyLimitExceeded(Exception):
    def __init__(self, received: int):
        super().__init__(received)
        self.received = received


def _declared_length(scope: Scope) -> int | None:
    for name, value in scope.get("headers") or ():
        if name.lower() == b"content-length":
            try:
                return int(value)
            except ValueError:
                # Content-Length inválido: decide el conteo en streaming.
                return None
    return None


class BodyLimitMiddleware:
    def __init__(self, app: ASGIApp, max_body_bytes: int | None = None):
        if max_body_bytes is None:
            from .config import get_settings

            max_body_bytes = get_settings().max_body_bytes
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = _declared_length(scope)
        if declared is not None and declared > self.max_body_bytes:
            self._log_rejection(scope, declared)
            await self._reject(send)
            return

        received = 0
        response_started = False

        async def counting_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body") or b"")
                if received > self.max_body_bytes:
                    raise _BodyLimitExceeded(received)
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, counting_receive, tracking_send)
        except _BodyLimitExceeded as exc:
            # Con la respuesta ya iniciada no hay forma válida de mandar un 413.
            if response_started:
                raise
            self._log_rejection(scope, exc.received)
            await self._reject(send)

    def _log_rejection(self, scope: Scope, size: int) -> None:
        logger.warning(
            "Request body over limit",
            extra={
                "body_bytes": size,
                "max_bytes": self.max_body_bytes,
                "path": scope.get("path", ""),
            },
        )

    async def _reject(self, send: Send) -> None:
        detail = payload_too_large(f"{self.max_body_bytes} bytes").detail
        body = json.dumps({"message": detail}, ensure_ascii=False).encode("utf-8")
        await send(
            {
                "type": "http.response.start",
                "status": 413,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"content-length", str(len(body)).encode("ascii")),
                ],
            }
        )
        await send({"type": "http.response.body", "body": body})
