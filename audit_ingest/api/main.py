"""
Name: FastAPI Application Entry Point (hosted audit ingestion service)

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Provision the audit table on startup (fatal if unusable)
  - Configure middleware (CORS, body limit, request context)
  - Mount the audit-events router under the /v1 prefix
  - Expose health, readiness and metrics endpoints

Collaborators:
  - container.get_table_provisioner: cold-start table contract
  - interfaces.api.http.router: POST /v1/audit-events
  - crosscutting.middleware / crosscutting.metrics

Notes:
  - Middleware order matters: RequestContext -> CORS -> BodyLimit -> routes
  - /healthz is liveness only; /readyz reports whether the table is confirmed
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from ..container import get_table_provisioner
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import service_unavailable
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..domain.errors import ProvisioningError
from ..interfaces.api.http.router import router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and provisions the table."""
    settings = get_settings()
    app.state.table_ready = False

    try:
        outcome = await run_in_threadpool(get_table_provisioner().ensure_table)
    except ProvisioningError as exc:
        # R: Without a usable table the service must not start.
        logger.error(
            "Audit table provisioning failed",
            extra={"table": settings.dynamodb_table, "error": str(exc)},
        )
        raise

    app.state.table_ready = True
    logger.info(
        "Audit ingest API starting up",
        extra={
            "environment": settings.environment,
            "table": settings.dynamodb_table,
            "provisioning": outcome.value,
            "max_body_bytes": settings.max_body_bytes,
        },
    )

    yield

    logger.info("Audit ingest API shutting down")


def create_app() -> FastAPI:
    settings = get_settings()

    # R: Create FastAPI application instance with API metadata
    application = FastAPI(
        title="Audit Ingest API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "audit-events",
                "description": "Append-only audit event ingestion",
            },
        ],
    )
    application.state.table_ready = False

    # R: Middleware order (last added = first to execute)
    application.add_middleware(
        BodyLimitMiddleware, max_body_bytes=settings.max_body_bytes
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
    )
    application.add_middleware(RequestContextMiddleware)

    # R: Register API routes under /v1 prefix for versioning
    application.include_router(router, prefix="/v1")

    register_exception_handlers(application)

    @application.get("/healthz")
    def healthz(request: Request):
        """R: Liveness: the process is up and serving."""
        return {
            "ok": True,
            "request_id": getattr(request.state, "request_id", None),
        }

    @application.get("/readyz")
    def readyz(request: Request):
        """R: Readiness: the audit table was confirmed at startup."""
        if not getattr(request.app.state, "table_ready", False):
            raise service_unavailable("audit-store")
        return {
            "ok": True,
            "table": settings.dynamodb_table,
            "request_id": getattr(request.state, "request_id", None),
        }

    @application.get("/metrics")
    def metrics():
        """R: Expose Prometheus metrics (text exposition format)."""
        content, content_type = get_metrics_response()
        return Response(content=content, media_type=content_type)

    return application


app = create_app()
