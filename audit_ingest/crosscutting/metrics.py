"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus): Observabilidad de bajo acoplamiento

Responsabilidades:
    - Definir métricas Prometheus en un registry propio (singleton del proceso).
    - Proveer funciones pequeñas y estables para registrar eventos/duraciones.
    - Cuidar cardinalidad (NO user_id, NO event ids, NO resource).
    - Exponer helpers para generar la respuesta /metrics.

Colaboradores:
    - crosscutting.middleware: registra latencia y conteo HTTP.
    - application/usecases: registra outcome de ingesta y latencia del put.
    - infrastructure/dynamodb/provisioning: registra el resultado del cold start.
    - functions/queue_handler: registra outcome por record de SQS.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

# ------------------------
# HTTP
# ------------------------
_requests_total = Counter(
    "audit_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "audit_request_latency_seconds",
    "Latencia de requests HTTP (segundos)",
    ["endpoint", "method"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=_registry,
)

# ------------------------
# Ingesta
# ------------------------
_events_total = Counter(
    "audit_events_total",
    "Eventos de auditoría por resultado (recorded/rejected/failed)",
    ["outcome"],
    registry=_registry,
)

_store_write_latency = Histogram(
    "audit_store_write_seconds",
    "Latencia del put en el store (segundos)",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=_registry,
)

# ------------------------
# Provisioning / cola
# ------------------------
_provisioning_total = Counter(
    "audit_provisioning_total",
    "Resultados de verificación/creación de la tabla en cold start",
    ["outcome"],
    registry=_registry,
)

_queue_records_total = Counter(
    "audit_queue_records_total",
    "Records de SQS procesados por resultado",
    ["outcome"],
    registry=_registry,
)


def record_request_metrics(
    *,
    endpoint: str,
    method: str,
    status_code: int,
    latency_seconds: float,
) -> None:
    """Registra conteo y latencia de un request HTTP."""
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized, method=method, status=_status_bucket(status_code)
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        latency_seconds
    )


def record_audit_event_outcome(outcome: str) -> None:
    _events_total.labels(outcome=outcome).inc()


def observe_store_write_duration(seconds: float) -> None:
    _store_write_latency.observe(seconds)


def record_provisioning_outcome(outcome: str) -> None:
    _provisioning_total.labels(outcome=outcome).inc()


def record_queue_record(outcome: str) -> None:
    _queue_records_total.labels(outcome=outcome).inc()


# -----------------------------------------------------------------------------
# Helpers privados
# -----------------------------------------------------------------------------

_UUID_SEGMENT = re.compile(
    r"/[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def _normalize_endpoint(path: str) -> str:
    """Reemplaza UUIDs en el path para no explotar la cardinalidad."""
    return _UUID_SEGMENT.sub("/{id}", path or "/")


def _status_bucket(code: int) -> str:
    """Agrupa status codes (2xx/4xx/5xx) salvo los que nos interesan exactos."""
    if code in {201, 400, 413, 500}:
        return str(code)
    return f"{code // 100}xx"


def get_metrics_response() -> tuple[bytes, str]:
    """Devuelve (body, content_type) para el endpoint /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
