"""
===============================================================================
TARJETA CRC — audit_ingest/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (store, provisioner, use case) siguiendo DIP.
  - Exponer factories para FastAPI (Depends) y para los handlers de función.
  - Mantener singletons con caching (lru_cache): un cliente DynamoDB por proceso.
  - Centralizar decisiones runtime basadas en Settings (config).

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories (puertos)
  - infrastructure.dynamodb / infrastructure.repositories (implementaciones)
  - application.usecases.ingestion (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO debe depender de FastAPI (solo expone factories).
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases import RecordAuditEventUseCase
from .crosscutting.config import get_settings
from .domain.repositories import AuditEventStore, AuditTableProvisioner
from .infrastructure.dynamodb import (
    DynamoDBAuditEventStore,
    DynamoDBConfig,
    DynamoDBTableProvisioner,
    build_dynamodb_client,
)
from .infrastructure.repositories import InMemoryAuditEventStore

# =============================================================================
# Helpers internos
# =============================================================================


def _is_test_env() -> bool:
    """
    Determina si estamos en entorno de test.

    Regla:
      - environment ∈ {"test", "testing", "ci"} => se favorece el store in-memory.
    """
    return get_settings().is_test_env()


# =============================================================================
# Recursos (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_dynamodb_client():
    """Cliente boto3 compartido (thread-safe), creado una vez por proceso."""
    settings = get_settings()
    return build_dynamodb_client(
        DynamoDBConfig(
            table_name=settings.dynamodb_table,
            region=settings.aws_region or None,
            endpoint_url=settings.dynamodb_endpoint_url or None,
            connect_timeout_seconds=settings.dynamodb_connect_timeout_seconds,
            read_timeout_seconds=settings.dynamodb_read_timeout_seconds,
        )
    )


@lru_cache(maxsize=1)
def get_in_memory_store() -> InMemoryAuditEventStore:
    """Store in-memory: hace de store y de provisioner en tests."""
    return InMemoryAuditEventStore(get_settings().dynamodb_table)


@lru_cache(maxsize=1)
def get_audit_event_store() -> AuditEventStore:
    if _is_test_env():
        return get_in_memory_store()
    return DynamoDBAuditEventStore(
        get_dynamodb_client(), get_settings().dynamodb_table
    )


@lru_cache(maxsize=1)
def get_table_provisioner() -> AuditTableProvisioner:
    if _is_test_env():
        return get_in_memory_store()
    settings = get_settings()
    return DynamoDBTableProvisioner(
        get_dynamodb_client(),
        settings.dynamodb_table,
        auto_create=settings.dynamodb_auto_create_table,
        wait_delay_seconds=settings.dynamodb_table_wait_delay_seconds,
        wait_max_attempts=settings.dynamodb_table_wait_max_attempts,
    )


# =============================================================================
# Casos de uso
# =============================================================================


def get_record_audit_event_use_case() -> RecordAuditEventUseCase:
    """Caso de uso: enriquecer y persistir un evento de auditoría."""
    return RecordAuditEventUseCase(
        store=get_audit_event_store(),
        environment=get_settings().environment,
    )


def reset_container() -> None:
    """Limpia los singletons (tests / recarga de settings)."""
    for factory in (
        get_dynamodb_client,
        get_in_memory_store,
        get_audit_event_store,
        get_table_provisioner,
    ):
        factory.cache_clear()
