"""
===============================================================================
TARJETA CRC — domain/errors.py (Fallas del store de auditoría)
===============================================================================

Responsabilidades:
  - Definir el lenguaje común de fallas del store keyed, independiente del SDK.
  - Ser el contrato de error de los puertos AuditEventStore / AuditTableProvisioner.
  - Permitir que la aplicación clasifique fallas (conflict, unavailable, ...)
    sin conocer boto3.

Colaboradores:
  - domain/repositories.py (puertos que las declaran)
  - infrastructure/dynamodb (traduce ClientError -> StoreError)
  - infrastructure/repositories/in_memory (mismos errores en tests)
  - application.usecases.ingestion.record_audit_event (StoreError -> AuditError)
===============================================================================
"""

from typing import Final

# Texto público de cualquier falla del lado servidor (HTTP, función y cola).
INTERNAL_ERROR_MESSAGE: Final[str] = "Internal server error"


class StoreError(Exception):
    """Base de errores del store de auditoría."""


class StoreConfigurationError(StoreError):
    """Configuración inválida o incompleta del adaptador."""


class StoreNotFoundError(StoreError):
    """La tabla no existe (ResourceNotFoundException)."""

    def __init__(self, table_name: str):
        super().__init__(f"Audit table not found. table={table_name}")
        self.table_name = table_name


class StoreConflictError(StoreError):
    """Ya existe un item con el mismo (id, timestamp)."""

    def __init__(self, event_id: str, timestamp: str):
        super().__init__(
            f"Audit event key already exists. id={event_id} timestamp={timestamp}"
        )
        self.event_id = event_id
        self.timestamp = timestamp


class StorePermissionError(StoreError):
    """Credenciales inválidas o falta de permisos (AccessDenied)."""

    def __init__(self, message: str = "Permission denied on audit store."):
        super().__init__(message)


class StoreUnavailableError(StoreError):
    """Store caído, throttling o timeout."""

    def __init__(self, message: str = "Audit store unavailable."):
        super().__init__(message)


class ProvisioningError(StoreError):
    """No se pudo confirmar ni crear la tabla: fatal para el arranque."""
