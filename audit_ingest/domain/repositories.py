"""
===============================================================================
TARJETA CRC — domain/repositories.py (Puertos de persistencia)
===============================================================================

Responsabilidades:
  - Definir los contratos que la aplicación necesita del store keyed:
      * AuditEventStore: put atómico de un evento completo.
      * AuditTableProvisioner: verificar/crear la tabla antes de la primera escritura.
  - Mantener el dominio libre de boto3.

Colaboradores:
  - infrastructure.dynamodb (implementación real)
  - infrastructure.repositories.in_memory (tests / dev local)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from .audit import AuditEvent


class ProvisioningOutcome(str, Enum):
    """Resultado de ensure_table()."""

    EXISTS = "exists"
    CREATED = "created"
    CREATED_CONCURRENTLY = "created_concurrently"


class AuditEventStore(Protocol):
    """R: Interface for append-only audit event persistence."""

    def put_event(self, event: AuditEvent) -> None:
        """
        R: Persist one complete event keyed by (id, timestamp).

        Must reject (never overwrite) an existing item with the same key.
        Raises domain.errors.StoreError subclasses on failure.
        """
        ...


class AuditTableProvisioner(Protocol):
    """R: Interface for the cold-start table existence contract."""

    def ensure_table(self) -> ProvisioningOutcome:
        """R: Verify or create the table. Raises domain.errors.ProvisioningError if unusable."""
        ...
