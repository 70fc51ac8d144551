"""
Domain Layer (Audit events)

Entidades, value objects y puertos. Sin dependencias de infraestructura.
"""

from .audit import (
    DEFAULT_ENVIRONMENT,
    PARTITION_KEY,
    REQUIRED_FIELDS,
    SORT_KEY,
    AuditEvent,
    CallerContext,
    EventMetadata,
    format_timestamp,
)
from .details import DetailValue, InvalidDetailsError, normalize_details
from .errors import (
    INTERNAL_ERROR_MESSAGE,
    ProvisioningError,
    StoreConfigurationError,
    StoreConflictError,
    StoreError,
    StoreNotFoundError,
    StorePermissionError,
    StoreUnavailableError,
)
from .repositories import AuditEventStore, AuditTableProvisioner, ProvisioningOutcome

__all__ = [
    "AuditEvent",
    "AuditEventStore",
    "AuditTableProvisioner",
    "CallerContext",
    "DEFAULT_ENVIRONMENT",
    "DetailValue",
    "EventMetadata",
    "INTERNAL_ERROR_MESSAGE",
    "InvalidDetailsError",
    "PARTITION_KEY",
    "ProvisioningError",
    "ProvisioningOutcome",
    "REQUIRED_FIELDS",
    "SORT_KEY",
    "StoreConfigurationError",
    "StoreConflictError",
    "StoreError",
    "StoreNotFoundError",
    "StorePermissionError",
    "StoreUnavailableError",
    "format_timestamp",
    "normalize_details",
]
