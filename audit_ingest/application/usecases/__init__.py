"""
Application use cases.
"""

from .ingestion import (
    AuditError,
    AuditErrorCode,
    RecordAuditEventInput,
    RecordAuditEventResult,
    RecordAuditEventUseCase,
    parse_audit_payload,
)

__all__ = [
    "AuditError",
    "AuditErrorCode",
    "RecordAuditEventInput",
    "RecordAuditEventResult",
    "RecordAuditEventUseCase",
    "parse_audit_payload",
]
