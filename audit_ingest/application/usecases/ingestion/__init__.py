"""
Audit ingestion use cases.
"""

from .audit_results import AuditError, AuditErrorCode, RecordAuditEventResult
from .parse_payload import (
    INVALID_JSON_MESSAGE,
    MISSING_BODY_MESSAGE,
    NOT_AN_OBJECT_MESSAGE,
    parse_audit_mapping,
    parse_audit_payload,
)
from .record_audit_event import (
    INTERNAL_ERROR_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    RecordAuditEventInput,
    RecordAuditEventUseCase,
)

__all__ = [
    "AuditError",
    "AuditErrorCode",
    "INTERNAL_ERROR_MESSAGE",
    "INVALID_JSON_MESSAGE",
    "MISSING_BODY_MESSAGE",
    "MISSING_FIELDS_MESSAGE",
    "NOT_AN_OBJECT_MESSAGE",
    "RecordAuditEventInput",
    "RecordAuditEventUseCase",
    "RecordAuditEventResult",
    "parse_audit_mapping",
    "parse_audit_payload",
]
