"""
HTTP schemas (DTOs de documentación).
"""

from .audit_events import AuditEventCreatedRes, AuditEventReq, audit_event_request_body

__all__ = ["AuditEventCreatedRes", "AuditEventReq", "audit_event_request_body"]
