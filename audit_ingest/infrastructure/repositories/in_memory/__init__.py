"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .audit_event_store import InMemoryAuditEventStore

__all__ = ["InMemoryAuditEventStore"]
