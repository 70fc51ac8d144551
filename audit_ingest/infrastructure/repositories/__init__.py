"""
Repository implementations (in-memory).
"""

from .in_memory import InMemoryAuditEventStore

__all__ = ["InMemoryAuditEventStore"]
