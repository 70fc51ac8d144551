# =============================================================================
# FILE: infrastructure/repositories/in_memory/audit_event_store.py
# =============================================================================
"""
In-Memory Audit Event Store for testing and development.

NOT FOR PRODUCTION USE - data is lost on restart.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional, Tuple

from ....domain.audit import AuditEvent
from ....domain.errors import StoreConflictError, StoreNotFoundError
from ....domain.repositories import ProvisioningOutcome


class InMemoryAuditEventStore:
    """
    In-memory implementation of AuditEventStore and AuditTableProvisioner.

    Useful for:
      - Unit testing
      - Local development without DynamoDB

    Mirrors the DynamoDB contract: writes fail until ensure_table() ran,
    and a duplicate (id, timestamp) is rejected, never overwritten.
    """

    def __init__(self, table_name: str = "AuditEvents", *, table_exists: bool = False) -> None:
        self.table_name = table_name
        self._table_exists = table_exists
        self._items: Dict[Tuple[str, str], AuditEvent] = {}
        self._lock = threading.Lock()
        self.put_calls = 0
        self.ensure_calls = 0

    def ensure_table(self) -> ProvisioningOutcome:
        with self._lock:
            self.ensure_calls += 1
            if self._table_exists:
                return ProvisioningOutcome.EXISTS
            self._table_exists = True
            return ProvisioningOutcome.CREATED

    def put_event(self, event: AuditEvent) -> None:
        with self._lock:
            self.put_calls += 1
            if not self._table_exists:
                raise StoreNotFoundError(self.table_name)
            if event.key in self._items:
                raise StoreConflictError(event.id, event.timestamp)
            self._items[event.key] = event

    # ---- helpers de test ----

    def get_event(self, event_id: str) -> Optional[AuditEvent]:
        with self._lock:
            for (item_id, _), event in self._items.items():
                if item_id == event_id:
                    return event
        return None

    def list_events(self) -> List[AuditEvent]:
        with self._lock:
            return list(self._items.values())

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self.put_calls = 0
