"""
Name: In-Memory Audit Event Store Tests

Responsibilities:
  - Validate the test double honors the store contract
"""

import pytest

from audit_ingest.domain import AuditEvent, EventMetadata, ProvisioningOutcome
from audit_ingest.domain.errors import StoreConflictError, StoreNotFoundError
from audit_ingest.infrastructure.repositories import InMemoryAuditEventStore

pytestmark = pytest.mark.unit


def _event(event_id: str = "evt-1") -> AuditEvent:
    return AuditEvent(
        id=event_id,
        timestamp="2024-01-01T00:00:00.000Z",
        event_type="LOGIN",
        user_id="u1",
        action="SIGN_IN",
        resource="session",
        metadata=EventMetadata(ip_address="", user_agent="", environment="dev"),
    )


def test_write_before_provisioning_fails():
    store = InMemoryAuditEventStore()

    with pytest.raises(StoreNotFoundError):
        store.put_event(_event())
    assert store.put_calls == 1


def test_ensure_table_creates_then_reports_existing():
    store = InMemoryAuditEventStore()

    assert store.ensure_table() is ProvisioningOutcome.CREATED
    assert store.ensure_table() is ProvisioningOutcome.EXISTS
    assert store.ensure_calls == 2


def test_duplicate_key_rejected():
    store = InMemoryAuditEventStore(table_exists=True)
    store.put_event(_event())

    with pytest.raises(StoreConflictError):
        store.put_event(_event())
    assert len(store.list_events()) == 1


def test_clear_resets_items_and_counter():
    store = InMemoryAuditEventStore(table_exists=True)
    store.put_event(_event())

    store.clear()

    assert store.list_events() == []
    assert store.put_calls == 0
    assert store.get_event("evt-1") is None
