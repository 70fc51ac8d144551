"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (ENVIRONMENT=test => in-memory store)
  - Reset cached settings/singletons between tests
  - Provide store, clock and use-case fixtures

Notes:
  - Env vars must be set BEFORE importing audit_ingest (the logger reads
    settings at import time).
"""

import os
import sys
from datetime import datetime, timezone
from itertools import count
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("DYNAMODB_TABLE", "AuditEvents")
os.environ.setdefault("LOG_JSON", "true")

from audit_ingest.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from audit_ingest import container  # noqa: E402
from audit_ingest.application.usecases import RecordAuditEventUseCase  # noqa: E402
from audit_ingest.functions import _bootstrap  # noqa: E402
from audit_ingest.infrastructure.repositories import (  # noqa: E402
    InMemoryAuditEventStore,
)

FIXED_NOW = datetime(2024, 1, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


@pytest.fixture(autouse=True)
def _reset_caches():
    """R: Each test sees fresh settings, singletons and cold start."""
    app_config.get_settings.cache_clear()
    container.reset_container()
    _bootstrap.reset()
    yield
    app_config.get_settings.cache_clear()
    container.reset_container()
    _bootstrap.reset()


@pytest.fixture
def store() -> InMemoryAuditEventStore:
    """R: Provisioned in-memory store that counts put calls."""
    return InMemoryAuditEventStore("AuditEvents", table_exists=True)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def sequential_ids():
    counter = count(1)
    return lambda: f"evt-{next(counter)}"


@pytest.fixture
def use_case(store, fixed_clock, sequential_ids) -> RecordAuditEventUseCase:
    return RecordAuditEventUseCase(
        store=store,
        environment="test",
        clock=fixed_clock,
        id_factory=sequential_ids,
    )
