"""
Shared pytest fixtures for redkit tests.

Provides the in-memory warehouse, executors, environment isolation and test
resource naming.
"""

import uuid
from datetime import datetime

import pytest

from redkit.executors import ExternalSchemaExecutor
from tests.fixtures import FakeWarehouse

REDSHIFT_ENV_VARS = (
    "REDSHIFT_HOST",
    "REDSHIFT_PORT",
    "REDSHIFT_DATABASE",
    "REDSHIFT_USER",
    "REDSHIFT_PASSWORD",
    "REDSHIFT_SSLMODE",
    "REDKIT_PROPAGATION_TIMEOUT",
    "REDKIT_POLL_INTERVAL",
)


def generate_test_prefix() -> str:
    """
    Generate a unique prefix for test resources.

    Format: redkit_test_{timestamp}_{short_uuid}
    Example: redkit_test_20240127_143052_abc123
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    short_uuid = uuid.uuid4().hex[:6]
    return f"redkit_test_{timestamp}_{short_uuid}"


@pytest.fixture(scope="session")
def test_prefix() -> str:
    """
    Session-scoped unique prefix for test resources.

    Use this to create schema names that won't collide with existing
    schemas or parallel test runs.
    """
    return generate_test_prefix()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove all redkit-related environment variables for the test duration."""
    for name in REDSHIFT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def fake_warehouse() -> FakeWarehouse:
    """In-memory warehouse with one extra user, alice (usesysid 200)."""
    warehouse = FakeWarehouse()
    warehouse.add_user(200, "alice")
    return warehouse


@pytest.fixture
def executor(fake_warehouse: FakeWarehouse) -> ExternalSchemaExecutor:
    """ExternalSchemaExecutor over the fake warehouse, polling without delay."""
    return ExternalSchemaExecutor(
        fake_warehouse,
        propagation_timeout_seconds=5,
        poll_interval_seconds=0,
    )
