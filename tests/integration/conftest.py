"""
Integration test fixtures for redkit.

Provides a real warehouse, the executor, and cleanup of created schemas.
Tests are skipped unless REDSHIFT_HOST plus the Glue database and IAM role
below are configured:

    REDKIT_TEST_GLUE_DATABASE, REDKIT_TEST_IAM_ROLE
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Generator, List

import pytest

from redkit import sql
from redkit.config import WarehouseConfig
from redkit.executors import ExternalSchemaExecutor
from redkit.models import ExternalSchema
from redkit.warehouse import SqlAlchemyWarehouse

logger = logging.getLogger(__name__)


@dataclass
class ResourceTracker:
    """Tracks created schemas (by current name) for cleanup after tests."""

    schemas: List[str] = field(default_factory=list)

    def add_schema(self, name: str) -> None:
        if name not in self.schemas:
            self.schemas.append(name)

    def rename_schema(self, old_name: str, new_name: str) -> None:
        self.schemas = [new_name if s == old_name else s for s in self.schemas]


@pytest.fixture(scope="session")
def warehouse() -> Generator[SqlAlchemyWarehouse, None, None]:
    """
    Session-scoped warehouse built from REDSHIFT_* environment variables.
    """
    if not os.getenv("REDSHIFT_HOST"):
        pytest.skip("REDSHIFT_HOST not set")
    config = WarehouseConfig.from_env()
    wh = SqlAlchemyWarehouse.from_config(config)
    try:
        with wh.session() as session:
            session.fetch_one(sql.Statement(sql="SELECT 1", description="ping"))
    except Exception as e:
        pytest.skip(f"Could not connect to Redshift: {e}")
    yield wh
    wh.dispose()


@pytest.fixture(scope="session")
def glue_target() -> dict:
    database = os.getenv("REDKIT_TEST_GLUE_DATABASE")
    iam_role = os.getenv("REDKIT_TEST_IAM_ROLE")
    if not database or not iam_role:
        pytest.skip("REDKIT_TEST_GLUE_DATABASE / REDKIT_TEST_IAM_ROLE not set")
    return {"database_name": database, "iam_role": iam_role}


@pytest.fixture
def resource_tracker() -> ResourceTracker:
    return ResourceTracker()


@pytest.fixture
def external_schema_executor(warehouse: SqlAlchemyWarehouse) -> ExternalSchemaExecutor:
    return ExternalSchemaExecutor(warehouse, poll_interval_seconds=0.5)


@pytest.fixture(autouse=True)
def cleanup_schemas(
    warehouse: SqlAlchemyWarehouse,
    resource_tracker: ResourceTracker,
) -> Generator[None, None, None]:
    """
    Drop every tracked schema after the test.

    Failed cleanups are logged but don't fail the test.
    """
    yield

    for name in reversed(resource_tracker.schemas):
        try:
            with warehouse.session() as session:
                session.execute(sql.drop_schema(name, cascade=True))
            logger.info(f"Cleaned up schema: {name}")
        except Exception as e:
            logger.warning(f"Failed to cleanup schema {name}: {e}")


@pytest.fixture
def make_declared(test_prefix: str, glue_target: dict):
    """Build an ExternalSchema with a unique name against the test Glue database."""
    def _make(suffix: str, **overrides) -> ExternalSchema:
        values = {"schema_name": f"{test_prefix}_{suffix}", **glue_target, **overrides}
        return ExternalSchema(**values)
    return _make
