"""
Redkit - Declarative management of Redshift external schemas.

This library binds Redshift namespaces to AWS Glue Data Catalog databases
and keeps them converged to a declared configuration.

Key Features:
- ExternalSchema model with write-once database_name / iam_role
- Identity tracked by pg_namespace oid, so renames keep the same resource
- Create / Read / Update / Delete / Exists / Import lifecycle operations
- Plan and reconcile against live state, with dry-run support
- YAML / JSON manifests of declared schemas

Quick Start:
    from redkit import (
        ExternalSchema, ExternalSchemaExecutor,
        SqlAlchemyWarehouse, WarehouseConfig,
    )

    config = WarehouseConfig.from_env()
    warehouse = SqlAlchemyWarehouse.from_config(config)
    executor = ExternalSchemaExecutor.from_config(warehouse, config)

    result = executor.create(ExternalSchema(
        schema_name="spectrum_sales",
        database_name="sales_glue_db",
        iam_role="arn:aws:iam::123456789012:role/spectrum",
    ))
    oid = result.identifier

    # Rename keeps the oid
    old = result.state
    executor.update(oid, old, old.model_copy(update={"schema_name": "spectrum_sales_v2"}))
"""

__version__ = "0.1.0"

from redkit.config import WarehouseConfig
from redkit.errors import (
    CreateError,
    DeleteError,
    ImmutableAttributeError,
    NotFoundError,
    OwnerResolutionError,
    PropagationTimeoutError,
    RedkitError,
    StatementError,
    StorageAccessError,
)
from redkit.executors import (
    BaseExecutor,
    ExecutionPlan,
    ExecutionResult,
    ExternalSchemaExecutor,
    OperationType,
)
from redkit.manifest import ExternalSchemaManifest, load_manifest
from redkit.models import ExternalSchema
from redkit.warehouse import SqlAlchemyWarehouse, Warehouse, WarehouseSession

__all__ = [
    # Version
    "__version__",
    # Models
    "ExternalSchema",
    "ExternalSchemaManifest",
    "load_manifest",
    # Executors
    "BaseExecutor",
    "ExecutionPlan",
    "ExecutionResult",
    "ExternalSchemaExecutor",
    "OperationType",
    # Warehouse
    "SqlAlchemyWarehouse",
    "Warehouse",
    "WarehouseConfig",
    "WarehouseSession",
    # Errors
    "CreateError",
    "DeleteError",
    "ImmutableAttributeError",
    "NotFoundError",
    "OwnerResolutionError",
    "PropagationTimeoutError",
    "RedkitError",
    "StatementError",
    "StorageAccessError",
]
