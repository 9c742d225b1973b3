"""
External schema executor for Redshift.

Reconciles declared ExternalSchema configuration against the live state in
pg_namespace / svv_external_schemas. The pg_namespace oid assigned at creation
is the resource key; names may change underneath it.
"""

import logging
import time
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from redkit import sql
from redkit.catalog import (
    check_exists,
    read_state,
    resolve_identifier_by_name,
    set_owner,
    wait_for_identifier,
)
from redkit.config import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_PROPAGATION_TIMEOUT_SECONDS,
    WarehouseConfig,
)
from redkit.errors import (
    CreateError,
    DeleteError,
    ImmutableAttributeError,
    NotFoundError,
    RedkitError,
    StatementError,
    StorageAccessError,
)
from redkit.models import ExternalSchema
from redkit.warehouse import Warehouse

from .base import BaseExecutor, ExecutionPlan, ExecutionResult, OperationType

logger = logging.getLogger(__name__)


class ExternalSchemaExecutor(BaseExecutor[ExternalSchema]):
    """Executor for external schema operations."""

    def __init__(
        self,
        warehouse: Warehouse,
        dry_run: bool = False,
        continue_on_error: bool = False,
        propagation_timeout_seconds: float = DEFAULT_PROPAGATION_TIMEOUT_SECONDS,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ):
        """
        Initialize the external schema executor.

        Args:
            warehouse: Source of connection and transaction scopes
            dry_run: If True, only log actions without executing
            continue_on_error: Return failed results instead of raising
            propagation_timeout_seconds: How long to wait for a new schema to appear in pg_namespace
            poll_interval_seconds: Interval between visibility checks
        """
        super().__init__(warehouse, dry_run, continue_on_error)
        self.propagation_timeout_seconds = propagation_timeout_seconds
        self.poll_interval_seconds = poll_interval_seconds

    @classmethod
    def from_config(cls, warehouse: Warehouse, config: WarehouseConfig, **kwargs) -> "ExternalSchemaExecutor":
        return cls(
            warehouse,
            propagation_timeout_seconds=config.propagation_timeout_seconds,
            poll_interval_seconds=config.poll_interval_seconds,
            **kwargs,
        )

    def get_resource_type(self) -> str:
        """Get the resource type."""
        return "EXTERNAL_SCHEMA"

    def exists(self, identifier: int) -> bool:
        """Check if a namespace with this oid still exists."""
        with self.warehouse.session() as session:
            return check_exists(session, identifier)

    def read(self, identifier: int) -> ExternalSchema:
        """Read the live state. NotFoundError means the schema is gone."""
        with self.warehouse.session() as session:
            return read_state(session, identifier)

    def create(self, resource: ExternalSchema) -> ExecutionResult:
        """Create the external schema and read back its server-side state."""
        start_time = time.time()
        resource_name = resource.schema_name

        try:
            if self.dry_run:
                logger.info(f"[DRY RUN] Would create external schema {resource_name}")
                return self._record(ExecutionResult(
                    success=True,
                    operation=OperationType.CREATE,
                    resource_type=self.get_resource_type(),
                    resource_name=resource_name,
                    message="Would be created (dry run)",
                ))

            statement = sql.create_external_schema(
                resource.schema_name, resource.database_name, resource.iam_role
            )
            with self.warehouse.session() as session:
                logger.info(f"Creating external schema {resource_name} from Glue database {resource.database_name}")
                try:
                    session.execute(statement)
                except SQLAlchemyError as e:
                    raise CreateError(f"Error {statement.description}: {e}") from e

                # From here on the schema exists server-side
                identifier = None
                try:
                    identifier = wait_for_identifier(
                        session,
                        resource_name,
                        self.propagation_timeout_seconds,
                        self.poll_interval_seconds,
                    )
                    logger.info(f"Created external schema {resource_name} with oid {identifier}")

                    if resource.owner is not None:
                        set_owner(session, resource_name, resource.owner)

                    live = read_state(session, identifier)
                except RedkitError as e:
                    if identifier is not None:
                        e.identifier = identifier
                    raise

            duration = time.time() - start_time
            return self._record(ExecutionResult(
                success=True,
                operation=OperationType.CREATE,
                resource_type=self.get_resource_type(),
                resource_name=live.schema_name,
                message="Created successfully",
                duration_seconds=duration,
                identifier=identifier,
                state=resource.with_live_state(live),
            ))

        except Exception as e:
            return self._handle_error(OperationType.CREATE, resource_name, e)

    def update(self, identifier: int, old: ExternalSchema, new: ExternalSchema) -> ExecutionResult:
        """
        Rename and/or reown the schema in one transaction.

        The rename runs before the ownership change so ALTER ... OWNER TO
        targets the new name. The result is read back on a separate plain
        connection before committing; if that read fails the transaction is
        rolled back.
        """
        start_time = time.time()
        resource_name = new.schema_name

        try:
            immutable = old.immutable_changes(new)
            if immutable:
                raise ImmutableAttributeError(old.schema_name, immutable, identifier=identifier)

            changes = old.diff(new)
            if not changes:
                live = self.read(identifier)
                return self._record(ExecutionResult(
                    success=True,
                    operation=OperationType.NO_OP,
                    resource_type=self.get_resource_type(),
                    resource_name=live.schema_name,
                    message="No changes needed",
                    identifier=identifier,
                    state=new.with_live_state(live),
                ))

            if self.dry_run:
                logger.info(f"[DRY RUN] Would update external schema {old.schema_name}")
                return self._record(ExecutionResult(
                    success=True,
                    operation=OperationType.UPDATE,
                    resource_type=self.get_resource_type(),
                    resource_name=resource_name,
                    message=f"Would update: {changes} (dry run)",
                    changes=changes,
                    identifier=identifier,
                ))

            with self.warehouse.transaction() as tx:
                if "schema_name" in changes:
                    statement = sql.rename_schema(old.schema_name, new.schema_name)
                    logger.info(f"Renaming external schema {old.schema_name} to {new.schema_name}")
                    try:
                        tx.execute(statement)
                    except SQLAlchemyError as e:
                        raise StatementError(f"Error {statement.description}: {e}", identifier=identifier) from e

                if "owner" in changes:
                    set_owner(tx, new.schema_name, new.owner)

                try:
                    with self.warehouse.session() as session:
                        live = read_state(session, identifier)
                except NotFoundError as e:
                    raise NotFoundError(
                        f"Error verifying update of external schema {resource_name}, rolling back: {e}",
                        identifier=identifier,
                    ) from e
                except StorageAccessError as e:
                    raise StorageAccessError(
                        f"Error verifying update of external schema {resource_name}, rolling back: {e}",
                        identifier=identifier,
                    ) from e

            duration = time.time() - start_time
            return self._record(ExecutionResult(
                success=True,
                operation=OperationType.UPDATE,
                resource_type=self.get_resource_type(),
                resource_name=live.schema_name,
                message=f"Updated: {changes}",
                duration_seconds=duration,
                changes=changes,
                identifier=identifier,
                state=new.with_live_state(live),
            ))

        except Exception as e:
            return self._handle_error(OperationType.UPDATE, resource_name, e)

    def delete(self, resource: ExternalSchema) -> ExecutionResult:
        """Drop the schema, cascading to dependent objects if configured."""
        start_time = time.time()
        resource_name = resource.schema_name

        try:
            if self.dry_run:
                logger.info(f"[DRY RUN] Would drop external schema {resource_name}")
                return self._record(ExecutionResult(
                    success=True,
                    operation=OperationType.DELETE,
                    resource_type=self.get_resource_type(),
                    resource_name=resource_name,
                    message="Would be deleted (dry run)",
                    identifier=resource.identifier,
                ))

            statement = sql.drop_schema(resource_name, cascade=resource.cascade_on_delete)
            with self.warehouse.session() as session:
                logger.info(f"Dropping external schema {resource_name}")
                try:
                    session.execute(statement)
                except SQLAlchemyError as e:
                    raise DeleteError(f"Error {statement.description}: {e}", identifier=resource.identifier) from e

            duration = time.time() - start_time
            return self._record(ExecutionResult(
                success=True,
                operation=OperationType.DELETE,
                resource_type=self.get_resource_type(),
                resource_name=resource_name,
                message="Deleted successfully",
                duration_seconds=duration,
                identifier=resource.identifier,
            ))

        except Exception as e:
            return self._handle_error(OperationType.DELETE, resource_name, e)

    def plan(self, desired: ExternalSchema, identifier: Optional[int] = None) -> ExecutionPlan:
        """Describe what reconcile() would do, without changing anything."""
        plan = ExecutionPlan()
        identifier = self._locate(desired, identifier)

        if identifier is None:
            plan.add_operation(OperationType.CREATE, self.get_resource_type(), desired.schema_name)
            return plan

        live = self.read(identifier)
        immutable = live.immutable_changes(desired)
        if immutable:
            plan.add_operation(
                OperationType.REPLACE, self.get_resource_type(), live.schema_name, immutable, identifier
            )
        elif live.diff(desired):
            plan.add_operation(
                OperationType.UPDATE, self.get_resource_type(), live.schema_name, live.diff(desired), identifier
            )
        else:
            plan.add_operation(OperationType.NO_OP, self.get_resource_type(), live.schema_name, identifier=identifier)
        return plan

    def reconcile(self, desired: ExternalSchema, identifier: Optional[int] = None) -> ExecutionResult:
        """
        Converge the live schema to the desired configuration.

        Creates the schema when it is absent, renames/reowns it when those
        differ, and refuses in-place changes to database_name or iam_role.
        """
        try:
            identifier = self._locate(desired, identifier)
            live = self.read(identifier) if identifier is not None else None
        except Exception as e:
            if isinstance(e, RedkitError) and e.identifier is None:
                e.identifier = identifier
            operation = OperationType.UPDATE if identifier is not None else OperationType.CREATE
            return self._handle_error(operation, desired.schema_name, e)

        if live is None:
            return self.create(desired)

        current = live.model_copy(update={"cascade_on_delete": desired.cascade_on_delete})
        return self.update(identifier, current, desired)

    def _locate(self, desired: ExternalSchema, identifier: Optional[int]) -> Optional[int]:
        """Find the oid to reconcile against, or None if the schema must be created."""
        if identifier is not None:
            if self.exists(identifier):
                return identifier
            logger.info(f"External schema with oid {identifier} no longer exists")
            return None

        with self.warehouse.session() as session:
            try:
                found = resolve_identifier_by_name(session, desired.schema_name)
            except NotFoundError:
                return None
        logger.info(f"Schema {desired.schema_name} already exists with oid {found}, adopting it")
        return found
