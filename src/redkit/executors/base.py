"""
Base executor class for warehouse object lifecycle operations.

Provides common functionality for all executors including error handling,
dry-run support, result bookkeeping and execution plans.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from redkit.errors import (
    CreateError,
    DeleteError,
    ImmutableAttributeError,
    NotFoundError,
    OwnerResolutionError,
    PropagationTimeoutError,
    StatementError,
    StorageAccessError,
)
from redkit.warehouse import Warehouse

logger = logging.getLogger(__name__)

T = TypeVar('T')  # Generic type for models


class OperationType(str, Enum):
    """Types of operations that can be performed."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    REPLACE = "REPLACE"
    DELETE = "DELETE"
    NO_OP = "NO_OP"
    SKIPPED = "SKIPPED"


@dataclass
class ExecutionResult:
    """Result of an execution operation."""

    success: bool
    operation: OperationType
    resource_type: str
    resource_name: str
    message: str = ""
    error: Optional[Exception] = None
    duration_seconds: float = 0.0
    changes: Dict[str, Any] = field(default_factory=dict)
    identifier: Optional[int] = None
    state: Optional[Any] = None

    def __str__(self) -> str:
        """String representation of the result."""
        status = "✅" if self.success else "❌"
        return (
            f"{status} {self.operation.value} {self.resource_type} "
            f"{self.resource_name}: {self.message}"
        )


@dataclass
class ExecutionPlan:
    """Execution plan showing what will be done."""

    operations: List[ExecutionResult] = field(default_factory=list)

    def add_operation(
        self,
        operation: OperationType,
        resource_type: str,
        resource_name: str,
        changes: Optional[Dict[str, Any]] = None,
        identifier: Optional[int] = None,
    ):
        """Add an operation to the plan."""
        self.operations.append(ExecutionResult(
            success=True,  # Plan assumes success
            operation=operation,
            resource_type=resource_type,
            resource_name=resource_name,
            message="Planned",
            changes=changes or {},
            identifier=identifier,
        ))

    @property
    def has_changes(self) -> bool:
        return any(op.operation != OperationType.NO_OP for op in self.operations)

    def __str__(self) -> str:
        """String representation of the plan."""
        if not self.operations:
            return "No operations planned"

        lines = ["Execution Plan:"]
        for i, op in enumerate(self.operations, 1):
            lines.append(f"  {i}. {op.operation.value} {op.resource_type} {op.resource_name}")
            if op.changes:
                for key, value in op.changes.items():
                    lines.append(f"      {key}: {value}")

        lines.append(f"\nTotal operations: {len(self.operations)}")

        return "\n".join(lines)


class BaseExecutor(ABC, Generic[T]):
    """
    Base class for all warehouse object executors.

    Provides common functionality including:
    - Error handling with descriptive messages
    - Dry-run mode support
    - Result bookkeeping and summaries

    Executors never retry: a failed statement is reported to the caller.
    """

    def __init__(
        self,
        warehouse: Warehouse,
        dry_run: bool = False,
        continue_on_error: bool = False,
    ):
        """
        Initialize the executor.

        Args:
            warehouse: Source of connection and transaction scopes
            dry_run: If True, only show what would be done
            continue_on_error: Return failed results instead of raising
        """
        self.warehouse = warehouse
        self.dry_run = dry_run
        self.continue_on_error = continue_on_error
        self.results: List[ExecutionResult] = []

    @abstractmethod
    def create(self, resource: T) -> ExecutionResult:
        """
        Create a new resource.

        Args:
            resource: The resource to create

        Returns:
            ExecutionResult carrying the assigned identifier and read-back state
        """
        pass

    @abstractmethod
    def read(self, identifier: int) -> T:
        """
        Read the live state of a resource.

        Args:
            identifier: The stable identifier of the resource

        Returns:
            The resource as the warehouse currently reports it
        """
        pass

    @abstractmethod
    def update(self, identifier: int, old: T, new: T) -> ExecutionResult:
        """
        Converge an existing resource from old to new configuration.

        Args:
            identifier: The stable identifier of the resource
            old: The previously applied configuration
            new: The desired configuration

        Returns:
            ExecutionResult carrying the read-back state
        """
        pass

    @abstractmethod
    def delete(self, resource: T) -> ExecutionResult:
        """
        Delete a resource.

        Args:
            resource: The resource to delete

        Returns:
            ExecutionResult indicating success or failure
        """
        pass

    @abstractmethod
    def exists(self, identifier: int) -> bool:
        """
        Check if a resource exists.

        Args:
            identifier: The stable identifier of the resource

        Returns:
            True if resource exists, False otherwise
        """
        pass

    @abstractmethod
    def get_resource_type(self) -> str:
        """Get the type of resource this executor handles."""
        pass

    def import_state(self, identifier: int) -> T:
        """Seed local state from a bare identifier supplied by an operator."""
        return self.read(identifier)

    def _record(self, result: ExecutionResult) -> ExecutionResult:
        self.results.append(result)
        logger.info(str(result))
        return result

    def _handle_error(
        self,
        operation: OperationType,
        resource_name: str,
        error: Exception
    ) -> ExecutionResult:
        """
        Handle an error during execution.

        Args:
            operation: The operation that failed
            resource_name: Name of the resource
            error: The exception that occurred

        Returns:
            ExecutionResult with error details
        """
        if isinstance(error, NotFoundError):
            message = f"Resource not found: {error}"
        elif isinstance(error, ImmutableAttributeError):
            message = f"Replacement required: {error}"
        elif isinstance(error, OwnerResolutionError):
            message = f"Owner could not be resolved: {error}. Check that the user exists in pg_user."
        elif isinstance(error, PropagationTimeoutError):
            message = f"Catalog propagation timed out: {error}"
        elif isinstance(error, CreateError):
            message = f"Create failed: {error}"
        elif isinstance(error, DeleteError):
            message = f"Delete failed: {error}. Dependent objects require cascade_on_delete."
        elif isinstance(error, StatementError):
            message = f"Statement failed: {error}"
        elif isinstance(error, (StorageAccessError, SQLAlchemyError)):
            message = f"Warehouse access failed: {error}. Check connectivity and credentials."
        else:
            message = str(error)

        result = ExecutionResult(
            success=False,
            operation=operation,
            resource_type=self.get_resource_type(),
            resource_name=resource_name,
            message=message,
            error=error,
            identifier=getattr(error, "identifier", None),
        )

        self.results.append(result)
        logger.error(f"Operation failed: {result}")

        if not self.continue_on_error:
            raise error

        return result

    def get_summary(self) -> str:
        """
        Get a summary of execution results.

        Returns:
            Summary string
        """
        if not self.results:
            return "No operations performed"

        successful = sum(1 for r in self.results if r.success)
        failed = sum(1 for r in self.results if not r.success)

        lines = [
            "Execution Summary:",
            f"  Total operations: {len(self.results)}",
            f"  Successful: {successful}",
            f"  Failed: {failed}"
        ]

        if failed > 0:
            lines.append("\nFailed operations:")
            for result in self.results:
                if not result.success:
                    lines.append(f"  - {result}")

        return "\n".join(lines)
