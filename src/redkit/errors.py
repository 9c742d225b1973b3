"""
Error taxonomy for external schema management.

Every error carries a description of the attempted operation. The underlying
driver error, when there is one, is chained as ``__cause__``.
"""

from typing import Optional


class RedkitError(Exception):
    """Base class for all redkit errors."""

    def __init__(self, message: str, identifier: Optional[int] = None):
        self.identifier = identifier
        super().__init__(message)


class NotFoundError(RedkitError):
    """Raised when an expected catalog row is missing (object gone, prune state)."""


class StorageAccessError(RedkitError):
    """Raised when a catalog query or connection fails."""


class StatementError(RedkitError):
    """Raised when a DDL statement fails to execute."""


class CreateError(StatementError):
    """Raised when the CREATE EXTERNAL SCHEMA statement fails."""


class DeleteError(StatementError):
    """Raised when the DROP SCHEMA statement fails."""


class OwnerResolutionError(RedkitError):
    """Raised when an owner id does not resolve to exactly one principal name."""

    def __init__(self, owner_id: int, names: Optional[list] = None):
        self.owner_id = owner_id
        self.names = list(names or [])
        if not self.names:
            detail = "no principal name"
        else:
            detail = f"{len(self.names)} principal names {self.names}"
        super().__init__(f"Owner id {owner_id} resolved to {detail}")


class PropagationTimeoutError(RedkitError):
    """Raised when a created schema does not become visible in the catalog in time."""

    def __init__(self, schema_name: str, timeout_seconds: float):
        self.schema_name = schema_name
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"External schema {schema_name} not visible in pg_namespace "
            f"after {timeout_seconds:.1f}s"
        )


class ImmutableAttributeError(RedkitError):
    """Raised when an update would change a write-once attribute."""

    def __init__(self, schema_name: str, changes: dict, identifier: Optional[int] = None):
        self.schema_name = schema_name
        self.changes = changes
        fields = ", ".join(sorted(changes))
        super().__init__(
            f"External schema {schema_name} cannot change {fields} in place; "
            "it must be dropped and recreated",
            identifier=identifier,
        )
