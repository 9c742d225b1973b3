"""
External schema model.

An external schema is a Redshift namespace whose tables are backed by an AWS
Glue Data Catalog database instead of native storage. The warehouse assigns
the ``identifier`` (the pg_namespace oid) at creation; it is the only durable
key, since ``schema_name`` can be renamed.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import Field, field_validator

from .base import BaseWarehouseModel

# Redshift identifiers are limited to 127 bytes
MAX_IDENTIFIER_LENGTH = 127


class ExternalSchema(BaseWarehouseModel):
    """
    Declared or observed state of a Redshift external schema.

    ``database_name`` and ``iam_role`` are write-once: changing either requires
    dropping and recreating the schema. ``owner`` is a numeric user id
    (``usesysid``); when left unset the session user becomes the owner and the
    value is only known after reading the schema back.
    """

    MUTABLE_FIELDS: ClassVar[Tuple[str, ...]] = ("schema_name", "owner")
    IMMUTABLE_FIELDS: ClassVar[Tuple[str, ...]] = ("database_name", "iam_role")

    schema_name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_IDENTIFIER_LENGTH,
        description="The name of the external schema in Redshift"
    )
    database_name: str = Field(
        ...,
        min_length=1,
        description="The name of the database in the AWS Glue Data Catalog. Immutable after creation."
    )
    iam_role: str = Field(
        ...,
        min_length=1,
        description="ARN of the IAM role with S3 and Glue Data Catalog access. Immutable after creation."
    )
    owner: Optional[int] = Field(
        None,
        ge=0,
        description="usesysid of the owner; defaults to the session user"
    )
    cascade_on_delete: bool = Field(
        False,
        description="Drop all objects in the schema (tables, functions) on delete"
    )
    identifier: Optional[int] = Field(
        None,
        description="pg_namespace oid, assigned by the warehouse at creation"
    )

    @field_validator("schema_name", "database_name", "iam_role")
    @classmethod
    def _no_nul(cls, v: str) -> str:
        if "\x00" in v:
            raise ValueError("value must not contain NUL characters")
        return v

    def diff(self, desired: ExternalSchema) -> Dict[str, Dict[str, Any]]:
        """Return the mutable-field changes needed to turn self into desired."""
        changes = {}
        if desired.schema_name != self.schema_name:
            changes["schema_name"] = {"from": self.schema_name, "to": desired.schema_name}
        # An unset desired owner means "whatever the warehouse picked"
        if desired.owner is not None and desired.owner != self.owner:
            changes["owner"] = {"from": self.owner, "to": desired.owner}
        return changes

    def immutable_changes(self, desired: ExternalSchema) -> Dict[str, Dict[str, Any]]:
        """Return changes to write-once fields (these force a replacement)."""
        changes = {}
        for name in self.IMMUTABLE_FIELDS:
            current, wanted = getattr(self, name), getattr(desired, name)
            if current != wanted:
                changes[name] = {"from": current, "to": wanted}
        return changes

    def with_live_state(self, live: ExternalSchema) -> ExternalSchema:
        """Overwrite the server-owned fields with a freshly read state."""
        return self.model_copy(update={
            "identifier": live.identifier,
            "schema_name": live.schema_name,
            "owner": live.owner,
            "database_name": live.database_name,
            "iam_role": live.iam_role,
        })

    def __str__(self) -> str:
        oid = self.identifier if self.identifier is not None else "unassigned"
        return f"ExternalSchema '{self.schema_name}' (oid={oid}, database={self.database_name})"
