"""
Statement builders for external schema DDL and catalog lookups.

Identifiers are quoted as identifiers (only when Redshift requires it) using
SQLAlchemy's PostgreSQL identifier preparer. Literals embedded in DDL are
escaped as string literals, since Redshift does not accept bind parameters
in DDL. Catalog lookups always use bound parameters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Sequence, Tuple

from sqlalchemy import bindparam, text
from sqlalchemy.dialects import postgresql
from sqlalchemy.sql.elements import TextClause

_PREPARER = postgresql.dialect().identifier_preparer

MASK = "***"


@dataclass(frozen=True)
class Statement:
    """A single SQL statement plus what it is trying to do."""

    sql: str
    description: str
    params: Dict[str, Any] = field(default_factory=dict)
    expanding: Tuple[str, ...] = ()
    sensitive: Tuple[str, ...] = ()

    @property
    def is_ddl(self) -> bool:
        """DDL carries no bind parameters and is sent to the driver verbatim."""
        return not self.params

    def to_text(self) -> TextClause:
        """Build the SQLAlchemy text construct for a parameterized statement."""
        clause = text(self.sql)
        if self.expanding:
            clause = clause.bindparams(*(bindparam(name, expanding=True) for name in self.expanding))
        return clause

    def for_log(self) -> str:
        """Statement text with sensitive literals masked."""
        sanitized = self.sql
        for value in self.sensitive:
            if value:
                # The SQL holds the escaped literal, not the raw value
                sanitized = sanitized.replace(quote_literal(value)[1:-1], MASK)
        if self.params:
            return f"{sanitized} {self.params}"
        return sanitized

    def __str__(self) -> str:
        return self.sql


def quote_identifier(name: str) -> str:
    """Quote a schema or user name for use as an SQL identifier."""
    if not name:
        raise ValueError("identifier must not be empty")
    return _PREPARER.quote(name)


def quote_literal(value: str) -> str:
    """Escape a value as a Redshift string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "''")
    return f"'{escaped}'"


# =============================================================================
# DDL
# =============================================================================

def create_external_schema(schema_name: str, database_name: str, iam_role: str) -> Statement:
    sql = (
        f"CREATE EXTERNAL SCHEMA {quote_identifier(schema_name)} "
        f"FROM DATA CATALOG DATABASE {quote_literal(database_name)} "
        f"IAM_ROLE {quote_literal(iam_role)}"
    )
    return Statement(
        sql=sql,
        description=f"creating external schema {schema_name}",
        sensitive=(iam_role,),
    )


def rename_schema(old_name: str, new_name: str) -> Statement:
    return Statement(
        sql=f"ALTER SCHEMA {quote_identifier(old_name)} RENAME TO {quote_identifier(new_name)}",
        description=f"renaming external schema {old_name} to {new_name}",
    )


def alter_schema_owner(schema_name: str, principal_name: str) -> Statement:
    return Statement(
        sql=f"ALTER SCHEMA {quote_identifier(schema_name)} OWNER TO {quote_identifier(principal_name)}",
        description=f"updating external schema {schema_name} owner to {principal_name}",
    )


def drop_schema(schema_name: str, cascade: bool = False) -> Statement:
    sql = f"DROP SCHEMA {quote_identifier(schema_name)}"
    if cascade:
        sql += " CASCADE"
    return Statement(sql=sql, description=f"dropping external schema {schema_name}")


# =============================================================================
# CATALOG QUERIES
# =============================================================================

def select_oid_by_name(schema_name: str) -> Statement:
    return Statement(
        sql="SELECT oid FROM pg_namespace WHERE nspname = :schema_name",
        description=f"reading oid for external schema {schema_name}",
        params={"schema_name": schema_name},
    )


def select_name_by_oid(oid: int) -> Statement:
    return Statement(
        sql="SELECT nspname FROM pg_namespace WHERE oid = :oid",
        description=f"reading external schema with oid {oid}",
        params={"oid": oid},
    )


def select_external_schema(oid: int) -> Statement:
    return Statement(
        sql=(
            "SELECT nspname, nspowner, databasename, "
            "json_extract_path_text(esoptions, 'IAM_ROLE') "
            "FROM pg_namespace JOIN svv_external_schemas ON pg_namespace.oid = esoid "
            "WHERE pg_namespace.oid = :oid"
        ),
        description=f"reading external schema information for oid {oid}",
        params={"oid": oid},
    )


def select_usernames(user_ids: Iterable[int]) -> Statement:
    ids: Sequence[int] = list(user_ids)
    return Statement(
        sql="SELECT usesysid, usename FROM pg_user WHERE usesysid IN :user_ids",
        description=f"resolving user names for usesysid {ids}",
        params={"user_ids": ids},
        expanding=("user_ids",),
    )
