"""
Identity resolution between schema names and pg_namespace oids.

The oid is the stable key for an external schema; names can change.
"""

import logging
import time

from sqlalchemy.exc import SQLAlchemyError

from redkit import sql
from redkit.errors import NotFoundError, PropagationTimeoutError, StorageAccessError
from redkit.warehouse import WarehouseSession

logger = logging.getLogger(__name__)


def resolve_identifier_by_name(session: WarehouseSession, schema_name: str) -> int:
    """
    Look up the oid assigned to a schema name.

    Raises:
        NotFoundError: If no namespace has that name
        StorageAccessError: If the query fails
    """
    statement = sql.select_oid_by_name(schema_name)
    try:
        row = session.fetch_one(statement)
    except SQLAlchemyError as e:
        raise StorageAccessError(f"Error {statement.description}: {e}") from e

    if row is None:
        raise NotFoundError(f"Error {statement.description}: no namespace named {schema_name}")
    return int(row[0])


def check_exists(session: WarehouseSession, identifier: int) -> bool:
    """Return whether a namespace with this oid exists. Zero rows is not an error."""
    statement = sql.select_name_by_oid(identifier)
    try:
        row = session.fetch_one(statement)
    except SQLAlchemyError as e:
        raise StorageAccessError(f"Error {statement.description}: {e}") from e
    return row is not None


def wait_for_identifier(
    session: WarehouseSession,
    schema_name: str,
    timeout_seconds: float,
    poll_interval: float,
) -> int:
    """
    Poll pg_namespace until a freshly created schema becomes visible.

    Catalog changes are not guaranteed to be visible as soon as the CREATE
    statement returns.

    Raises:
        PropagationTimeoutError: If the schema is still missing after the timeout
        StorageAccessError: If a lookup query fails
    """
    start_time = time.monotonic()
    attempt = 0

    while True:
        attempt += 1
        try:
            identifier = resolve_identifier_by_name(session, schema_name)
            logger.debug(f"Schema {schema_name} visible as oid {identifier} after {attempt} attempt(s)")
            return identifier
        except NotFoundError:
            pass

        elapsed = time.monotonic() - start_time
        if elapsed >= timeout_seconds:
            logger.error(f"Timeout waiting for schema {schema_name} after {elapsed:.1f}s")
            raise PropagationTimeoutError(schema_name, timeout_seconds)

        logger.debug(f"Schema {schema_name} not visible yet, retrying in {poll_interval}s")
        time.sleep(poll_interval)
