"""
Materializes external schema state from the system catalogs.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from redkit import sql
from redkit.errors import NotFoundError, StorageAccessError
from redkit.models import ExternalSchema
from redkit.warehouse import WarehouseSession

logger = logging.getLogger(__name__)


def read_state(session: WarehouseSession, identifier: int) -> ExternalSchema:
    """
    Read the live state of an external schema by oid.

    Joins pg_namespace with svv_external_schemas; the IAM role is taken from
    the ``IAM_ROLE`` key of the esoptions JSON. ``cascade_on_delete`` is not
    stored by the warehouse and is left at its default. Schemas that
    authenticate without an IAM role come back with an empty ``iam_role``.

    Raises:
        NotFoundError: If no external schema has this oid
        StorageAccessError: If the query fails
    """
    statement = sql.select_external_schema(identifier)
    try:
        row = session.fetch_one(statement)
    except SQLAlchemyError as e:
        raise StorageAccessError(f"Error {statement.description}: {e}") from e

    if row is None:
        raise NotFoundError(f"Error {statement.description}: no such external schema")

    # Catalog values are taken verbatim; declared-input validation would
    # strip quoted names such as "ext1 " and reject roleless schemas.
    schema_name, owner, database_name, iam_role = row
    state = ExternalSchema.model_construct(
        identifier=identifier,
        schema_name=schema_name,
        owner=int(owner),
        database_name=database_name,
        iam_role=iam_role,
    )
    logger.debug(f"Read {state}")
    return state
