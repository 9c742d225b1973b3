"""
Principal name lookup and schema ownership transfer.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from sqlalchemy.exc import SQLAlchemyError

from redkit import sql
from redkit.errors import OwnerResolutionError, StatementError, StorageAccessError
from redkit.warehouse import WarehouseSession

logger = logging.getLogger(__name__)


def lookup_usernames(session: WarehouseSession, user_ids: Sequence[int]) -> List[str]:
    """
    Resolve usesysids to user names, one name per id, in the order given.

    Raises:
        OwnerResolutionError: If an id matches no user, or more than one
        StorageAccessError: If the query fails
    """
    if not user_ids:
        return []

    statement = sql.select_usernames(user_ids)
    try:
        rows = session.fetch_all(statement)
    except SQLAlchemyError as e:
        raise StorageAccessError(f"Error {statement.description}: {e}") from e

    names_by_id: Dict[int, List[str]] = defaultdict(list)
    for usesysid, usename in rows:
        names_by_id[int(usesysid)].append(usename)

    names = []
    for user_id in user_ids:
        matches = names_by_id.get(user_id, [])
        if len(matches) != 1:
            raise OwnerResolutionError(user_id, matches)
        names.append(matches[0])
    return names


def set_owner(session: WarehouseSession, schema_name: str, owner_id: int) -> str:
    """
    Transfer ownership of a schema to the user with the given usesysid.

    ``schema_name`` must be the schema's current name, so a rename in the same
    change has to run first.

    Returns:
        The resolved principal name

    Raises:
        OwnerResolutionError: If the id does not resolve to exactly one user
        StatementError: If the ALTER SCHEMA statement fails
    """
    principal_name = lookup_usernames(session, [owner_id])[0]

    statement = sql.alter_schema_owner(schema_name, principal_name)
    logger.info(f"Setting owner of schema {schema_name} to {principal_name} ({owner_id})")
    try:
        session.execute(statement)
    except SQLAlchemyError as e:
        raise StatementError(f"Error {statement.description}: {e}") from e
    return principal_name
