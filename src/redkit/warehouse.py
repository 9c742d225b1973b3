"""
Warehouse connection scopes.

Every core operation receives its session explicitly. A ``Warehouse`` hands out
two kinds of scope:

- ``session()``: a plain autocommit connection, each statement stands alone
- ``transaction()``: a single all-or-nothing transaction, committed when the
  block exits normally and rolled back when it raises

Both scopes return their connection to the pool on every exit path.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Protocol, Sequence

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import WarehouseConfig
from .errors import StorageAccessError
from .sql import Statement

logger = logging.getLogger(__name__)

Row = Sequence[Any]


class WarehouseSession(Protocol):
    """The statement surface the core needs from a connection."""

    def execute(self, statement: Statement) -> None:
        ...

    def fetch_one(self, statement: Statement) -> Optional[Row]:
        ...

    def fetch_all(self, statement: Statement) -> List[Row]:
        ...


class Warehouse(Protocol):
    """Hands out connection scopes from a pool."""

    def session(self):
        """Context manager yielding a plain autocommit WarehouseSession."""
        ...

    def transaction(self):
        """Context manager yielding a transactional WarehouseSession."""
        ...


class SqlAlchemySession:
    """WarehouseSession over a SQLAlchemy Connection."""

    def __init__(self, connection: Connection):
        self._connection = connection

    def execute(self, statement: Statement) -> None:
        logger.debug(f"Executing SQL: {statement.for_log()}")
        if statement.is_ddl:
            # Sent verbatim: DDL literals must not be parsed for bind markers
            self._connection.exec_driver_sql(statement.sql)
        else:
            self._connection.execute(statement.to_text(), statement.params)

    def fetch_one(self, statement: Statement) -> Optional[Row]:
        logger.debug(f"Querying: {statement.for_log()}")
        row = self._connection.execute(statement.to_text(), statement.params).first()
        return tuple(row) if row is not None else None

    def fetch_all(self, statement: Statement) -> List[Row]:
        logger.debug(f"Querying: {statement.for_log()}")
        result = self._connection.execute(statement.to_text(), statement.params)
        return [tuple(row) for row in result]


class SqlAlchemyWarehouse:
    """Warehouse backed by a pooled SQLAlchemy engine."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_config(cls, config: WarehouseConfig, **engine_kwargs: Any) -> SqlAlchemyWarehouse:
        engine_kwargs.setdefault("pool_pre_ping", True)
        engine = create_engine(config.to_url(), **engine_kwargs)
        logger.info(f"Created engine for {config.user}@{config.host}:{config.port}/{config.database}")
        return cls(engine)

    @contextmanager
    def session(self) -> Iterator[SqlAlchemySession]:
        try:
            connection = self.engine.connect().execution_options(isolation_level="AUTOCOMMIT")
        except SQLAlchemyError as e:
            raise StorageAccessError(f"Error acquiring warehouse connection: {e}") from e

        try:
            yield SqlAlchemySession(connection)
        finally:
            connection.close()

    @contextmanager
    def transaction(self) -> Iterator[SqlAlchemySession]:
        try:
            connection = self.engine.connect()
        except SQLAlchemyError as e:
            raise StorageAccessError(f"Error acquiring warehouse connection: {e}") from e

        try:
            try:
                tx = connection.begin()
            except SQLAlchemyError as e:
                raise StorageAccessError(f"Error beginning transaction: {e}") from e

            try:
                yield SqlAlchemySession(connection)
            except BaseException:
                logger.info("Rolling back transaction")
                tx.rollback()
                raise

            try:
                tx.commit()
            except SQLAlchemyError as e:
                raise StorageAccessError(f"Error committing transaction: {e}") from e
        finally:
            connection.close()

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()
