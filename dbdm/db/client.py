"""Record store facade over a single SQLite connection."""

from __future__ import annotations

import asyncio
import enum
import logging
import uuid
from collections.abc import Mapping
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Union

import aiosqlite
from pydantic import ValidationError

from dbdm.config import DatabaseSettings, get_settings
from dbdm.core.where_compiler import WhereClause, compile_where
from dbdm.db.connection import AiosqliteDriver, Row, StorageDriver
from dbdm.db.models import QueryOptions
from dbdm.errors import (
    ConnectionError,
    InvalidQueryOptions,
    MissingWhereClauseError,
    NotConnectedError,
    StorageError,
)

logger = logging.getLogger(__name__)


def _generate_id() -> str:
    return str(uuid.uuid4())


class ConnectionState(enum.Enum):
    UNCONNECTED = "unconnected"
    CONNECTED = "connected"
    CLOSED = "closed"


class DBClient:
    """Async CRUD client for one SQLite database file.

    Call :meth:`connect` before any other operation and :meth:`close` when
    done, or use the client as an async context manager. A closed client
    cannot be reconnected; create a new instance instead.

    Table names, column names and ``order_by`` expressions are written into
    SQL verbatim. Only values are bound as parameters, so those identifiers
    must come from trusted code.
    """

    def __init__(
        self,
        config: Union[DatabaseSettings, str, None] = None,
        *,
        driver: Optional[StorageDriver] = None,
        id_factory: Callable[[], str] = _generate_id,
    ) -> None:
        if config is None:
            config = get_settings().db
        elif isinstance(config, str):
            config = DatabaseSettings(path=config)
        self.config = config
        self.driver: StorageDriver = driver or AiosqliteDriver(
            timeout=config.timeout, foreign_keys=config.foreign_keys
        )
        self.id_factory = id_factory
        self.state = ConnectionState.UNCONNECTED
        self._handle: Any = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> "DBClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    async def connect(self) -> None:
        """Open the configured database file."""
        if self.state is ConnectionState.CONNECTED:
            return
        if self.state is ConnectionState.CLOSED:
            raise ConnectionError("Client has been closed; create a new DBClient to reconnect")
        try:
            self._handle = await self.driver.open(self.config.path)
        except (aiosqlite.Error, OSError) as e:
            raise ConnectionError(f"Failed to connect to database: {e}") from e
        self.state = ConnectionState.CONNECTED
        logger.info("Connected to database %s", self.config.path)

    async def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        if self.state is not ConnectionState.CONNECTED:
            return
        async with self._lock:
            # another close() may have finished while we waited for the lock
            if self.state is not ConnectionState.CONNECTED:
                return
            handle, self._handle = self._handle, None
            self.state = ConnectionState.CLOSED
            await self.driver.close(handle)
        logger.info("Closed database %s", self.config.path)

    @asynccontextmanager
    async def _operation(self) -> AsyncIterator[Any]:
        """Hold the client lock for one operation and yield the live handle."""
        if self.state is not ConnectionState.CONNECTED:
            raise NotConnectedError()
        async with self._lock:
            # close() may have run while we waited for the lock
            if self.state is not ConnectionState.CONNECTED:
                raise NotConnectedError()
            yield self._handle

    async def create_table(self, table: str, columns: Mapping[str, str]) -> List[Row]:
        """Create *table* if it does not exist.

        *columns* maps column names to type declarations, e.g.
        ``{"id": "TEXT PRIMARY KEY", "age": "INTEGER"}``. Returns an empty
        list on success.
        """
        async with self._operation() as handle:
            column_definitions = ", ".join(f"{name} {decl}" for name, decl in columns.items())
            query = f"CREATE TABLE IF NOT EXISTS {table} ({column_definitions})"
            try:
                await self.driver.execute(handle, query)
            except aiosqlite.Error as e:
                raise StorageError(f"Failed to create table: {e}") from e
        return []

    async def find(
        self,
        table: str,
        *,
        where: Optional[Mapping[str, Any]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[str] = None,
    ) -> List[Row]:
        """Return every row of *table* matching *where*."""
        async with self._operation() as handle:
            options = _query_options(limit=limit, offset=offset, order_by=order_by)
            query, params = _select(table, compile_where(where), options)
            try:
                return await self.driver.query_all(handle, query, params)
            except aiosqlite.Error as e:
                raise StorageError(f"Failed to find records: {e}") from e

    async def find_one(
        self,
        table: str,
        *,
        where: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
    ) -> Optional[Row]:
        """Return the first row matching *where*, or ``None``."""
        async with self._operation() as handle:
            options = _query_options(limit=1, order_by=order_by)
            return await self._find_one(handle, table, compile_where(where), options)

    async def _find_one(
        self, handle: Any, table: str, clause: WhereClause, options: QueryOptions
    ) -> Optional[Row]:
        query, params = _select(table, clause, options)
        try:
            return await self.driver.query_one(handle, query, params)
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to find record: {e}") from e

    async def create(self, table: str, data: Dict[str, Any]) -> Any:
        """Insert *data* as a new row and return its id.

        A missing or ``None`` ``id`` is replaced by a generated one, written
        back into *data*. Other falsy ids such as ``0`` or ``""`` are kept.
        """
        async with self._operation() as handle:
            if data.get("id") is None:
                data["id"] = self.id_factory()
            columns = ", ".join(data.keys())
            placeholders = ", ".join("?" for _ in data)
            query = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"
            try:
                await self.driver.execute(handle, query, tuple(data.values()))
            except aiosqlite.Error as e:
                raise StorageError(f"Failed to create record: {e}") from e
            created = await self._find_one(
                handle, table, compile_where({"id": data["id"]}), QueryOptions(limit=1)
            )
        if created is None:
            raise StorageError("Failed to create record: Record not found after insertion")
        return data["id"]

    async def update(self, table: str, where: Mapping[str, Any], data: Mapping[str, Any]) -> int:
        """Set *data* on every row matching *where* and return the row count.

        An empty *where* updates every row in the table.
        """
        async with self._operation() as handle:
            clause = compile_where(where)
            set_clause = ", ".join(f"{column} = ?" for column in data)
            query = f"UPDATE {table} SET {set_clause} {clause.sql}".rstrip()
            params = (*data.values(), *clause.params)
            try:
                return await self.driver.execute(handle, query, params)
            except aiosqlite.Error as e:
                raise StorageError(f"Failed to update records: {e}") from e

    async def delete(self, table: str, where: Mapping[str, Any]) -> int:
        """Delete rows matching *where* and return the row count.

        Refuses to run without a condition; pass an explicit one to clear a table.
        """
        async with self._operation() as handle:
            clause = compile_where(where)
            if not clause:
                raise MissingWhereClauseError()
            query = f"DELETE FROM {table} {clause.sql}"
            try:
                return await self.driver.execute(handle, query, clause.params)
            except aiosqlite.Error as e:
                raise StorageError(f"Failed to delete records: {e}") from e


def _query_options(**kwargs: Any) -> QueryOptions:
    try:
        return QueryOptions(**kwargs)
    except ValidationError as e:
        raise InvalidQueryOptions(f"Invalid query options: {e}") from e


def _select(table: str, clause: WhereClause, options: QueryOptions) -> tuple:
    query = f"SELECT * FROM {table}"
    if clause:
        query += f" {clause.sql}"
    if options.order_by:
        query += f" ORDER BY {options.order_by}"
    if options.limit is not None:
        query += f" LIMIT {options.limit}"
    elif options.offset is not None:
        # SQLite only accepts OFFSET inside a LIMIT clause; -1 means unbounded.
        query += " LIMIT -1"
    if options.offset is not None:
        query += f" OFFSET {options.offset}"
    return query, clause.params
