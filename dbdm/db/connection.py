"""Storage driver used by :class:`~dbdm.db.client.DBClient`.

The client talks to storage only through the :class:`StorageDriver` protocol.
:class:`AiosqliteDriver` is the default implementation: it wraps an
``aiosqlite`` connection, returns rows as plain dictionaries and commits after
every write statement.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Protocol, Sequence

import aiosqlite

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class StorageDriver(Protocol):
    """Operations the client needs from an embedded SQL engine.

    Implementations signal failures with ``sqlite3.Error`` subclasses (which
    ``aiosqlite`` re-exports), so the client can wrap them uniformly.
    """

    async def open(self, path: str) -> Any:
        """Open *path* and return a connection handle."""
        ...

    async def execute(self, handle: Any, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a write statement, commit it and return the affected row count."""
        ...

    async def query_all(self, handle: Any, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        ...

    async def query_one(self, handle: Any, sql: str, params: Sequence[Any] = ()) -> Optional[Row]:
        ...

    async def close(self, handle: Any) -> None:
        ...


class AiosqliteDriver:
    """SQLite driver backed by ``aiosqlite``.

    ``aiosqlite`` runs every request for a connection on one worker thread, so
    single statements never interleave. Multi-statement operations still need
    the caller to serialize access to the handle.
    """

    def __init__(self, timeout: float = 5.0, foreign_keys: bool = True) -> None:
        self.timeout = timeout
        self.foreign_keys = foreign_keys

    async def open(self, path: str) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(path, timeout=self.timeout)
        try:
            conn.row_factory = aiosqlite.Row
            if self.foreign_keys:
                await conn.execute("PRAGMA foreign_keys = ON;")
                await conn.commit()
        except aiosqlite.Error:
            await conn.close()
            raise
        logger.debug("Opened database connection to %s", path)
        return conn

    async def execute(self, handle: aiosqlite.Connection, sql: str, params: Sequence[Any] = ()) -> int:
        start_time = time.monotonic()
        cursor = await handle.execute(sql, tuple(params))
        try:
            affected = cursor.rowcount
        finally:
            await cursor.close()
        await handle.commit()
        logger.debug(
            "Executed statement in %.3f seconds (%d params, %d rows affected)",
            time.monotonic() - start_time,
            len(params),
            affected,
        )
        return max(affected, 0)

    async def query_all(
        self, handle: aiosqlite.Connection, sql: str, params: Sequence[Any] = ()
    ) -> List[Row]:
        async with handle.execute(sql, tuple(params)) as cursor:
            rows = await cursor.fetchall()
        logger.debug("Query returned %d rows (%d params)", len(rows), len(params))
        return [dict(row) for row in rows]

    async def query_one(
        self, handle: aiosqlite.Connection, sql: str, params: Sequence[Any] = ()
    ) -> Optional[Row]:
        async with handle.execute(sql, tuple(params)) as cursor:
            row = await cursor.fetchone()
        return dict(row) if row is not None else None

    async def close(self, handle: aiosqlite.Connection) -> None:
        await handle.close()
        logger.debug("Closed database connection")
