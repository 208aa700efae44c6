"""dbdm: a lightweight async data-access layer over SQLite.

Applications that want the default log format call :func:`configure_logging`
once at startup; the library itself only emits records.
"""

from dbdm.config import AppSettings, DatabaseSettings, get_settings
from dbdm.core.where_compiler import WhereClause, compile_where
from dbdm.db.client import ConnectionState, DBClient
from dbdm.db.connection import AiosqliteDriver, StorageDriver
from dbdm.db.models import QueryOptions
from dbdm.errors import (
    ConnectionError,
    DatabaseError,
    InvalidQueryOptions,
    MissingWhereClauseError,
    NotConnectedError,
    StorageError,
    UnknownOperator,
)
from dbdm.log import configure_logging

__all__ = [
    "AiosqliteDriver",
    "AppSettings",
    "ConnectionError",
    "ConnectionState",
    "DBClient",
    "DatabaseError",
    "DatabaseSettings",
    "InvalidQueryOptions",
    "MissingWhereClauseError",
    "NotConnectedError",
    "QueryOptions",
    "StorageDriver",
    "StorageError",
    "UnknownOperator",
    "WhereClause",
    "compile_where",
    "configure_logging",
    "get_settings",
]
