"""Exception hierarchy raised by the data-access layer."""

from __future__ import annotations

__all__ = [
    "DatabaseError",
    "NotConnectedError",
    "ConnectionError",
    "UnknownOperator",
    "MissingWhereClauseError",
    "StorageError",
    "InvalidQueryOptions",
]


class DatabaseError(Exception):
    """Base class for every error raised by :mod:`dbdm`."""


class NotConnectedError(DatabaseError):
    """Raised when a data operation runs before ``connect`` or after ``close``."""

    def __init__(self, message: str = "Database not connected. Call connect() first.") -> None:
        super().__init__(message)


class ConnectionError(DatabaseError):
    """Raised when the database file cannot be opened."""


class UnknownOperator(DatabaseError):
    """Raised when a condition uses an operator outside the supported set.

    ``operator`` holds the offending key.
    """

    def __init__(self, operator: str) -> None:
        super().__init__(f"Unknown operator: {operator}")
        self.operator = operator


class MissingWhereClauseError(DatabaseError):
    """Raised when ``delete`` is called without a condition."""

    def __init__(self, message: str = "Delete operation requires where clause") -> None:
        super().__init__(message)


class StorageError(DatabaseError):
    """Raised when the storage driver fails while executing a statement."""


class InvalidQueryOptions(DatabaseError):
    """Raised when ``limit``, ``offset`` or ``order_by`` fail validation."""
