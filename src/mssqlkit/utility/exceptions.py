"""
Custom exceptions for mssqlkit - clear, actionable error handling.

mssqlkit never recovers from or retries a failed database call. Every
failure is logged with the operation that raised it and then propagated
to the caller, wrapped in one of the exceptions below so scripts can
handle configuration, connection and query failures separately.

Exception Hierarchy:
    MssqlKitError (base)
    ├── ConfigError - Invalid or missing connection string / config file
    └── DatabaseError
        ├── DatabaseConnectionError - Driver failed to open a connection
        └── QueryError - Driver rejected or failed a SQL statement

Usage Guidelines:
    - Always use exception chaining (`raise QueryError(...) from e`) when
      wrapping driver exceptions so the original pyodbc error stays available
      as `__cause__`.
    - A scalar query that returns no rows is not an error; it yields None.
"""
from typing import Optional


class MssqlKitError(Exception):
    """Base exception for all mssqlkit errors."""

    pass


class ConfigError(MssqlKitError):
    """Raised when there's an error in configuration."""

    pass


class DatabaseError(MssqlKitError):
    """Base exception for database-related errors."""

    def __init__(self, message: str, sqlstate: Optional[str] = None):
        super().__init__(message)
        self.sqlstate = sqlstate


class DatabaseConnectionError(DatabaseError):
    """Driver failed to open a connection."""

    pass


class QueryError(DatabaseError):
    """Driver rejected or failed a SQL statement."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        sqlstate: Optional[str] = None,
    ):
        super().__init__(message, sqlstate=sqlstate)
        self.operation = operation
