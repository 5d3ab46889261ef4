"""
Utility functions and classes for mssqlkit.
"""
from .exceptions import (
    ConfigError,
    DatabaseConnectionError,
    DatabaseError,
    MssqlKitError,
    QueryError,
)

__all__ = [
    "MssqlKitError",
    "ConfigError",
    "DatabaseError",
    "DatabaseConnectionError",
    "QueryError",
]
