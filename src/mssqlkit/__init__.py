"""
SQL Server connectivity and schema introspection for scripts.
"""
from .configs import MssqlKitSettings
from .connections import Database, MssqlDatabase
from .core import Err, Ok, TabularResult
from .schema import Attribute, Entity, Relationship
from .utility.exceptions import (
    ConfigError,
    DatabaseConnectionError,
    DatabaseError,
    MssqlKitError,
    QueryError,
)

__version__ = "1.0.0"

__all__ = [
    # Database
    "Database",
    "MssqlDatabase",
    "MssqlKitSettings",
    # Results and schema models
    "TabularResult",
    "Ok",
    "Err",
    "Entity",
    "Attribute",
    "Relationship",
    # Errors
    "MssqlKitError",
    "ConfigError",
    "DatabaseError",
    "DatabaseConnectionError",
    "QueryError",
]
