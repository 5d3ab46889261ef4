"""
Database access for mssqlkit.

Key components:
- Database: Interface scripts program against
- MssqlDatabase: SQL Server implementation on pyodbc
- bind_parameters: Named @Param placeholders to pyodbc positional markers
"""
from .base import Database
from .mssql import MssqlDatabase
from .parameters import SqlParameters, SqlValue, bind_parameters

__all__ = [
    "Database",
    "MssqlDatabase",
    "SqlParameters",
    "SqlValue",
    "bind_parameters",
]
