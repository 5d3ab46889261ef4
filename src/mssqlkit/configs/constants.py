"""
Shared constants and default configuration for SQL Server connections.
"""

from pydantic import BaseModel, Field

CONFIG_FILE_NAME = "mssqlkit.yml"
CONNECTION_STRING_ENV = "MSSQLKIT_CONNECTION_STRING"


class MssqlConnectionDefaults(BaseModel):
    """Default MSSQL connection configuration."""

    driver: str = Field(
        default="ODBC Driver 18 for SQL Server",
        description="ODBC driver used when the connection string names none",
    )
    timeout: int = Field(default=30, ge=1, description="Login timeout in seconds")
    autocommit: bool = Field(
        default=True, description="Commit each statement as it executes"
    )


MSSQL_CONNECTION_DEFAULTS = MssqlConnectionDefaults()


def get_mssql_defaults() -> dict:
    """
    Get default MSSQL connection options.

    Returns:
        Dictionary with default MSSQL connection options
    """
    return MSSQL_CONNECTION_DEFAULTS.model_dump()
