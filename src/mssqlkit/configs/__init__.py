"""
Configuration for mssqlkit: connection strings, defaults and settings files.
"""
from .connection_string import (
    ensure_driver,
    is_valid_connection_string,
    mask_connection_string,
    parse_connection_string,
)
from .constants import MSSQL_CONNECTION_DEFAULTS, get_mssql_defaults
from .settings import MssqlKitSettings, expand_env_vars

__all__ = [
    "MSSQL_CONNECTION_DEFAULTS",
    "MssqlKitSettings",
    "ensure_driver",
    "expand_env_vars",
    "get_mssql_defaults",
    "is_valid_connection_string",
    "mask_connection_string",
    "parse_connection_string",
]
