"""
Settings for mssqlkit - where the connection string and schema defaults live.

Settings are read from an `mssqlkit.yml` file found by walking up from the
current directory, or from the MSSQLKIT_CONNECTION_STRING environment
variable when no file exists:

    ```yaml
    connection_string: "Server=tcp:myserver.database.windows.net,1433;Database=sales;Authentication=ActiveDirectoryInteractive"
    default_schema: dbo
    cleaning_token: tbl_
    ```

String values may reference environment variables with `${VAR}` or
`${VAR:-default}`. The host-style key `DefaultConnectionString` is accepted
as an alias of `connection_string`.
"""
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from mssqlkit.utility.exceptions import ConfigError

from .connection_string import is_valid_connection_string
from .constants import (
    CONFIG_FILE_NAME,
    CONNECTION_STRING_ENV,
    MSSQL_CONNECTION_DEFAULTS,
)

_ENV_PATTERN = re.compile(r"\$\{([^:}]+)(?::-([^}]*))?\}")


def expand_env_vars(data: Any) -> Any:
    """
    Recursively expand environment variables in configuration data.

    Supports patterns like ${VAR_NAME} and ${VAR_NAME:-default_value}

    Raises:
        ConfigError: If environment variable is not set and no default provided
    """
    if isinstance(data, str):

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2)

            env_value = os.getenv(var_name)
            if env_value is not None:
                return env_value
            if default_value is not None:
                return default_value
            raise ConfigError(
                f"Environment variable '{var_name}' is not set and no default"
            )

        return _ENV_PATTERN.sub(replace_env_var, data)

    if isinstance(data, dict):
        return {key: expand_env_vars(value) for key, value in data.items()}

    if isinstance(data, list):
        return [expand_env_vars(item) for item in data]

    return data


class MssqlKitSettings(BaseModel):
    """Connection string plus the defaults used by the schema loaders."""

    connection_string: str = Field(..., description="ODBC connection string")
    default_schema: str = Field(
        default="dbo", description="Schema used when a loader gets none"
    )
    cleaning_token: Optional[str] = Field(
        default=None, description="Prefix stripped from entity names"
    )
    entities_query: Optional[str] = Field(
        default=None, description="Override for the column introspection query"
    )
    relationships_query: Optional[str] = Field(
        default=None, description="Override for the foreign key query"
    )

    driver: str = Field(
        default=MSSQL_CONNECTION_DEFAULTS.driver, description="ODBC driver name"
    )
    timeout: int = Field(
        default=MSSQL_CONNECTION_DEFAULTS.timeout,
        ge=1,
        description="Login timeout in seconds",
    )
    autocommit: bool = Field(
        default=MSSQL_CONNECTION_DEFAULTS.autocommit,
        description="Commit each statement as it executes",
    )

    @model_validator(mode="before")
    @classmethod
    def accept_host_key(cls, data):
        """Map the host's DefaultConnectionString key onto connection_string."""
        if isinstance(data, dict) and "DefaultConnectionString" in data:
            data = dict(data)
            host_value = data.pop("DefaultConnectionString")
            data.setdefault("connection_string", host_value)
        return data

    @field_validator("connection_string")
    @classmethod
    def validate_connection_string(cls, v):
        """Require both a server and a database in the connection string."""
        if not is_valid_connection_string(v):
            raise ValueError(
                "Connection string must name a server (Server=...) "
                "and a database (Database=...)"
            )
        return v

    def get_connection_options(self) -> Dict[str, Any]:
        """Get options for MssqlDatabase."""
        return {
            "driver": self.driver,
            "timeout": self.timeout,
            "autocommit": self.autocommit,
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], expand_env: bool = True
    ) -> "MssqlKitSettings":
        """
        Create settings from a dictionary.

        Args:
            data: Settings values
            expand_env: Expand ${VAR} references; turn off for values that
                are already literal, such as a connection string passed on
                the command line
        """
        if not isinstance(data, dict):
            raise ConfigError(
                f"Settings must be a mapping, got {type(data).__name__}"
            )
        try:
            return cls(**(expand_env_vars(data) if expand_env else data))
        except ValidationError as e:
            raise ConfigError(f"Invalid mssqlkit settings: {e}") from e

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "MssqlKitSettings":
        """Load settings from a YAML file."""
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigError(f"Settings file not found: {path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {path}: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def find(cls, start_path: Optional[Path] = None) -> "MssqlKitSettings":
        """
        Find mssqlkit.yml by walking up directories from start_path.

        Falls back to the MSSQLKIT_CONNECTION_STRING environment variable.

        Raises:
            ConfigError: If neither a settings file nor the variable is found
        """
        current = Path(start_path or Path.cwd()).resolve()
        searched_paths = []

        while True:
            candidate = current / CONFIG_FILE_NAME
            searched_paths.append(str(candidate))
            if candidate.exists():
                return cls.from_yaml(candidate)
            if current == current.parent:
                break
            current = current.parent

        env_value = os.environ.get(CONNECTION_STRING_ENV)
        if env_value:
            return cls.from_dict({"connection_string": env_value}, expand_env=False)

        error_msg = f"""
No {CONFIG_FILE_NAME} found and {CONNECTION_STRING_ENV} is not set.

Searched locations:
{chr(10).join(f"  - {path}" for path in searched_paths)}

To get started, run:
  mssqlkit init
"""
        raise ConfigError(error_msg)
