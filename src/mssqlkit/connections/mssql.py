"""
MS SQL Server database for scripts, backed by pyodbc.

Every public operation brackets its work with open_connection() and
close_connection(): there is no pooling, so each call pays for its own
login and a failed statement still releases the connection. Authentication
is whatever the connection string asks the ODBC driver for (SQL logins,
`Authentication=ActiveDirectoryInteractive`, managed identity, ...).

The instance holds a single mutable connection handle and no lock; use one
instance per thread.
"""
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

import pyodbc

from mssqlkit.configs.connection_string import (
    describe_target,
    ensure_driver,
    is_valid_connection_string,
)
from mssqlkit.configs.constants import get_mssql_defaults
from mssqlkit.configs.settings import MssqlKitSettings
from mssqlkit.core.results import (
    Err,
    Ok,
    Outcome,
    TabularResult,
    advance_to_result_set,
)
from mssqlkit.messages import get_logger
from mssqlkit.schema.mapper import map_entities, map_relationships
from mssqlkit.schema.models import Entity, Relationship
from mssqlkit.schema.queries import (
    DEFAULT_ENTITIES_QUERY,
    DEFAULT_RELATIONSHIPS_QUERY,
    resolve_query,
)
from mssqlkit.utility.exceptions import (
    ConfigError,
    DatabaseConnectionError,
    MssqlKitError,
    QueryError,
)

from .base import Database
from .parameters import SqlParameters, bind_parameters


def _sqlstate(error: pyodbc.Error) -> Optional[str]:
    """pyodbc puts the SQLSTATE first in args: ('42000', '[42000] ...')."""
    sqlstate = getattr(error, "sqlstate", None)
    if sqlstate:
        return sqlstate
    if len(error.args) > 1 and isinstance(error.args[0], str):
        return error.args[0]
    return None


def _message(error: pyodbc.Error) -> str:
    if len(error.args) > 1:
        return str(error.args[1])
    return str(error)


class MssqlDatabase(Database):
    """
    MS SQL Server database with parameterized queries and schema loading.

    Example:
        ```python
        db = MssqlDatabase(
            "Server=tcp:myserver.database.windows.net,1433;"
            "Database=sales;Authentication=ActiveDirectoryInteractive"
        )
        count = db.execute_scalar(
            "SELECT COUNT(*) FROM dbo.Orders WHERE CustomerId = @CustomerId",
            {"@CustomerId": 42},
        )
        entities = db.load_entities("dbo", cleaning_token="tbl_")
        ```
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        logger: Optional[Any] = None,
        options: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the database.

        Args:
            connection_string: Optional connection string, passed to setup()
            logger: Anything with an error(message) method; defaults to the
                mssqlkit logger
            options: Connection options:
                - driver: ODBC driver used when the string names none
                  (default: "ODBC Driver 18 for SQL Server")
                - timeout: Login timeout in seconds (default: 30)
                - autocommit: Commit each statement (default: True)
        """
        self.options = {**get_mssql_defaults(), **(options or {})}
        self.driver = self.options["driver"]
        self.timeout = self.options["timeout"]
        self.autocommit = self.options["autocommit"]

        self.logger = logger or get_logger("mssqlkit.connections.mssql")

        self._connection_string: Optional[str] = None
        self._connection: Optional[pyodbc.Connection] = None

        # Loader defaults, filled in by from_settings()
        self.default_schema: Optional[str] = None
        self.cleaning_token: Optional[str] = None
        self.entities_query: Optional[str] = None
        self.relationships_query: Optional[str] = None

        if connection_string is not None:
            self.setup(connection_string)

    @classmethod
    def from_settings(
        cls, settings: MssqlKitSettings, logger: Optional[Any] = None
    ) -> "MssqlDatabase":
        """Build a database from settings, including loader defaults."""
        db = cls(
            settings.connection_string,
            logger=logger,
            options=settings.get_connection_options(),
        )
        db.default_schema = settings.default_schema
        db.cleaning_token = settings.cleaning_token
        db.entities_query = settings.entities_query
        db.relationships_query = settings.relationships_query
        return db

    def __repr__(self) -> str:
        target = describe_target(self._connection_string) if self._connection_string else "unset"
        return f"MssqlDatabase({target})"

    def __enter__(self) -> "MssqlDatabase":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close_connection()

    # Connection gate

    @property
    def connection_string(self) -> Optional[str]:
        return self._connection_string

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and not self._is_closed(self._connection)

    def setup(self, connection_string: str) -> None:
        """
        Validate and store the connection string. Does not connect.

        Raises:
            ConfigError: If the string lacks a server or database, or if the
                database was already set up
        """
        if self._connection_string is not None:
            self.logger.error("Setup called twice; the connection string is fixed")
            raise ConfigError(
                "Database is already set up; create a new MssqlDatabase "
                "to use another connection string"
            )

        if not is_valid_connection_string(connection_string):
            self.logger.error("The provided connection string is not valid")
            raise ConfigError(
                "The provided connection string is not valid: it must name "
                "a server (Server=...) and a database (Database=...)"
            )

        self._connection_string = connection_string
        self.logger.debug(f"Configured for {describe_target(connection_string)}")

    def open_connection(self) -> None:
        """
        Open the connection unless an open handle already exists.

        Raises:
            ConfigError: If setup() was never called
            DatabaseConnectionError: If the driver cannot connect
        """
        if self._connection is not None and not self._is_closed(self._connection):
            return

        if not self._connection_string:
            self.logger.error("Connection string is not set")
            raise ConfigError(
                "Connection string is not set. Call setup with a valid "
                "connection string."
            )

        target = describe_target(self._connection_string)
        try:
            self.logger.debug(f"Connecting to {target}")
            self._connection = pyodbc.connect(
                ensure_driver(self._connection_string, self.driver),
                autocommit=self.autocommit,
                timeout=self.timeout,
            )
            self.logger.debug(f"Connected to {target}")
        except pyodbc.Error as e:
            self._connection = None
            error_msg = _message(e)
            sqlstate = _sqlstate(e)
            self.logger.error(f"SQL connection error: {error_msg}")

            # IM002: data source name not found and no default driver
            if sqlstate == "IM002" or "IM002" in error_msg:
                raise DatabaseConnectionError(
                    f"ODBC Driver not found. Expected: {self.driver}. "
                    f"Install msodbcsql18 or set the driver option.",
                    sqlstate=sqlstate,
                ) from e

            raise DatabaseConnectionError(
                f"Connection error: {error_msg}", sqlstate=sqlstate
            ) from e

    def close_connection(self) -> None:
        """Close the connection; a no-op when it is closed or was never opened."""
        conn = self._connection
        if conn is None:
            return

        try:
            if not self._is_closed(conn):
                conn.close()
                self.logger.debug("Connection closed")
        except pyodbc.Error as e:
            self.logger.warning(f"Error closing connection: {_message(e)}")
        finally:
            self._connection = None

    @contextmanager
    def connection(self) -> Iterator[pyodbc.Connection]:
        """Open the connection for the duration of a with-block."""
        self.open_connection()
        try:
            yield self._connection
        finally:
            self.close_connection()

    @staticmethod
    def _is_closed(conn: Any) -> bool:
        return bool(getattr(conn, "closed", False))

    # Command execution

    def _run(
        self,
        operation: str,
        query: str,
        parameters: Optional[SqlParameters],
        handle: Callable[[Any], Any],
        commit: bool = False,
        log_unexpected: bool = False,
    ) -> Any:
        """Open, bind, execute, hand the cursor to `handle`, always close."""
        sql, values = bind_parameters(query, parameters)

        with self.connection() as conn:
            cursor = None
            try:
                cursor = conn.cursor()
                self.logger.debug(f"{operation}: {sql.strip()[:150]}")
                if values:
                    cursor.execute(sql, values)
                else:
                    cursor.execute(sql)
                result = handle(cursor)
                if commit and not self.autocommit:
                    conn.commit()
                return result
            except pyodbc.Error as e:
                error_msg = _message(e)
                self.logger.error(f"SQL error in {operation}: {error_msg}")
                raise QueryError(
                    f"SQL error in {operation}: {error_msg}",
                    operation=operation,
                    sqlstate=_sqlstate(e),
                ) from e
            except Exception as e:
                if log_unexpected:
                    self.logger.error(f"Unexpected error in {operation}: {e}")
                raise
            finally:
                if cursor is not None:
                    cursor.close()

    @staticmethod
    def _row_count(cursor: Any) -> int:
        return cursor.rowcount

    @staticmethod
    def _first_value(cursor: Any) -> Any:
        if not advance_to_result_set(cursor):
            return None
        row = cursor.fetchone()
        if row is None:
            return None
        return row[0]

    def execute_non_query(
        self, query: str, parameters: Optional[SqlParameters] = None
    ) -> int:
        """
        Execute INSERT, UPDATE or DELETE.

        Returns:
            Number of rows affected (-1 when the driver cannot tell, e.g.
            under SET NOCOUNT ON)

        Raises:
            QueryError: If the statement fails
        """
        return self._run(
            "execute_non_query", query, parameters, self._row_count, commit=True
        )

    def execute_scalar(
        self, query: str, parameters: Optional[SqlParameters] = None
    ) -> Any:
        """
        Execute a query returning a single value (COUNT, SUM, ...).

        Returns:
            First column of the first row, or None when there is no row
        """
        return self._run("execute_scalar", query, parameters, self._first_value)

    def execute_query(
        self, query: str, parameters: Optional[SqlParameters] = None
    ) -> TabularResult:
        """Execute a query and return the whole result set."""
        return self._run(
            "execute_query", query, parameters, TabularResult.from_cursor
        )

    def execute_insert(self, query: str, parameters: SqlParameters) -> int:
        """Execute a parameterized INSERT and return the affected row count."""
        return self._run(
            "execute_insert",
            query,
            parameters,
            self._row_count,
            commit=True,
            log_unexpected=True,
        )

    def execute_update(self, query: str, parameters: SqlParameters) -> int:
        """Execute a parameterized UPDATE and return the affected row count."""
        return self._run(
            "execute_update",
            query,
            parameters,
            self._row_count,
            commit=True,
            log_unexpected=True,
        )

    def attempt(
        self, operation: Union[str, Callable[..., Any]], *args: Any, **kwargs: Any
    ) -> Outcome:
        """
        Run an operation and return Ok(value) or Err(error).

        Only mssqlkit errors are captured; anything else still raises.

        Example:
            ```python
            outcome = db.attempt("execute_scalar", "SELECT COUNT(*) FROM dbo.T")
            if outcome.ok:
                print(outcome.value)
            ```
        """
        func = getattr(self, operation) if isinstance(operation, str) else operation
        try:
            return Ok(func(*args, **kwargs))
        except MssqlKitError as e:
            return Err(e)

    # Schema introspection

    def _schema_rows(
        self, default_query: str, override: Optional[str], schema: Optional[str]
    ) -> TabularResult:
        query = resolve_query(default_query, override)
        return self.execute_query(query, {"@Schema": schema})

    def load_entities(
        self,
        schema: Optional[str] = None,
        query_override: Optional[str] = None,
        cleaning_token: Optional[str] = None,
    ) -> List[Entity]:
        """
        Load the tables of a schema with their columns.

        Args:
            schema: Schema name (e.g. "dbo"); bound as @Schema
            query_override: Query to run instead of the INFORMATION_SCHEMA
                default; must return TableName, ColumnName, DataType,
                CharMaxLength and IsNullable, sorted by table
            cleaning_token: Prefix stripped from table names

        Returns:
            Entities in table order; an unknown schema gives an empty list
        """
        schema = schema if schema is not None else self.default_schema
        token = cleaning_token if cleaning_token is not None else self.cleaning_token
        rows = self._schema_rows(
            DEFAULT_ENTITIES_QUERY, query_override or self.entities_query, schema
        )
        entities = map_entities(rows, token)
        self.logger.debug(f"Loaded {len(entities)} entities from schema '{schema}'")
        return entities

    def load_relationships(
        self,
        schema: Optional[str] = None,
        query_override: Optional[str] = None,
        cleaning_token: Optional[str] = None,
    ) -> List[Relationship]:
        """
        Load the foreign keys of a schema.

        Args:
            schema: Schema name (e.g. "dbo"); bound as @Schema
            query_override: Query to run instead of the default; must return
                fkTableName, fkColumnName and pkTableName
            cleaning_token: Prefix stripped from both table names
        """
        schema = schema if schema is not None else self.default_schema
        token = cleaning_token if cleaning_token is not None else self.cleaning_token
        rows = self._schema_rows(
            DEFAULT_RELATIONSHIPS_QUERY,
            query_override or self.relationships_query,
            schema,
        )
        relationships = map_relationships(rows, token)
        self.logger.debug(
            f"Loaded {len(relationships)} relationships from schema '{schema}'"
        )
        return relationships
