"""
Base database interface.

Defines the contract scripts program against, so a database-specific
implementation (MssqlDatabase) can be swapped for a fake in tests.
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from mssqlkit.core.results import TabularResult
from mssqlkit.schema.models import Entity, Relationship

from .parameters import SqlParameters


class Database(ABC):
    """
    Abstract base class for script-facing databases.

    Implementations own one connection handle, open it around each
    operation and close it afterwards, even when the operation fails.

    Example:
        ```python
        class MssqlDatabase(Database):
            def execute_scalar(self, query, parameters=None):
                # open, bind, execute, close
                ...
        ```
    """

    @abstractmethod
    def setup(self, connection_string: str) -> None:
        """Validate and store the connection string without connecting."""
        pass

    @abstractmethod
    def open_connection(self) -> None:
        """Open the connection unless it is already open."""
        pass

    @abstractmethod
    def close_connection(self) -> None:
        """Close the connection if it is open."""
        pass

    @abstractmethod
    def execute_non_query(
        self, query: str, parameters: Optional[SqlParameters] = None
    ) -> int:
        """Run INSERT/UPDATE/DELETE and return the affected row count."""
        pass

    @abstractmethod
    def execute_scalar(
        self, query: str, parameters: Optional[SqlParameters] = None
    ) -> Any:
        """Return the first column of the first row, or None."""
        pass

    @abstractmethod
    def execute_query(
        self, query: str, parameters: Optional[SqlParameters] = None
    ) -> TabularResult:
        """Return the full result set."""
        pass

    def execute_insert(self, query: str, parameters: SqlParameters) -> int:
        """Run a parameterized INSERT and return the affected row count."""
        return self.execute_non_query(query, parameters)

    def execute_update(self, query: str, parameters: SqlParameters) -> int:
        """Run a parameterized UPDATE and return the affected row count."""
        return self.execute_non_query(query, parameters)

    @abstractmethod
    def load_entities(
        self,
        schema: Optional[str] = None,
        query_override: Optional[str] = None,
        cleaning_token: Optional[str] = None,
    ) -> List[Entity]:
        """Load the tables of a schema with their columns."""
        pass

    @abstractmethod
    def load_relationships(
        self,
        schema: Optional[str] = None,
        query_override: Optional[str] = None,
        cleaning_token: Optional[str] = None,
    ) -> List[Relationship]:
        """Load the foreign keys of a schema."""
        pass
