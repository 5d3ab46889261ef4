"""
Result types returned by the database layer.

TabularResult is a snapshot of a result set: column names in select order,
rows as dicts keyed by those names, and the Python types reported by the
driver. Ok / Err give callers an explicit success-or-failure value at the
boundary when they prefer that to try/except.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterator, Optional, Tuple, TypeVar, Union

import polars as pl

T = TypeVar("T")


def advance_to_result_set(cursor: Any) -> bool:
    """
    Skip row-count results until the cursor sits on one with columns.

    A batch such as `INSERT ...; SELECT SCOPE_IDENTITY()` reports the
    INSERT first. Returns False when no result set follows.
    """
    while cursor.description is None:
        if not cursor.nextset():
            return False
    return True


@dataclass(frozen=True)
class TabularResult:
    """
    Full result set of a query.

    Example:
        ```python
        result = db.execute_query("SELECT Id, Name FROM dbo.Users")
        for row in result:
            print(row["Id"], row["Name"])
        df = result.to_polars()
        ```
    """

    columns: Tuple[str, ...] = ()
    rows: Tuple[Dict[str, Any], ...] = ()
    column_types: Tuple[Optional[type], ...] = ()

    @classmethod
    def from_cursor(cls, cursor: Any) -> "TabularResult":
        """Drain the first result set of a DB-API cursor into a TabularResult."""
        if not advance_to_result_set(cursor):
            return cls()

        description = cursor.description
        columns = tuple(column[0] for column in description)
        column_types = tuple(column[1] for column in description)
        rows = tuple(dict(zip(columns, row)) for row in cursor.fetchall())
        return cls(columns=columns, rows=rows, column_types=column_types)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def first(self) -> Optional[Dict[str, Any]]:
        """First row, or None for an empty result."""
        return self.rows[0] if self.rows else None

    def column(self, name: str) -> Tuple[Any, ...]:
        """All values of one column, in row order."""
        if name not in self.columns:
            raise KeyError(f"Column '{name}' not in result: {list(self.columns)}")
        return tuple(row[name] for row in self.rows)

    def to_polars(self) -> pl.DataFrame:
        """Convert to a Polars DataFrame, keeping column order."""
        if not self.rows:
            return pl.DataFrame(schema=list(self.columns))
        return pl.DataFrame(
            [tuple(row[name] for name in self.columns) for row in self.rows],
            schema=list(self.columns),
            orient="row",
        )


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome of a database operation."""

    value: T
    ok: bool = field(default=True, init=False)

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed outcome of a database operation."""

    error: Exception
    ok: bool = field(default=False, init=False)

    def unwrap(self):
        raise self.error


Outcome = Union[Ok[T], Err]
