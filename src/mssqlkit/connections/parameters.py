"""
Named parameter binding for pyodbc.

Queries are written with T-SQL style named placeholders (`@Schema`,
`@CustomerId`) and parameters are passed as a mapping from name to value.
pyodbc only understands positional `?` markers, so the query is rewritten
and the values are returned in the order their placeholders appear. Values
are always sent to the driver as bound parameters; nothing is formatted
into the SQL text.
"""
import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Mapping, Optional, Tuple, Union
from uuid import UUID

SqlValue = Union[None, bool, int, float, Decimal, str, bytes, datetime, date, time, UUID]
SqlParameters = Mapping[str, SqlValue]

_SQL_VALUE_TYPES = (bool, int, float, Decimal, str, bytes, bytearray, datetime, date, time, UUID)

# String literals are matched first so placeholders inside them are skipped.
# The lookbehind keeps @@ROWCOUNT style globals and emails intact.
_TOKEN_PATTERN = re.compile(r"'(?:[^']|'')*'|(?<![@\w])@([A-Za-z_][\w#$]*)")


def normalize_parameter_name(name: str) -> str:
    """Strip the leading @ and lower-case (T-SQL variable names ignore case)."""
    if not isinstance(name, str) or not name.lstrip("@"):
        raise TypeError(f"Parameter names must be non-empty strings, got {name!r}")
    return name.lstrip("@").lower()


def _check_value(name: str, value: SqlValue) -> None:
    if value is None or isinstance(value, _SQL_VALUE_TYPES):
        return
    raise TypeError(
        f"Unsupported value for parameter '{name}': {type(value).__name__}"
    )


def bind_parameters(
    query: str, parameters: Optional[SqlParameters] = None
) -> Tuple[str, List[SqlValue]]:
    """
    Rewrite named placeholders as `?` and collect values in order.

    Placeholders that are not keys of `parameters` (locally declared
    variables, `@@` globals) are left alone. A placeholder used twice binds
    its value twice.

    Args:
        query: SQL text with `@Name` placeholders
        parameters: Mapping of placeholder name (with or without `@`) to value

    Returns:
        Tuple of (rewritten_sql, positional_values)

    Raises:
        TypeError: If a parameter name or value has an unsupported type
    """
    if not parameters:
        return query, []

    lookup = {}
    for name, value in parameters.items():
        _check_value(name, value)
        lookup[normalize_parameter_name(name)] = value

    values: List[SqlValue] = []

    def replace(match):
        name = match.group(1)
        if name is None:
            return match.group(0)
        key = name.lower()
        if key not in lookup:
            return match.group(0)
        values.append(lookup[key])
        return "?"

    return _TOKEN_PATTERN.sub(replace, query), values
