"""
Row mappers turning INFORMATION_SCHEMA result rows into entities and
relationships.

`map_entities` expects rows sorted by table then column position (the
default query orders them that way) and groups each contiguous run of the
same cleaned table name into one Entity. Override queries may not keep that
order, so a table that shows up again after another one is merged into the
entity already started for it rather than producing a duplicate name.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

from mssqlkit.messages import get_logger

from .models import Attribute, Entity, Relationship

logger = get_logger("mssqlkit.schema.mapper")

# SQL Server reports (n)varchar(max) and varbinary(max) with length -1
MAX_LENGTH = -1

# Older relationship queries spell the key column alias in Dutch
FOREIGN_KEY_COLUMNS = ("fkColumnName", "fkColumnNaam")


def clean_entity_name(name: Optional[str], cleaning_token: Optional[str] = None) -> str:
    """
    Strip cleaning_token from the start of name, ignoring case.

    Example:
        clean_entity_name("dbo_Users", "dbo_") -> "Users"
        clean_entity_name("Orders", "dbo_") -> "Orders"
    """
    name = name or ""
    if cleaning_token and name.lower().startswith(cleaning_token.lower()):
        return name[len(cleaning_token) :]
    return name


def format_column_type(data_type: Optional[str], char_max_length: Any = None) -> str:
    """
    Append the character length to the data type when there is one.

    SQL Server reports MAX columns with a length of -1; those render as
    `nvarchar(max)` rather than the raw `nvarchar(-1)`.
    """
    data_type = data_type or ""
    if char_max_length is None:
        return data_type
    if isinstance(char_max_length, (int, float, Decimal)) or str(char_max_length).strip():
        length = int(char_max_length)
        if length == MAX_LENGTH:
            return f"{data_type}(max)"
        return f"{data_type}({length})"
    return data_type


def is_nullable_flag(value: Any) -> bool:
    """IS_NULLABLE is 'YES' or 'NO'; anything other than 'YES' means not null."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().upper() == "YES"


def _get(row: Mapping[str, Any], column: str) -> Any:
    """Read a column by name, falling back to a case-insensitive match."""
    if column in row:
        return row[column]
    lowered = column.lower()
    for key, value in row.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return None


def _get_first(row: Mapping[str, Any], columns: Iterable[str]) -> Any:
    """Read the first of several alias columns that has a value."""
    for column in columns:
        value = _get(row, column)
        if value is not None:
            return value
    return None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def map_entities(
    rows: Iterable[Mapping[str, Any]], cleaning_token: Optional[str] = None
) -> List[Entity]:
    """
    Group (TableName, ColumnName, DataType, CharMaxLength, IsNullable) rows
    into entities.

    Args:
        rows: Result rows, sorted by table then ordinal position
        cleaning_token: Optional prefix to strip from table names

    Returns:
        Entities in first-seen order; an empty input gives an empty list
    """
    collected: Dict[str, Dict[str, Attribute]] = {}
    current_name: Optional[str] = None
    current_attributes: Optional[Dict[str, Attribute]] = None

    def flush() -> None:
        if current_name is None:
            return
        existing = collected.get(current_name)
        if existing is None:
            collected[current_name] = current_attributes
            return
        logger.debug(
            f"Table '{current_name}' appeared again out of order; merging columns"
        )
        repeated = set(existing) & set(current_attributes)
        if repeated:
            logger.debug(
                f"Columns {sorted(repeated)} of '{current_name}' redefined; "
                "keeping the last definition"
            )
        existing.update(current_attributes)

    for row in rows:
        table_name = clean_entity_name(_text(_get(row, "TableName")), cleaning_token)

        if current_name is None or table_name != current_name:
            flush()
            current_name = table_name
            current_attributes = {}

        column_name = _text(_get(row, "ColumnName"))
        if column_name in current_attributes:
            logger.debug(
                f"Column '{column_name}' repeated in table '{current_name}'; "
                "keeping the last definition"
            )
        current_attributes[column_name] = Attribute(
            type=format_column_type(
                _text(_get(row, "DataType")), _get(row, "CharMaxLength")
            ),
            nullable=is_nullable_flag(_get(row, "IsNullable")),
        )

    flush()

    return [
        Entity(name=name, attributes=attributes)
        for name, attributes in collected.items()
    ]


def map_relationships(
    rows: Iterable[Mapping[str, Any]], cleaning_token: Optional[str] = None
) -> List[Relationship]:
    """
    Build one relationship per foreign key row.

    Rows carry fkTableName, fkColumnName (or fkColumnNaam) and pkTableName;
    duplicates are kept as returned.
    """
    relationships = []
    for row in rows:
        from_entity = clean_entity_name(_text(_get(row, "fkTableName")), cleaning_token)
        key = _get_first(row, FOREIGN_KEY_COLUMNS)
        if key is None:
            logger.warning(
                f"Relationship row for '{from_entity}' has no fkColumnName; "
                "the key is left empty"
            )
        relationships.append(
            Relationship(
                from_entity=from_entity,
                to_entity=clean_entity_name(_text(_get(row, "pkTableName")), cleaning_token),
                key=_text(key),
            )
        )
    return relationships
