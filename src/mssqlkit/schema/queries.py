"""
Built-in introspection queries and override resolution.

Both queries take the schema name as the `@Schema` parameter. Override
queries must return the same column aliases for the mappers to read them.
"""
from typing import Optional

DEFAULT_ENTITIES_QUERY = """
SELECT TABLE_NAME AS TableName,
       COLUMN_NAME AS ColumnName,
       DATA_TYPE AS DataType,
       CHARACTER_MAXIMUM_LENGTH AS CharMaxLength,
       IS_NULLABLE AS IsNullable
FROM INFORMATION_SCHEMA.COLUMNS
WHERE TABLE_SCHEMA = @Schema
ORDER BY TABLE_NAME, ORDINAL_POSITION
"""

DEFAULT_RELATIONSHIPS_QUERY = """
SELECT fk.TABLE_NAME AS fkTableName,
       fk.COLUMN_NAME AS fkColumnName,
       pk.TABLE_NAME AS pkTableName,
       pk.COLUMN_NAME AS pkColumnName,
       fk.CONSTRAINT_NAME AS Name
FROM INFORMATION_SCHEMA.REFERENTIAL_CONSTRAINTS AS rc
JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE AS fk
  ON rc.CONSTRAINT_NAME = fk.CONSTRAINT_NAME
JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE AS pk
  ON rc.UNIQUE_CONSTRAINT_NAME = pk.CONSTRAINT_NAME
WHERE fk.TABLE_SCHEMA = @Schema
ORDER BY fkTableName, fkColumnName
"""


def resolve_query(default_query: str, override: Optional[str] = None) -> str:
    """
    Pick the override when one is given, else the default.

    Any non-empty string wins, whitespace-only included; the SQL itself is
    not checked and a broken override fails at execution time.
    """
    if override:
        return override
    return default_query
