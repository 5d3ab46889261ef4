"""
Schema introspection: entities, relationships and the queries behind them.
"""
from .mapper import (
    clean_entity_name,
    format_column_type,
    is_nullable_flag,
    map_entities,
    map_relationships,
)
from .models import Attribute, Entity, Relationship
from .queries import DEFAULT_ENTITIES_QUERY, DEFAULT_RELATIONSHIPS_QUERY, resolve_query

__all__ = [
    "Attribute",
    "DEFAULT_ENTITIES_QUERY",
    "DEFAULT_RELATIONSHIPS_QUERY",
    "Entity",
    "Relationship",
    "clean_entity_name",
    "format_column_type",
    "is_nullable_flag",
    "map_entities",
    "map_relationships",
    "resolve_query",
]
