"""
Schema models: tables become entities, foreign keys become relationships.

Both are immutable snapshots built fresh on every load; the live database
stays the source of truth.
"""
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class Attribute(BaseModel):
    """One column of an entity."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="SQL data type, e.g. 'varchar(50)'")
    nullable: bool = Field(..., description="Whether the column accepts NULL")


class Entity(BaseModel):
    """
    A table and its columns.

    Attributes keep the column order of the source rows.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Table name with any cleaning token removed")
    attributes: Dict[str, Attribute] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.attributes)

    @property
    def column_names(self) -> list:
        return list(self.attributes)


class Relationship(BaseModel):
    """A foreign key edge from the referencing table to the referenced one."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_entity: str = Field(..., alias="fromEntity")
    to_entity: str = Field(..., alias="toEntity")
    key: str = Field(..., description="Foreign key column on from_entity")
