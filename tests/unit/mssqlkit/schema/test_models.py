"""
Tests for the schema models.
"""
import pytest
from pydantic import ValidationError

from mssqlkit.schema.models import Attribute, Entity, Relationship


def test_models_are_frozen():
    entity = Entity(name="Users", attributes={"Id": Attribute(type="int", nullable=False)})

    with pytest.raises(ValidationError):
        entity.name = "Other"


def test_entity_helpers():
    entity = Entity(
        name="Users",
        attributes={
            "Id": Attribute(type="int", nullable=False),
            "Email": Attribute(type="nvarchar(255)", nullable=True),
        },
    )

    assert len(entity) == 2
    assert entity.column_names == ["Id", "Email"]
    assert entity.model_dump() == {
        "name": "Users",
        "attributes": {
            "Id": {"type": "int", "nullable": False},
            "Email": {"type": "nvarchar(255)", "nullable": True},
        },
    }


def test_relationship_accepts_field_names_and_aliases():
    by_name = Relationship(from_entity="Orders", to_entity="Customers", key="CustomerId")
    by_alias = Relationship(fromEntity="Orders", toEntity="Customers", key="CustomerId")

    assert by_name == by_alias
    assert by_alias.model_dump() == {
        "from_entity": "Orders",
        "to_entity": "Customers",
        "key": "CustomerId",
    }
