"""
Unit tests for named parameter binding.
"""
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

import pytest

from mssqlkit.connections.parameters import bind_parameters, normalize_parameter_name


def test_no_parameters_leaves_query_alone():
    query = "SELECT * FROM T WHERE A = @A"

    assert bind_parameters(query, None) == (query, [])
    assert bind_parameters(query, {}) == (query, [])


def test_values_follow_placeholder_order():
    sql, values = bind_parameters(
        "SELECT * FROM T WHERE B = @B AND A = @A", {"@A": 1, "@B": "two"}
    )

    assert sql == "SELECT * FROM T WHERE B = ? AND A = ?"
    assert values == ["two", 1]


def test_keys_with_or_without_at_sign():
    _, values = bind_parameters("SELECT @First, @Second", {"First": 1, "@Second": 2})

    assert values == [1, 2]


def test_names_match_case_insensitively():
    sql, values = bind_parameters("SELECT * FROM T WHERE S = @SCHEMA", {"@Schema": "dbo"})

    assert sql == "SELECT * FROM T WHERE S = ?"
    assert values == ["dbo"]


def test_unknown_placeholders_and_globals_untouched():
    sql, values = bind_parameters(
        "DECLARE @local INT = @Id; SELECT @local, @@ROWCOUNT", {"Id": 5}
    )

    assert sql == "DECLARE @local INT = ?; SELECT @local, @@ROWCOUNT"
    assert values == [5]


def test_placeholders_inside_string_literals_are_ignored():
    sql, values = bind_parameters(
        "SELECT '@Name', 'it''s @Name' , @Name", {"Name": "Ada"}
    )

    assert sql == "SELECT '@Name', 'it''s @Name' , ?"
    assert values == ["Ada"]


def test_similar_prefix_names_are_distinct():
    sql, values = bind_parameters("SELECT @Id, @IdList", {"Id": 1, "IdList": "1,2"})

    assert sql == "SELECT ?, ?"
    assert values == [1, "1,2"]


def test_value_is_never_interpolated():
    sql, values = bind_parameters(
        "SELECT * FROM Users WHERE Name = @Name", {"Name": "x'; DROP TABLE Users; --"}
    )

    assert "DROP" not in sql
    assert values == ["x'; DROP TABLE Users; --"]


@pytest.mark.parametrize(
    "value",
    [
        None,
        True,
        3,
        2.5,
        Decimal("1.10"),
        "text",
        b"\x00\x01",
        datetime(2024, 1, 1, 12, 0),
        date(2024, 1, 1),
        UUID("12345678-1234-5678-1234-567812345678"),
    ],
)
def test_supported_values(value):
    _, values = bind_parameters("SELECT @V", {"V": value})

    assert values == [value]


def test_unsupported_value_type():
    with pytest.raises(TypeError, match="Unsupported value for parameter 'V'"):
        bind_parameters("SELECT @V", {"V": [1, 2]})


@pytest.mark.parametrize("name", ["", "@", None])
def test_invalid_parameter_names(name):
    with pytest.raises(TypeError):
        normalize_parameter_name(name)
