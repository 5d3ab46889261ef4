"""
Unit tests for connection string helpers.
"""
import pytest

from mssqlkit.configs.connection_string import (
    describe_target,
    ensure_driver,
    is_valid_connection_string,
    mask_connection_string,
    parse_connection_string,
)


class TestParse:
    def test_keys_are_lower_cased(self):
        pairs = parse_connection_string("SERVER=db;Database=app;  Uid = sa ")

        assert pairs == {"server": "db", "database": "app", "uid": "sa"}

    def test_braced_values_may_contain_semicolons(self):
        pairs = parse_connection_string(
            "Driver={ODBC Driver 18 for SQL Server};Server=db;Pwd={a;b}}c};Database=app"
        )

        assert pairs["driver"] == "ODBC Driver 18 for SQL Server"
        assert pairs["pwd"] == "a;b}c"
        assert pairs["database"] == "app"

    def test_segments_without_equals_are_ignored(self):
        assert parse_connection_string("garbage;Server=db;;") == {"server": "db"}

    def test_empty(self):
        assert parse_connection_string("") == {}
        assert parse_connection_string(None) == {}


class TestValidity:
    @pytest.mark.parametrize(
        "text",
        [
            "Server=db;Database=app",
            "server=db;database=app",
            "Data Source=db;Initial Catalog=app",
            "Addr=db;Database=app",
            "Server=tcp:db.example.com,1433;Database=app;Authentication=ActiveDirectoryInteractive",
        ],
    )
    def test_valid(self, text):
        assert is_valid_connection_string(text)

    @pytest.mark.parametrize(
        "text",
        [
            "Server=db",
            "Database=app",
            "Server=db;Database=",
            "Server=  ;Database=app",
            "",
            None,
            42,
        ],
    )
    def test_invalid(self, text):
        assert not is_valid_connection_string(text)


def test_ensure_driver_adds_missing_driver():
    assert ensure_driver("Server=db;Database=app", "ODBC Driver 18 for SQL Server") == (
        "Driver={ODBC Driver 18 for SQL Server};Server=db;Database=app"
    )


def test_ensure_driver_keeps_existing_driver():
    text = "DRIVER={FreeTDS};Server=db;Database=app"

    assert ensure_driver(text, "ODBC Driver 18 for SQL Server") == text


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Server=db;Database=app;Pwd=secret", "Server=db;Database=app;Pwd=***"),
        ("Server=db;PASSWORD = {se;cret};Database=app", "Server=db;PASSWORD = ***;Database=app"),
        ("Server=db;Database=app", "Server=db;Database=app"),
        (None, ""),
    ],
)
def test_mask_connection_string(text, expected):
    assert mask_connection_string(text) == expected


def test_describe_target_shortens_azure_host():
    assert describe_target(
        "Server=tcp:myserver.database.windows.net,1433;Database=sales"
    ) == "myserver/sales"
    assert describe_target("Server=localhost;Database=app") == "localhost/app"
