"""
Common test fixtures and configuration.

Database tests never touch a real server: pyodbc.connect is patched to
return a MagicMock connection whose cursor is primed per test with
`prime_cursor`.
"""
import logging
import shutil
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

# Add src directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

VALID_CONNECTION_STRING = (
    "Server=tcp:test.database.windows.net,1433;Database=testdb;"
    "Uid=tester;Pwd=s3cret;Encrypt=yes"
)


@pytest.fixture(autouse=True)
def setup_logging():
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)
    yield


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def connection_string():
    return VALID_CONNECTION_STRING


def prime_cursor(
    cursor: MagicMock,
    columns: Optional[Sequence[str]] = None,
    rows: Optional[List[tuple]] = None,
    rowcount: int = -1,
    types: Optional[Sequence[type]] = None,
) -> MagicMock:
    """
    Make a mock cursor behave like pyodbc after execute().

    columns=None means the statement produced no result set.
    """
    rows = rows or []
    if columns is None:
        cursor.description = None
    else:
        types = types or [str] * len(columns)
        cursor.description = [
            (name, column_type, None, None, None, None, True)
            for name, column_type in zip(columns, types)
        ]
    cursor.fetchall.return_value = list(rows)
    cursor.nextset.return_value = False
    cursor.fetchone.return_value = rows[0] if rows else None
    cursor.rowcount = rowcount
    return cursor


def make_connection() -> MagicMock:
    """A mock pyodbc connection that tracks its closed state."""
    conn = MagicMock()
    conn.closed = False

    def close():
        conn.closed = True

    conn.close.side_effect = close
    prime_cursor(conn.cursor.return_value)
    return conn


@pytest.fixture
def mock_connection():
    return make_connection()


@pytest.fixture
def mock_cursor(mock_connection):
    return mock_connection.cursor.return_value


@pytest.fixture
def mock_connect(mock_connection):
    """Patch pyodbc.connect to hand out mock_connection."""
    with patch(
        "mssqlkit.connections.mssql.pyodbc.connect", return_value=mock_connection
    ) as connect:
        yield connect


@pytest.fixture
def mock_logger():
    """Stands in for the logger collaborator (anything with error())."""
    return MagicMock()


@pytest.fixture
def database(connection_string, mock_logger):
    from mssqlkit.connections.mssql import MssqlDatabase

    return MssqlDatabase(connection_string, logger=mock_logger)


@pytest.fixture
def entity_rows() -> List[dict]:
    """Rows as returned by the default entities query."""
    return [
        {"TableName": "T1", "ColumnName": "C1", "DataType": "int", "CharMaxLength": None, "IsNullable": "NO"},
        {"TableName": "T1", "ColumnName": "C2", "DataType": "varchar", "CharMaxLength": 50, "IsNullable": "YES"},
        {"TableName": "T2", "ColumnName": "C1", "DataType": "int", "CharMaxLength": None, "IsNullable": "NO"},
    ]


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def prime():
    """Expose prime_cursor to tests."""
    return prime_cursor
