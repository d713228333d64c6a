"""Unit tests for the SQLite driver.

This module tests the SqliteDriver class including:
- Statement execution and result handles
- Affected rows and generated identifiers
- Error mapping
- Native escaping
"""

import sqlite3
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest

from sqlhelper.adapters.sqlite import SqliteConfig, SqliteDriver, SqliteExceptionHandler
from sqlhelper.database import Database
from sqlhelper.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    DataError,
    ForeignKeyViolationError,
    ImproperConfigurationError,
    NotNullViolationError,
    OperationalError,
    SQLParsingError,
    UniqueViolationError,
)
from sqlhelper.protocols import DriverConnection
from sqlhelper.typing import FormatSpecifier


@pytest.fixture
def driver() -> Generator[SqliteDriver, None, None]:
    driver = SqliteDriver(sqlite3.connect(":memory:", isolation_level=None))
    driver.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL UNIQUE)").release()
    yield driver
    driver.close()


def test_driver_satisfies_protocol(driver: SqliteDriver) -> None:
    assert isinstance(driver, DriverConnection)
    assert driver.dialect == "sqlite"


def test_execute_mutation(driver: SqliteDriver) -> None:
    """Test affected rows and the generated identifier after an INSERT."""
    handle = driver.execute("INSERT INTO users (name) VALUES ('alice')")
    handle.release()

    assert driver.affected_rows() == 1
    assert driver.last_insert_id() == 1
    assert handle.columns() == ()


def test_execute_read(driver: SqliteDriver) -> None:
    """Test rows are fetched one by one as name-keyed records."""
    driver.execute("INSERT INTO users (name) VALUES ('alice'), ('bob')").release()

    handle = driver.execute("SELECT id, name FROM users ORDER BY id")
    assert [column.name for column in handle.columns()] == ["id", "name"]
    assert handle.fetch_row() == {"id": 1, "name": "alice"}
    assert handle.fetch_row() == {"id": 2, "name": "bob"}
    assert handle.fetch_row() is None
    handle.release()


def test_read_reports_no_affected_rows(driver: SqliteDriver) -> None:
    driver.execute("SELECT 1").release()
    assert driver.affected_rows() == 0


def test_execute_empty_statement(driver: SqliteDriver) -> None:
    with pytest.raises(SQLParsingError, match="Query was empty"):
        driver.execute("   ")


@pytest.mark.parametrize(
    ("sql", "error_class"),
    [
        ("SELEC 1", SQLParsingError),
        ("SELECT * FROM missing", OperationalError),
        ("INSERT INTO users (name) VALUES (NULL)", NotNullViolationError),
    ],
)
def test_execute_maps_errors(driver: SqliteDriver, sql: str, error_class: type) -> None:
    """Test sqlite3 errors are mapped onto sqlhelper exceptions."""
    with pytest.raises(error_class) as exc_info:
        driver.execute(sql)
    assert exc_info.value.sql == sql
    assert isinstance(exc_info.value.__cause__, sqlite3.Error)


def test_execute_unique_violation(driver: SqliteDriver) -> None:
    driver.execute("INSERT INTO users (name) VALUES ('alice')").release()
    with pytest.raises(UniqueViolationError):
        driver.execute("INSERT INTO users (name) VALUES ('alice')")


def test_exception_handler_foreign_key() -> None:
    with pytest.raises(ForeignKeyViolationError), SqliteExceptionHandler("DELETE FROM parent"):
        raise sqlite3.IntegrityError("FOREIGN KEY constraint failed")


def test_exception_handler_ignores_other_errors() -> None:
    with pytest.raises(ValueError), SqliteExceptionHandler():
        raise ValueError("not a database error")


def test_escape_doubles_quotes(driver: SqliteDriver) -> None:
    assert driver.escape("it's") == "it''s"
    assert driver.escape("back\\slash") == "back\\slash"


def test_config_defaults() -> None:
    """Test an in-memory autocommit database with native escaping by default."""
    config = SqliteConfig(field_types={"id": "%d"})

    assert config.connection_config == {"database": ":memory:", "isolation_level": None}
    assert config.real_escape is True
    assert config.field_types == {"id": FormatSpecifier.INTEGER}

    driver = config.create_connection()
    assert isinstance(driver, SqliteDriver)
    driver.close()


def test_config_connection_failure(tmp_path) -> None:  # type: ignore[no-untyped-def]
    config = SqliteConfig(connection_config={"database": str(tmp_path / "missing" / "db.sqlite")})
    with pytest.raises(DatabaseConnectionError):
        config.create_connection()


def test_execute_unencodable_value(driver: SqliteDriver) -> None:
    """Test a lone surrogate is mapped onto a data error instead of escaping as UnicodeEncodeError."""
    sql = "INSERT INTO users (name) VALUES ('x\ud800y')"

    with pytest.raises(DataError) as exc_info:
        driver.execute(sql)

    assert exc_info.value.sql == sql
    assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)


def test_unencodable_value_is_reported_and_returns_false() -> None:
    """Test the helper reports the rejected insert and returns False."""
    reporter = MagicMock()
    with Database(SqliteConfig(error_reporter=reporter)) as db:
        db.query("CREATE TABLE t (a TEXT)")

        assert db.insert("t", {"a": "x\ud800y"}) is False

    reporter.report.assert_called_once()
    assert isinstance(reporter.report.call_args.args[0], DataError)


def test_exception_handler_maps_warning() -> None:
    with pytest.raises(DatabaseError) as exc_info, SqliteExceptionHandler("SELECT 1; SELECT 2"):
        raise sqlite3.Warning("You can only execute one statement at a time.")
    assert exc_info.value.sql == "SELECT 1; SELECT 2"
    assert isinstance(exc_info.value.__cause__, sqlite3.Warning)


def test_config_rejects_backslash_escaping() -> None:
    """Test SQLite cannot be configured with escaping it does not honour."""
    with pytest.raises(ImproperConfigurationError):
        SqliteConfig(real_escape=False)
