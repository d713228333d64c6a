"""Integration tests for the Database helper on an in-memory SQLite database."""

from collections.abc import Generator

import pytest

from sqlhelper import Database, RaisingErrorReporter
from sqlhelper.adapters.sqlite import SqliteConfig
from sqlhelper.exceptions import SQLParsingError, UniqueViolationError


@pytest.fixture
def db() -> Generator[Database, None, None]:
    with Database(SqliteConfig(field_types={"age": "%d", "score": "%f"})) as database:
        assert (
            database.query(
                "CREATE TABLE users ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL UNIQUE, age INTEGER, score REAL)"
            )
            is True
        )
        yield database


def test_insert_and_read_back(db: Database) -> None:
    assert db.insert("users", {"name": "Alice", "age": 30}) == 1
    assert db.insert_id == 1
    assert db.insert("users", {"name": "Bob", "age": 25}) == 1
    assert db.insert_id == 2

    assert db.get_value("SELECT age FROM users WHERE name = 'Bob'") == 25
    assert db.get_results("SELECT name, age FROM users ORDER BY id") == [
        {"name": "Alice", "age": 30},
        {"name": "Bob", "age": 25},
    ]
    assert db.num_rows == 2
    assert db.get_column(None, 0) == ["Alice", "Bob"]


def test_quote_round_trip(db: Database) -> None:
    """Test a value with a quote is stored and matched literally."""
    db.insert("users", {"name": "it's", "age": 5})

    assert db.get_value(db.prepare("SELECT name FROM users WHERE name = %s", "it's")) == "it's"


def test_injection_attempt_is_stored_literally(db: Database) -> None:
    hostile = "x'; DROP TABLE users; --"
    assert db.insert("users", {"name": hostile}) == 1

    assert db.get_value(db.prepare("SELECT name FROM users WHERE name = %s", hostile)) == hostile
    assert db.get_value("SELECT COUNT(*) FROM users") == 1


def test_update_and_delete_return_affected_rows(db: Database) -> None:
    db.insert("users", {"name": "Alice", "age": 30})
    db.insert("users", {"name": "Bob", "age": 30})

    assert db.update("users", {"age": 31}, {"age": 30}) == 2
    assert db.affected_rows == 2
    assert db.update("users", {"age": 40}, {"name": "nobody"}) == 0
    assert db.delete("users", {"name": "Bob"}) == 1
    assert db.get_value("SELECT COUNT(*) FROM users") == 1


def test_replace(db: Database) -> None:
    db.insert("users", {"name": "Alice", "age": 30})
    db.replace("users", {"id": 1, "name": "Alice", "age": 35}, ["%d", "%s", "%d"])

    assert db.get_row("SELECT id, name, age FROM users") == {"id": 1, "name": "Alice", "age": 35}


def test_float_format(db: Database) -> None:
    db.insert("users", {"name": "Carol", "score": 1.5})
    assert db.get_value("SELECT score FROM users WHERE name = 'Carol'") == 1.5


def test_literal_percent_and_like(db: Database) -> None:
    db.insert("users", {"name": "Alice"})

    assert db.get_value(db.prepare("SELECT name FROM users WHERE name LIKE %s", "Al%")) == "Alice"
    assert db.get_value(db.prepare("SELECT '100%%' FROM users WHERE name = %s", "Alice")) == "100%"


def test_get_row_and_column_info(db: Database) -> None:
    db.insert("users", {"name": "Alice", "age": 30})

    assert db.get_row("SELECT * FROM users") == {"id": 1, "name": "Alice", "age": 30, "score": None}
    assert db.get_column_info() == ["id", "name", "age", "score"]
    assert db.get_column_info("name", 1) == "name"
    assert db.get_value(None, 3, 0) is None


def test_errors_return_false(db: Database) -> None:
    """Test rejected statements yield False and leave no stale rows."""
    db.insert("users", {"name": "Alice"})
    db.query("SELECT * FROM users")

    assert db.query("SELEC 1") is False
    assert db.get_value() is None
    assert db.insert("users", {"name": "Alice"}) is False
    assert db.query("") is False
    assert db.prepare("SELECT %s, %s", "only-one") == ""


def test_raising_reporter() -> None:
    with Database(SqliteConfig(error_reporter=RaisingErrorReporter())) as database:
        database.query("CREATE TABLE t (name TEXT UNIQUE)")
        database.insert("t", {"name": "a"})

        with pytest.raises(UniqueViolationError):
            database.insert("t", {"name": "a"})
        with pytest.raises(SQLParsingError):
            database.query("SELEC 1")


def test_drop_table(db: Database) -> None:
    assert db.query("DROP TABLE users") is True
    assert db.query("SELECT * FROM users") is False
