from __future__ import annotations

from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from sqlhelper.config import DatabaseConfig
from sqlhelper.core.result import ColumnInfo
from sqlhelper.database import Database


class StubConfig(DatabaseConfig):
    """Configuration that hands out a prepared driver connection."""

    driver_name = "stub"

    def __init__(self, connection: Any, **kwargs: Any) -> None:
        self._connection = connection
        super().__init__(**kwargs)

    def create_connection(self) -> Any:
        return self._connection


def _make_handle(rows: list[dict[str, Any]] | None = None, columns: tuple[str, ...] = ()) -> MagicMock:
    handle = MagicMock()
    handle.columns.return_value = tuple(ColumnInfo(name=name) for name in columns)
    handle.fetch_row.side_effect = [*(rows or []), None]
    return handle


@pytest.fixture
def make_handle() -> Callable[..., MagicMock]:
    """Factory for mock result handles yielding the given rows."""
    return _make_handle


@pytest.fixture
def mock_connection() -> MagicMock:
    """Create a mock driver connection with quote-doubling native escaping."""
    connection = MagicMock()
    connection.execute.return_value = _make_handle()
    connection.affected_rows.return_value = 1
    connection.last_insert_id.return_value = 5
    connection.escape.side_effect = lambda value: value.replace("'", "''")
    return connection


@pytest.fixture
def make_database(mock_connection: MagicMock) -> Callable[..., Database]:
    """Factory for a :class:`Database` on top of ``mock_connection``."""

    def _factory(**kwargs: Any) -> Database:
        return Database(StubConfig(mock_connection, **kwargs))

    return _factory


@pytest.fixture
def stub_config_class() -> type[DatabaseConfig]:
    return StubConfig
