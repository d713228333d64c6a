import contextlib
import sqlite3
from typing import Any, Final, Optional

from sqlhelper.core.result import ColumnInfo
from sqlhelper.exceptions import (
    DataError,
    DatabaseError,
    ForeignKeyViolationError,
    IntegrityError,
    NotNullViolationError,
    OperationalError,
    SQLParsingError,
    UniqueViolationError,
)

__all__ = ("SqliteDriver", "SqliteExceptionHandler", "SqliteResultHandle")

SQLITE_CONSTRAINT_UNIQUE_CODE: Final = 2067
SQLITE_CONSTRAINT_PRIMARYKEY_CODE: Final = 1555
SQLITE_CONSTRAINT_FOREIGNKEY_CODE: Final = 787
SQLITE_CONSTRAINT_NOTNULL_CODE: Final = 1299


class SqliteExceptionHandler:
    """Context manager that maps ``sqlite3`` errors onto sqlhelper exceptions.

    Extended result codes are used when the interpreter exposes them, the error
    message otherwise.
    """

    __slots__ = ("sql",)

    def __init__(self, sql: Optional[str] = None) -> None:
        self.sql = sql

    def __enter__(self) -> None:
        return None

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is None:
            return
        if issubclass(exc_type, sqlite3.Error):
            self._map_sqlite_exception(exc_val)
        elif issubclass(exc_type, (UnicodeError, sqlite3.Warning)):
            self._map_rejected_input(exc_val)

    def _map_rejected_input(self, error: Exception) -> None:
        # values that cannot be encoded, or several statements in one call on older sqlite3 modules
        error_class = DataError if isinstance(error, UnicodeError) else DatabaseError
        msg = f"SQLite rejected the statement: {error}"
        raise error_class(msg, sql=self.sql) from error

    def _map_sqlite_exception(self, error: sqlite3.Error) -> None:
        code: Optional[int] = getattr(error, "sqlite_errorcode", None)
        message = str(error)
        lowered = message.lower()

        error_class: type[DatabaseError]
        if isinstance(error, sqlite3.IntegrityError):
            if code in {SQLITE_CONSTRAINT_UNIQUE_CODE, SQLITE_CONSTRAINT_PRIMARYKEY_CODE} or "unique" in lowered:
                error_class = UniqueViolationError
            elif code == SQLITE_CONSTRAINT_FOREIGNKEY_CODE or "foreign key" in lowered:
                error_class = ForeignKeyViolationError
            elif code == SQLITE_CONSTRAINT_NOTNULL_CODE or "not null" in lowered:
                error_class = NotNullViolationError
            else:
                error_class = IntegrityError
        elif isinstance(error, sqlite3.OperationalError):
            if "syntax error" in lowered or "incomplete input" in lowered or "unrecognized token" in lowered:
                error_class = SQLParsingError
            else:
                error_class = OperationalError
        elif isinstance(error, sqlite3.DataError):
            error_class = DataError
        else:
            error_class = DatabaseError

        code_str = f" [code {code}]" if code else ""
        raise error_class(f"SQLite error{code_str}: {message}", sql=self.sql, code=code) from error


class SqliteResultHandle:
    """Rows of one executed ``sqlite3`` cursor."""

    __slots__ = ("_columns", "_names", "cursor")

    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self.cursor = cursor
        description = cursor.description or ()
        self._names = [column[0] for column in description]
        self._columns = tuple(ColumnInfo(name=name) for name in self._names)

    def columns(self) -> "tuple[ColumnInfo, ...]":
        return self._columns

    def fetch_row(self) -> "Optional[dict[str, Any]]":
        if not self._names:
            return None
        row = self.cursor.fetchone()
        if row is None:
            return None
        return dict(zip(self._names, row))

    def release(self) -> None:
        with contextlib.suppress(sqlite3.Error):
            self.cursor.close()


class SqliteDriver:
    """Driver connection on top of a ``sqlite3.Connection``.

    The connection should be opened in autocommit mode (``isolation_level=None``);
    sqlhelper never commits.
    """

    dialect = "sqlite"

    __slots__ = ("_affected_rows", "_last_insert_id", "connection")

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection
        self._affected_rows = 0
        self._last_insert_id: Optional[int] = None

    def execute(self, sql: str) -> SqliteResultHandle:
        if not sql or not sql.strip():
            msg = "Query was empty"
            raise SQLParsingError(msg, sql=sql)

        with SqliteExceptionHandler(sql):
            cursor = self.connection.cursor()
            try:
                cursor.execute(sql)
            except Exception:
                cursor.close()
                raise

        self._affected_rows = cursor.rowcount if cursor.rowcount > 0 else 0
        self._last_insert_id = cursor.lastrowid
        return SqliteResultHandle(cursor)

    def affected_rows(self) -> int:
        return self._affected_rows

    def last_insert_id(self) -> Optional[int]:
        return self._last_insert_id

    def escape(self, value: str) -> str:
        """SQLite string literals escape a single quote by doubling it."""
        return value.replace("'", "''")

    def close(self) -> None:
        self.connection.close()
