"""PyMySQL driver implementation.

Provides MySQL/MariaDB connectivity with error-code mapping and column metadata.
"""

import contextlib
from typing import TYPE_CHECKING, Any, Final, Optional

import pymysql
import pymysql.err
from pymysql.constants import FIELD_TYPE, FLAG

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

if TYPE_CHECKING:
    from pymysql.connections import Connection
    from pymysql.cursors import Cursor

__all__ = ("PyMysqlDriver", "PyMysqlExceptionHandler", "PyMysqlResultHandle")

MYSQL_ER_DUP_ENTRY: Final = 1062
MYSQL_ER_BAD_NULL_ERROR: Final = 1048
MYSQL_ER_NO_REFERENCED_ROW: Final = 1216
MYSQL_ER_ROW_IS_REFERENCED: Final = 1217
MYSQL_ER_ROW_IS_REFERENCED_2: Final = 1451
MYSQL_ER_NO_REFERENCED_ROW_2: Final = 1452
MYSQL_ER_EMPTY_QUERY: Final = 1065
MYSQL_ER_PARSE_ERROR: Final = 1064

_FOREIGN_KEY_CODES: Final = frozenset({
    MYSQL_ER_NO_REFERENCED_ROW,
    MYSQL_ER_ROW_IS_REFERENCED,
    MYSQL_ER_ROW_IS_REFERENCED_2,
    MYSQL_ER_NO_REFERENCED_ROW_2,
})

_FIELD_TYPE_NAMES: "dict[int, str]" = {}
for _name, _value in vars(FIELD_TYPE).items():
    # aliases such as CHAR = TINY come last; keep the first name
    if _name.isupper() and isinstance(_value, int):
        _FIELD_TYPE_NAMES.setdefault(_value, _name.lower())

_NUMERIC_FIELD_TYPES: Final = frozenset({
    FIELD_TYPE.DECIMAL,
    FIELD_TYPE.NEWDECIMAL,
    FIELD_TYPE.TINY,
    FIELD_TYPE.SHORT,
    FIELD_TYPE.LONG,
    FIELD_TYPE.INT24,
    FIELD_TYPE.LONGLONG,
    FIELD_TYPE.FLOAT,
    FIELD_TYPE.DOUBLE,
    FIELD_TYPE.YEAR,
})


class PyMysqlExceptionHandler:
    """Context manager that maps PyMySQL errors onto sqlhelper exceptions."""

    __slots__ = ("sql",)

    def __init__(self, sql: Optional[str] = None) -> None:
        self.sql = sql

    def __enter__(self) -> None:
        return None

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is None:
            return
        if issubclass(exc_type, pymysql.err.MySQLError):
            self._map_mysql_exception(exc_val)
        elif issubclass(exc_type, UnicodeError):
            msg = f"MySQL statement could not be encoded: {exc_val}"
            raise DataError(msg, sql=self.sql) from exc_val

    def _map_mysql_exception(self, error: Any) -> None:
        code: Optional[int] = None
        message = str(error)
        if len(error.args) >= 2 and isinstance(error.args[0], int):
            code, message = error.args[0], str(error.args[1])

        error_class: type[DatabaseError]
        if code == MYSQL_ER_DUP_ENTRY:
            error_class = UniqueViolationError
        elif code in _FOREIGN_KEY_CODES:
            error_class = ForeignKeyViolationError
        elif code == MYSQL_ER_BAD_NULL_ERROR:
            error_class = NotNullViolationError
        elif code in {MYSQL_ER_PARSE_ERROR, MYSQL_ER_EMPTY_QUERY}:
            error_class = SQLParsingError
        elif isinstance(error, pymysql.err.IntegrityError):
            error_class = IntegrityError
        elif isinstance(error, pymysql.err.DataError):
            error_class = DataError
        elif isinstance(error, pymysql.err.OperationalError):
            error_class = OperationalError
        else:
            error_class = DatabaseError

        code_str = f" [code {code}]" if code else ""
        raise error_class(f"MySQL error{code_str}: {message}", sql=self.sql, code=code) from error


def _column_info(description: "tuple[Any, ...]", field: Any = None) -> ColumnInfo:
    name, type_code, _, internal_size, _, _, null_ok = description
    flags = getattr(field, "flags", 0) or 0
    return ColumnInfo(
        name=name,
        table=getattr(field, "table_name", "") or "",
        type=_FIELD_TYPE_NAMES.get(type_code),
        max_length=internal_size,
        not_null=bool(flags & FLAG.NOT_NULL) if field is not None else not null_ok,
        primary_key=bool(flags & FLAG.PRI_KEY),
        unique_key=bool(flags & FLAG.UNIQUE_KEY),
        multiple_key=bool(flags & FLAG.MULTIPLE_KEY),
        numeric=type_code in _NUMERIC_FIELD_TYPES,
        blob=bool(flags & FLAG.BLOB),
        unsigned=bool(flags & FLAG.UNSIGNED),
        zerofill=bool(flags & FLAG.ZEROFILL),
    )


class PyMysqlResultHandle:
    """Rows of one executed PyMySQL cursor."""

    __slots__ = ("_columns", "_names", "cursor")

    def __init__(self, cursor: "Cursor") -> None:
        self.cursor = cursor
        description = cursor.description or ()
        # key flags and table names are only exposed on the protocol-level field packets
        result = getattr(cursor, "_result", None)
        fields = list(getattr(result, "fields", None) or ())
        if len(fields) != len(description):
            fields = [None] * len(description)
        self._names = [column[0] for column in description]
        self._columns = tuple(_column_info(column, field) for column, field in zip(description, fields))

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
        with contextlib.suppress(pymysql.err.MySQLError):
            self.cursor.close()


class PyMysqlDriver:
    """Driver connection on top of a ``pymysql`` connection."""

    dialect = "mysql"

    __slots__ = ("_affected_rows", "_last_insert_id", "connection")

    def __init__(self, connection: "Connection") -> None:
        self.connection = connection
        self._affected_rows = 0
        self._last_insert_id: Optional[int] = None

    def execute(self, sql: str) -> PyMysqlResultHandle:
        with PyMysqlExceptionHandler(sql):
            cursor = self.connection.cursor()
            try:
                cursor.execute(sql)
            except Exception:
                cursor.close()
                raise

        self._affected_rows = cursor.rowcount if cursor.rowcount and cursor.rowcount > 0 else 0
        self._last_insert_id = cursor.lastrowid
        return PyMysqlResultHandle(cursor)

    def affected_rows(self) -> int:
        return self._affected_rows

    def last_insert_id(self) -> Optional[int]:
        return self._last_insert_id

    def escape(self, value: str) -> str:
        """Escape with the server's rules for the connection's character set and SQL mode."""
        return self.connection.escape_string(value)

    def close(self) -> None:
        with contextlib.suppress(pymysql.err.MySQLError):
            self.connection.close()
