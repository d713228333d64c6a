"""Runtime-checkable protocols for the collaborators sqlhelper talks to.

A driver adapter provides a :class:`DriverConnection`; an application may plug in
its own :class:`ErrorReporter`.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqlhelper.core.result import ColumnInfo
    from sqlhelper.exceptions import SQLHelperError

__all__ = ("DriverConnection", "ErrorReporter", "ResultHandle")


@runtime_checkable
class ResultHandle(Protocol):
    """Driver-side result of one executed statement."""

    def columns(self) -> "Sequence[ColumnInfo]":
        """Column descriptors, in result order. Empty for statements without rows."""
        ...

    def fetch_row(self) -> "Optional[dict[str, Any]]":
        """Next record keyed by column name, or ``None`` at the end."""
        ...

    def release(self) -> None:
        """Free the driver-side resources held by this result."""
        ...


@runtime_checkable
class DriverConnection(Protocol):
    """An open connection to one database.

    ``execute`` raises :class:`~sqlhelper.exceptions.DatabaseError` (or a
    subclass) when the database rejects the statement.
    """

    def execute(self, sql: str) -> ResultHandle:
        ...

    def affected_rows(self) -> int:
        ...

    def last_insert_id(self) -> Optional[int]:
        ...

    def escape(self, value: str) -> str:
        """Escape ``value`` for the connection's character set."""
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class ErrorReporter(Protocol):
    """Receives unrecoverable errors.

    A reporter may serialize the error for the client and may terminate the
    request by raising; when it returns, the caller carries on with a falsy result.
    """

    def report(self, error: "SQLHelperError") -> None:
        ...
