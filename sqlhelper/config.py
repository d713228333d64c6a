"""Database configuration shared by all driver adapters."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict

from typing_extensions import NotRequired

from sqlhelper.core.builders import coerce_specifier
from sqlhelper.reporting import LoggingErrorReporter

if TYPE_CHECKING:
    from sqlhelper.protocols import DriverConnection, ErrorReporter
    from sqlhelper.typing import FieldTypes, FormatSpecifier

__all__ = ("ConnectionParams", "DatabaseConfig")


class ConnectionParams(TypedDict, total=False):
    """Connection parameters shared by the network drivers."""

    host: NotRequired[str]
    """Host where the database server is located."""

    user: NotRequired[str]
    """The username used to authenticate with the database."""

    password: NotRequired[str]
    """The password used to authenticate with the database."""

    database: NotRequired[str]
    """The database name to use."""

    port: NotRequired[int]
    """The TCP/IP port of the database server."""

    charset: NotRequired[str]
    """The character set to use for the connection."""

    connect_timeout: NotRequired[float]
    """Timeout before throwing an error when connecting."""


class DatabaseConfig(ABC):
    """Settings for one database connection and its query helpers.

    Args:
        connection_config: Driver connection parameters.
        field_types: Default format specifier per column name, e.g. ``{"id": "%d"}``.
            Columns not listed default to ``%s``.
        real_escape: Escape with the driver's native routine instead of backslash escaping.
        strict_placeholders: Raise on a placeholder/argument count mismatch instead
            of letting the database reject the resulting empty statement.
        error_reporter: Receives connection and driver errors. Defaults to logging them.
    """

    driver_name: "ClassVar[str]" = ""
    default_real_escape: "ClassVar[bool]" = False

    def __init__(
        self,
        *,
        connection_config: "Optional[dict[str, Any]]" = None,
        field_types: "Optional[FieldTypes]" = None,
        real_escape: Optional[bool] = None,
        strict_placeholders: bool = False,
        error_reporter: "Optional[ErrorReporter]" = None,
    ) -> None:
        self.connection_config: dict[str, Any] = dict(connection_config or {})
        self.field_types: dict[str, FormatSpecifier] = {
            column: coerce_specifier(form) for column, form in (field_types or {}).items()
        }
        self.real_escape = self.default_real_escape if real_escape is None else real_escape
        self.strict_placeholders = strict_placeholders
        self.error_reporter: ErrorReporter = error_reporter or LoggingErrorReporter()

    @abstractmethod
    def create_connection(self) -> "DriverConnection":
        """Open a new connection.

        Raises:
            DatabaseConnectionError: The server refused the connection or the credentials.
        """

    def __repr__(self) -> str:
        safe = {key: value for key, value in self.connection_config.items() if key != "password"}
        return f"{self.__class__.__name__}(connection_config={safe!r}, real_escape={self.real_escape!r})"
