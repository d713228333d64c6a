"""SQLite database configuration."""

import sqlite3
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict

from typing_extensions import NotRequired

from sqlhelper.adapters.sqlite.driver import SqliteDriver
from sqlhelper.config import DatabaseConfig
from sqlhelper.exceptions import DatabaseConnectionError, ImproperConfigurationError
from sqlhelper.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlhelper.protocols import ErrorReporter
    from sqlhelper.typing import FieldTypes

__all__ = ("SqliteConfig", "SqliteConnectionParams")

logger = get_logger("adapters.sqlite")


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[Optional[str]]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


class SqliteConfig(DatabaseConfig):
    """SQLite configuration.

    Defaults to an in-memory database in autocommit mode. Escaping defaults to the
    native quote-doubling; backslash escaping is rejected because SQLite string
    literals do not honour it.
    """

    driver_name: "ClassVar[str]" = "sqlite"
    default_real_escape: "ClassVar[bool]" = True

    def __init__(
        self,
        *,
        connection_config: "SqliteConnectionParams | dict[str, Any] | None" = None,
        field_types: "Optional[FieldTypes]" = None,
        real_escape: Optional[bool] = None,
        strict_placeholders: bool = False,
        error_reporter: "Optional[ErrorReporter]" = None,
    ) -> None:
        params: dict[str, Any] = dict(connection_config or {})
        params.setdefault("database", ":memory:")
        params.setdefault("isolation_level", None)
        super().__init__(
            connection_config=params,
            field_types=field_types,
            real_escape=real_escape,
            strict_placeholders=strict_placeholders,
            error_reporter=error_reporter,
        )
        if not self.real_escape:
            msg = "SQLite does not honour backslash escapes; SqliteConfig requires real_escape=True"
            raise ImproperConfigurationError(msg)

    def create_connection(self) -> SqliteDriver:
        try:
            connection = sqlite3.connect(**self.connection_config)
        except sqlite3.Error as e:
            msg = f"Could not open SQLite database {self.connection_config.get('database')!r}: {e}"
            raise DatabaseConnectionError(msg) from e
        logger.debug("Opened SQLite database %s", self.connection_config["database"])
        return SqliteDriver(connection)
