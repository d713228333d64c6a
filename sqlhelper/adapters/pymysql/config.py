"""PyMySQL database configuration."""

from typing import TYPE_CHECKING, Any, ClassVar, Optional

import pymysql
import pymysql.err
from typing_extensions import NotRequired

from sqlhelper.adapters.pymysql.driver import PyMysqlDriver
from sqlhelper.config import ConnectionParams, DatabaseConfig
from sqlhelper.exceptions import DatabaseConnectionError
from sqlhelper.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlhelper.protocols import ErrorReporter
    from sqlhelper.typing import FieldTypes

__all__ = ("PyMysqlConfig", "PyMysqlConnectionParams")

logger = get_logger("adapters.pymysql")


class PyMysqlConnectionParams(ConnectionParams, total=False):
    """PyMySQL connection parameters.

    Based on ``pymysql.connect()``.
    """

    unix_socket: NotRequired[str]
    """The location of the Unix socket file."""

    autocommit: NotRequired[bool]
    """If True, autocommit mode will be enabled."""

    sql_mode: NotRequired[str]
    """Default SQL_MODE to use."""

    init_command: NotRequired[str]
    """Initial SQL statement to execute once connected."""

    ssl: NotRequired[Any]
    """SSL connection parameters."""


class PyMysqlConfig(DatabaseConfig):
    """MySQL / MariaDB configuration through PyMySQL.

    Connections are opened in autocommit mode unless ``autocommit`` is given.
    """

    driver_name: "ClassVar[str]" = "pymysql"
    default_real_escape: "ClassVar[bool]" = False

    def __init__(
        self,
        *,
        connection_config: "PyMysqlConnectionParams | dict[str, Any] | None" = None,
        field_types: "Optional[FieldTypes]" = None,
        real_escape: Optional[bool] = None,
        strict_placeholders: bool = False,
        error_reporter: "Optional[ErrorReporter]" = None,
    ) -> None:
        params: dict[str, Any] = dict(connection_config or {})
        params.setdefault("autocommit", True)
        super().__init__(
            connection_config=params,
            field_types=field_types,
            real_escape=real_escape,
            strict_placeholders=strict_placeholders,
            error_reporter=error_reporter,
        )

    def create_connection(self) -> PyMysqlDriver:
        try:
            connection = pymysql.connect(**self.connection_config)
        except pymysql.err.MySQLError as e:
            msg = f"Could not connect to MySQL at {self.connection_config.get('host', 'localhost')!r}: {e}"
            raise DatabaseConnectionError(msg) from e
        logger.debug(
            "Connected to MySQL %s/%s",
            self.connection_config.get("host", "localhost"),
            self.connection_config.get("database", ""),
        )
        return PyMysqlDriver(connection)
