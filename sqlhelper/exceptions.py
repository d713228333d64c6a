from typing import Any, Optional

__all__ = (
    "DataError",
    "DatabaseConnectionError",
    "DatabaseError",
    "ExtraParameterError",
    "ForeignKeyViolationError",
    "ImproperConfigurationError",
    "IntegrityError",
    "MissingDependencyError",
    "MissingParameterError",
    "NotNullViolationError",
    "OperationalError",
    "ParameterError",
    "SQLBuilderError",
    "SQLHelperError",
    "SQLParsingError",
    "UniqueViolationError",
)


class SQLHelperError(Exception):
    """Base exception class from which all sqlhelper exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLHelperError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(SQLHelperError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install sqlhelper[{install_package or package}]' to install sqlhelper with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(SQLHelperError):
    """Improper Configuration error.

    Raised when a configuration value cannot be used to build a connection or a statement.
    """


# -- Connection and driver errors --
class DatabaseConnectionError(SQLHelperError):
    """The database server refused the connection or the credentials."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Could not connect to the database."
        super().__init__(message)


class DatabaseError(SQLHelperError):
    """A submitted statement was rejected by the database.

    Attributes:
        sql: The statement that failed, when known.
        code: The native driver error code, when known.
    """

    sql: Optional[str]
    code: Optional[int]

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None, code: Optional[int] = None) -> None:
        if message is None:
            message = "The database rejected the statement."
        super().__init__(message)
        self.sql = sql
        self.code = code


class SQLParsingError(DatabaseError):
    """The database could not parse the statement (syntax error, empty query)."""


class OperationalError(DatabaseError):
    """Operational failure such as a lost connection or a locked table."""


class DataError(DatabaseError):
    """A value could not be stored in the target column."""


class IntegrityError(DatabaseError):
    """Data integrity error."""


class UniqueViolationError(IntegrityError):
    """A unique or primary key constraint was violated."""


class ForeignKeyViolationError(IntegrityError):
    """A foreign key constraint was violated."""


class NotNullViolationError(IntegrityError):
    """A NOT NULL constraint was violated."""


# -- Statement building errors --
class SQLBuilderError(SQLHelperError):
    """Issues building an INSERT, REPLACE, UPDATE or DELETE statement."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


# -- Template parameter errors --
class ParameterError(SQLHelperError):
    """Base class for placeholder and argument errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MissingParameterError(ParameterError):
    """Raised when the template has more placeholders than arguments."""


class ExtraParameterError(ParameterError):
    """Raised when more arguments are supplied than the template has placeholders."""

