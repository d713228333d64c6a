"""sqlhelper: a small database helper for ad-hoc SQL, safe templates and quick result access."""

from sqlhelper import adapters, core, exceptions, typing, utils
from sqlhelper.__metadata__ import __version__
from sqlhelper.config import ConnectionParams, DatabaseConfig
from sqlhelper.core.result import ColumnInfo, ExecutionOutcome, ResultSet
from sqlhelper.database import Database
from sqlhelper.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    MissingDependencyError,
    ParameterError,
    SQLBuilderError,
    SQLHelperError,
)
from sqlhelper.reporting import JSONErrorReporter, LoggingErrorReporter, RaisingErrorReporter
from sqlhelper.typing import FormatSpecifier

__all__ = (
    "ColumnInfo",
    "ConnectionParams",
    "Database",
    "DatabaseConfig",
    "DatabaseConnectionError",
    "DatabaseError",
    "ExecutionOutcome",
    "FormatSpecifier",
    "JSONErrorReporter",
    "LoggingErrorReporter",
    "MissingDependencyError",
    "ParameterError",
    "RaisingErrorReporter",
    "ResultSet",
    "SQLBuilderError",
    "SQLHelperError",
    "__version__",
    "adapters",
    "core",
    "exceptions",
    "typing",
    "utils",
)
