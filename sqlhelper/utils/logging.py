"""Statement logging for sqlhelper.

Loggers live under the ``sqlhelper`` namespace. Executed statements and reported
errors attach a :class:`StatementFields` record to the log record as
``record.statement``; :class:`StatementFormatter` writes it out as JSON lines.
"""

import logging
import sys
from typing import IO, TYPE_CHECKING, Optional, Union

import msgspec

if TYPE_CHECKING:
    from sqlhelper.core.result import ExecutionOutcome
    from sqlhelper.exceptions import SQLHelperError

__all__ = (
    "ROOT_LOGGER_NAME",
    "StatementFields",
    "StatementFormatter",
    "configure_logging",
    "get_logger",
    "log_error",
    "log_statement",
)

ROOT_LOGGER_NAME = "sqlhelper"

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class StatementFields(msgspec.Struct, omit_defaults=True):
    """Details of one executed or rejected statement.

    Unset attributes are left out of the encoded record.
    """

    kind: Optional[str] = None
    keyword: Optional[str] = None
    rows_affected: Optional[int] = None
    num_rows: Optional[int] = None
    insert_id: Optional[int] = None
    execution_time: Optional[float] = None
    error: Optional[str] = None
    code: Optional[int] = None
    sql: Optional[str] = None


class _LogEntry(msgspec.Struct, omit_defaults=True):
    timestamp: str
    level: str
    logger: str
    message: str
    statement: Optional[StatementFields] = None
    exception: Optional[str] = None


_encoder = msgspec.json.Encoder()


class StatementFormatter(logging.Formatter):
    """One JSON object per record, with statement details nested under ``statement``."""

    def format(self, record: logging.LogRecord) -> str:
        statement = getattr(record, "statement", None)
        entry = _LogEntry(
            timestamp=self.formatTime(record, self.datefmt),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
            statement=statement if isinstance(statement, StatementFields) else None,
            exception=self.formatException(record.exc_info) if record.exc_info else None,
        )
        return _encoder.encode(entry).decode()


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``sqlhelper.<name>``, or the package logger when no name is given."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def log_statement(logger: logging.Logger, outcome: "ExecutionOutcome") -> None:
    """Log an executed statement at DEBUG with its kind, counts and timing.

    ``num_rows`` is only recorded for statements that produced a result set.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    fields = StatementFields(
        kind=str(outcome.kind) if outcome.kind is not None else None,
        keyword=outcome.keyword or None,
        rows_affected=outcome.rows_affected,
        num_rows=outcome.result_set.num_rows if outcome.result_set else None,
        insert_id=outcome.insert_id,
        execution_time=outcome.execution_time,
    )
    logger.debug("Executed %s statement", outcome.keyword or "unclassified", extra={"statement": fields})


def log_error(logger: logging.Logger, error: "SQLHelperError") -> None:
    """Log a reported error at ERROR with its kind, native code and statement."""
    fields = StatementFields(
        error=type(error).__name__, code=getattr(error, "code", None), sql=getattr(error, "sql", None)
    )
    logger.error(
        "%s: %s", type(error).__name__, error.detail or error, exc_info=error, extra={"statement": fields}
    )


def configure_logging(
    level: Union[int, str] = logging.INFO, structured: bool = True, stream: "Optional[IO[str]]" = None
) -> logging.Handler:
    """Send sqlhelper logs to ``stream`` (stderr by default).

    Replaces any handler installed by a previous call and stops propagation to
    the root logger.

    Args:
        level: Level name or number for the ``sqlhelper`` logger.
        structured: JSON lines via :class:`StatementFormatter`; plain text otherwise.
        stream: Where to write.

    Returns:
        The installed handler.
    """
    logger = get_logger()
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StatementFormatter() if structured else logging.Formatter(_PLAIN_FORMAT))
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
    return handler
