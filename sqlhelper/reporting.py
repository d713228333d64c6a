"""Error reporters.

The executor hands every fatal error to a reporter instead of formatting the
client-facing payload itself.
"""

import sys
from typing import IO, TYPE_CHECKING, Any, Optional

import msgspec

from sqlhelper.utils.logging import get_logger, log_error

if TYPE_CHECKING:
    import logging

    from sqlhelper.exceptions import SQLHelperError

__all__ = ("JSONErrorReporter", "LoggingErrorReporter", "RaisingErrorReporter", "error_payload")


def error_payload(error: "SQLHelperError") -> "dict[str, Any]":
    """Structured form of an error: its kind tag and its message."""
    payload: dict[str, Any] = {"status": "error", "error": type(error).__name__, "message": error.detail or str(error)}
    sql = getattr(error, "sql", None)
    if sql:
        payload["sql"] = sql
    return payload


class LoggingErrorReporter:
    """Logs the error and lets the caller continue with a falsy result."""

    __slots__ = ("logger",)

    def __init__(self, logger: "Optional[logging.Logger]" = None) -> None:
        self.logger = logger or get_logger("reporting")

    def report(self, error: "SQLHelperError") -> None:
        log_error(self.logger, error)


class RaisingErrorReporter:
    """Terminates the request by re-raising the error."""

    __slots__ = ()

    def report(self, error: "SQLHelperError") -> None:
        raise error


class JSONErrorReporter:
    """Writes the error as one JSON document to ``stream``.

    Args:
        stream: Where to write. Defaults to ``sys.stdout``.
        terminate: Raise :class:`SystemExit` after writing, ending the request.
    """

    __slots__ = ("_encoder", "stream", "terminate")

    def __init__(self, stream: "Optional[IO[str]]" = None, terminate: bool = False) -> None:
        self.stream = stream
        self.terminate = terminate
        self._encoder = msgspec.json.Encoder()

    def report(self, error: "SQLHelperError") -> None:
        stream = self.stream or sys.stdout
        stream.write(self._encoder.encode(error_payload(error)).decode())
        stream.write("\n")
        stream.flush()
        if self.terminate:
            raise SystemExit(1) from error
