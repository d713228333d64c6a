"""Unit tests for error reporters."""

import io
from unittest.mock import MagicMock

import msgspec
import pytest

from sqlhelper.exceptions import DatabaseConnectionError, DatabaseError
from sqlhelper.protocols import ErrorReporter
from sqlhelper.reporting import JSONErrorReporter, LoggingErrorReporter, RaisingErrorReporter, error_payload


def test_error_payload() -> None:
    """Test the payload carries the kind tag, the message and the statement."""
    error = DatabaseError("boom", sql="SELECT 1")
    assert error_payload(error) == {"status": "error", "error": "DatabaseError", "message": "boom", "sql": "SELECT 1"}


def test_error_payload_without_sql() -> None:
    assert error_payload(DatabaseConnectionError()) == {
        "status": "error",
        "error": "DatabaseConnectionError",
        "message": "Could not connect to the database.",
    }


@pytest.mark.parametrize("reporter_class", [LoggingErrorReporter, RaisingErrorReporter, JSONErrorReporter])
def test_reporters_satisfy_protocol(reporter_class: type) -> None:
    assert isinstance(reporter_class(), ErrorReporter)


def test_logging_reporter_logs_error() -> None:
    logger = MagicMock()
    error = DatabaseError("boom")

    LoggingErrorReporter(logger).report(error)

    logger.error.assert_called_once()
    assert logger.error.call_args.args[1:] == ("DatabaseError", "boom")
    assert logger.error.call_args.kwargs["exc_info"] is error
    assert logger.error.call_args.kwargs["extra"]["statement"].error == "DatabaseError"


def test_raising_reporter_reraises() -> None:
    error = DatabaseError("boom")
    with pytest.raises(DatabaseError) as exc_info:
        RaisingErrorReporter().report(error)
    assert exc_info.value is error


def test_json_reporter_writes_one_document() -> None:
    """Test the JSON reporter writes one JSON line and returns."""
    stream = io.StringIO()
    error = DatabaseError("boom", sql="SELEC 1")

    JSONErrorReporter(stream).report(error)

    output = stream.getvalue()
    assert output.endswith("\n")
    assert msgspec.json.decode(output.strip()) == error_payload(error)


def test_json_reporter_terminates() -> None:
    """Test the JSON reporter can end the request after writing."""
    stream = io.StringIO()

    with pytest.raises(SystemExit) as exc_info:
        JSONErrorReporter(stream, terminate=True).report(DatabaseConnectionError())

    assert exc_info.value.code == 1
    assert '"error":"DatabaseConnectionError"' in stream.getvalue()
