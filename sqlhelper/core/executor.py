"""Statement execution against a single driver connection."""

import time
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Optional, Union

from mypy_extensions import mypyc_attr

from sqlhelper.core.classifier import StatementKind, classify_statement
from sqlhelper.core.result import EMPTY_RESULT_SET, ExecutionOutcome, ResultSet
from sqlhelper.exceptions import DatabaseError
from sqlhelper.reporting import LoggingErrorReporter
from sqlhelper.utils.logging import get_logger, log_statement

if TYPE_CHECKING:
    from sqlhelper.core.classifier import StatementClassification
    from sqlhelper.protocols import DriverConnection, ErrorReporter, ResultHandle

__all__ = ("QueryExecutor",)

logger = get_logger("core.executor")


@mypyc_attr(allow_interpreted_subclasses=True)
class QueryExecutor:
    """Runs statements on one connection and keeps the outcome of the latest one.

    Not thread-safe: sessions that run concurrently need their own executor, or
    must hold a lock around the execute-then-read sequence.

    Args:
        connection: The open driver connection. The executor owns it from now on.
        error_reporter: Receives driver errors. Defaults to logging them.
    """

    __slots__ = ("connection", "current", "error_reporter", "last_query")

    def __init__(self, connection: "DriverConnection", error_reporter: "Optional[ErrorReporter]" = None) -> None:
        self.connection = connection
        self.error_reporter: ErrorReporter = error_reporter or LoggingErrorReporter()
        self.last_query: Optional[str] = None
        self.current: Optional[ExecutionOutcome] = None

    @property
    def result_set(self) -> ResultSet:
        """Rows and columns of the latest statement; empty if it was not a read."""
        if self.current is None:
            return EMPTY_RESULT_SET
        return self.current.result_set

    def flush(self) -> None:
        """Forget the latest outcome and statement text."""
        self.current = None
        self.last_query = None

    def execute(self, sql: str) -> ExecutionOutcome:
        """Run ``sql`` and return its outcome.

        Driver errors are handed to the error reporter; if the reporter returns,
        the outcome carries the error and ``value`` is ``False``.
        """
        self.flush()
        self.last_query = sql

        started = time.perf_counter()
        try:
            handle = self.connection.execute(sql)
        except DatabaseError as exc:
            if exc.sql is None:
                exc.sql = sql
            self.current = ExecutionOutcome(
                sql=sql, success=False, error=exc, execution_time=time.perf_counter() - started
            )
            self.error_reporter.report(exc)
            return self.current

        classification = classify_statement(sql)
        try:
            outcome = self._build_outcome(sql, classification, handle)
        finally:
            handle.release()

        self.current = replace(outcome, execution_time=time.perf_counter() - started)
        log_statement(logger, self.current)
        return self.current

    def query(self, sql: str) -> "Union[bool, int]":
        """Run ``sql`` and return the classic scalar result.

        Returns:
            ``False`` on error, the success flag for DDL, the affected row count for
            INSERT/UPDATE/DELETE/REPLACE, and the number of rows otherwise.
        """
        return self.execute(sql).value

    def _build_outcome(
        self, sql: str, classification: "StatementClassification", handle: "ResultHandle"
    ) -> ExecutionOutcome:
        if classification.kind is StatementKind.DDL:
            return ExecutionOutcome(sql=sql, kind=classification.kind, keyword=classification.keyword, success=True)

        if classification.kind is StatementKind.MUTATION:
            insert_id = self.connection.last_insert_id() if classification.captures_insert_id else None
            return ExecutionOutcome(
                sql=sql,
                kind=classification.kind,
                keyword=classification.keyword,
                rows_affected=self.connection.affected_rows(),
                insert_id=insert_id,
            )

        columns = tuple(handle.columns())
        rows: list[dict[str, Any]] = []
        while (row := handle.fetch_row()) is not None:
            rows.append(row)
        return ExecutionOutcome(
            sql=sql,
            kind=classification.kind,
            keyword=classification.keyword,
            result_set=ResultSet(rows=tuple(rows), columns=columns),
        )
