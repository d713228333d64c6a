"""The :class:`Database` helper: one connection, ad-hoc SQL and a cached last result."""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from sqlhelper.core import accessors
from sqlhelper.core.builders import BuiltStatement, build_delete, build_insert_replace, build_update
from sqlhelper.core.escaping import Escaper
from sqlhelper.core.executor import QueryExecutor
from sqlhelper.core.result import ExecutionOutcome, ResultSet
from sqlhelper.core.template import TemplateCompiler
from sqlhelper.exceptions import DatabaseConnectionError, MissingDependencyError, SQLBuilderError
from sqlhelper.utils.logging import get_logger

if TYPE_CHECKING:
    from types import TracebackType

    from sqlhelper.config import DatabaseConfig
    from sqlhelper.core.result import ColumnInfo
    from sqlhelper.protocols import DriverConnection, ErrorReporter
    from sqlhelper.typing import FieldTypes, FormatArg

__all__ = ("Database",)

logger = get_logger("database")


class Database:
    """A single database connection with query helpers.

    Every call to :meth:`query` replaces the cached result; the ``get_*``
    accessors read that cache. Not thread-safe: give each session its own
    instance or serialize access externally.

    Example::

        db = Database(SqliteConfig(field_types={"age": "%d"}))
        db.insert("users", {"name": "Alice", "age": 30})
        db.get_value(db.prepare("SELECT age FROM users WHERE name = %s", "Alice"))

    Args:
        config: Connection settings, escaping mode and per-column format defaults.

    Raises:
        DatabaseConnectionError: The connection could not be opened. The error
            is handed to the configured reporter first.
    """

    def __init__(self, config: "DatabaseConfig") -> None:
        self.config = config
        self.error_reporter: ErrorReporter = config.error_reporter
        self.field_types: dict[str, Any] = dict(config.field_types)
        try:
            connection = config.create_connection()
        except DatabaseConnectionError as exc:
            self.error_reporter.report(exc)
            raise

        self._executor = QueryExecutor(connection, self.error_reporter)
        self.escaper = Escaper(config.real_escape, connection.escape)
        self.compiler = TemplateCompiler(self.escaper, strict=config.strict_placeholders)

        self.affected_rows = 0
        self.insert_id: Optional[int] = 0
        self.num_rows = 0

    @classmethod
    def connect(
        cls,
        host: str,
        user: str,
        password: str,
        database: str,
        *,
        field_types: "Optional[FieldTypes]" = None,
        real_escape: Optional[bool] = None,
        strict_placeholders: bool = False,
        error_reporter: "Optional[ErrorReporter]" = None,
        **connection_params: Any,
    ) -> "Database":
        """Connect to a MySQL server through PyMySQL.

        Raises:
            MissingDependencyError: ``pymysql`` is not installed.
            DatabaseConnectionError: The server refused the connection or the credentials.
        """
        try:
            from sqlhelper.adapters.pymysql import PyMysqlConfig
        except ImportError as e:
            raise MissingDependencyError(package="pymysql") from e

        config = PyMysqlConfig(
            connection_config={"host": host, "user": user, "password": password, "database": database, **connection_params},
            field_types=field_types,
            real_escape=real_escape,
            strict_placeholders=strict_placeholders,
            error_reporter=error_reporter,
        )
        return cls(config)

    # -- connection lifecycle --
    @property
    def connection(self) -> "DriverConnection":
        return self._executor.connection

    def close(self) -> None:
        self._executor.connection.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        self.close()

    # -- cached state --
    @property
    def last_query(self) -> Optional[str]:
        return self._executor.last_query

    @property
    def outcome(self) -> Optional[ExecutionOutcome]:
        """The outcome of the latest statement, ``None`` before the first one."""
        return self._executor.current

    @property
    def result_set(self) -> ResultSet:
        return self._executor.result_set

    @property
    def last_result(self) -> "list[dict[str, Any]]":
        return list(self.result_set.rows)

    @property
    def column_info(self) -> "Optional[list[ColumnInfo]]":
        columns = self.result_set.columns
        return list(columns) if columns else None

    def flush(self) -> None:
        """Drop the cached result, its column metadata and the last query text."""
        self._executor.flush()

    # -- escaping and templates --
    def escape(self, value: Any) -> str:
        return self.escaper.escape(value)

    def escape_all(self, values: "Iterable[Any]") -> "list[str]":
        return self.escaper.escape_all(values)

    def prepare(self, template: Optional[str], *args: Any) -> Optional[str]:
        """Compile a ``%d``/``%f``/``%s``/``%%`` template into escaped SQL.

        Arguments may be passed one by one or as a single list. See
        :class:`~sqlhelper.core.template.TemplateCompiler`.
        """
        return self.compiler.compile(template, *args)

    # -- execution --
    def execute(self, sql: str) -> ExecutionOutcome:
        """Run ``sql`` and return its full outcome, replacing the cached result."""
        outcome = self._executor.execute(sql)
        if outcome.rows_affected is not None:
            self.affected_rows = outcome.rows_affected
            if outcome.captures_insert_id:
                self.insert_id = outcome.insert_id
        self.num_rows = outcome.result_set.num_rows
        return outcome

    def query(self, sql: Optional[str]) -> "Union[bool, int]":
        """Run ``sql``.

        Returns:
            ``False`` on a database error or when ``sql`` is ``None`` (nothing to
            run). Otherwise ``True`` for CREATE/ALTER/TRUNCATE/DROP, the affected
            row count for INSERT/UPDATE/DELETE/REPLACE, and the number of rows
            for everything else.
        """
        if sql is None:
            return False
        return self.execute(sql).value

    # -- accessors --
    def get_value(self, query: Optional[str] = None, col: int = 0, row: int = 0) -> Any:
        """Value at column position ``col`` of row ``row``.

        Runs ``query`` first when given; otherwise reads the cached result.
        """
        if query:
            self.query(query)
        return accessors.get_value(self.result_set, col, row)

    def get_row(self, query: Optional[str] = None, row: int = 0) -> "Optional[dict[str, Any]]":
        """Row ``row`` of ``query``. Without a query this returns ``None``."""
        if not query:
            return None
        self.query(query)
        return accessors.get_row(self.result_set, row)

    def get_column(self, query: Optional[str] = None, col: int = 0) -> "list[Any]":
        """Values of column position ``col`` for every row, from ``query`` or the cached result."""
        if query:
            self.query(query)
        return accessors.get_column(self.result_set, col)

    def get_results(self, query: Optional[str] = None) -> "Optional[list[dict[str, Any]]]":
        """Every row of ``query``. Without a query this returns ``None``."""
        if not query:
            return None
        self.query(query)
        return accessors.get_results(self.result_set)

    def get_column_info(self, info_type: str = "name", col_offset: int = -1) -> Any:
        """Column metadata of the cached result; ``None`` when there is none.

        See :func:`sqlhelper.core.accessors.get_column_info`.
        """
        return accessors.get_column_info(self.result_set, info_type, col_offset)

    # -- statement builders --
    def insert(self, table: str, data: "Mapping[str, Any]", formats: "FormatArg" = None) -> "Union[bool, int]":
        """Insert one row.

        Example::

            db.insert("table", {"column": "foo", "field": "bar"})
            db.insert("table", {"column": "foo", "field": 1337}, ["%s", "%d"])

        Returns:
            The number of rows inserted, or ``False`` on error or invalid input. An
            empty or non-mapping ``data`` returns ``False`` without running or
            reporting anything.
        """
        return self._insert_replace(table, data, formats, "INSERT")

    def replace(self, table: str, data: "Mapping[str, Any]", formats: "FormatArg" = None) -> "Union[bool, int]":
        """Replace one row (``REPLACE INTO``).

        Same arguments and return value as :meth:`insert`, including ``False`` for an
        empty or non-mapping ``data``.
        """
        return self._insert_replace(table, data, formats, "REPLACE")

    def update(
        self,
        table: str,
        data: "Mapping[str, Any]",
        where: "Mapping[str, Any]",
        formats: "FormatArg" = None,
        where_formats: "FormatArg" = None,
    ) -> "Union[bool, int]":
        """Update the rows matching every ``where`` clause.

        Example::

            db.update("table", {"column": "foo", "field": 1337}, {"ID": 1}, ["%s", "%d"], ["%d"])

        Returns:
            The number of rows updated, or ``False`` on error or invalid input. An
            empty or non-mapping ``data`` or ``where`` returns ``False`` without
            running or reporting anything.
        """
        return self._run_built(
            lambda: build_update(table, data, where, formats, where_formats, field_types=self.field_types)
        )

    def delete(self, table: str, where: "Mapping[str, Any]", where_formats: "FormatArg" = None) -> "Union[bool, int]":
        """Delete the rows matching every ``where`` clause.

        Table and column names are not backtick-quoted here, unlike the other builders.

        Returns:
            The number of rows deleted, or ``False`` on error or invalid input. An
            empty or non-mapping ``where`` returns ``False`` without running or
            reporting anything.
        """
        return self._run_built(lambda: build_delete(table, where, where_formats, field_types=self.field_types))

    def _insert_replace(
        self, table: str, data: "Mapping[str, Any]", formats: "FormatArg", statement_type: str
    ) -> "Union[bool, int]":
        return self._run_built(
            lambda: build_insert_replace(table, data, formats, statement_type, field_types=self.field_types)
        )

    def _run_built(self, build: "Callable[[], BuiltStatement]") -> "Union[bool, int]":
        try:
            statement = build()
        except SQLBuilderError as exc:
            logger.debug("Statement not built: %s", exc.detail)
            return False
        return self.query(self.prepare(statement.template, list(statement.arguments)))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(config={self.config!r})"
