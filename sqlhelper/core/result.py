"""Result values produced by the query executor.

Every executed statement yields one immutable :class:`ExecutionOutcome`. Read
statements carry their rows and column metadata in a :class:`ResultSet`; the
other kinds carry an empty one.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final, Optional, Union

from sqlhelper.core.classifier import INSERT_ID_KEYWORDS, StatementKind

if TYPE_CHECKING:
    from sqlhelper.exceptions import DatabaseError

__all__ = ("COLUMN_INFO_ALIASES", "COLUMN_INFO_FIELDS", "ColumnInfo", "EMPTY_RESULT_SET", "ExecutionOutcome", "ResultSet")


@dataclass(frozen=True)
class ColumnInfo:
    """Metadata of one result column, as reported by the driver.

    Drivers that do not report an attribute leave its default in place.
    """

    name: str
    table: str = ""
    type: Optional[str] = None
    default: Any = None
    max_length: Optional[int] = None
    not_null: bool = False
    primary_key: bool = False
    unique_key: bool = False
    multiple_key: bool = False
    numeric: bool = False
    blob: bool = False
    unsigned: bool = False
    zerofill: bool = False


COLUMN_INFO_FIELDS: Final = frozenset(ColumnInfo.__dataclass_fields__)
COLUMN_INFO_ALIASES: Final = {"def": "default"}


@dataclass(frozen=True)
class ResultSet:
    """Rows and column metadata of one read statement.

    Rows are ``dict`` records keyed by column name, in the column order the
    driver returned.
    """

    rows: "tuple[dict[str, Any], ...]" = ()
    columns: "tuple[ColumnInfo, ...]" = ()

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    @property
    def column_names(self) -> "list[str]":
        return [column.name for column in self.columns]

    def __len__(self) -> int:
        return len(self.rows)

    def __bool__(self) -> bool:
        return bool(self.rows) or bool(self.columns)


EMPTY_RESULT_SET: Final = ResultSet()


@dataclass(frozen=True)
class ExecutionOutcome:
    """What happened when one statement was executed.

    Attributes:
        sql: The statement that was submitted.
        kind: The statement bucket, ``None`` when the driver rejected it.
        keyword: The leading keyword, upper-cased.
        success: Raw success indicator from the driver.
        rows_affected: Affected rows, for mutations.
        insert_id: Generated identifier, for INSERT and REPLACE.
        result_set: Rows and columns, for reads.
        error: The driver error, when the statement was rejected.
        execution_time: Seconds spent in the driver.
    """

    sql: str
    kind: Optional[StatementKind] = None
    keyword: str = ""
    success: bool = True
    rows_affected: Optional[int] = None
    insert_id: Optional[int] = None
    result_set: ResultSet = field(default=EMPTY_RESULT_SET)
    error: "Optional[DatabaseError]" = None
    execution_time: Optional[float] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def captures_insert_id(self) -> bool:
        return self.keyword in INSERT_ID_KEYWORDS

    @property
    def value(self) -> "Union[bool, int]":
        """The classic ``query()`` return value.

        ``False`` on error, the success indicator for DDL, the affected row
        count for mutations and the row count for reads.
        """
        if self.error is not None or self.kind is None:
            return False
        if self.kind is StatementKind.DDL:
            return self.success
        if self.kind is StatementKind.MUTATION:
            return self.rows_affected or 0
        return self.result_set.num_rows
