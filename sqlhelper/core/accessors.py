"""Read helpers over a :class:`~sqlhelper.core.result.ResultSet`.

These never execute anything and never raise on out-of-range access; absence
is reported as ``None``.
"""

from typing import Any, Optional, Union

from sqlhelper.core.result import COLUMN_INFO_ALIASES, COLUMN_INFO_FIELDS, ResultSet

__all__ = ("get_column", "get_column_info", "get_results", "get_row", "get_value")


def _in_range(index: int, size: int) -> bool:
    return 0 <= index < size


def get_row(result: ResultSet, row: int = 0) -> "Optional[dict[str, Any]]":
    """Return record ``row``, or ``None`` when there is no such row."""
    if not _in_range(row, len(result.rows)):
        return None
    return result.rows[row]


def get_value(result: ResultSet, col: int = 0, row: int = 0) -> Any:
    """Return the value at ordinal position ``col`` of record ``row``.

    Columns are counted in the record's field order, not looked up by name.
    ``None`` when the position does not exist, or the value is ``None`` or ``""``.
    """
    record = get_row(result, row)
    if record is None:
        return None
    values = list(record.values())
    if not _in_range(col, len(values)):
        return None
    value = values[col]
    if value is None or value == "":
        return None
    return value


def get_column(result: ResultSet, col: int = 0) -> "list[Any]":
    """Return :func:`get_value` of column ``col`` for every row, in row order."""
    return [get_value(result, col, row) for row in range(len(result.rows))]


def get_results(result: ResultSet) -> "list[dict[str, Any]]":
    return list(result.rows)


def get_column_info(result: ResultSet, info_type: str = "name", col_offset: int = -1) -> "Union[list[Any], Any, None]":
    """Return one metadata attribute for every column, or for one column.

    Args:
        result: The result set to read.
        info_type: One of name, table, def/default, type, max_length, not_null,
            primary_key, unique_key, multiple_key, numeric, blob, unsigned, zerofill.
        col_offset: ``-1`` for all columns, otherwise the column position.

    Returns:
        A list in column order when ``col_offset`` is ``-1``, the single value
        otherwise. ``None`` when no column metadata is available or the offset
        is out of range.

    Raises:
        ValueError: If ``info_type`` is not a known attribute and column metadata is available.
    """
    if not result.columns:
        return None
    attribute = COLUMN_INFO_ALIASES.get(info_type, info_type)
    if attribute not in COLUMN_INFO_FIELDS:
        msg = f"Unknown column info type {info_type!r}"
        raise ValueError(msg)
    if col_offset == -1:
        return [getattr(column, attribute) for column in result.columns]
    if not _in_range(col_offset, len(result.columns)):
        return None
    return getattr(result.columns[col_offset], attribute)
