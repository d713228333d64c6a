"""Template builders for INSERT, REPLACE, UPDATE and DELETE.

Each builder turns a column -> value mapping into a placeholder template and
the ordered argument list that goes with it. Nothing is escaped here; the
result is meant to be fed to :class:`~sqlhelper.core.template.TemplateCompiler`.

Specifier resolution, per column:

1. the next entry of the explicit ``formats``, or the first entry once they run out;
2. otherwise the configured default for that column name;
3. otherwise ``%s``.
"""

from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple, Optional, Union

from sqlhelper.exceptions import SQLBuilderError
from sqlhelper.typing import FieldTypes, FormatArg, FormatSpecifier
from sqlhelper.utils.type_guards import is_mapping

__all__ = (
    "BuiltStatement",
    "build_delete",
    "build_insert_replace",
    "build_update",
    "coerce_specifier",
    "quote_identifier",
    "resolve_formats",
)

WRITE_STATEMENT_TYPES = frozenset({"INSERT", "REPLACE"})


class BuiltStatement(NamedTuple):
    """A placeholder template and the arguments for its placeholders, in order."""

    template: str
    arguments: "tuple[Any, ...]"


def coerce_specifier(value: "Union[FormatSpecifier, str]") -> FormatSpecifier:
    """Convert ``"%d"``, ``"%f"`` or ``"%s"`` into a :class:`FormatSpecifier`.

    Raises:
        SQLBuilderError: For anything else.
    """
    if isinstance(value, FormatSpecifier):
        return value
    try:
        return FormatSpecifier(value)
    except ValueError as exc:
        msg = f"Unsupported format specifier {value!r}; expected one of %d, %f, %s"
        raise SQLBuilderError(msg) from exc


def _explicit_formats(formats: FormatArg) -> "list[FormatSpecifier]":
    if formats is None:
        return []
    if isinstance(formats, str):
        return [coerce_specifier(formats)]
    return [coerce_specifier(form) for form in formats]


def resolve_formats(
    columns: "Iterable[str]", formats: FormatArg = None, field_types: "Optional[FieldTypes]" = None
) -> "list[FormatSpecifier]":
    """Resolve the specifier of every column, in column order."""
    explicit = _explicit_formats(formats)
    defaults = field_types or {}
    resolved: list[FormatSpecifier] = []
    for index, column in enumerate(columns):
        if explicit:
            resolved.append(explicit[index] if index < len(explicit) else explicit[0])
        elif column in defaults:
            resolved.append(coerce_specifier(defaults[column]))
        else:
            resolved.append(FormatSpecifier.STRING)
    return resolved


def quote_identifier(name: str) -> str:
    """Backtick-quote a table or column name, doubling any embedded backtick."""
    if not name or not str(name).strip():
        msg = "Table and column names must not be empty"
        raise SQLBuilderError(msg)
    normalized = str(name).replace("`", "``")
    return f"`{normalized}`"


def _require_mapping(value: Any, argument: str) -> "Mapping[str, Any]":
    if not is_mapping(value):
        msg = f"{argument} must be a mapping of column names to values, got {type(value).__name__}"
        raise SQLBuilderError(msg)
    if not value:
        msg = f"{argument} must contain at least one column"
        raise SQLBuilderError(msg)
    return value


def build_insert_replace(
    table: str,
    data: "Mapping[str, Any]",
    formats: FormatArg = None,
    statement_type: str = "INSERT",
    field_types: "Optional[FieldTypes]" = None,
) -> BuiltStatement:
    """Build an ``INSERT INTO`` or ``REPLACE INTO`` template.

    Example::

        build_insert_replace("users", {"name": "Alice", "age": 30}, field_types={"age": "%d"})
        # INSERT INTO `users` (`name`,`age`) VALUES (%s,%d)

    Raises:
        SQLBuilderError: Unsupported ``statement_type`` or ``data`` not a non-empty mapping.
    """
    keyword = str(statement_type).upper()
    if keyword not in WRITE_STATEMENT_TYPES:
        msg = f"Unsupported statement type {statement_type!r}; expected INSERT or REPLACE"
        raise SQLBuilderError(msg)
    data = _require_mapping(data, "data")

    columns = list(data.keys())
    specifiers = resolve_formats(columns, formats, field_types)
    column_list = ",".join(quote_identifier(column) for column in columns)
    value_list = ",".join(spec.value for spec in specifiers)
    template = f"{keyword} INTO {quote_identifier(table)} ({column_list}) VALUES ({value_list})"
    return BuiltStatement(template, tuple(data.values()))


def build_update(
    table: str,
    data: "Mapping[str, Any]",
    where: "Mapping[str, Any]",
    formats: FormatArg = None,
    where_formats: FormatArg = None,
    field_types: "Optional[FieldTypes]" = None,
) -> BuiltStatement:
    """Build an ``UPDATE`` template whose WHERE clauses are ANDed.

    Arguments are the ``data`` values followed by the ``where`` values.

    Raises:
        SQLBuilderError: ``data`` or ``where`` is not a non-empty mapping.
    """
    data = _require_mapping(data, "data")
    where = _require_mapping(where, "where")

    assignments = [
        f"{quote_identifier(column)} = {spec.value}"
        for column, spec in zip(data, resolve_formats(data, formats, field_types))
    ]
    conditions = [
        f"{quote_identifier(column)} = {spec.value}"
        for column, spec in zip(where, resolve_formats(where, where_formats, field_types))
    ]
    template = f"UPDATE {quote_identifier(table)} SET {', '.join(assignments)} WHERE {' AND '.join(conditions)}"
    return BuiltStatement(template, (*data.values(), *where.values()))


def build_delete(
    table: str,
    where: "Mapping[str, Any]",
    where_formats: FormatArg = None,
    field_types: "Optional[FieldTypes]" = None,
) -> BuiltStatement:
    """Build a ``DELETE FROM`` template whose WHERE clauses are ANDed.

    Unlike the other builders, table and column names are emitted as given,
    without backtick quoting.

    Raises:
        SQLBuilderError: ``where`` is not a non-empty mapping.
    """
    where = _require_mapping(where, "where")
    if not table or not str(table).strip():
        msg = "Table and column names must not be empty"
        raise SQLBuilderError(msg)

    conditions = [
        f"{column} = {spec.value}" for column, spec in zip(where, resolve_formats(where, where_formats, field_types))
    ]
    template = f"DELETE FROM {table} WHERE {' AND '.join(conditions)}"
    return BuiltStatement(template, tuple(where.values()))
