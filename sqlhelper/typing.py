from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Union

from typing_extensions import TypeAlias

__all__ = (
    "DictRow",
    "FieldTypes",
    "FormatArg",
    "FormatSpecifier",
    "QueryArgs",
)


class FormatSpecifier(str, Enum):
    """Placeholder directives understood by the template compiler.

    - INTEGER: ``%d`` rendered as a bare integer literal
    - FLOAT: ``%f`` rendered as a bare float literal with six decimals
    - STRING: ``%s`` rendered as a single-quoted, escaped string literal

    ``%%`` is not a specifier; it is the escape for a literal percent sign.
    """

    INTEGER = "%d"
    FLOAT = "%f"
    STRING = "%s"

    def __str__(self) -> str:
        return self.value


DictRow: TypeAlias = "dict[str, Any]"
"""A single record keyed by column name, in the column order returned by the driver."""

FieldTypes: TypeAlias = "Mapping[str, Union[FormatSpecifier, str]]"
"""Per-column default specifiers, e.g. ``{"id": "%d"}``."""

FormatArg: TypeAlias = "Union[FormatSpecifier, str, Sequence[Union[FormatSpecifier, str]], None]"
"""Explicit builder formats: a single specifier or one per column."""

QueryArgs: TypeAlias = "Union[Sequence[Any], Mapping[str, Any]]"
