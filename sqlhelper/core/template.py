"""Placeholder template compilation.

Templates use a deliberately small subset of ``sprintf`` syntax:

- ``%d`` integer, emitted bare
- ``%f`` float, emitted bare with six decimals
- ``%s`` string, escaped and wrapped in single quotes
- ``%%`` a literal percent sign, consumes no argument

There is no support for sign, padding, width, precision or argument numbering.
Any other ``%`` sequence is copied through unchanged.

Example::

    compiler.compile("SELECT * FROM `table` WHERE `column` = %s AND `field` = %d", "foo", 1337)
    compiler.compile("SELECT DATE_FORMAT(`field`, '%%c') FROM `table` WHERE `column` = %s", ["foo"])
"""

import re
from typing import Any, Final, Optional

from mypy_extensions import mypyc_attr

from sqlhelper.core.escaping import Escaper
from sqlhelper.exceptions import ExtraParameterError, MissingParameterError, ParameterError
from sqlhelper.typing import FormatSpecifier
from sqlhelper.utils.logging import get_logger
from sqlhelper.utils.type_guards import is_iterable_parameters, is_mapping

__all__ = (
    "TemplateCompiler",
    "count_placeholders",
    "normalize_arguments",
    "quote_string_placeholders",
    "render_float",
    "render_integer",
    "substitute",
    "unquote_string_placeholders",
)

logger = get_logger("core.template")

_DIRECTIVE_RE: Final = re.compile(r"%(?:%|[dfs])")
_INTEGER_PREFIX_RE: Final = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX_RE: Final = re.compile(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")

_LITERAL_PERCENT: Final = "%%"
_QUOTED_STRING_PLACEHOLDERS: Final = ("'%s'", '"%s"')


def normalize_arguments(args: "tuple[Any, ...]") -> "list[Any]":
    """Collapse both call shapes into one ordered argument list.

    ``compile(t, "a", 1)`` and ``compile(t, ["a", 1])`` are equivalent. When the
    first argument is a sequence or a mapping it supplies every argument
    (mapping values are taken in insertion order) and the rest are ignored.
    """
    if not args:
        return []
    first = args[0]
    if is_mapping(first):
        return list(first.values())
    if is_iterable_parameters(first):
        return list(first)
    return list(args)


def unquote_string_placeholders(template: str) -> str:
    """Strip quotes that a caller already put around ``%s``."""
    for quoted in _QUOTED_STRING_PLACEHOLDERS:
        template = template.replace(quoted, FormatSpecifier.STRING.value)
    return template


def quote_string_placeholders(template: str) -> str:
    """Wrap every ``%s`` directive in single quotes.

    The template is scanned directive by directive, so the ``%s`` in ``%%s``
    is never touched while the one in ``%%%s`` is.
    """

    def _quote(match: "re.Match[str]") -> str:
        directive = match.group()
        if directive == FormatSpecifier.STRING.value:
            return f"'{directive}'"
        return directive

    return _DIRECTIVE_RE.sub(_quote, template)


def count_placeholders(template: str) -> int:
    """Number of directives that consume an argument."""
    return sum(1 for match in _DIRECTIVE_RE.finditer(template) if match.group() != _LITERAL_PERCENT)


def render_integer(text: str) -> str:
    """Render the integer prefix of ``text``, or ``0`` when there is none."""
    match = _INTEGER_PREFIX_RE.match(text)
    return str(int(match.group(1))) if match else "0"


def render_float(text: str) -> str:
    """Render the numeric prefix of ``text`` as a float with six decimals."""
    match = _FLOAT_PREFIX_RE.match(text)
    value = float(match.group(1)) if match else 0.0
    return f"{value:.6f}"


def substitute(template: str, args: "list[str]") -> str:
    """Fill the directives of ``template`` with already-escaped arguments, in order.

    Raises:
        MissingParameterError: Fewer arguments than placeholders.
        ExtraParameterError: More arguments than placeholders.
    """
    expected = count_placeholders(template)
    if expected > len(args):
        msg = f"Template expects {expected} arguments but {len(args)} were supplied"
        raise MissingParameterError(msg, template)
    if expected < len(args):
        msg = f"Template expects {expected} arguments but {len(args)} were supplied"
        raise ExtraParameterError(msg, template)

    remaining = iter(args)

    def _fill(match: "re.Match[str]") -> str:
        directive = match.group()
        if directive == _LITERAL_PERCENT:
            return "%"
        value = next(remaining)
        if directive == FormatSpecifier.INTEGER.value:
            return render_integer(value)
        if directive == FormatSpecifier.FLOAT.value:
            return render_float(value)
        return value

    return _DIRECTIVE_RE.sub(_fill, template)


@mypyc_attr(allow_interpreted_subclasses=True)
class TemplateCompiler:
    """Turns a placeholder template and its arguments into a final SQL string.

    Args:
        escaper: Escaper applied to every argument before substitution.
        strict: Raise on a placeholder/argument count mismatch instead of
            returning an empty statement for the database to reject.
    """

    __slots__ = ("escaper", "strict")

    def __init__(self, escaper: Escaper, strict: bool = False) -> None:
        self.escaper = escaper
        self.strict = strict

    def prepare_template(self, template: str) -> str:
        """Apply the unquoting and quoting passes without substituting anything."""
        return quote_string_placeholders(unquote_string_placeholders(template))

    def compile(self, template: Optional[str], *args: Any) -> Optional[str]:
        """Compile ``template`` with ``args``.

        Returns:
            The final SQL. ``None`` when ``template`` is ``None``. An empty string
            when the argument count does not match and ``strict`` is off.

        Raises:
            MissingParameterError: In strict mode, too few arguments.
            ExtraParameterError: In strict mode, too many arguments.
        """
        if template is None:
            return None

        arguments = self.escaper.escape_all(normalize_arguments(args))
        prepared = self.prepare_template(template)
        try:
            return substitute(prepared, arguments)
        except ParameterError as exc:
            if self.strict:
                raise
            logger.debug("Template substitution failed: %s", exc.detail)
            return ""

    __call__ = compile
