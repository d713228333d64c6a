"""Escaping of scalar values for use inside single-quoted SQL string literals."""

from collections.abc import Callable, Iterable
from typing import Any, Optional

from mypy_extensions import mypyc_attr

from sqlhelper.exceptions import ImproperConfigurationError

__all__ = ("Escaper", "backslash_escape", "to_sql_text")

_BACKSLASH_ESCAPES = str.maketrans({
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\x00": "\\0",
    "\n": "\\n",
    "\r": "\\r",
    "\x1a": "\\Z",
})


def to_sql_text(value: Any) -> str:
    """Render a scalar as the text that gets escaped and substituted.

    ``None`` renders as the empty string and booleans as ``1``/``0``.
    Everything else uses ``str()``, so numbers come out as decimal text.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def backslash_escape(text: str) -> str:
    """Portable escaping: backslash-prefix quotes, backslashes and control characters."""
    return text.translate(_BACKSLASH_ESCAPES)


@mypyc_attr(allow_interpreted_subclasses=True)
class Escaper:
    """Escapes values with either the connection's native routine or backslash escaping.

    The mode is chosen once, when the escaper is created.

    Args:
        real_escape: Use the driver-native routine instead of backslash escaping.
        native_escape: The connection's string escaping routine. Required when
            ``real_escape`` is true.
    """

    __slots__ = ("_escape", "real_escape")

    def __init__(self, real_escape: bool = False, native_escape: "Optional[Callable[[str], str]]" = None) -> None:
        if real_escape and native_escape is None:
            msg = "real_escape requires a connection that provides a native escape routine"
            raise ImproperConfigurationError(msg)
        self.real_escape = real_escape
        self._escape: Callable[[str], str] = native_escape if real_escape and native_escape else backslash_escape

    def escape(self, value: Any) -> str:
        return self._escape(to_sql_text(value))

    def escape_all(self, values: "Iterable[Any]") -> "list[str]":
        """Escape every value, keeping positional order."""
        return [self.escape(value) for value in values]

    def __call__(self, value: Any) -> str:
        return self.escape(value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(real_escape={self.real_escape!r})"
