"""Type guard functions for runtime type checking in sqlhelper."""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

__all__ = (
    "is_iterable_parameters",
    "is_mapping",
)


def is_mapping(obj: Any) -> "TypeGuard[Mapping[str, Any]]":
    """Check if a value is a column -> value mapping.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, Mapping)


def is_iterable_parameters(params: Any) -> "TypeGuard[Sequence[Any]]":
    """Check if parameters are a positional sequence (but not a string, bytes or mapping).

    Args:
        params: The parameters to check

    Returns:
        True if the parameters are a sequence, False otherwise
    """
    return isinstance(params, Sequence) and not isinstance(params, (str, bytes, bytearray, Mapping))
