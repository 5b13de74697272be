"""Argument guards shared by every adapter."""

from typing import TypeVar

from crudkit.exceptions import InvalidArgumentError

_V = TypeVar("_V")


def ensure_argument(value: _V | None, argument_name: str) -> _V:
    """Return ``value`` unchanged, or raise if it is None.

    Args:
        value: The argument received by a repository operation.
        argument_name: Name reported in the error message.

    Raises:
        InvalidArgumentError: If ``value`` is None.
    """
    if value is None:
        raise InvalidArgumentError(argument_name)
    return value
