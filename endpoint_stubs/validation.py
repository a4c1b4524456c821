"""Type checks for attributes that must keep a fixed type."""

from typing import Any, Union

from .exceptions import InvalidArgumentType


def validate_type(name: str, value: Any, expected: Union[type, tuple[type, ...]]) -> Any:
    """
    Return value unchanged if it is an instance of expected.

    Raises:
        InvalidArgumentType: when value has any other type
    """
    kinds = expected if isinstance(expected, tuple) else (expected,)
    # bool is an int subclass, only accept it where asked for explicitly
    if isinstance(value, bool) and bool not in kinds:
        raise InvalidArgumentType(name=name, actual=value, expected=kinds)
    if not isinstance(value, kinds):
        raise InvalidArgumentType(name=name, actual=value, expected=kinds)
    return value


def validate_identifier(name: str, value: Any) -> str:
    """Identifiers are non-empty strings."""
    validate_type(name, value, str)
    if not value.strip():
        raise InvalidArgumentType(name=name, actual=value, expected=["non-empty str"])
    return value
