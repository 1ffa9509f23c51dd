"""Structural equality for comparing fetched rows, objects and arrays."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

__all__ = ("assert_one_of", "is_composite", "is_deep_equal")

_TEXT_TYPES = (str, bytes, bytearray)
_MISSING = object()


def is_composite(value: Any) -> bool:
    """Check whether a value has members (a mapping or a non-text sequence).

    Args:
        value: Value to inspect.

    Returns:
        True for mappings and sequences other than ``str``/``bytes``.
    """
    if isinstance(value, Mapping):
        return True
    return isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES)


def _scalars_equal(x: Any, y: Any) -> bool:
    # bool is an int subclass; keep True distinct from 1
    if isinstance(x, bool) or isinstance(y, bool):
        return type(x) is type(y) and x == y
    return bool(x == y)


def _key_tag(key: Any) -> "tuple[bool, Any]":
    # dict lookups treat True and 1 as one key
    return (isinstance(key, bool), key)


def is_deep_equal(x: Any, y: Any) -> bool:
    """Determine whether two values are structurally equal.

    Mappings compare by key set and member values, sequences by length and
    position. Mapping keys follow the scalar rule, so ``True`` and ``1`` are
    different keys. A list and a tuple with equal members are equal, so fetched rows
    can be compared against literal expectations. Cyclic structures are not
    supported and recurse without bound.

    Args:
        x: First value.
        y: Second value.

    Returns:
        True if both values have the same structure and contents.
    """
    if x is y:
        return True

    if x is None or y is None:
        return False

    x_composite, y_composite = is_composite(x), is_composite(y)
    if not (x_composite and y_composite):
        if x_composite or y_composite:
            return False
        return _scalars_equal(x, y)

    if isinstance(x, Mapping) != isinstance(y, Mapping):
        return False

    if len(x) != len(y):
        return False

    if isinstance(x, Mapping):
        y_keys = {_key_tag(key): key for key in y}
        for key, value in x.items():
            y_key = y_keys.get(_key_tag(key), _MISSING)
            if y_key is _MISSING:
                return False
            if not is_deep_equal(value, y[y_key]):
                return False
        return True

    return all(is_deep_equal(a, b) for a, b in zip(x, y))


def assert_one_of(candidates: Iterable[Any], value: Any) -> None:
    """Assert that ``value`` is structurally equal to one of ``candidates``.

    Raises:
        AssertionError: If no candidate matches.
    """
    candidates = list(candidates)
    if not any(is_deep_equal(candidate, value) for candidate in candidates):
        msg = f"{value!r} is not one of {candidates!r}"
        raise AssertionError(msg)
