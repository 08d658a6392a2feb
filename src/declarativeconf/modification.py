"""In-place style modification helpers.

A transform receives a value and either mutates it and returns ``None`` or
returns a replacement value. These helpers normalise both styles.
"""

from typing import Any, Callable, TypeVar

from declarativeconf.config import copy_value

T = TypeVar('T')


def run_transform(transform: Callable[[T], Any], value: T) -> T:
    """Run ``transform`` against ``value`` and return the resulting value."""
    result = transform(value)
    return value if result is None else result


def modification(value: T, transform: Callable[[T], Any]) -> T:
    """Return a modified copy of ``value``.

    Value-semantics objects are copied first, so the caller's object is left
    untouched. Reference objects are modified in place and returned.

        >>> modification([1, 2], lambda items: items.append(3))
        [1, 2, 3]
    """
    return run_transform(transform, copy_value(value))


def ensure_callable(transform: Any, what: str = "transform") -> None:
    if not callable(transform):
        raise TypeError(f"{what} must be callable, got {type(transform).__name__}")
