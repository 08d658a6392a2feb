"""
Deferred modification queue.

A Configurator is an immutable, ordered queue of transformations. Applying it
runs every transformation in insertion order against the same evolving value:

    >>> cfg = Configurator(lambda p: p.tags.append('a')).appending_configuration(
    ...     lambda p: replace(p, x=1))
    >>> cfg.configured(point)      # copy of point, tags + ['a'], x == 1

Given a ``base_type``, a Configurator also supports fluent field navigation,
each terminal step returning a new Configurator:

    >>> Configurator(base_type=Point).x(5).y(10).configured(Point(0, 0))
    Point(x=5, y=10)
"""

import logging
from typing import Any, Callable, Generic, Iterable, Optional, Tuple, TypeVar

from declarativeconf.config import copy_value
from declarativeconf.introspection import unwrap_optional
from declarativeconf.modification import ensure_callable, run_transform
from declarativeconf.navigation import Navigable, navigate_dotted

logger = logging.getLogger(__name__)

Base = TypeVar('Base')

Transform = Callable[[Any], Any]


class Configurator(Navigable, Generic[Base]):
    """Immutable queue of pending modifications for ``Base`` values."""

    __slots__ = ('_transforms', '_base_type', '_base_optional')

    def __init__(self, transform: Optional[Transform] = None, *, base_type: Any = None):
        """
        Args:
            transform: Optional first transformation
            base_type: Type used to resolve fields during navigation
        """
        if transform is not None:
            ensure_callable(transform)
        base_type, base_optional = unwrap_optional(base_type)
        self._init((transform,) if transform is not None else (), base_type, base_optional)

    def _init(self, transforms: Tuple[Transform, ...], base_type: Any, base_optional: bool) -> None:
        object.__setattr__(self, '_transforms', transforms)
        object.__setattr__(self, '_base_type', base_type)
        object.__setattr__(self, '_base_optional', base_optional)

    def _with_transforms(self, transforms: Iterable[Transform]) -> 'Configurator[Base]':
        new = type(self).__new__(type(self))
        new._init(tuple(transforms), self._base_type, self._base_optional)
        return new

    @property
    def transforms(self) -> Tuple[Transform, ...]:
        """Queued transformations in application order."""
        return self._transforms

    def set(self, transform: Transform) -> 'Configurator[Base]':
        """Return a queue containing exactly ``transform``."""
        ensure_callable(transform)
        return self._with_transforms((transform,))

    def appending_configuration(self, transform: Transform) -> 'Configurator[Base]':
        """Return a queue with ``transform`` after all existing transformations."""
        ensure_callable(transform)
        return self._with_transforms(self._transforms + (transform,))

    # Navigation steps append through this hook
    _appending_configuration = appending_configuration

    def appending(self, other: 'Configurator[Base]') -> 'Configurator[Base]':
        """Return a queue with all of ``other``'s transformations appended."""
        if not isinstance(other, Configurator):
            raise TypeError(f"Can only append a Configurator, got {type(other).__name__}")
        return self._with_transforms(self._transforms + other._transforms)

    def configure(self, base: Base) -> Base:
        """Apply the queue to ``base`` without copying it first.

        Reference objects are modified in place. Returns the final value, which
        differs from ``base`` when a transformation returns a replacement or
        rebuilds a value-semantics object.
        """
        logger.debug(f"Applying {len(self._transforms)} configuration(s) to {type(base).__name__}")
        for transform in self._transforms:
            base = run_transform(transform, base)
        return base

    def configured(self, base: Base) -> Base:
        """Apply the queue to a copy of ``base`` and return the result.

        The copy follows value semantics (see ``config.copy_value``): value
        objects are copied, reference objects are shared and modified in place.
        """
        return self.configure(copy_value(base))

    def at(self, path: str):
        """Navigate a dotted field path, e.g. ``cfg.at('inner.value')(5)``."""
        return navigate_dotted(self, path)

    def _navigation_state(self):
        return self, None, self._base_type, self._base_optional

    def __len__(self) -> int:
        return len(self._transforms)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Configurator is immutable; use set() or appending_configuration()")

    def __repr__(self) -> str:
        type_name = getattr(self._base_type, '__name__', None) or 'Any'
        return f"Configurator[{type_name}]({len(self._transforms)} pending)"
