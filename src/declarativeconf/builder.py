"""
Fluent builder.

A Builder pairs a factory for the initial value with a Configurator of pending
writes. Field navigation queues writes; ``build()`` runs the factory once and
applies the queue:

    >>> Builder(Point(x=0, y=0)).x(5).y(10).build()
    Point(x=5, y=10)

Builders are immutable. Every step returns a new Builder, so a prefix can be
shared and branched:

    >>> base = Builder(Label()).text('OK')
    >>> primary = base.style.color('blue').build()
    >>> danger = base.style.color('red').build()

Value vs reference bases:
- ``build()`` works on a copy of value-semantics bases (dataclasses, lists, ...)
  and returns the result; the initial value is never modified.
- ``apply()`` is for reference-semantics bases: the produced object is
  configured in place and nothing is returned.
"""

import logging
from typing import Any, Callable, Generic, TypeVar

from declarativeconf.config import has_value_semantics
from declarativeconf.configurator import Configurator
from declarativeconf.introspection import resolve_base_type, unwrap_optional
from declarativeconf.modification import ensure_callable
from declarativeconf.navigation import Navigable, navigate_dotted

logger = logging.getLogger(__name__)

Base = TypeVar('Base')


class Builder(Navigable, Generic[Base]):
    """Immutable fluent builder for ``Base`` values."""

    __slots__ = ('_initial_value', '_configurator', '_base_type', '_base_optional')

    def __init__(self, initial_value: Base, *, base_type: Any = None):
        """
        Args:
            initial_value: Starting value; value-semantics objects are copied on
                every build, reference objects are shared
            base_type: Type used to resolve fields (defaults to the value's type)
        """
        if base_type is None:
            base_type = type(initial_value)
        base_type, base_optional = unwrap_optional(base_type)
        self._init(lambda: initial_value, Configurator(base_type=base_type), base_type, base_optional)

    @classmethod
    def from_factory(cls, factory: Callable[[], Base], *, base_type: Any = None) -> 'Builder[Base]':
        """Create a builder whose initial value is produced by ``factory`` on each build.

        ``base_type`` defaults to the factory's return annotation (or the factory
        itself when it is a class).
        """
        ensure_callable(factory, "factory")
        if base_type is None:
            base_type = resolve_base_type(factory)
        base_type, base_optional = unwrap_optional(base_type)
        builder = cls.__new__(cls)
        builder._init(factory, Configurator(base_type=base_type), base_type, base_optional)
        return builder

    def _init(self, initial_value: Callable[[], Base], configurator: Configurator, base_type: Any, base_optional: bool) -> None:
        object.__setattr__(self, '_initial_value', initial_value)
        object.__setattr__(self, '_configurator', configurator)
        object.__setattr__(self, '_base_type', base_type)
        object.__setattr__(self, '_base_optional', base_optional)

    def _with_configurator(self, configurator: Configurator) -> 'Builder[Base]':
        new = type(self).__new__(type(self))
        new._init(self._initial_value, configurator, self._base_type, self._base_optional)
        return new

    def _appending_configuration(self, transform: Callable[[Any], Any]) -> 'Builder[Base]':
        return self._with_configurator(self._configurator.appending_configuration(transform))

    @property
    def configurator(self) -> Configurator:
        """Pending writes, reusable on other values via ``configured()``."""
        return self._configurator

    def build(self) -> Base:
        """Run the factory once and apply all pending writes."""
        return self._configurator.configured(self._initial_value())

    def apply(self) -> None:
        """Run the factory once and configure the produced object in place.

        Only meaningful for reference-semantics bases; value-semantics bases
        would lose every write, so they raise TypeError (use ``build()``).
        """
        base = self._initial_value()
        if has_value_semantics(base):
            raise TypeError(
                f"apply() requires a reference-semantics base, got {type(base).__name__}; use build()"
            )
        self._configurator.configure(base)

    def set(self, transform: Callable[[Base], Any]) -> 'Builder[Base]':
        """Queue a whole-base transformation.

        ``transform`` mutates the base in place or returns a replacement.
        """
        ensure_callable(transform)
        return self._appending_configuration(transform)

    def reinforce(self, transform: Callable[..., Any], *args: Any) -> 'Builder[Base]':
        """Build now, then start a new builder from the result with one queued transformation.

        ``transform`` is called as ``transform(base, *args)``. Use it as a
        checkpoint when later edits depend on the effects of earlier ones.
        """
        ensure_callable(transform)
        built = self.build()
        logger.debug(f"Reinforced {type(built).__name__} after {len(self._configurator)} pending write(s)")
        checkpoint = type(self).__new__(type(self))
        checkpoint._init(lambda: built, Configurator(base_type=self._base_type), self._base_type, self._base_optional)
        return checkpoint.set(lambda base: transform(base, *args))

    def at(self, path: str):
        """Navigate a dotted field path, e.g. ``builder.at('inner.value')(5)``."""
        return navigate_dotted(self, path)

    def _navigation_state(self):
        return self, None, self._base_type, self._base_optional

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Builder is immutable; field steps return a new Builder")

    def __repr__(self) -> str:
        type_name = getattr(self._base_type, '__name__', None) or 'Any'
        return f"Builder[{type_name}]({len(self._configurator)} pending)"
