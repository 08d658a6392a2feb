"""
Fluent field navigation shared by Builder and Configurator.

Attribute access on a Builder (or a typed Configurator) walks the fields of the
base type and returns a *step* bound to the composed KeyPath:

    builder.inner.value          # CallableBlock: writable
    builder.area                 # NonCallableBlock: read-only property
    builder.items[0]             # item access

- CallableBlock: ``step(value)`` / ``step(value, when=flag)`` / ``step.set(fn)``
  queue a write and return a new owner (Builder or Configurator).
- NonCallableBlock: navigation only. It has no ``__call__`` and no ``set``, so
  attempting a write through a read-only field fails on the spot.

Optional fields (``Optional[X]``) are lifted automatically: writes through an
absent intermediate value are dropped.
"""

import logging
from typing import Any, Hashable, Tuple

from declarativeconf.config import copy_value, is_reference_type
from declarativeconf.introspection import FieldInfo, describe_attribute, describe_item
from declarativeconf.keypath import KeyPath, attribute, item
from declarativeconf.modification import ensure_callable, modification

logger = logging.getLogger(__name__)


def _type_name(value_type: Any) -> str:
    return getattr(value_type, '__name__', None) or repr(value_type)


def _make_step(owner, parent_path, parent_type, parent_optional: bool, field_path: KeyPath, info: FieldInfo):
    """Build the step for one field below ``parent_path``.

    Args:
        owner: Builder or Configurator receiving queued writes
        parent_path: Path from the base to the parent value (None at the base)
        parent_type: Declared type of the parent value
        parent_optional: Whether the parent value may be None
        field_path: Writable path from the parent value to the field
        info: Field description of the field within ``parent_type``
    """
    inner = field_path if info.writable else KeyPath.getonly(field_path)
    if parent_optional:
        inner = inner.optional()

    if parent_path is None:
        path = inner
    elif parent_path.is_writable or not inner.is_writable:
        path = parent_path.appending(inner)
    elif is_reference_type(parent_type):
        # Read-only parent holding a shared object: write into the object itself
        path = parent_path.appending_through_reference(inner)
    else:
        path = parent_path.appending(inner)

    absent = None
    if parent_optional:
        if parent_path is None:
            absent = lambda base: base is None
        else:
            absent = lambda base: parent_path.extract(base) is None

    block_type = CallableBlock if path.is_writable else NonCallableBlock
    return block_type(owner, path, info.value_type, parent_optional or info.optional, absent)


class Navigable:
    """Mixin providing attribute and item navigation.

    Subclasses implement ``_navigation_state()`` returning
    ``(owner, path, value_type, optional)``. Names starting with an underscore
    are never treated as fields by ``__getattr__``; use ``at()`` on the owner
    to reach them.
    """

    __slots__ = ()

    def _navigation_state(self) -> Tuple[Any, Any, Any, bool]:
        raise NotImplementedError

    def _attribute_step(self, name: str):
        owner, path, value_type, optional = self._navigation_state()
        info = describe_attribute(value_type, name)
        return _make_step(owner, path, value_type, optional, attribute(name), info)

    def _item_step(self, key: Hashable):
        owner, path, value_type, optional = self._navigation_state()
        info = describe_item(value_type, key)
        return _make_step(owner, path, value_type, optional, item(key), info)

    def __getattr__(self, name: str):
        if name.startswith('_'):
            raise AttributeError(f"{type(self).__name__} has no attribute '{name}'")
        return self._attribute_step(name)

    def __getitem__(self, key: Hashable):
        return self._item_step(key)


def navigate_dotted(start: Navigable, path: str):
    """Follow a dotted attribute path like ``'inner.value'`` from ``start``."""
    names = path.split('.') if path else []
    if not names or not all(names):
        raise ValueError(f"Invalid dotted path: {path!r}")

    step = start
    for name in names:
        step = step._attribute_step(name)
    return step


class _Block(Navigable):
    __slots__ = ('_owner', '_path', '_value_type', '_optional', '_absent')

    def __init__(self, owner, path: KeyPath, value_type: Any = Any, optional: bool = False, absent=None):
        object.__setattr__(self, '_owner', owner)
        object.__setattr__(self, '_path', path)
        object.__setattr__(self, '_value_type', value_type)
        object.__setattr__(self, '_optional', optional)
        object.__setattr__(self, '_absent', absent)

    def _navigation_state(self):
        return self._owner, self._path, self._value_type, self._optional

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only; call the step to queue a write")

    def __repr__(self) -> str:
        optional = '?' if self._optional else ''
        return f"{type(self).__name__}({self._path.description}: {_type_name(self._value_type)}{optional})"


class NonCallableBlock(_Block):
    """Navigation step through a read-only field."""

    __slots__ = ()


class CallableBlock(_Block):
    """Navigation step through a writable field."""

    __slots__ = ()

    def __call__(self, value: Any, when: bool = True):
        """Queue "set this field to ``value``" and return a new owner.

        With ``when=False`` the queued step leaves the base untouched.
        """
        path = self._path

        if not when:
            def skip(base):
                logger.debug(f"Skipped guarded write to {path.description}")
                return base
            return self._owner._appending_configuration(skip)

        def embed(base):
            return path.embed(copy_value(value), base)

        return self._owner._appending_configuration(embed)

    def set(self, transform):
        """Queue a field-local modification and return a new owner.

        ``transform`` receives the current field value (a copy for value types)
        and mutates it in place or returns a replacement. It is not called when
        an optional intermediate value is absent.
        """
        ensure_callable(transform)
        path = self._path
        absent = self._absent

        def modify(base):
            if absent is not None and absent(base):
                logger.debug(f"Skipped modification of {path.description}: container is None")
                return base
            return path.embed(modification(path.extract(base), transform), base)

        return self._owner._appending_configuration(modify)
