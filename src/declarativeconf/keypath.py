"""
Composable bidirectional field accessors.

A KeyPath reads a value out of a root object (``extract``). A WritableKeyPath
can also produce a root with that value replaced (``embed``). Paths compose:

    >>> path = attribute('inner').appending(attribute('value'))
    >>> path.extract(wrapper)              # wrapper.inner.value
    >>> path.embed(99, wrapper)            # wrapper with inner.value == 99

Write capability is structural. A read-only KeyPath has no ``embed`` method at
all, and composing anything with a read-only path yields a read-only path.

How ``embed`` writes depends on the root's semantics (see ``config``):
value-semantics roots (dataclasses, tuples, lists, dicts) are rebuilt and the
original is left untouched; reference-semantics roots are updated in place and
returned.
"""

import copy
import dataclasses
import logging
from typing import Any, Callable, Generic, Hashable, TypeVar

from declarativeconf.config import has_value_semantics

logger = logging.getLogger(__name__)

Root = TypeVar('Root')
Value = TypeVar('Value')
LocalValue = TypeVar('LocalValue')


class KeyPath(Generic[Root, Value]):
    """Read-only path from ``Root`` to ``Value``."""

    __slots__ = ('_extract', '_description')

    is_writable = False

    def __init__(self, extract: Callable[[Root], Value], description: str = ''):
        self._extract = extract
        self._description = description

    @property
    def description(self) -> str:
        return self._description

    def extract(self, root: Root) -> Value:
        """Read the value at this path. Never mutates ``root``."""
        return self._extract(root)

    def appending(self, path: 'KeyPath[Value, LocalValue]') -> 'KeyPath[Root, LocalValue]':
        """Compose with a path starting at this path's value."""
        outer, inner = self, path
        return KeyPath(
            lambda root: inner.extract(outer.extract(root)),
            outer.description + inner.description,
        )

    def appending_through_reference(self, path: 'KeyPath[Value, LocalValue]') -> 'KeyPath[Root, LocalValue]':
        """Compose with a writable path into a shared (reference) object.

        The outer segment is never written: the inner write lands in the object
        returned by ``extract`` and the root is returned unchanged. Only valid when
        this path's value has reference semantics.
        """
        if not path.is_writable:
            return self.appending(path)

        outer, inner = self, path

        def embed(value, root):
            target = outer.extract(root)
            result = inner.embed(value, target)
            if result is not target:
                logger.debug(
                    f"Write through {outer.description or '<root>'} produced a new object; "
                    f"{type(target).__name__} does not have reference semantics, write is lost"
                )
            return root

        return WritableKeyPath(
            lambda root: inner.extract(outer.extract(root)),
            embed,
            outer.description + inner.description,
        )

    def optional(self) -> 'KeyPath':
        """Lift into a path over an optional root; a ``None`` root extracts ``None``."""
        base = self

        def extract(root):
            if root is None:
                return None
            return base.extract(root)

        return KeyPath(extract, base.description + '?')

    @classmethod
    def getonly(cls, path: 'KeyPath[Root, Value]') -> 'KeyPath[Root, Value]':
        """Read-only view of any path."""
        return KeyPath(path.extract, path.description)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._description or '<root>'})"


class WritableKeyPath(KeyPath[Root, Value]):
    """Path from ``Root`` to ``Value`` that can also write the value back."""

    __slots__ = ('_embed',)

    is_writable = True

    def __init__(
        self,
        extract: Callable[[Root], Value],
        embed: Callable[[Value, Root], Root],
        description: str = '',
    ):
        super().__init__(extract, description)
        self._embed = embed

    def embed(self, value: Value, root: Root) -> Root:
        """Return ``root`` with the value at this path replaced by ``value``."""
        return self._embed(value, root)

    def appending(self, path: KeyPath[Value, LocalValue]) -> KeyPath[Root, LocalValue]:
        if not path.is_writable:
            return super().appending(path)

        outer, inner = self, path

        def embed(value, root):
            return outer.embed(inner.embed(value, outer.extract(root)), root)

        return WritableKeyPath(
            lambda root: inner.extract(outer.extract(root)),
            embed,
            outer.description + inner.description,
        )

    def optional(self) -> 'WritableKeyPath':
        """Lift into a path over an optional root.

        Embedding into a ``None`` root is a no-op: the ``None`` root is returned
        and the value is dropped.
        """
        base = self

        def extract(root):
            if root is None:
                return None
            return base.extract(root)

        def embed(value, root):
            if root is None:
                logger.debug(f"Dropped write to {base.description or '<root>'}: container is None")
                return root
            return base.embed(value, root)

        return WritableKeyPath(extract, embed, base.description + '?')


# =============================================================================
# PATH CONSTRUCTORS
# =============================================================================

def _embed_attribute(root: Any, name: str, value: Any) -> Any:
    if not has_value_semantics(root):
        setattr(root, name, value)
        return root
    if dataclasses.is_dataclass(root):
        # __post_init__ is not rerun; object.__setattr__ reaches frozen fields and property setters
        new_root = copy.copy(root)
        object.__setattr__(new_root, name, value)
        return new_root
    if isinstance(root, tuple) and hasattr(root, '_replace'):
        return root._replace(**{name: value})
    new_root = copy.copy(root)
    setattr(new_root, name, value)
    return new_root


def _embed_item(root: Any, key: Any, value: Any) -> Any:
    if isinstance(root, tuple):
        items = list(root)
        items[key] = value
        if hasattr(root, '_fields'):
            return type(root)(*items)
        return type(root)(items)
    if not has_value_semantics(root):
        root[key] = value
        return root
    new_root = copy.copy(root)
    new_root[key] = value
    return new_root


def attribute(name: str) -> WritableKeyPath:
    """Writable path to attribute ``name``."""
    return WritableKeyPath(
        lambda root: getattr(root, name),
        lambda value, root: _embed_attribute(root, name, value),
        f'.{name}',
    )


def item(key: Hashable) -> WritableKeyPath:
    """Writable path to ``root[key]``."""
    return WritableKeyPath(
        lambda root: root[key],
        lambda value, root: _embed_item(root, key, value),
        f'[{key!r}]',
    )


def getter(fn: Callable[[Root], Value], description: str = '') -> KeyPath[Root, Value]:
    """Read-only path computed by ``fn``."""
    return KeyPath(fn, description or f'.<{getattr(fn, "__name__", "getter")}>')


def dotted(path: str) -> WritableKeyPath:
    """Writable path for a dotted attribute chain like ``'inner.value'``."""
    names = path.split('.') if path else []
    if not names or not all(names):
        raise ValueError(f"Invalid dotted path: {path!r}")

    result = attribute(names[0])
    for name in names[1:]:
        result = result.appending(attribute(name))
    return result
