"""
Field introspection for type-driven navigation.

Answers, for a container type and a field name or item key:
- what type the field holds (with Optional unwrapped),
- whether the field is optional,
- whether the field can be written.

Handles:
- Dataclasses: uses dataclasses.fields(); ``init=False`` fields are read-only
- Properties: read-only unless they define a setter
- Annotated class attributes; ``ClassVar`` attributes are read-only
- NamedTuples
- Generic containers for item access (Dict[K, V], List[T], Tuple[...], TypedDict)
"""

import collections.abc
import dataclasses
import inspect
import logging
import types
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Tuple, Union, get_args, get_origin, get_type_hints

logger = logging.getLogger(__name__)

_MISSING = object()
_NONE_TYPE = type(None)

_UNION_TYPES = (Union,)
if hasattr(types, 'UnionType'):
    _UNION_TYPES += (types.UnionType,)

# Abstract container types whose items cannot be assigned
_READ_ONLY_ORIGINS = (
    collections.abc.Mapping,
    collections.abc.Sequence,
    collections.abc.Set,
    frozenset,
    str,
    bytes,
)


@dataclass(frozen=True)
class FieldInfo:
    """What navigation needs to know about one field."""
    name: str
    value_type: Any = Any  # Optional already unwrapped
    writable: bool = True
    optional: bool = False


def unwrap_optional(field_type: Any) -> Tuple[Any, bool]:
    """Split ``Optional[X]`` / ``X | None`` into ``(X, True)``.

    Non-optional types come back as ``(field_type, False)``.
    """
    origin = get_origin(field_type)
    if origin in _UNION_TYPES:
        args = get_args(field_type)
        if _NONE_TYPE in args:
            rest = tuple(arg for arg in args if arg is not _NONE_TYPE)
            if len(rest) == 1:
                return rest[0], True
            return Union[rest], True
    return field_type, False


def _type_hints(obj: Any) -> Dict[str, Any]:
    try:
        return get_type_hints(obj)
    except (NameError, TypeError) as e:
        # Unresolvable forward references: fall back to raw annotations
        logger.debug(f"Could not resolve type hints for {obj!r}: {e}")
        return dict(getattr(obj, '__annotations__', {}))


def _is_known_type(owner_type: Any) -> bool:
    return isinstance(owner_type, type) and owner_type not in (object, Any)


def describe_attribute(owner_type: Any, name: str) -> FieldInfo:
    """Describe attribute ``name`` of ``owner_type``.

    Unknown owner types (``Any``, ``None``) describe every attribute as a
    writable field of unknown type. Dataclasses and NamedTuples have a closed set
    of fields, so an unknown name raises AttributeError.
    """
    if not _is_known_type(owner_type):
        return FieldInfo(name)

    static = inspect.getattr_static(owner_type, name, _MISSING)

    if isinstance(static, property):
        hint = _type_hints(static.fget).get('return', Any) if static.fget else Any
        value_type, optional = unwrap_optional(hint)
        return FieldInfo(name, value_type, static.fset is not None, optional)

    hints = _type_hints(owner_type)

    if dataclasses.is_dataclass(owner_type):
        for f in dataclasses.fields(owner_type):
            if f.name == name:
                value_type, optional = unwrap_optional(hints.get(name, f.type))
                return FieldInfo(name, value_type, f.init, optional)

    if name in hints:
        hint = hints[name]
        if hint is ClassVar or get_origin(hint) is ClassVar:
            args = get_args(hint)
            value_type, optional = unwrap_optional(args[0] if args else Any)
            return FieldInfo(name, value_type, False, optional)
        value_type, optional = unwrap_optional(hint)
        return FieldInfo(name, value_type, True, optional)

    tuple_fields = getattr(owner_type, '_fields', None)
    if isinstance(tuple_fields, tuple) and name in tuple_fields:
        return FieldInfo(name)

    type_name = owner_type.__name__
    if dataclasses.is_dataclass(owner_type) or tuple_fields is not None:
        raise AttributeError(f"{type_name} has no field '{name}'")

    if static is not _MISSING and (inspect.isroutine(static) or isinstance(static, (staticmethod, classmethod))):
        raise AttributeError(f"'{name}' is a method of {type_name}, not a field")

    # Plain classes: instance attributes are invisible at the type level
    return FieldInfo(name)


def describe_item(container_type: Any, key: Any) -> FieldInfo:
    """Describe ``container[key]`` for a container type."""
    name = repr(key)

    if not _is_known_type(container_type) and get_origin(container_type) is None:
        return FieldInfo(name)

    origin = get_origin(container_type) or container_type
    args = get_args(container_type)

    writable = not (
        isinstance(origin, type)
        and issubclass(origin, _READ_ONLY_ORIGINS)
        and not issubclass(origin, (collections.abc.MutableMapping, collections.abc.MutableSequence, tuple))
    )

    # TypedDict: per-key annotations
    if isinstance(container_type, type) and issubclass(container_type, dict) and hasattr(container_type, '__total__'):
        hints = _type_hints(container_type)
        if key not in hints:
            raise KeyError(f"{container_type.__name__} has no key {key!r}")
        value_type, optional = unwrap_optional(hints[key])
        return FieldInfo(name, value_type, True, optional)

    value_type: Any = Any
    if isinstance(origin, type) and issubclass(origin, tuple):
        if len(args) == 2 and args[1] is Ellipsis:
            value_type = args[0]
        elif args and isinstance(key, int) and -len(args) <= key < len(args):
            value_type = args[key]
    elif isinstance(origin, type) and issubclass(origin, collections.abc.Mapping):
        if len(args) == 2:
            value_type = args[1]
    elif args:
        value_type = args[0]

    value_type, optional = unwrap_optional(value_type)
    return FieldInfo(name, value_type, writable, optional)


def resolve_base_type(factory: Any) -> Optional[Any]:
    """Best-effort result type of a zero-argument factory."""
    if isinstance(factory, type):
        return factory
    hint = _type_hints(factory).get('return') if callable(factory) else None
    if hint is None:
        return None
    value_type, _ = unwrap_optional(hint)
    return value_type
