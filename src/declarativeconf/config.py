"""
Framework configuration: value vs reference semantics.

Python objects are all references, so the framework needs a rule for deciding
which objects behave like values (copied before modification, rebuilt on
write) and which behave like shared objects (mutated in place).

Default rules:
- Immutable scalars (None, bool, int, float, complex, str, bytes, ...) are values
  and are never copied.
- Dataclass instances, tuples (including namedtuples), lists, dicts and sets are
  values: copies are rebuilt member by member.
- Every other object is a reference.

Explicit registrations override the defaults. The most specific class in the
MRO wins:

    >>> register_reference_type(Session)      # dataclass used as an entity
    >>> register_value_type(Vector)           # plain class copied on write
"""

import copy
import dataclasses
import logging
from typing import Any, Dict, Type

logger = logging.getLogger(__name__)

VALUE = "value"
REFERENCE = "reference"

_IMMUTABLE_TYPES = (type(None), bool, int, float, complex, str, bytes, frozenset, range, type)
_VALUE_CONTAINER_TYPES = (tuple, list, dict, set)

# Explicit registrations: type -> VALUE | REFERENCE
_semantics_registry: Dict[Type, str] = {}


def register_value_type(cls: Type) -> Type:
    """Register ``cls`` (and its subclasses) as having value semantics.

    Returns the class so it can be used as a decorator.
    """
    _semantics_registry[cls] = VALUE
    logger.debug(f"Registered value semantics for {cls.__name__}")
    return cls


def register_reference_type(cls: Type) -> Type:
    """Register ``cls`` (and its subclasses) as having reference semantics.

    Returns the class so it can be used as a decorator.
    """
    _semantics_registry[cls] = REFERENCE
    logger.debug(f"Registered reference semantics for {cls.__name__}")
    return cls


def unregister_semantics(cls: Type) -> None:
    """Remove an explicit registration; the default rules apply again."""
    _semantics_registry.pop(cls, None)


def get_registered_semantics() -> Dict[Type, str]:
    """Return a copy of the explicit registrations."""
    return dict(_semantics_registry)


def reset_semantics() -> None:
    """Drop all explicit registrations."""
    _semantics_registry.clear()


def _registered_semantics(cls: Type):
    for klass in getattr(cls, '__mro__', ()):
        if klass in _semantics_registry:
            return _semantics_registry[klass]
    return None


def is_value_type(cls: Any) -> bool:
    """Check whether instances of ``cls`` have value semantics."""
    if cls is Any or not isinstance(cls, type):
        return False
    registered = _registered_semantics(cls)
    if registered is not None:
        return registered == VALUE
    if issubclass(cls, _IMMUTABLE_TYPES) or issubclass(cls, _VALUE_CONTAINER_TYPES):
        return True
    return dataclasses.is_dataclass(cls)


def is_reference_type(cls: Any) -> bool:
    """Check whether instances of ``cls`` are known to have reference semantics.

    Unknown types (``Any``, typing constructs, ``None``) are neither value nor
    reference types, so this is not simply ``not is_value_type(cls)``.
    """
    if cls is Any or cls is object or not isinstance(cls, type):
        return False
    return not is_value_type(cls)


def has_value_semantics(obj: Any) -> bool:
    """Check whether ``obj`` should be copied rather than shared."""
    return is_value_type(type(obj))


def copy_value(obj: Any) -> Any:
    """Copy ``obj`` according to its semantics.

    Value objects are rebuilt recursively; reference objects found anywhere in
    the structure are shared, not copied.
    """
    cls = type(obj)
    if not is_value_type(cls) or isinstance(obj, _IMMUTABLE_TYPES):
        return obj

    if dataclasses.is_dataclass(obj):
        # object.__setattr__ also covers frozen dataclasses
        new_obj = copy.copy(obj)
        for f in dataclasses.fields(obj):
            object.__setattr__(new_obj, f.name, copy_value(getattr(obj, f.name)))
        return new_obj

    if isinstance(obj, tuple):
        members = [copy_value(item) for item in obj]
        if hasattr(obj, '_fields'):
            return cls(*members)
        return cls(members)

    if isinstance(obj, list):
        new_list = copy.copy(obj)
        new_list[:] = [copy_value(item) for item in obj]
        return new_list

    if isinstance(obj, dict):
        new_dict = copy.copy(obj)
        for key, value in obj.items():
            new_dict[key] = copy_value(value)
        return new_dict

    if isinstance(obj, set):
        return copy.copy(obj)

    # Explicitly registered value type: a shallow copy gives it its own identity
    return copy.copy(obj)
