"""
Declarative object-construction helpers.

Write chained, path-based mutations instead of imperative statements, and give
objects settable callback slots.

Key Features:
- Composable key paths that read and write nested fields, through optionals
- Immutable deferred modification queues (Configurator)
- Fluent builders with type-driven field navigation (Builder)
- Per-instance callback slots (Handler / DataSource)
- Pluggable value vs reference semantics

Quick Start:
    >>> from dataclasses import dataclass
    >>> from declarativeconf import Builder
    >>>
    >>> @dataclass
    ... class Point:
    ...     x: int = 0
    ...     y: int = 0
    >>>
    >>> Builder(Point()).x(5).y(10).build()
    Point(x=5, y=10)

Modules:
    - keypath: KeyPath / WritableKeyPath and path constructors
    - configurator: Deferred modification queue
    - builder: Fluent builder
    - navigation: Field navigation steps shared by Builder and Configurator
    - handler: Callback slots
    - introspection: Field type and writability lookup
    - modification: In-place style modification helpers
    - config: Value vs reference semantics registry
"""

# Paths
from declarativeconf.keypath import (
    KeyPath,
    WritableKeyPath,
    attribute,
    item,
    getter,
    dotted,
)

# Queue and builder
from declarativeconf.configurator import Configurator
from declarativeconf.builder import Builder
from declarativeconf.navigation import CallableBlock, NonCallableBlock

# Callback slots
from declarativeconf.handler import (
    CallbackSlot,
    HandlerSlot,
    DataSource,
    Handler,
)

# Helpers
from declarativeconf.modification import modification
from declarativeconf.introspection import FieldInfo, describe_attribute, describe_item

# Configuration
from declarativeconf.config import (
    register_value_type,
    register_reference_type,
    unregister_semantics,
    get_registered_semantics,
    reset_semantics,
    is_value_type,
    is_reference_type,
    has_value_semantics,
    copy_value,
)

__all__ = [
    # Paths
    'KeyPath',
    'WritableKeyPath',
    'attribute',
    'item',
    'getter',
    'dotted',
    # Queue and builder
    'Configurator',
    'Builder',
    'CallableBlock',
    'NonCallableBlock',
    # Callback slots
    'CallbackSlot',
    'HandlerSlot',
    'DataSource',
    'Handler',
    # Helpers
    'modification',
    'FieldInfo',
    'describe_attribute',
    'describe_item',
    # Configuration
    'register_value_type',
    'register_reference_type',
    'unregister_semantics',
    'get_registered_semantics',
    'reset_semantics',
    'is_value_type',
    'is_reference_type',
    'has_value_semantics',
    'copy_value',
]

__version__ = '1.0.0'
__description__ = 'Declarative builders, configurators and callback slots'
