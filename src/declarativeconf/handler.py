"""
Callback slots.

A CallbackSlot stores at most one optional callable. External code sets it,
the owning object invokes it when something happens:

    class Calculator:
        sum = DataSource(default=lambda a, b: a + b)
        on_result = Handler()

        def add(self, a, b):
            result = self.sum.invoke(a, b)
            if result is not None:
                self.on_result.invoke(result)
            return result

    calc = Calculator()

    @calc.on_result               # register (decorator form)
    def show(value):
        print(value)

    calc.on_result.set(None)      # clear
    calc.on_result = show         # attribute assignment also registers

Setting and invoking are deliberately different entry points: calling the
slot with a function registers it, ``invoke()`` runs it. Invoking an empty slot
returns None.
"""

import logging
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

Output = TypeVar('Output')


class CallbackSlot(Generic[Output]):
    """Holder for one optional callback."""

    __slots__ = ('_action', '_name')

    def __init__(self, action: Optional[Callable[..., Output]] = None, name: str = ''):
        self._name = name
        self._action = None
        self.set(action)

    @property
    def action(self) -> Optional[Callable[..., Output]]:
        return self._action

    @property
    def is_set(self) -> bool:
        return self._action is not None

    def set(self, action: Optional[Callable[..., Output]]) -> None:
        """Replace the stored callback; ``None`` clears it."""
        if action is not None and not callable(action):
            raise TypeError(f"Callback for {self._name or 'slot'} must be callable or None, got {type(action).__name__}")
        self._action = action

    def __call__(self, action: Callable[..., Output]) -> Callable[..., Output]:
        """Register ``action`` and return it, so the slot works as a decorator."""
        self.set(action)
        return action

    def invoke(self, *args: Any, **kwargs: Any) -> Optional[Output]:
        """Run the stored callback; returns None when nothing is registered."""
        action = self._action
        if action is None:
            logger.debug(f"Invoked empty callback slot {self._name or '<anonymous>'}")
            return None
        return action(*args, **kwargs)

    def __repr__(self) -> str:
        state = getattr(self._action, '__name__', 'set') if self._action is not None else 'empty'
        return f"{type(self).__name__}({self._name or '<anonymous>'}: {state})"


class HandlerSlot(CallbackSlot[None]):
    """CallbackSlot for side-effect callbacks; ``invoke()`` always returns None."""

    __slots__ = ()

    def invoke(self, *args: Any, **kwargs: Any) -> None:
        super().invoke(*args, **kwargs)
        return None


class DataSource(Generic[Output]):
    """Class-level declaration of a per-instance CallbackSlot.

    Each instance of the owning class gets its own slot, created on first
    access and seeded with ``default``. Assigning to the attribute sets the
    slot's callback.

    Slots are stored in the instance ``__dict__``, so owners declaring
    ``__slots__`` (including ``@dataclass(slots=True)``) must keep a
    ``'__dict__'`` slot.
    """

    slot_type = CallbackSlot

    def __init__(self, default: Optional[Callable[..., Output]] = None):
        if default is not None and not callable(default):
            raise TypeError(f"default must be callable or None, got {type(default).__name__}")
        self.default = default
        self.name = ''

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def _slot(self, instance: Any) -> CallbackSlot:
        storage = getattr(instance, '__dict__', None)
        if storage is None:
            raise TypeError(
                f"{type(self).__name__} '{self.name}' needs a per-instance __dict__; "
                f"{type(instance).__name__} defines __slots__ without '__dict__'"
            )
        slot = storage.get(self.name)
        if slot is None:
            slot = self.slot_type(self.default, name=f"{type(instance).__name__}.{self.name}")
            storage[self.name] = slot
        return slot

    def __get__(self, instance: Any, owner: Optional[type] = None):
        if instance is None:
            return self
        return self._slot(instance)

    def __set__(self, instance: Any, action: Optional[Callable[..., Output]]) -> None:
        self._slot(instance).set(action)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"


class Handler(DataSource[None]):
    """Class-level declaration of a per-instance HandlerSlot."""

    slot_type = HandlerSlot
