"""
Tests for the fluent builder.

Tests cover:
- Field navigation and build()
- Builder immutability and prefix reuse
- Guarded writes
- Field-local modification with set()
- Optional intermediate fields
- Read-only fields and writes through shared objects
- apply(), reinforce(), factories and item navigation
"""

from dataclasses import InitVar, dataclass, field, replace
from typing import ClassVar, Dict, List, Optional

import pytest

from declarativeconf import Builder, CallableBlock, Configurator, NonCallableBlock


@dataclass
class Point:
    x: int = 0
    y: int = 0


@dataclass
class Inner:
    value: int = 0
    tags: List[str] = field(default_factory=list)


@dataclass
class Wrapper:
    inner: Optional[Inner] = None
    label: str = ""


@dataclass
class Rect:
    origin: Point = field(default_factory=Point)
    size: Point = field(default_factory=Point)
    kind: ClassVar[str] = "rect"
    created: str = field(default="now", init=False)

    @property
    def area(self) -> int:
        return self.size.x * self.size.y


@dataclass
class Report:
    scores: Dict[str, int] = field(default_factory=dict)


@dataclass
class Temperature:
    celsius: float = 0.0

    @property
    def fahrenheit(self) -> float:
        return self.celsius * 9 / 5 + 32

    @fahrenheit.setter
    def fahrenheit(self, value: float) -> None:
        self.celsius = (value - 32) * 5 / 9


@dataclass
class Account:
    owner: str = ""
    opening: InitVar[int] = 0
    balance: int = field(init=False, default=0)

    def __post_init__(self, opening):
        self.balance = opening


class Canvas:
    title: str
    background: str

    def __init__(self):
        self.title = ""
        self.background = "white"


class Window:
    name: str

    def __init__(self):
        self.name = ""
        self._canvas = Canvas()

    @property
    def canvas(self) -> Canvas:
        return self._canvas


class TestBuild:
    """Test basic navigation and build()."""

    def test_point_scenario(self):
        """Builder(Point(0, 0)).x(5).y(10).build() == Point(5, 10)."""
        assert Builder(Point(x=0, y=0)).x(5).y(10).build() == Point(x=5, y=10)

    def test_no_steps(self):
        """A builder without steps builds an equal copy."""
        point = Point(1, 2)
        result = Builder(point).build()

        assert result == point
        assert result is not point

    def test_initial_value_untouched(self):
        """build() never modifies the initial value."""
        point = Point()
        Builder(point).x(5).build()
        assert point == Point()

    def test_nested_fields(self):
        """Nested dataclass fields are written through the composed path."""
        rect = Builder(Rect()).origin.x(1).size.x(3).size.y(4).build()

        assert rect.origin == Point(1, 0)
        assert rect.size == Point(3, 4)
        assert rect.area == 12

    def test_last_write_wins(self):
        """Later writes to the same field override earlier ones."""
        assert Builder(Point()).x(1).x(2).build().x == 2

    def test_whole_base_set(self):
        """set() queues a transformation of the whole base."""
        result = Builder(Point(1, 2)).set(lambda p: replace(p, x=p.y, y=p.x)).build()
        assert result == Point(2, 1)

    def test_values_copied_per_build(self):
        """Value-semantics arguments are copied into every build."""
        builder = Builder(Inner()).tags(["a"])
        first, second = builder.build(), builder.build()

        first.tags.append("b")
        assert second.tags == ["a"]

    def test_steps_are_typed(self):
        """Writable fields give callable steps, read-only fields do not."""
        builder = Builder(Rect())

        assert isinstance(builder.origin, CallableBlock)
        assert isinstance(builder.area, NonCallableBlock)
        assert repr(builder.origin.x) == "CallableBlock(.origin.x: int)"


class TestImmutability:
    """Test that builders are never altered by later steps."""

    def test_prefix_unchanged(self):
        """b1.build() is unaffected by steps taken from b1."""
        b1 = Builder(Point()).x(1)
        b2 = b1.y(2)

        assert b1.build() == Point(1, 0)
        assert b2.build() == Point(1, 2)

    def test_branching(self):
        """Two branches from one prefix stay independent."""
        prefix = Builder(Inner()).value(1)
        left = prefix.tags.set(lambda tags: tags.append("left"))
        right = prefix.tags.set(lambda tags: tags.append("right"))

        assert left.build().tags == ["left"]
        assert right.build().tags == ["right"]
        assert prefix.build() == Inner(value=1)

    def test_setattr_rejected(self):
        """Builders and steps reject attribute assignment."""
        builder = Builder(Point())
        with pytest.raises(AttributeError):
            builder.x = 5
        with pytest.raises(AttributeError):
            builder.origin_step = None

    def test_step_setattr_rejected(self):
        """Steps are read-only objects."""
        with pytest.raises(AttributeError):
            Builder(Point()).x.y = 1


class TestGuardedWrite:
    """Test when= guarded writes."""

    def test_false_guard_is_noop(self):
        """A false guard builds the same result as no step at all."""
        guarded = Builder(Point(1, 1)).x(5, when=False).build()
        assert guarded == Builder(Point(1, 1)).build()

    def test_true_guard_writes(self):
        """A true guard behaves like an unguarded write."""
        assert Builder(Point()).x(5, when=True).build() == Point(5, 0)

    def test_guard_returns_new_builder(self):
        """A skipped step still returns a new builder."""
        builder = Builder(Point())
        assert builder.x(5, when=False) is not builder

    def test_skip_is_logged(self, debug_logs):
        """Skipped writes leave a debug record."""
        Builder(Point()).x(5, when=False).build()
        assert "Skipped guarded write to .x" in debug_logs.text


class TestFieldModification:
    """Test step.set(transform)."""

    def test_in_place_mutation(self):
        """In-place transforms modify a copy of the field."""
        initial = Inner(tags=["a"])
        result = Builder(initial).tags.set(lambda tags: tags.append("b")).build()

        assert result.tags == ["a", "b"]
        assert initial.tags == ["a"]

    def test_returned_replacement(self):
        """Returned values replace the field."""
        assert Builder(Point(x=4)).x.set(lambda x: x * 10).build() == Point(40, 0)

    def test_nested_dataclass_field(self):
        """Nested dataclass fields can be rebuilt in one step."""
        result = Builder(Rect()).size.set(lambda size: replace(size, x=2, y=2)).build()
        assert result.area == 4


class TestOptionalFields:
    """Test navigation through Optional fields."""

    def test_absent_container_scenario(self):
        """Writing below an absent optional leaves the base unchanged."""
        result = Builder(Wrapper(inner=None)).inner.value(99).build()
        assert result == Wrapper(inner=None)

    def test_present_container(self):
        """Writing below a present optional updates it."""
        result = Builder(Wrapper(inner=Inner(value=1))).inner.value(99).build()
        assert result.inner == Inner(value=99)

    def test_set_skipped_for_absent_container(self):
        """Field transforms are not called when the container is absent."""
        def fail(value):
            raise AssertionError("transform must not run")

        result = Builder(Wrapper()).inner.value.set(fail).build()
        assert result == Wrapper()

    def test_replacing_the_optional_itself(self):
        """The optional field itself is an ordinary writable field."""
        result = Builder(Wrapper()).inner(Inner(value=3)).inner.value.set(lambda v: v + 1).build()
        assert result.inner == Inner(value=4)

    def test_optional_base(self):
        """A None base stays None when the base type is optional."""
        builder = Builder.from_factory(lambda: None, base_type=Optional[Point]).x(5)
        assert builder.build() is None

    def test_step_repr_marks_optional(self):
        """Steps below an optional report an optional value."""
        assert repr(Builder(Wrapper()).inner.value) == "CallableBlock(.inner.value?: int?)"


class TestDataclassWrites:
    """Test single-field writes into dataclass values."""

    def test_property_setter(self):
        """Writable properties are written through their setter."""
        initial = Temperature()
        result = Builder(initial).fahrenheit(212).build()

        assert result.celsius == 100
        assert initial.celsius == 0

    def test_derived_fields_preserved(self):
        """Writing one field keeps fields derived in __post_init__."""
        initial = Account(owner="a", opening=50)
        result = Builder(initial).owner("b").build()

        assert result.owner == "b"
        assert result.balance == 50
        assert initial.owner == "a"

    def test_other_fields_unchanged(self):
        """Only the targeted field differs from the input."""
        result = Builder(Account(owner="a", opening=7)).owner.set(lambda owner: owner + "!").build()
        assert (result.owner, result.balance) == ("a!", 7)


class TestReadOnlyFields:
    """Test read-only fields."""

    def test_property_without_setter(self):
        """Calling a read-only step fails immediately."""
        with pytest.raises(TypeError):
            Builder(Rect()).area(5)

    def test_init_false_field(self):
        """Dataclass fields with init=False are read-only."""
        assert isinstance(Builder(Rect()).created, NonCallableBlock)

    def test_classvar(self):
        """ClassVar attributes are read-only."""
        assert isinstance(Builder(Rect()).kind, NonCallableBlock)

    def test_unknown_field(self):
        """Unknown dataclass fields raise AttributeError during navigation."""
        with pytest.raises(AttributeError, match="Point has no field 'z'"):
            Builder(Point()).z

    def test_write_through_shared_object(self):
        """A read-only property holding a shared object still allows writes into it."""
        window = Window()
        step = Builder(window).canvas.title

        assert isinstance(step, CallableBlock)
        result = step("Main").build()

        assert result is window
        assert window.canvas.title == "Main"


class TestApply:
    """Test apply() for reference bases."""

    def test_apply_mutates_in_place(self):
        """apply() configures the shared object."""
        window = Window()
        returned = Builder(window).name("editor").canvas.background("black").apply()

        assert returned is None
        assert window.name == "editor"
        assert window.canvas.background == "black"

    def test_apply_rejects_value_base(self):
        """Value-semantics bases must use build()."""
        with pytest.raises(TypeError, match="use build"):
            Builder(Point()).x(1).apply()


class TestReinforce:
    """Test reinforce() checkpoints."""

    def test_reinforce_with_args(self):
        """Extra arguments are passed after the base."""
        result = (
            Builder(Point())
            .x(2)
            .reinforce(lambda p, factor: replace(p, y=p.x * factor), 3)
            .build()
        )
        assert result == Point(2, 6)

    def test_reinforce_builds_once(self):
        """The pending chain is materialised when reinforce() is called."""
        calls = []

        def make_point() -> Point:
            calls.append(1)
            return Point()

        checkpoint = Builder.from_factory(make_point).x(1).reinforce(lambda p: replace(p, y=1))
        assert len(calls) == 1

        assert checkpoint.build() == Point(1, 1)
        assert checkpoint.build() == Point(1, 1)
        assert len(calls) == 1

    def test_reinforce_continues_chain(self):
        """Steps can be queued after a checkpoint."""
        result = Builder(Point()).x(1).reinforce(lambda p: replace(p, y=p.x)).x(7).build()
        assert result == Point(7, 1)

    def test_reinforce_reference(self):
        """Checkpoints on reference bases keep working on the same object."""
        window = Window()

        def rename(w, suffix):
            w.name = w.name + suffix

        Builder(window).name("main").reinforce(rename, "-1").apply()
        assert window.name == "main-1"


class TestFactories:
    """Test from_factory()."""

    def test_factory_called_once_per_build(self):
        """The factory runs exactly once per build()."""
        calls = []

        def make_point() -> Point:
            calls.append(1)
            return Point()

        builder = Builder.from_factory(make_point).x(3)
        assert calls == []

        assert builder.build() == Point(3, 0)
        assert builder.build() == Point(3, 0)
        assert len(calls) == 2

    def test_base_type_from_annotation(self):
        """The factory's return annotation drives navigation."""
        def make_point() -> Point:
            return Point()

        with pytest.raises(AttributeError):
            Builder.from_factory(make_point).z

    def test_class_as_factory(self):
        """A class is its own base type."""
        assert Builder.from_factory(Point).y(4).build() == Point(0, 4)

    def test_non_callable_factory(self):
        """Factories must be callable."""
        with pytest.raises(TypeError):
            Builder.from_factory(Point())


class TestItemNavigation:
    """Test item access and dotted paths."""

    def test_dict_base(self):
        """Items of a dict base can be written."""
        original = {'a': 1}
        assert Builder(original)['b'](2).build() == {'a': 1, 'b': 2}
        assert original == {'a': 1}

    def test_typed_dict_field(self):
        """Dict fields resolve their value type."""
        step = Builder(Report()).scores['math']
        assert repr(step) == "CallableBlock(.scores['math']: int)"
        assert step(90).build() == Report(scores={'math': 90})

    def test_list_item(self):
        """List items inside dataclasses are copy-on-write."""
        initial = Inner(tags=["a", "b"])
        result = Builder(initial).tags[1]("z").build()

        assert result.tags == ["a", "z"]
        assert initial.tags == ["a", "b"]

    def test_dotted_path(self):
        """at() follows dotted attribute paths."""
        result = Builder(Wrapper(inner=Inner())).at('inner.value')(5).build()
        assert result.inner.value == 5

    def test_dotted_path_invalid(self):
        """Empty dotted paths are rejected."""
        with pytest.raises(ValueError):
            Builder(Point()).at('')


class TestConfiguratorInterop:
    """Test the builder's pending queue."""

    def test_configurator_reused(self):
        """A builder's queue can configure other values."""
        cfg = Builder(Point()).x(9).configurator

        assert isinstance(cfg, Configurator)
        assert cfg.configured(Point(1, 1)) == Point(9, 1)

    def test_repr(self):
        """repr shows the base type and pending writes."""
        assert repr(Builder(Point()).x(1).y(2)) == "Builder[Point](2 pending)"
