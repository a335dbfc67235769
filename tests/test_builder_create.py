# tests/test_builder_create.py
import enum
import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Optional, Protocol, Sequence, Union

import pytest

from pydummy.builder import ObjectBuilder
from pydummy.errors import (
    NoConstructorAvailable,
    RecursionLimitExceeded,
    UnresolvableAbstractType,
    UnresolvableParameter,
    UnsupportedConstruction,
)
from pydummy.introspect import Constructor, Parameter
from pydummy.placeholders import DummyEnum


# ----------------------------- models ---------------------------------------

class Color(enum.Enum):
    RED = 1
    BLUE = 2


@dataclass
class Flat:
    count: int
    ratio: float
    active: bool
    label: str
    note: Optional[str]
    tags: list[str]
    history: Sequence[int]
    ids: set[int]
    extra: dict[str, int]
    color: Color


class Address:
    def __init__(self, street: str, number: int):
        self.street = street
        self.number = number


@dataclass
class Person:
    name: str
    address: Address
    nicknames: list[str]


@dataclass
class Company:
    boss: Person
    headquarters: Address


class Shape(ABC):
    @abstractmethod
    def area(self) -> float:
        ...


@dataclass
class Square(Shape):
    side: float

    def area(self) -> float:
        return self.side * self.side


@dataclass
class Circle(Shape):
    radius: float

    def area(self) -> float:
        return 3.14 * self.radius * self.radius


@dataclass
class Drawing:
    shape: Shape


@dataclass
class Sticker:
    shape: Union[Square, Circle]


class Sealed:
    __init__ = None


@dataclass
class HasSealed:
    sealed: Sealed


BOOM = ValueError("boom")


class Exploding:
    def __init__(self, x: int):
        raise BOOM


@dataclass
class WrapsExploding:
    inner: Exploding


class KeywordOnly:
    def __init__(self, a: int, *, b: str, **extra):
        self.a = a
        self.b = b
        self.extra = extra


class WithDefault:
    def __init__(self, a: int, b=7):
        self.a = a
        self.b = b


class NoAnnotation:
    def __init__(self, a):
        self.a = a


class Box:
    def __init__(self, size: int):
        self.size = size

    def __class_getitem__(cls, item):
        from types import GenericAlias
        return GenericAlias(cls, item)


@dataclass
class Holder:
    box: Box[int]


@dataclass
class Node:
    value: int
    next: "Node"


@dataclass
class Chain:
    value: int
    next: Optional["Chain"]


class Greeter(Protocol):
    def greet(self) -> str:
        ...


@dataclass
class Welcome:
    greeter: Greeter


class Sized:
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

    @classmethod
    def square(cls, side: int) -> "Sized":
        return cls(side, side)


# ----------------------------- tests ----------------------------------------

def test_primitive_fields_get_placeholders():
    flat = ObjectBuilder().create(Flat)
    assert flat.count == 1
    assert flat.ratio == 1.0
    assert flat.active is False
    assert flat.label == "dummy"
    assert flat.note is None
    assert flat.tags == []
    assert flat.history == ()
    assert flat.ids == set()
    assert flat.extra == {}
    assert flat.color is DummyEnum.dummy


def test_create_is_repeatable_and_never_shares_containers():
    builder = ObjectBuilder()
    a = builder.create(Flat)
    b = builder.create(Flat)
    assert a == b
    assert a.tags is not b.tags
    assert a.extra is not b.extra


def test_nested_classes_are_built_recursively():
    company = ObjectBuilder().create(Company)
    assert isinstance(company.boss, Person)
    assert company.boss.name == "dummy"
    assert company.boss.address.street == "dummy"
    assert company.boss.address.number == 1
    assert company.headquarters.number == 1
    assert company.boss.address is not company.headquarters


def test_built_object_can_be_completed_with_replace():
    person = replace(ObjectBuilder().create(Person), name="Ada")
    assert person.name == "Ada"
    assert person.address.street == "dummy"


def test_abstract_field_fails_on_bare_builder():
    with pytest.raises(UnresolvableAbstractType) as excinfo:
        ObjectBuilder().create(Drawing)
    assert excinfo.value.target is Shape
    assert "don't know how to instantiate" in str(excinfo.value)


def test_abstract_root_fails_on_bare_builder():
    with pytest.raises(UnsupportedConstruction):
        ObjectBuilder().create(Shape)


def test_abstract_field_resolved_by_registered_implementation():
    square = Square(3.0)
    drawing = ObjectBuilder().using(square).create(Drawing)
    assert drawing.shape is square


def test_interest_set_builds_first_matching_subclass():
    builder = ObjectBuilder().add_class(Address).add_class(Square).add_class(Circle)
    drawing = builder.create(Drawing)
    assert isinstance(drawing.shape, Square)
    assert drawing.shape.side == 1.0


def test_add_class_is_chainable_and_validates_argument():
    builder = ObjectBuilder()
    assert builder.add_class(Square) is builder
    assert builder.classes == [Square]
    with pytest.raises(TypeError):
        builder.add_class(Square(1.0))  # type: ignore[arg-type]


def test_union_field_resolved_through_interest_set():
    with pytest.raises(UnresolvableAbstractType):
        ObjectBuilder().create(Sticker)
    sticker = ObjectBuilder().add_class(Circle).create(Sticker)
    assert isinstance(sticker.shape, Circle)


def test_no_constructor_available():
    with pytest.raises(NoConstructorAvailable) as excinfo:
        ObjectBuilder().create(Sealed)
    assert excinfo.value.target is Sealed


def test_no_constructor_available_for_nested_field():
    with pytest.raises(NoConstructorAvailable):
        ObjectBuilder().create(HasSealed)


def test_constructor_exception_propagates_unchanged():
    with pytest.raises(ValueError) as excinfo:
        ObjectBuilder().create(Exploding)
    assert excinfo.value is BOOM


def test_nested_constructor_exception_propagates_unchanged():
    with pytest.raises(ValueError) as excinfo:
        ObjectBuilder().create(WrapsExploding)
    assert excinfo.value is BOOM


def test_keyword_only_parameters_and_variadics():
    obj = ObjectBuilder().create(KeywordOnly)
    assert obj.a == 1
    assert obj.b == "dummy"
    assert obj.extra == {}


def test_unannotated_parameter_uses_default():
    obj = ObjectBuilder().create(WithDefault)
    assert (obj.a, obj.b) == (1, 7)


def test_unannotated_parameter_without_default_fails():
    with pytest.raises(UnresolvableParameter) as excinfo:
        ObjectBuilder().create(NoAnnotation)
    assert excinfo.value.parameter == "a"


def test_parameterized_generic_builds_origin_class():
    holder = ObjectBuilder().create(Holder)
    assert isinstance(holder.box, Box)
    assert holder.box.size == 1


def test_optional_self_reference_terminates():
    chain = ObjectBuilder().create(Chain)
    assert chain.value == 1
    assert chain.next is None


def test_self_reference_is_unbounded_by_default():
    with pytest.raises(RecursionError):
        ObjectBuilder().create(Node)


def test_max_depth_stops_self_reference():
    with pytest.raises(RecursionLimitExceeded) as excinfo:
        ObjectBuilder(max_depth=5).create(Node)
    assert excinfo.value.max_depth == 5
    assert excinfo.value.target is Node


def test_max_depth_counts_nesting_levels():
    # Company -> Person -> Address is two levels below the root.
    assert ObjectBuilder(max_depth=2).create(Company).boss.address.number == 1
    with pytest.raises(RecursionLimitExceeded):
        ObjectBuilder(max_depth=1).create(Company)


def test_builder_depth_is_reset_after_failure():
    builder = ObjectBuilder(max_depth=1)
    with pytest.raises(RecursionLimitExceeded):
        builder.create(Company)
    assert builder.create(Person).address.street == "dummy"


def test_protocol_field_fails_on_bare_builder():
    with pytest.raises(UnresolvableAbstractType):
        ObjectBuilder().create(Welcome)


def test_get_best_constructor_exposes_parameters():
    cons = ObjectBuilder().get_best_constructor(Address)
    assert cons.owner is Address
    assert [p.name for p in cons.parameters] == ["street", "number"]
    assert [p.annotation for p in cons.parameters] == [str, int]


def test_create_instance_with_hand_made_constructor():
    cons = Constructor(
        owner=Sized,
        factory=Sized.square,
        parameters=(Parameter("side", inspect.Parameter.POSITIONAL_OR_KEYWORD, int),),
    )
    obj = ObjectBuilder().create_instance(cons)
    assert (obj.width, obj.height) == (1, 1)


def test_get_best_constructor_can_be_overridden():
    class FactoryBuilder(ObjectBuilder):
        def get_best_constructor(self, cls):
            if cls is Sized:
                return Constructor(
                    owner=Sized,
                    factory=Sized.square,
                    parameters=(Parameter("side", inspect.Parameter.POSITIONAL_OR_KEYWORD, int),),
                )
            return super().get_best_constructor(cls)

    obj = FactoryBuilder().create(Sized)
    assert obj.width == obj.height == 1
