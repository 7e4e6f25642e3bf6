"""Unit tests for descriptors read from source code with libcst."""

import pytest

from splurge_property_model.access import privileged_introspection
from splurge_property_model.annotations import (
    BindingName,
    DateFormat,
    Nillable,
    PropertyOrder,
    Transient,
)
from splurge_property_model.descriptors import SourceModuleReader
from splurge_property_model.exceptions import DescriptorError
from splurge_property_model.naming import AccessorRole

MODULE = '''
from abc import ABC, abstractmethod
from typing import Annotated, ClassVar, Final, Protocol

from splurge_property_model import BindingName, Nillable, annotate, binding_name, creator, property_order, transient


class Named(Protocol):
    @binding_name("label")
    def getName(self) -> str: ...


class Identified(ABC):
    @abstractmethod
    def getId(self) -> int: ...


class Base:
    id: int
    count: ClassVar[int] = 0


@property_order("first_name", "id")
class Person(Base, Named, Identified):
    first_name: Annotated[str, BindingName("firstName"), Nillable(False)]
    _secret: str
    limit: Final[int] = 3

    @creator
    def __init__(self, id: int, first_name: Annotated[str, BindingName("given")]) -> None:
        self.first_name = first_name

    def getName(self) -> str:
        return self.first_name

    def getId(self) -> int:
        return 1

    @property
    def age(self) -> int:
        return 0

    @age.setter
    @nillable(True)
    def age(self, value: int) -> None:
        pass

    @transient
    def getTemp(self) -> int:
        return 0

    @annotate(DateFormat("yyyy-MM-dd", locale="en"), Nillable(False))
    def getBorn(self) -> str:
        return ""

    @staticmethod
    def getCount() -> int:
        return 0

    def compute(self, a, b, *rest, **options):
        return None

    def make_helper(self):
        class Hidden:
            x: int

        return Hidden


class Outer:
    class Inner:
        x: int

    class Sub(Inner):
        y: int


class Slotted:
    __slots__ = ("a", "_b")


class OneLiner: value: int
'''


@pytest.fixture
def reader():
    return SourceModuleReader(MODULE, "people")


def _by_name(handles):
    return {h.name: h for h in handles}


def test_class_names_include_nested_but_not_function_local(reader):
    assert reader.class_names == [
        "Named",
        "Identified",
        "Base",
        "Person",
        "Outer",
        "Outer.Inner",
        "Outer.Sub",
        "Slotted",
        "OneLiner",
    ]


def test_descriptor_identity(reader):
    person = reader.get("Person")

    assert person is reader.get("Person")
    assert person.name == "people.Person"
    assert person.key == ("people", "Person")
    assert person.qualname == "Person"


def test_unknown_class_raises(reader):
    with pytest.raises(DescriptorError) as exc_info:
        reader.get("Missing")

    assert exc_info.value.details["type_name"] == "Missing"


def test_parse_error_raises():
    with pytest.raises(DescriptorError):
        SourceModuleReader("class (:\n", "broken")


def test_inheritance_cycle_raises():
    with pytest.raises(DescriptorError, match="Inheritance cycle detected"):
        SourceModuleReader("class A(B):\n    pass\n\n\nclass B(A):\n    pass\n", "cyclic")


def test_supertype_and_interfaces(reader):
    person = reader.get("Person")

    assert person.supertype == reader.get("Base")
    assert [i.name for i in person.interfaces] == ["people.Named", "people.Identified"]
    assert reader.get("Named").is_interface
    assert reader.get("Identified").is_interface
    assert not reader.get("Base").is_interface
    assert reader.get("Base").supertype is None


def test_hierarchy_is_resolved_once(reader, mocker):
    resolve_base = mocker.spy(reader, "resolve_base")
    person = reader.get("Person")

    supertype = person.supertype
    interfaces = person.interfaces
    calls = resolve_base.call_count

    assert calls > 0
    assert person.supertype is supertype
    assert person.interfaces is interfaces
    assert person.is_interface is False
    assert resolve_base.call_count == calls


def test_nested_base_resolves_through_enclosing_scope(reader):
    assert reader.get("Outer.Sub").supertype == reader.get("Outer.Inner")


def test_unresolved_bases_are_ignored():
    reader = SourceModuleReader("import json\n\n\nclass Codec(json.JSONEncoder):\n    x: int\n", "codec")

    assert reader.get("Codec").supertype is None
    assert reader.get("Codec").interfaces == ()


def test_class_metadata(reader):
    assert reader.get("Person").metadata == (PropertyOrder(("first_name", "id")),)


def test_fields(reader):
    person = reader.get("Person")
    with privileged_introspection(person):
        fields = _by_name(person.declared_fields())

    assert list(fields) == ["first_name", "_secret", "limit"]
    assert fields["first_name"].metadata == (BindingName("firstName"), Nillable(False))
    assert not fields["_secret"].is_public
    assert fields["limit"].is_final
    assert _by_name(reader.get("Base").declared_fields())["count"].is_static


def test_slots_and_one_line_bodies(reader):
    slotted = reader.get("Slotted")
    with privileged_introspection(slotted):
        assert [f.name for f in slotted.declared_fields()] == ["a", "_b"]

    assert [f.name for f in reader.get("OneLiner").declared_fields()] == ["value"]


def test_methods(reader):
    methods = [m for m in reader.get("Person").declared_methods() if not m.is_synthetic]
    by_name = {(m.name, m.accessor_role): m for m in methods}

    assert by_name[("getName", None)].parameter_count == 0
    assert by_name[("getTemp", None)].metadata == (Transient(),)
    assert by_name[("getBorn", None)].metadata == (DateFormat("yyyy-MM-dd", "en"), Nillable(False))
    assert by_name[("getCount", None)].is_static
    assert by_name[("getCount", None)].parameter_count == 0
    assert by_name[("compute", None)].parameter_count == 4
    assert by_name[("age", AccessorRole.GETTER)].bound_property == "age"
    assert by_name[("age", AccessorRole.SETTER)].metadata == (Nillable(True),)


def test_interface_accessor_metadata(reader):
    (get_name,) = reader.get("Named").declared_methods()

    assert get_name.name == "getName"
    assert get_name.metadata == (BindingName("label"),)


def test_find_creator(reader):
    spec = reader.get("Person").find_creator()

    assert spec is not None
    assert spec.name == "__init__"
    assert spec.parameter_names == ("id", "given")
    assert reader.get("Base").find_creator() is None


def test_non_literal_arguments_are_skipped():
    source = (
        "from x import binding_name\n\nNAME = 'n'\n\n\n"
        "class C:\n    @binding_name(NAME)\n    def getA(self):\n        return 1\n"
    )
    (method,) = SourceModuleReader(source, "m").get("C").declared_methods()

    assert method.metadata == ()
