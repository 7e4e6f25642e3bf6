"""Unit tests for the class model registry."""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Annotated, Protocol

import pytest

from splurge_property_model.annotations import BindingName, binding_name
from splurge_property_model.context import ModelConfig
from splurge_property_model.descriptors import RuntimeTypeDescriptor
from splurge_property_model.events import ClassModelBuiltEvent, ErrorEvent
from splurge_property_model.exceptions import PropertyNameClashError
from splurge_property_model.main import build_class_model
from splurge_property_model.registry import ClassModelRegistry


class Person:
    name: str
    age: int


class Employee(Person):
    salary: int


class Clashing:
    first: Annotated[str, BindingName("x")]
    second: Annotated[str, BindingName("x")]


class ClashingChild(Clashing):
    other: int


class Labelled(Protocol):
    @binding_name("label")
    def getName(self) -> str: ...


class Contact(Labelled):
    email: str

    def getName(self) -> str:
        return ""

    def setName(self, value: str) -> None:
        pass


class Manager(Contact):
    level: int

    def getName(self) -> str:
        return ""


class Wide:
    a: int
    b: int
    c: int


def test_model_is_built_once_and_cached():
    registry = ClassModelRegistry()

    model = registry.get_class_model(Person)

    assert model is registry.get_class_model(Person)
    assert model is registry.get_class_model(RuntimeTypeDescriptor(Person))
    assert model.is_published
    assert [p.property_name for p in model.sorted_properties] == ["age", "name"]
    assert Person in registry
    assert len(registry) == 1


def test_parent_model_is_built_and_cached_first():
    registry = ClassModelRegistry()

    child = registry.get_class_model(Employee)

    assert Person in registry
    assert child.parent is registry.get_cached(Person)
    assert [p.property_name for p in child.sorted_properties] == ["age", "name", "salary"]


def test_contains_rejects_non_types():
    registry = ClassModelRegistry()

    assert "Person" not in registry
    assert registry.get_cached(Person) is None


def test_clear_drops_cached_models():
    registry = ClassModelRegistry()
    first = registry.get_class_model(Person)

    registry.clear()

    assert len(registry) == 0
    assert registry.get_class_model(Person) is not first


def test_concurrent_requests_build_once(mocker):
    registry = ClassModelRegistry()
    spy = mocker.spy(registry, "_build")
    barrier = threading.Barrier(8)

    def request():
        barrier.wait()
        return registry.get_class_model(Wide)

    with ThreadPoolExecutor(max_workers=8) as pool:
        models = list(pool.map(lambda _: request(), range(8)))

    assert spy.call_count == 1
    assert all(model is models[0] for model in models)


def test_name_clash_raises_and_caches_nothing():
    registry = ClassModelRegistry()

    with pytest.raises(PropertyNameClashError) as exc_info:
        registry.get_class_model(Clashing)

    error = exc_info.value
    assert {error.first_property, error.second_property} == {"first", "second"}
    assert error.type_name.endswith("Clashing")
    assert Clashing not in registry

    with pytest.raises(PropertyNameClashError):
        registry.get_class_model(Clashing)


def test_parent_clash_propagates_to_child():
    registry = ClassModelRegistry()

    with pytest.raises(PropertyNameClashError):
        registry.get_class_model(ClashingChild)

    assert len(registry) == 0


def test_events_are_published():
    registry = ClassModelRegistry()
    built = []
    errors = []
    registry.event_bus.subscribe(ClassModelBuiltEvent, built.append)
    registry.event_bus.subscribe(ErrorEvent, errors.append)

    registry.get_class_model(Employee)
    with pytest.raises(PropertyNameClashError):
        registry.get_class_model(Clashing)

    assert [event.class_model.type.simple_name for event in built] == ["Person", "Employee"]
    assert built[1].property_count == 3
    assert len(errors) == 1
    assert errors[0].error_type == "PropertyNameClashError"
    assert errors[0].component == "check_property_name_clash"


def test_registry_config_drives_naming():
    registry = ClassModelRegistry(config=ModelConfig.from_dict({"naming_strategy": "UPPER_CAMEL_CASE"}))

    model = registry.get_class_model(Person)

    assert [p.read_name for p in model.sorted_properties] == ["Age", "Name"]


def test_build_class_model_convenience():
    registry = ClassModelRegistry()

    assert build_class_model(Person, registry=registry) is registry.get_class_model(Person)
    assert build_class_model(Person).get_property("name") is not None


def test_fresh_builds_are_structurally_equal():
    first = ClassModelRegistry().get_class_model(Manager)
    second = ClassModelRegistry().get_class_model(Manager)

    assert first is not second
    assert first.to_dict() == second.to_dict()
    assert first.parent.to_dict() == second.parent.to_dict()
    assert [p.read_name for p in first.sorted_properties] == ["email", "level", "label"]


def test_key_locks_are_released_after_success_and_failure():
    registry = ClassModelRegistry()

    registry.get_class_model(Employee)
    assert registry._key_locks == {}

    with pytest.raises(PropertyNameClashError):
        registry.get_class_model(ClashingChild)
    assert registry._key_locks == {}


def test_clear_drops_key_locks():
    registry = ClassModelRegistry()
    registry.get_class_model(Person)
    registry._key_locks["stale"] = threading.Lock()

    registry.clear()

    assert registry._key_locks == {}
    assert len(registry) == 0
