"""Unit tests for read/write name clash detection."""

from typing import Annotated

import pytest

from splurge_property_model.annotations import BindingName, binding_name
from splurge_property_model.context import BuildContext
from splurge_property_model.descriptors import RuntimeTypeDescriptor
from splurge_property_model.events import EventBus
from splurge_property_model.exceptions import PropertyNameClashError
from splurge_property_model.model import ClassModel, PropertyCollection, PropertyModel
from splurge_property_model.registry import ClassModelRegistry
from splurge_property_model.steps import CheckPropertyNameClashStep
from splurge_property_model.steps.validation_steps import clashes


class Holder:
    pass


class ReadOnlyAndWriteOnly:
    @binding_name("x")
    def getA(self) -> int:
        return 0

    @binding_name("x")
    def setB(self, value: int) -> None:
        pass


class HiddenDuplicate:
    first: int
    _second: Annotated[int, BindingName("first")]


class Base:
    code: int


class Shadow(Base):
    other: Annotated[int, BindingName("code")]


def _model(class_model, name, read_name, write_name, readable=True, writable=True):
    return PropertyModel(name, read_name, write_name, readable, writable, class_model)


def test_clashes_compares_only_enabled_directions():
    class_model = ClassModel(RuntimeTypeDescriptor(Holder))

    assert clashes(_model(class_model, "a", "x", "a"), _model(class_model, "b", "x", "b"))
    assert clashes(_model(class_model, "a", "a", "x"), _model(class_model, "b", "b", "x"))
    assert not clashes(
        _model(class_model, "a", "x", "a", writable=False), _model(class_model, "b", "x", "b", readable=False)
    )
    assert not clashes(_model(class_model, "a", "a", "a"), _model(class_model, "b", "b", "b"))


def test_step_returns_failure_with_clash_error():
    descriptor = RuntimeTypeDescriptor(Holder)
    class_model = ClassModel(descriptor)
    collection = PropertyCollection(class_model=class_model)
    collection.sorted_properties = [
        _model(class_model, "a", "x", "a"),
        _model(class_model, "b", "b", "b"),
        _model(class_model, "c", "x", "c"),
    ]

    step = CheckPropertyNameClashStep("check", EventBus())
    result = step.execute(BuildContext.create(descriptor), collection)

    assert result.is_error()
    assert isinstance(result.error, PropertyNameClashError)
    assert result.error.first_property == "a"
    assert result.error.second_property == "c"
    assert result.metadata["step"] == "check"


def test_read_only_and_write_only_sharing_a_name_do_not_clash():
    model = ClassModelRegistry().get_class_model(ReadOnlyAndWriteOnly)

    assert {p.property_name for p in model.sorted_properties} == {"a", "b"}


def test_non_public_duplicate_does_not_clash():
    model = ClassModelRegistry().get_class_model(HiddenDuplicate)

    assert len(model.sorted_properties) == 2


def test_clash_with_inherited_property():
    with pytest.raises(PropertyNameClashError) as exc_info:
        ClassModelRegistry().get_class_model(Shadow)

    assert exc_info.value.first_property == "code"
    assert exc_info.value.second_property == "other"
    assert "clashes with property" in str(exc_info.value)
