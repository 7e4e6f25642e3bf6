"""Unit tests for binding annotations and metadata holders."""

import pytest

from splurge_property_model.annotations import (
    BindingName,
    DateFormat,
    MetadataHolder,
    Nillable,
    PropertyOrder,
    Transient,
    annotate,
    binding_name,
    creator,
    declared_metadata,
    is_creator,
    nillable,
    property_order,
    transient,
)


def test_annotate_records_metadata_without_wrapping():
    def getter():
        return 1

    decorated = annotate(BindingName("x"), Nillable(False))(getter)

    assert decorated is getter
    assert declared_metadata(getter) == (BindingName("x"), Nillable(False))


def test_annotate_rejects_non_annotations():
    with pytest.raises(TypeError):
        annotate("not an annotation")  # type: ignore[arg-type]


def test_stacked_decorators_accumulate():
    @binding_name("label")
    @nillable(False)
    def getName():
        return ""

    assert declared_metadata(getName) == (Nillable(False), BindingName("label"))


def test_metadata_on_property_is_stored_on_getter():
    class Holder:
        @transient
        @property
        def value(self):
            return 1

    prop = vars(Holder)["value"]
    assert declared_metadata(prop) == (Transient(),)
    assert declared_metadata(prop.fget) == (Transient(),)


def test_class_metadata_is_not_inherited():
    @property_order("b", "a")
    class Parent:
        pass

    class Child(Parent):
        pass

    assert declared_metadata(Parent) == (PropertyOrder(("b", "a")),)
    assert declared_metadata(Child) == ()


def test_creator_marker_on_static_factory():
    class Point:
        @creator
        @staticmethod
        def of(x, y):
            return Point()

        @staticmethod
        def other():
            return None

    assert is_creator(vars(Point)["of"])
    assert not is_creator(vars(Point)["other"])


def test_metadata_holder_keeps_first_annotation_per_kind():
    holder = MetadataHolder([BindingName("first"), BindingName("second"), DateFormat("yyyy")])

    assert holder.get(BindingName) == BindingName("first")
    assert len(holder) == 2
    assert DateFormat in holder
    assert holder.get(Nillable) is None


def test_metadata_holder_put_and_put_if_absent():
    holder = MetadataHolder([BindingName("mine")])

    assert not holder.put_if_absent(BindingName("theirs"))
    assert holder.get(BindingName) == BindingName("mine")

    assert holder.put_if_absent(Nillable(True))
    holder.put(BindingName("replaced"))
    assert holder.get(BindingName) == BindingName("replaced")


def test_metadata_holder_copy_is_independent():
    holder = MetadataHolder([BindingName("x")])
    copy = holder.copy()
    copy.put(Transient())

    assert copy == MetadataHolder([BindingName("x"), Transient()])
    assert not holder.has(Transient)
