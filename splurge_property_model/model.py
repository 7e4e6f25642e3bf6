"""Working and finalized property records.

``Property`` is the mutable accumulator used while one class is being
collected. ``PropertyModel`` is its frozen, finalized counterpart, owned
by a ``ClassModel``. A ``ClassModel`` publishes its ordered properties
exactly once; after that only the creator parameter links may be set.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, TypeVar

from .annotations import BindingAnnotation, MetadataHolder
from .descriptors.base import CreatorSpec, FieldHandle, MethodHandle, TypeDescriptor

A = TypeVar("A", bound=BindingAnnotation)


@dataclass
class AnnotatedMember:
    """A raw field or method handle with its own mutable metadata holder."""

    handle: FieldHandle | MethodHandle
    metadata: MetadataHolder = dataclasses.field(default_factory=MetadataHolder)

    @classmethod
    def of(cls, handle: FieldHandle | MethodHandle) -> AnnotatedMember:
        return cls(handle, MetadataHolder(handle.metadata))

    @property
    def name(self) -> str:
        return self.handle.name

    @property
    def owner(self) -> str:
        return self.handle.owner

    @property
    def is_public(self) -> bool:
        return self.handle.is_public

    @property
    def is_static(self) -> bool:
        return self.handle.is_static

    def copy(self) -> AnnotatedMember:
        return AnnotatedMember(self.handle, self.metadata.copy())

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "owner": self.owner,
            "metadata": [type(item).__name__ for item in self.metadata],
        }


@dataclass
class Property:
    """Members found for one property name within one class declaration."""

    name: str
    owner: TypeDescriptor
    field: AnnotatedMember | None = None
    getter: AnnotatedMember | None = None
    setter: AnnotatedMember | None = None

    def set_field(self, handle: FieldHandle) -> None:
        self.field = AnnotatedMember.of(handle)

    def set_getter(self, handle: MethodHandle) -> None:
        self.getter = AnnotatedMember.of(handle)

    def set_setter(self, handle: MethodHandle) -> None:
        self.setter = AnnotatedMember.of(handle)

    def members(self) -> list[AnnotatedMember]:
        return [member for member in (self.field, self.getter, self.setter) if member is not None]


@dataclass(frozen=True, eq=False)
class PropertyModel:
    """Finalized, bindable property of a class model.

    Instances compare by identity: an inherited property is the same
    object in the parent and in every subclass that does not redeclare it.
    """

    property_name: str
    read_name: str
    write_name: str
    readable: bool
    writable: bool
    class_model: ClassModel
    field: AnnotatedMember | None = None
    getter: AnnotatedMember | None = None
    setter: AnnotatedMember | None = None

    def get_read_metadata(self, kind: type[A]) -> A | None:
        """Return metadata of ``kind`` that applies when reading (getter first)."""
        for member in (self.getter, self.field):
            if member is not None and member.metadata.has(kind):
                return member.metadata.get(kind)
        return None

    def get_write_metadata(self, kind: type[A]) -> A | None:
        """Return metadata of ``kind`` that applies when writing (setter first)."""
        for member in (self.setter, self.field):
            if member is not None and member.metadata.has(kind):
                return member.metadata.get(kind)
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "property_name": self.property_name,
            "read_name": self.read_name,
            "write_name": self.write_name,
            "readable": self.readable,
            "writable": self.writable,
            "owner": self.class_model.type.name,
            "field": self.field.to_dict() if self.field else None,
            "getter": self.getter.to_dict() if self.getter else None,
            "setter": self.setter.to_dict() if self.setter else None,
        }

    def __repr__(self) -> str:
        return (
            f"PropertyModel({self.property_name!r}, read_name={self.read_name!r}, "
            f"write_name={self.write_name!r}, readable={self.readable}, writable={self.writable})"
        )


@dataclass
class CreatorParameterCustomization:
    """Per-parameter customization; holds the linked property once bound."""

    property_model: PropertyModel | None = None

    @property
    def is_linked(self) -> bool:
        return self.property_model is not None

    def link(self, property_model: PropertyModel) -> None:
        self.property_model = property_model


@dataclass
class CreatorParameter:
    name: str
    index: int
    customization: CreatorParameterCustomization = dataclasses.field(default_factory=CreatorParameterCustomization)


@dataclass
class CreatorModel:
    """Constructor or factory used to instantiate a type."""

    name: str
    owner: str
    parameters: list[CreatorParameter] = dataclasses.field(default_factory=list)
    is_factory: bool = False

    @classmethod
    def from_spec(cls, spec: CreatorSpec) -> CreatorModel:
        parameters = [CreatorParameter(name, index) for index, name in enumerate(spec.parameter_names)]
        return cls(name=spec.name, owner=spec.owner, parameters=parameters, is_factory=spec.is_factory)

    def get_parameter(self, name: str) -> CreatorParameter | None:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "is_factory": self.is_factory,
            "parameters": [
                {
                    "name": p.name,
                    "property": p.customization.property_model.property_name
                    if p.customization.property_model is not None
                    else None,
                }
                for p in self.parameters
            ],
        }


@dataclass
class ClassCustomization:
    """Class-level customization resolved before properties are collected."""

    creator: CreatorModel | None = None
    property_order: tuple[str, ...] | None = None
    metadata: MetadataHolder = dataclasses.field(default_factory=MetadataHolder)


class ClassModel:
    """Per-type aggregate of ordered property models.

    Args:
        type: Descriptor of the modelled type.
        parent: Published model of the supertype, if any.
        customization: Class-level customization.
    """

    def __init__(
        self,
        type: TypeDescriptor,
        parent: ClassModel | None = None,
        customization: ClassCustomization | None = None,
    ) -> None:
        self.type = type
        self.parent = parent
        self.customization = customization or ClassCustomization()
        self._sorted_properties: tuple[PropertyModel, ...] | None = None

    @property
    def is_published(self) -> bool:
        return self._sorted_properties is not None

    @property
    def sorted_properties(self) -> tuple[PropertyModel, ...]:
        return self._sorted_properties or ()

    def publish(self, properties: list[PropertyModel]) -> None:
        """Assign the ordered property list.

        Raises:
            RuntimeError: If the model was already published.
        """
        if self._sorted_properties is not None:
            raise RuntimeError(f"Class model for {self.type.name} is already published")
        self._sorted_properties = tuple(properties)

    def get_property(self, name: str) -> PropertyModel | None:
        for property_model in self.sorted_properties:
            if property_model.property_name == name:
                return property_model
        return None

    def to_dict(self) -> dict[str, Any]:
        creator = self.customization.creator
        return {
            "type": self.type.name,
            "parent": self.parent.type.name if self.parent is not None else None,
            "properties": [p.to_dict() for p in self.sorted_properties],
            "creator": creator.to_dict() if creator is not None else None,
        }

    def __repr__(self) -> str:
        return f"ClassModel({self.type.name}, properties={len(self.sorted_properties)})"


@dataclass
class PropertyCollection:
    """Data threaded through the build steps of one class model.

    ``properties`` is the working map of the class being built.
    ``inherited`` holds parent models carried forward and merged properties
    that were finalized early. ``sorted_properties`` is filled by ordering.
    """

    class_model: ClassModel
    properties: dict[str, Property] = dataclasses.field(default_factory=dict)
    inherited: list[PropertyModel] = dataclasses.field(default_factory=list)
    sorted_properties: list[PropertyModel] = dataclasses.field(default_factory=list)
