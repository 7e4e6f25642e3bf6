"""Accessor resolution and property ordering policies.

``AccessorResolutionPolicy`` decides whether a property can effectively be
read and written given its field, getter and setter. ``PropertyOrdering``
is the pluggable step that finalizes working properties into
``PropertyModel`` objects and returns them in binding order;
``StrategyPropertyOrdering`` is the default implementation driven by
:class:`~splurge_property_model.context.ModelConfig`.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from .annotations import BindingName, Transient
from .model import AnnotatedMember, ClassModel, Property, PropertyModel
from .naming import PropertyNamingStrategy

if TYPE_CHECKING:
    from .context import BuildContext

_logger = logging.getLogger(__name__)


class PropertyOrderStrategy(Enum):
    """Ordering applied to the properties declared by one class."""

    LEXICOGRAPHICAL = "LEXICOGRAPHICAL"
    ANY = "ANY"
    REVERSE = "REVERSE"


@dataclass(frozen=True)
class Propagation:
    """Effective access to a property and the members providing it."""

    readable: bool
    writable: bool
    is_transient: bool = False
    read_member: AnnotatedMember | None = None
    write_member: AnnotatedMember | None = None


def _usable(member: AnnotatedMember | None) -> bool:
    return member is not None and member.is_public and not member.is_static


class AccessorResolutionPolicy:
    """Default visibility rules for reading and writing a property.

    A ``Transient`` annotation on any member disables both directions.
    Reading goes through a public, non-static getter and falls back to a
    public, non-static field. Writing goes through a public, non-static
    setter and falls back to a public, non-static field that is not
    ``Final``.
    """

    def resolve(self, prop: Property | PropertyModel) -> Propagation:
        members = [m for m in (prop.field, prop.getter, prop.setter) if m is not None]
        if any(m.metadata.has(Transient) for m in members):
            return Propagation(readable=False, writable=False, is_transient=True)

        read_member: AnnotatedMember | None = None
        if _usable(prop.getter):
            read_member = prop.getter
        elif _usable(prop.field):
            read_member = prop.field

        write_member: AnnotatedMember | None = None
        if _usable(prop.setter):
            write_member = prop.setter
        elif _usable(prop.field) and not getattr(prop.field.handle, "is_final", False):  # type: ignore[union-attr]
            write_member = prop.field

        return Propagation(
            readable=read_member is not None,
            writable=write_member is not None,
            read_member=read_member,
            write_member=write_member,
        )


def _binding_name(*members: AnnotatedMember | None) -> str | None:
    for member in members:
        if member is None:
            continue
        name = member.metadata.get(BindingName)
        if name is not None:
            return name.value
    return None


def finalize_property(
    class_model: ClassModel,
    prop: Property,
    policy: AccessorResolutionPolicy,
    naming: PropertyNamingStrategy = PropertyNamingStrategy.IDENTITY,
) -> PropertyModel:
    """Turn a working property into a ``PropertyModel`` owned by ``class_model``.

    The read name comes from a ``BindingName`` on the getter, then the
    field; the write name from the setter, then the field. Without one the
    naming strategy translates the property name.
    """
    propagation = policy.resolve(prop)
    default_name = naming.translate(prop.name)
    return PropertyModel(
        property_name=prop.name,
        read_name=_binding_name(prop.getter, prop.field) or default_name,
        write_name=_binding_name(prop.setter, prop.field) or default_name,
        readable=propagation.readable,
        writable=propagation.writable,
        class_model=class_model,
        field=prop.field,
        getter=prop.getter,
        setter=prop.setter,
    )


class PropertyOrdering(Protocol):
    """Finalizes and orders the working properties of one class."""

    def order_properties(
        self, properties: dict[str, Property], class_model: ClassModel, context: BuildContext
    ) -> list[PropertyModel]: ...


class StrategyPropertyOrdering:
    """Order properties by the configured ``PropertyOrderStrategy``.

    Names listed in the class's ``PropertyOrder`` customization come first,
    in the listed order, matched against the property name or the read
    name. The remaining properties follow in strategy order.
    """

    def __init__(self, policy: AccessorResolutionPolicy | None = None) -> None:
        self.policy = policy or AccessorResolutionPolicy()

    def order_properties(
        self, properties: dict[str, Property], class_model: ClassModel, context: BuildContext
    ) -> list[PropertyModel]:
        naming = context.config.naming_strategy
        models = [finalize_property(class_model, prop, self.policy, naming) for prop in properties.values()]

        strategy = context.config.property_ordering
        if strategy is PropertyOrderStrategy.LEXICOGRAPHICAL:
            models.sort(key=lambda m: m.property_name)
        elif strategy is PropertyOrderStrategy.REVERSE:
            models.sort(key=lambda m: m.property_name, reverse=True)

        explicit = class_model.customization.property_order
        if not explicit:
            return models

        head: list[PropertyModel] = []
        for name in explicit:
            for model in models:
                if model not in head and name in (model.property_name, model.read_name):
                    head.append(model)
                    break
            else:
                _logger.debug("Ordered name %s matches no property of %s", name, class_model.type.name)
        return head + [m for m in models if m not in head]
