"""Reconciliation of the working properties with the parent class model.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from ..context import BuildContext
from ..events import EventBus
from ..model import AnnotatedMember, Property, PropertyCollection, PropertyModel
from ..pipeline import Step
from ..policies import AccessorResolutionPolicy, finalize_property
from ..result import Result


def _backfill(current: AnnotatedMember | None, inherited: AnnotatedMember | None) -> AnnotatedMember | None:
    if current is not None:
        return current
    return inherited.copy() if inherited is not None else None


class MergeParentPropertiesStep(Step[PropertyCollection, PropertyCollection]):
    """Carry forward or merge every property of the parent class model.

    Parent properties the class does not redeclare are carried forward as
    the same objects. Redeclared ones are merged slot by slot, the class's
    own members first. A readable merge result replaces the working entry
    and is ordered with the class's own properties; any other result is
    finalized at the parent's position and leaves the working map.
    """

    def __init__(self, name: str, event_bus: EventBus, policy: AccessorResolutionPolicy | None = None) -> None:
        super().__init__(name, event_bus)
        self.policy = policy or AccessorResolutionPolicy()

    def merge(self, current: Property, parent_property: PropertyModel) -> Property:
        return Property(
            name=parent_property.property_name,
            owner=current.owner,
            field=_backfill(current.field, parent_property.field),
            getter=_backfill(current.getter, parent_property.getter),
            setter=_backfill(current.setter, parent_property.setter),
        )

    def execute(self, context: BuildContext, collection: PropertyCollection) -> Result[PropertyCollection]:
        class_model = collection.class_model
        parent = class_model.parent
        if parent is None:
            return Result.success(collection)

        carried = merged_count = 0
        for parent_property in parent.sorted_properties:
            name = parent_property.property_name
            current = collection.properties.get(name)
            if current is None:
                collection.inherited.append(parent_property)
                carried += 1
                continue

            merged = self.merge(current, parent_property)
            merged_count += 1
            if self.policy.resolve(merged).readable:
                collection.properties[name] = merged
            else:
                collection.inherited.append(
                    finalize_property(class_model, merged, self.policy, context.config.naming_strategy)
                )
                del collection.properties[name]

        self._logger.debug(
            f"{class_model.type.name}: {carried} inherited, {merged_count} merged from {parent.type.name}"
        )
        return Result.success(collection, {"inherited": carried, "merged": merged_count})
