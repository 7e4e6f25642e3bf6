"""Collection steps: the class's own fields and accessor methods.

Both steps enumerate members inside ``privileged_introspection`` so that
non-public members are seen; whether such a property is readable or
writable is decided later by the accessor resolution policy.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from ..access import privileged_introspection
from ..context import BuildContext
from ..model import ClassModel, Property, PropertyCollection
from ..naming import AccessorRole, accessor_property_name, accessor_role
from ..pipeline import Step
from ..result import Result


class CollectFieldsStep(Step[ClassModel, PropertyCollection]):
    """Create one working property per declared field.

    Synthetic fields (dunder and name-mangled names) are skipped.
    """

    def execute(self, context: BuildContext, class_model: ClassModel) -> Result[PropertyCollection]:
        descriptor = context.descriptor
        collection = PropertyCollection(class_model=class_model)

        with privileged_introspection(descriptor):
            fields = descriptor.declared_fields()

        for handle in fields:
            if handle.is_synthetic:
                continue
            prop = Property(handle.name, descriptor)
            prop.set_field(handle)
            collection.properties[handle.name] = prop

        self._logger.debug(f"Collected {len(collection.properties)} fields of {descriptor.name}")
        return Result.success(collection, {"field_count": len(collection.properties)})


class CollectAccessorsStep(Step[PropertyCollection, PropertyCollection]):
    """Attach getters and setters to the working property they derive.

    A method is a getter when its name starts with ``get`` or ``is`` and it
    takes no parameters, a setter when its name starts with ``set`` and it
    takes one. Python ``property`` accessors bind to the property's own
    name. A later accessor for the same slot replaces an earlier one.
    """

    def execute(self, context: BuildContext, collection: PropertyCollection) -> Result[PropertyCollection]:
        descriptor = context.descriptor

        with privileged_introspection(descriptor):
            methods = descriptor.declared_methods()

        accessor_count = 0
        for handle in methods:
            if handle.is_synthetic:
                continue
            role = accessor_role(handle)
            if role is None:
                continue

            name = accessor_property_name(handle)
            prop = collection.properties.get(name)
            if prop is None:
                prop = Property(name, descriptor)
                collection.properties[name] = prop

            if role is AccessorRole.SETTER:
                prop.set_setter(handle)
            else:
                prop.set_getter(handle)
            accessor_count += 1

        self._logger.debug(f"Collected {accessor_count} accessors of {descriptor.name}")
        return Result.success(collection, {"accessor_count": accessor_count})
