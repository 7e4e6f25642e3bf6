"""Propagation of interface accessor metadata onto concrete accessors.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from ..access import privileged_introspection
from ..context import BuildContext
from ..interfaces import collect_interfaces
from ..model import PropertyCollection
from ..naming import AccessorRole, accessor_property_name, accessor_role
from ..pipeline import Step
from ..result import Result


class PropagateInterfaceMetadataStep(Step[PropertyCollection, PropertyCollection]):
    """Copy metadata declared on interface accessors to the implementing accessors.

    Interfaces are visited nearest first. A piece of metadata is copied only
    when the concrete accessor carries nothing of the same kind, so the
    concrete class wins over its interfaces and the first interface wins
    over later ones. Interface accessors without a matching concrete
    property or accessor slot are skipped.
    """

    def execute(self, context: BuildContext, collection: PropertyCollection) -> Result[PropertyCollection]:
        pushed = 0
        for interface in collect_interfaces(context.descriptor):
            with privileged_introspection(interface):
                methods = interface.declared_methods()

            for handle in methods:
                if handle.is_synthetic:
                    continue
                role = accessor_role(handle)
                if role is None:
                    continue

                name = accessor_property_name(handle)
                prop = collection.properties.get(name)
                if prop is None:
                    self._logger.debug(f"{interface.name}.{handle.name} has no matching property, skipping")
                    continue

                target = prop.getter if role is AccessorRole.GETTER else prop.setter
                if target is None:
                    self._logger.debug(f"{interface.name}.{handle.name} has no matching {role.value}, skipping")
                    continue

                for annotation in handle.metadata:
                    if target.metadata.put_if_absent(annotation):
                        pushed += 1

        return Result.success(collection, {"propagated_metadata": pushed})
