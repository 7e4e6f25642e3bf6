"""Validation of the ordered property list.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from ..context import BuildContext
from ..exceptions import PropertyNameClashError
from ..model import PropertyCollection, PropertyModel
from ..pipeline import Step
from ..result import Result


def clashes(first: PropertyModel, second: PropertyModel) -> bool:
    """Return True when two properties share a read name or a write name."""
    if first.readable and second.readable and first.read_name == second.read_name:
        return True
    return first.writable and second.writable and first.write_name == second.write_name


class CheckPropertyNameClashStep(Step[PropertyCollection, PropertyCollection]):
    """Reject class models where two properties expose the same external name.

    Every pair of the inherited and own properties is checked once.
    """

    def execute(self, context: BuildContext, collection: PropertyCollection) -> Result[PropertyCollection]:
        properties = collection.sorted_properties
        for index, first in enumerate(properties):
            for second in properties[index + 1 :]:
                if clashes(first, second):
                    return Result.failure(
                        PropertyNameClashError(
                            first.property_name, second.property_name, collection.class_model.type.name
                        ),
                        {"step": self.name},
                    )
        return Result.success(collection)
