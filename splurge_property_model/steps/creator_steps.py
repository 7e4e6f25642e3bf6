"""Linking of creator parameters to finalized properties.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from ..context import BuildContext
from ..model import PropertyCollection
from ..pipeline import Step
from ..result import Result


class BindCreatorParametersStep(Step[PropertyCollection, PropertyCollection]):
    """Link each creator parameter to the property with the same name.

    Parameters without a matching property stay unlinked.
    """

    def execute(self, context: BuildContext, collection: PropertyCollection) -> Result[PropertyCollection]:
        creator = collection.class_model.customization.creator
        if creator is None:
            return Result.success(collection)

        by_name = {p.property_name: p for p in reversed(collection.sorted_properties)}
        linked = 0
        for parameter in creator.parameters:
            property_model = by_name.get(parameter.name)
            if property_model is None:
                self._logger.debug(f"Creator parameter {parameter.name} of {creator.owner} matches no property")
                continue
            parameter.customization.link(property_model)
            linked += 1

        return Result.success(collection, {"linked_parameters": linked})
