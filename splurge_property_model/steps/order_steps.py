"""Ordering of the finalized property list.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from ..context import BuildContext
from ..events import EventBus
from ..model import PropertyCollection
from ..pipeline import Step
from ..policies import PropertyOrdering, StrategyPropertyOrdering
from ..result import Result


class OrderPropertiesStep(Step[PropertyCollection, PropertyCollection]):
    """Finalize the working properties and append them after the inherited ones."""

    def __init__(self, name: str, event_bus: EventBus, ordering: PropertyOrdering | None = None) -> None:
        super().__init__(name, event_bus)
        self.ordering = ordering or StrategyPropertyOrdering()

    def execute(self, context: BuildContext, collection: PropertyCollection) -> Result[PropertyCollection]:
        ordered = self.ordering.order_properties(collection.properties, collection.class_model, context)
        collection.sorted_properties = [*collection.inherited, *ordered]
        return Result.success(collection, {"property_count": len(collection.sorted_properties)})
