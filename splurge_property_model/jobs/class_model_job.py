"""Job building one class model.

The job runs two tasks over a fresh, unpublished ``ClassModel``:

- ``collection`` gathers the class's own fields and accessors into the
  working property map and pushes interface metadata onto them;
- ``reconciliation`` merges the parent's published properties, orders and
  finalizes the result, rejects read/write name clashes and links creator
  parameters.

On success the ordered properties are published to the class model.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
from typing import Any

from ..context import BuildContext
from ..events import EventBus
from ..model import ClassModel
from ..pipeline import Job, Step, Task
from ..policies import AccessorResolutionPolicy, PropertyOrdering, StrategyPropertyOrdering
from ..result import Result
from ..steps import (
    BindCreatorParametersStep,
    CheckPropertyNameClashStep,
    CollectAccessorsStep,
    CollectFieldsStep,
    MergeParentPropertiesStep,
    OrderPropertiesStep,
    PropagateInterfaceMetadataStep,
)


class ClassModelJob(Job[ClassModel, ClassModel]):
    """Build and publish the property list of one class model.

    Args:
        event_bus: Event bus used for publishing build events.
        ordering: Property ordering policy; defaults to ``StrategyPropertyOrdering``.
        policy: Accessor resolution policy shared by merging and ordering.
    """

    def __init__(
        self,
        event_bus: EventBus,
        ordering: PropertyOrdering | None = None,
        policy: AccessorResolutionPolicy | None = None,
    ) -> None:
        self.policy = policy or AccessorResolutionPolicy()
        self.ordering = ordering or StrategyPropertyOrdering(self.policy)
        super().__init__(
            "class_model",
            [self._create_collection_task(event_bus), self._create_reconciliation_task(event_bus)],
            event_bus,
        )
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    def _create_collection_task(self, event_bus: EventBus) -> Task:
        steps: list[Step[Any, Any]] = [
            CollectFieldsStep("collect_fields", event_bus),
            CollectAccessorsStep("collect_accessors", event_bus),
            PropagateInterfaceMetadataStep("propagate_interface_metadata", event_bus),
        ]
        return Task("collection", steps, event_bus)

    def _create_reconciliation_task(self, event_bus: EventBus) -> Task:
        steps: list[Step[Any, Any]] = [
            MergeParentPropertiesStep("merge_parent_properties", event_bus, self.policy),
            OrderPropertiesStep("order_properties", event_bus, self.ordering),
            CheckPropertyNameClashStep("check_property_name_clash", event_bus),
            BindCreatorParametersStep("bind_creator_parameters", event_bus),
        ]
        return Task("reconciliation", steps, event_bus)

    def execute(self, context: BuildContext, initial_input: Any = None) -> Result[ClassModel]:
        """Run the job and publish the class model.

        Args:
            context: Build context of the class being modelled.
            initial_input: The unpublished ``ClassModel`` to fill.

        Returns:
            A ``Result`` containing the published class model, or the first
            error raised or returned by a step.
        """
        class_model: ClassModel = initial_input
        result = super().execute(context, class_model)
        if result.is_error():
            self._logger.debug(f"Class model job failed for {context.descriptor.name}: {result.error}")
            return Result.failure(result.error or RuntimeError("Class model job failed"), result.metadata)

        class_model.publish(result.data.sorted_properties)  # type: ignore[union-attr]
        return Result.success(class_model, result.metadata)
