"""Steps building one class model.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from .collect_steps import CollectAccessorsStep, CollectFieldsStep
from .creator_steps import BindCreatorParametersStep
from .interface_steps import PropagateInterfaceMetadataStep
from .merge_steps import MergeParentPropertiesStep
from .order_steps import OrderPropertiesStep
from .validation_steps import CheckPropertyNameClashStep

__all__ = [
    "CollectFieldsStep",
    "CollectAccessorsStep",
    "PropagateInterfaceMetadataStep",
    "MergeParentPropertiesStep",
    "OrderPropertiesStep",
    "CheckPropertyNameClashStep",
    "BindCreatorParametersStep",
]
