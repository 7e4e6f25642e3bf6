"""Programmatic API for splurge_property_model.

``build_class_model`` returns the class model of a live class.
``inspect_source`` reads a module's source with libcst, without importing
it, and returns the class models of the classes it defines. Both are used
by the CLI and tests.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .context import ModelConfig
from .descriptors.base import TypeDescriptor
from .descriptors.source import SourceModuleReader
from .events import EventBus
from .exceptions import PropertyModelError
from .model import ClassModel
from .registry import ClassModelRegistry
from .result import Result

_logger = logging.getLogger(__name__)


def build_class_model(
    target: type | TypeDescriptor,
    config: ModelConfig | None = None,
    registry: ClassModelRegistry | None = None,
) -> ClassModel:
    """Build (or fetch from ``registry``) the class model of ``target``.

    Args:
        target: Live class or type descriptor.
        config: Configuration for a registry created on the fly; ignored
            when ``registry`` is given.
        registry: Registry caching the model and its supertypes' models.

    Raises:
        PropertyNameClashError: If two properties share a read or write name.
    """
    if registry is None:
        registry = ClassModelRegistry(config=config)
    return registry.get_class_model(target)


def inspect_source(
    source_code: str,
    module_name: str = "__main__",
    config: ModelConfig | None = None,
    class_names: Iterable[str] | None = None,
    event_bus: EventBus | None = None,
) -> Result[dict[str, ClassModel]]:
    """Build the class models of the classes defined in ``source_code``.

    Args:
        source_code: Python module source.
        module_name: Name used to qualify the classes.
        config: Optional ``ModelConfig``.
        class_names: Qualified names of the classes to model; every class of
            the module when omitted.
        event_bus: Optional bus receiving build events.

    Returns:
        ``Result`` mapping each class's qualified name to its class model on
        success, or the descriptor/name clash error on failure.
    """
    try:
        reader = SourceModuleReader(source_code, module_name)
        registry = ClassModelRegistry(config=config, event_bus=event_bus)
        names = list(class_names) if class_names is not None else reader.class_names
        models = {name: registry.get_class_model(reader.get(name)) for name in names}
    except PropertyModelError as e:
        _logger.debug(f"Inspecting module {module_name} failed: {e}")
        return Result.failure(e, {"module": module_name})

    return Result.success(models, {"module": module_name, "class_count": len(models)})
