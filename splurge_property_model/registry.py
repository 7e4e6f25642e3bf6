"""Process-wide cache of class models.

``ClassModelRegistry`` is the only entry point that builds class models.
It is created by the caller and passed to whatever needs models; nothing
in the package keeps a module-level cache.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Hashable

from .context import BuildContext, ModelConfig
from .customization import CustomizationRegistry
from .descriptors.base import TypeDescriptor
from .descriptors.runtime import RuntimeTypeDescriptor
from .events import ClassModelBuiltEvent, ErrorEvent, EventBus
from .jobs import ClassModelJob
from .model import ClassModel
from .policies import AccessorResolutionPolicy, PropertyOrdering


class ClassModelRegistry:
    """Builds each class model once and hands out the cached instance.

    Concurrent requests for the same type are coalesced with a per-type
    lock and a second cache lookup under that lock, so at most one model is
    built per type. Different types build in parallel; only the cache
    insert runs under the registry-wide lock. A failed build caches nothing
    and re-raises the original error.

    Args:
        config: Configuration applied to every model built here.
        customizations: Source of creators and explicit property order.
        event_bus: Bus receiving build events; a private bus is created when omitted.
        ordering: Property ordering policy.
        policy: Accessor resolution policy.
    """

    def __init__(
        self,
        config: ModelConfig | None = None,
        customizations: CustomizationRegistry | None = None,
        event_bus: EventBus | None = None,
        ordering: PropertyOrdering | None = None,
        policy: AccessorResolutionPolicy | None = None,
    ) -> None:
        self.config = config or ModelConfig()
        self.customizations = customizations or CustomizationRegistry()
        self.event_bus = event_bus or EventBus()
        self._ordering = ordering
        self._policy = policy
        self._models: dict[Hashable, ClassModel] = {}
        self._key_locks: dict[Hashable, threading.Lock] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @staticmethod
    def describe(target: type | TypeDescriptor) -> TypeDescriptor:
        return target if isinstance(target, TypeDescriptor) else RuntimeTypeDescriptor(target)

    def get_class_model(self, target: type | TypeDescriptor) -> ClassModel:
        """Return the class model of ``target``, building it on first request.

        The supertype's model is obtained (and built if needed) first.

        Raises:
            PropertyNameClashError: If two properties of the type, or of a
                supertype, share a read or write name.
            DescriptorError: If the type cannot be described.
        """
        descriptor = self.describe(target)
        key = descriptor.key

        with self._lock:
            cached = self._models.get(key)
            if cached is not None:
                return cached
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            try:
                with self._lock:
                    cached = self._models.get(key)
                if cached is not None:
                    return cached

                class_model = self._build(descriptor)

                with self._lock:
                    return self._models.setdefault(key, class_model)
            finally:
                with self._lock:
                    if self._key_locks.get(key) is key_lock:
                        del self._key_locks[key]

    def get_cached(self, target: type | TypeDescriptor) -> ClassModel | None:
        with self._lock:
            return self._models.get(self.describe(target).key)

    def clear(self) -> None:
        with self._lock:
            self._models.clear()
            self._key_locks.clear()

    def __contains__(self, target: object) -> bool:
        if not isinstance(target, (type, TypeDescriptor)):
            return False
        return self.get_cached(target) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._models)

    def _build(self, descriptor: TypeDescriptor) -> ClassModel:
        start_time = time.time()
        supertype = descriptor.supertype
        parent = self.get_class_model(supertype) if supertype is not None else None

        context = BuildContext.create(descriptor, self.config)
        class_model = ClassModel(descriptor, parent, self.customizations.get_class_customization(descriptor))
        result = ClassModelJob(self.event_bus, self._ordering, self._policy).execute(context, class_model)

        if result.is_error():
            error = result.error or RuntimeError(f"Building class model for {descriptor.name} failed")
            self.event_bus.publish(
                ErrorEvent(
                    timestamp=time.time(),
                    run_id=context.run_id,
                    context=context,
                    error=error,
                    error_type=type(error).__name__,
                    component=str(result.metadata.get("failed_step", "class_model")),  # type: ignore[union-attr]
                )
            )
            raise error

        self.event_bus.publish(
            ClassModelBuiltEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                class_model=class_model,
                property_count=len(class_model.sorted_properties),
                duration_ms=(time.time() - start_time) * 1000,
            )
        )
        self._logger.debug(f"Built class model for {descriptor.name}")
        return class_model
