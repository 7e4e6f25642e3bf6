"""Class-level customization: creators and explicit property order.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

import inspect
import logging
import threading
import typing
from collections.abc import Callable, Hashable, Sequence
from typing import Any

from .annotations import MetadataHolder, PropertyOrder
from .descriptors.base import CreatorSpec, TypeDescriptor
from .descriptors.runtime import RuntimeTypeDescriptor, creator_parameter_name
from .model import ClassCustomization, CreatorModel

_logger = logging.getLogger(__name__)


def _descriptor_of(target: type | TypeDescriptor) -> TypeDescriptor:
    return target if isinstance(target, TypeDescriptor) else RuntimeTypeDescriptor(target)


def signature_parameter_names(factory: Callable[..., Any]) -> tuple[str, ...]:
    """Return the bindable parameter names of ``factory``.

    A leading ``self``/``cls`` parameter and ``*args``/``**kwargs`` are
    dropped. A ``BindingName`` in a parameter's ``Annotated`` hint renames it.
    """
    func = factory.__func__ if isinstance(factory, (staticmethod, classmethod)) else factory
    parameters = list(inspect.signature(func).parameters.values())
    if isinstance(factory, classmethod) or (parameters and parameters[0].name in ("self", "cls")):
        parameters = parameters[1:]
    try:
        hints = typing.get_type_hints(func, include_extras=True)
    except Exception as e:
        _logger.debug("Using unresolved annotations for %s: %s", func, e)
        hints = {}
    names: list[str] = []
    for parameter in parameters:
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        names.append(creator_parameter_name(parameter, hints.get(parameter.name, parameter.annotation)))
    return tuple(names)


class CustomizationRegistry:
    """Resolves the class customization used when building a class model.

    Creators registered with ``register_creator`` take precedence over a
    creator discovered on the type through the ``@creator`` marker.
    """

    def __init__(self) -> None:
        self._creators: dict[Hashable, CreatorSpec] = {}
        self._lock = threading.Lock()

    def register_creator(
        self,
        target: type | TypeDescriptor,
        factory: Callable[..., Any] | None = None,
        parameter_names: Sequence[str] | None = None,
        name: str | None = None,
    ) -> CreatorSpec:
        """Register the creator of ``target``.

        Args:
            target: Live class or type descriptor.
            factory: Constructor or factory callable; its signature supplies
                the parameter names when ``parameter_names`` is omitted.
            parameter_names: Explicit parameter names, in call order.
            name: Creator name; defaults to the factory's name or ``__init__``.

        Returns:
            The registered creator spec.

        Raises:
            ValueError: If neither ``factory`` nor ``parameter_names`` is given.
        """
        if parameter_names is None:
            if factory is None:
                raise ValueError("register_creator needs a factory or explicit parameter names")
            parameter_names = signature_parameter_names(factory)

        func = factory.__func__ if isinstance(factory, (staticmethod, classmethod)) else factory
        creator_name = name or getattr(func, "__name__", None) or "__init__"
        descriptor = _descriptor_of(target)
        spec = CreatorSpec(
            name=creator_name,
            owner=descriptor.name,
            parameter_names=tuple(parameter_names),
            is_factory=creator_name != "__init__",
            target=func,
        )
        with self._lock:
            self._creators[descriptor.key] = spec
        _logger.debug("Registered creator %s for %s", creator_name, descriptor.name)
        return spec

    def get_creator(self, descriptor: TypeDescriptor) -> CreatorSpec | None:
        with self._lock:
            registered = self._creators.get(descriptor.key)
        return registered if registered is not None else descriptor.find_creator()

    def get_class_customization(self, descriptor: TypeDescriptor) -> ClassCustomization:
        """Return a fresh customization for ``descriptor``."""
        spec = self.get_creator(descriptor)
        metadata = MetadataHolder(descriptor.metadata)
        order = metadata.get(PropertyOrder)
        return ClassCustomization(
            creator=CreatorModel.from_spec(spec) if spec is not None else None,
            property_order=order.names if order is not None else None,
            metadata=metadata,
        )
