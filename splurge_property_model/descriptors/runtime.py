"""Type descriptors backed by live Python classes.

Members are read from the class's own ``__dict__`` (never through
attribute lookup, so inherited members and descriptor side effects are
avoided):

- fields are the class's own annotated names, in declaration order,
  followed by ``__slots__`` entries that carry no annotation;
- methods are plain functions, ``staticmethod`` and ``classmethod``
  objects, and the getter/setter functions of ``property`` and
  ``functools.cached_property`` objects.

``typing.Protocol`` classes and ABCs that declare only abstract members
are interfaces. The supertype is the first base that is neither an
interface nor one of the marker bases (``object``, ``ABC``, ``Protocol``,
``Generic``).

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

import functools
import inspect
import logging
import typing
from abc import ABC, ABCMeta
from collections.abc import Hashable
from typing import Annotated, Any, ClassVar, Final, Generic, Protocol

from ..annotations import BindingAnnotation, BindingName, declared_metadata, is_creator
from ..exceptions import DescriptorError
from ..naming import AccessorRole
from .base import CreatorSpec, FieldHandle, MethodHandle, TypeDescriptor, is_public_name, is_synthetic_name

_logger = logging.getLogger(__name__)

_MARKER_BASES: tuple[Any, ...] = (object, ABC, Protocol, Generic)


def _is_marker_base(base: type) -> bool:
    return any(base is marker for marker in _MARKER_BASES)


def _is_abstract(obj: Any) -> bool:
    return bool(getattr(obj, "__isabstractmethod__", False))


def _is_member_function(obj: Any) -> bool:
    return inspect.isfunction(obj) or isinstance(obj, (staticmethod, classmethod, property, functools.cached_property))


def is_interface_class(cls: type) -> bool:
    """Return True when ``cls`` acts as an interface contract.

    Protocol classes always qualify. Other ABCs qualify when they declare at
    least one abstract member, no concrete members and no instance fields.
    """
    if _is_marker_base(cls):
        return False
    if getattr(cls, "_is_protocol", False):
        return True
    if not isinstance(cls, ABCMeta):
        return False

    abstract_members = 0
    for name, value in vars(cls).items():
        if is_synthetic_name(name, cls.__name__) or not _is_member_function(value):
            continue
        if not _is_abstract(value):
            return False
        abstract_members += 1

    for annotation in inspect.get_annotations(cls).values():
        if not _is_class_var(annotation):
            return False
    return abstract_members > 0


def _unwrap_qualifier(annotation: Any, qualifier: Any) -> tuple[bool, Any]:
    """Strip a ``ClassVar``/``Final`` wrapper, reporting whether it was present."""
    if annotation is qualifier:
        return True, None
    if typing.get_origin(annotation) is qualifier:
        args = typing.get_args(annotation)
        return True, args[0] if args else None
    if isinstance(annotation, str):
        name = qualifier._name if hasattr(qualifier, "_name") else str(qualifier)
        stripped = annotation.replace("typing.", "", 1)
        return stripped == name or stripped.startswith(f"{name}["), annotation
    return False, annotation


def _is_class_var(annotation: Any) -> bool:
    return _unwrap_qualifier(annotation, ClassVar)[0]


def binding_metadata_of(annotation: Any) -> tuple[BindingAnnotation, ...]:
    """Return binding annotations carried by an ``Annotated[...]`` hint."""
    if typing.get_origin(annotation) is not Annotated:
        return ()
    return tuple(item for item in annotation.__metadata__ if isinstance(item, BindingAnnotation))


def creator_parameter_name(parameter: inspect.Parameter, annotation: Any) -> str:
    """Return the bound name of a creator parameter, honouring ``BindingName``."""
    for item in binding_metadata_of(annotation):
        if isinstance(item, BindingName):
            return item.value
    return parameter.name


class RuntimeTypeDescriptor(TypeDescriptor):
    """Descriptor for a live Python class."""

    def __init__(self, cls: type) -> None:
        if not isinstance(cls, type):
            raise DescriptorError(f"Expected a class, got {type(cls).__name__}")
        self._cls = cls

    @property
    def python_type(self) -> type:
        return self._cls

    @property
    def name(self) -> str:
        return f"{self._cls.__module__}.{self._cls.__qualname__}"

    @property
    def key(self) -> Hashable:
        return self._cls

    @functools.cached_property
    def _bases(self) -> tuple[type, ...]:
        return tuple(base for base in self._cls.__bases__ if not _is_marker_base(base))

    @functools.cached_property
    def supertype(self) -> TypeDescriptor | None:  # type: ignore[override]
        if self.is_interface:
            return None
        for base in self._bases:
            if not is_interface_class(base):
                return RuntimeTypeDescriptor(base)
        return None

    @functools.cached_property
    def interfaces(self) -> tuple[TypeDescriptor, ...]:  # type: ignore[override]
        return tuple(RuntimeTypeDescriptor(base) for base in self._bases if is_interface_class(base))

    @functools.cached_property
    def is_interface(self) -> bool:  # type: ignore[override]
        return is_interface_class(self._cls)

    @property
    def metadata(self) -> tuple[BindingAnnotation, ...]:
        return declared_metadata(self._cls)

    def _resolved_hints(self, target: Any) -> dict[str, Any]:
        try:
            return typing.get_type_hints(target, include_extras=True)
        except Exception as e:
            _logger.debug("Using unresolved annotations for %s: %s", self.name, e)
            return {}

    def _read_fields(self) -> list[FieldHandle]:
        own = inspect.get_annotations(self._cls)
        hints = self._resolved_hints(self._cls) if own else {}
        fields: list[FieldHandle] = []
        seen: set[str] = set()
        for name, raw in own.items():
            fields.append(self._field_handle(name, hints.get(name, raw)))
            seen.add(name)

        slots = vars(self._cls).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in seen or name in ("__dict__", "__weakref__"):
                continue
            fields.append(self._field_handle(name, None))
            seen.add(name)
        return fields

    def _field_handle(self, name: str, annotation: Any) -> FieldHandle:
        is_static, inner = _unwrap_qualifier(annotation, ClassVar)
        is_final, inner = _unwrap_qualifier(inner, Final)
        return FieldHandle(
            name=name,
            owner=self.name,
            is_public=is_public_name(name),
            is_static=is_static,
            is_final=is_final,
            is_synthetic=is_synthetic_name(name, self._cls.__name__),
            metadata=binding_metadata_of(inner),
            annotation=annotation,
        )

    def _parameter_count(self, func: Any, bound: bool) -> int | None:
        try:
            count = len(inspect.signature(func).parameters)
        except (TypeError, ValueError) as e:
            _logger.debug("Cannot read signature of %s on %s: %s", func, self.name, e)
            return None
        return max(count - 1, 0) if bound else count

    def _read_methods(self) -> list[MethodHandle]:
        methods: list[MethodHandle] = []
        owner_simple = self._cls.__name__
        for name, raw in vars(self._cls).items():
            common = {
                "owner": self.name,
                "is_public": is_public_name(name),
                "is_synthetic": is_synthetic_name(name, owner_simple),
                "is_abstract": _is_abstract(raw),
            }
            if isinstance(raw, property):
                if raw.fget is not None:
                    methods.append(
                        MethodHandle(
                            name=name,
                            parameter_count=0,
                            metadata=declared_metadata(raw.fget),
                            bound_property=name,
                            accessor_role=AccessorRole.GETTER,
                            target=raw.fget,
                            **common,
                        )
                    )
                if raw.fset is not None:
                    methods.append(
                        MethodHandle(
                            name=name,
                            parameter_count=1,
                            metadata=declared_metadata(raw.fset),
                            bound_property=name,
                            accessor_role=AccessorRole.SETTER,
                            target=raw.fset,
                            **common,
                        )
                    )
                continue
            if isinstance(raw, functools.cached_property):
                methods.append(
                    MethodHandle(
                        name=name,
                        parameter_count=0,
                        metadata=declared_metadata(raw.func),
                        bound_property=name,
                        accessor_role=AccessorRole.GETTER,
                        target=raw.func,
                        **common,
                    )
                )
                continue

            if isinstance(raw, staticmethod):
                func, bound, is_static = raw.__func__, False, True
            elif isinstance(raw, classmethod):
                func, bound, is_static = raw.__func__, True, True
            elif inspect.isfunction(raw):
                func, bound, is_static = raw, True, False
            else:
                continue

            count = self._parameter_count(func, bound)
            if count is None:
                continue
            methods.append(
                MethodHandle(
                    name=name,
                    parameter_count=count,
                    is_static=is_static,
                    metadata=declared_metadata(func),
                    target=func,
                    **common,
                )
            )
        return methods

    def find_creator(self) -> CreatorSpec | None:
        for name, raw in vars(self._cls).items():
            if not _is_member_function(raw) or isinstance(raw, (property, functools.cached_property)):
                continue
            if not is_creator(raw):
                continue
            func = raw.__func__ if isinstance(raw, (staticmethod, classmethod)) else raw
            parameters = list(inspect.signature(func).parameters.values())
            if not isinstance(raw, staticmethod):
                parameters = parameters[1:]
            hints = self._resolved_hints(func)
            names: list[str] = []
            for parameter in parameters:
                if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                    continue
                names.append(creator_parameter_name(parameter, hints.get(parameter.name, parameter.annotation)))
            return CreatorSpec(
                name=name,
                owner=self.name,
                parameter_names=tuple(names),
                is_factory=name != "__init__",
                target=func,
            )
        return None


def describe_class(cls: type) -> RuntimeTypeDescriptor:
    """Return a descriptor for the live class ``cls``."""
    return RuntimeTypeDescriptor(cls)
