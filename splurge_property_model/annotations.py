"""Binding annotations and the holders that carry them.

Binding annotations are small frozen dataclasses attached to classes,
functions and ``Annotated[...]`` field annotations. The *kind* of an
annotation is its class: a member carries at most one annotation per kind.

Decorators in this module only record metadata on the decorated object.
They never wrap or replace it, so they can be stacked freely with
``property``, ``staticmethod``, ``classmethod`` and ``abc.abstractmethod``.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

METADATA_ATTRIBUTE = "__binding_annotations__"
CREATOR_ATTRIBUTE = "__binding_creator__"

A = TypeVar("A", bound="BindingAnnotation")
F = TypeVar("F")


@dataclass(frozen=True)
class BindingAnnotation:
    """Base class for all binding metadata kinds."""

    @property
    def kind(self) -> type[BindingAnnotation]:
        return type(self)


@dataclass(frozen=True)
class BindingName(BindingAnnotation):
    """External read/write name of a property."""

    value: str


@dataclass(frozen=True)
class Transient(BindingAnnotation):
    """Excludes a property from binding."""


@dataclass(frozen=True)
class Nillable(BindingAnnotation):
    """Whether ``None`` values are written for the property."""

    value: bool = True


@dataclass(frozen=True)
class DateFormat(BindingAnnotation):
    """Date/time formatting pattern, consumed by value converters."""

    pattern: str
    locale: str | None = None


@dataclass(frozen=True)
class NumberFormat(BindingAnnotation):
    """Number formatting pattern, consumed by value converters."""

    pattern: str
    locale: str | None = None


@dataclass(frozen=True)
class PropertyOrder(BindingAnnotation):
    """Class-level explicit ordering of property names."""

    names: tuple[str, ...]


# Kinds recognised by name when reading source code.
ANNOTATION_KINDS: dict[str, type[BindingAnnotation]] = {
    kind.__name__: kind for kind in (BindingName, Transient, Nillable, DateFormat, NumberFormat, PropertyOrder)
}


def _metadata_target(target: Any) -> Any:
    """Return the object that stores metadata for ``target``."""
    if isinstance(target, property):
        return target.fget
    if isinstance(target, (staticmethod, classmethod)):
        return target.__func__
    return target


def declared_metadata(obj: Any) -> tuple[BindingAnnotation, ...]:
    """Return the binding annotations declared directly on ``obj``.

    Classes are read through their own ``__dict__`` so metadata of a base
    class is never reported for a subclass.
    """
    if isinstance(obj, type):
        return tuple(vars(obj).get(METADATA_ATTRIBUTE, ()))
    target = _metadata_target(obj)
    if target is None:
        return ()
    return tuple(getattr(target, METADATA_ATTRIBUTE, ()))


def annotate(*metadata: BindingAnnotation) -> Callable[[F], F]:
    """Attach binding annotations to a class, function or descriptor.

    Args:
        *metadata: Annotation instances to attach.

    Returns:
        Decorator that records the metadata and returns its argument.
    """
    for item in metadata:
        if not isinstance(item, BindingAnnotation):
            raise TypeError(f"Expected a BindingAnnotation, got {type(item).__name__}")

    def decorator(target: F) -> F:
        holder = _metadata_target(target)
        existing = declared_metadata(holder)
        setattr(holder, METADATA_ATTRIBUTE, existing + tuple(metadata))
        return target

    return decorator


def binding_name(value: str) -> Callable[[F], F]:
    return annotate(BindingName(value))


def transient(target: F) -> F:
    return annotate(Transient())(target)


def nillable(value: bool = True) -> Callable[[F], F]:
    return annotate(Nillable(value))


def date_format(pattern: str, locale: str | None = None) -> Callable[[F], F]:
    return annotate(DateFormat(pattern, locale))


def number_format(pattern: str, locale: str | None = None) -> Callable[[F], F]:
    return annotate(NumberFormat(pattern, locale))


def property_order(*names: str) -> Callable[[F], F]:
    """Class decorator fixing the order of the named properties."""
    return annotate(PropertyOrder(tuple(names)))


def creator(target: F) -> F:
    """Mark ``__init__`` or a static/class factory as the type's creator."""
    setattr(_metadata_target(target), CREATOR_ATTRIBUTE, True)
    return target


def is_creator(obj: Any) -> bool:
    target = _metadata_target(obj)
    return bool(getattr(target, CREATOR_ATTRIBUTE, False))


class MetadataHolder:
    """Mutable per-member store holding at most one annotation per kind.

    The first annotation seen for a kind is kept when the holder is built
    from a sequence; ``put`` replaces and ``put_if_absent`` never does.
    """

    def __init__(self, metadata: Iterable[BindingAnnotation] = ()) -> None:
        self._by_kind: dict[type[BindingAnnotation], BindingAnnotation] = {}
        for item in metadata:
            self._by_kind.setdefault(type(item), item)

    def get(self, kind: type[A]) -> A | None:
        return self._by_kind.get(kind)  # type: ignore[return-value]

    def has(self, kind: type[BindingAnnotation]) -> bool:
        return kind in self._by_kind

    def put(self, annotation: BindingAnnotation) -> None:
        self._by_kind[type(annotation)] = annotation

    def put_if_absent(self, annotation: BindingAnnotation) -> bool:
        """Store ``annotation`` unless its kind is already present.

        Returns:
            ``True`` when the annotation was stored.
        """
        if type(annotation) in self._by_kind:
            return False
        self._by_kind[type(annotation)] = annotation
        return True

    def copy(self) -> MetadataHolder:
        return MetadataHolder(self._by_kind.values())

    def __contains__(self, kind: object) -> bool:
        return kind in self._by_kind

    def __iter__(self) -> Iterator[BindingAnnotation]:
        return iter(list(self._by_kind.values()))

    def __len__(self) -> int:
        return len(self._by_kind)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MetadataHolder):
            return NotImplemented
        return self._by_kind == other._by_kind

    def __repr__(self) -> str:
        return f"MetadataHolder({list(self._by_kind.values())!r})"
