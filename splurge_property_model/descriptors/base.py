"""Abstract type descriptor and member handles.

A ``TypeDescriptor`` is the only view of a class the model builder uses:
its own declared fields and methods, its supertype, its directly
implemented interfaces and its class-level binding metadata. Concrete
descriptors read live classes (``runtime``) or source code (``source``).

Member enumeration honours the privileged introspection scope from
:mod:`splurge_property_model.access`: outside the scope only public
members are reported.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any

from ..access import is_privileged
from ..annotations import BindingAnnotation
from ..naming import AccessorRole


def is_public_name(name: str) -> bool:
    return not name.startswith("_")


def is_synthetic_name(name: str, owner_name: str) -> bool:
    """Return True for dunder names and names mangled for ``owner_name``."""
    if name.startswith("__") and name.endswith("__"):
        return True
    return name.startswith(f"_{owner_name.lstrip('_')}__")


@dataclass(frozen=True)
class FieldHandle:
    """A field declared directly on a type."""

    name: str
    owner: str
    is_public: bool = True
    is_static: bool = False
    is_final: bool = False
    is_synthetic: bool = False
    metadata: tuple[BindingAnnotation, ...] = ()
    annotation: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class MethodHandle:
    """A method declared directly on a type.

    ``parameter_count`` excludes the bound ``self``/``cls`` parameter.
    Getters and setters of a Python ``property`` record the property name
    in ``bound_property`` and their role in ``accessor_role``.
    """

    name: str
    owner: str
    parameter_count: int
    is_public: bool = True
    is_static: bool = False
    is_abstract: bool = False
    is_synthetic: bool = False
    metadata: tuple[BindingAnnotation, ...] = ()
    bound_property: str | None = None
    accessor_role: AccessorRole | None = None
    target: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class CreatorSpec:
    """A constructor or factory marked as the type's creator."""

    name: str
    owner: str
    parameter_names: tuple[str, ...]
    is_factory: bool = False
    target: Any = field(default=None, compare=False, repr=False)


class TypeDescriptor(ABC):
    """Read-only description of one type declaration.

    Descriptors compare equal when their ``key`` is equal; the key is what
    the class model registry caches on.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Qualified display name of the type."""

    @property
    @abstractmethod
    def key(self) -> Hashable:
        """Identity of the described type."""

    @property
    @abstractmethod
    def supertype(self) -> TypeDescriptor | None:
        """Direct supertype, or None for hierarchy roots and interfaces."""

    @property
    @abstractmethod
    def interfaces(self) -> tuple[TypeDescriptor, ...]:
        """Directly implemented (or, for interfaces, extended) interfaces."""

    @property
    @abstractmethod
    def is_interface(self) -> bool:
        """Whether the type is an interface contract."""

    @property
    @abstractmethod
    def metadata(self) -> tuple[BindingAnnotation, ...]:
        """Binding annotations declared on the type itself."""

    @abstractmethod
    def _read_fields(self) -> list[FieldHandle]:
        """Return every field declared directly on the type."""

    @abstractmethod
    def _read_methods(self) -> list[MethodHandle]:
        """Return every method declared directly on the type."""

    @abstractmethod
    def find_creator(self) -> CreatorSpec | None:
        """Return the creator declared on the type, if any."""

    def declared_fields(self) -> list[FieldHandle]:
        """Return the type's own fields visible in the current scope."""
        fields = self._read_fields()
        if is_privileged():
            return fields
        return [f for f in fields if f.is_public]

    def declared_methods(self) -> list[MethodHandle]:
        """Return the type's own methods visible in the current scope."""
        methods = self._read_methods()
        if is_privileged():
            return methods
        return [m for m in methods if m.is_public]

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeDescriptor):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"
