"""Accessor naming rules and external naming strategies.

Everything here is a pure string transformation. ``to_property_name``
derives a property name from a ``get``/``is``/``set`` accessor name and
``PropertyNamingStrategy`` turns an internal property name into the
external name used for reading and writing.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .descriptors.base import MethodHandle

IS_PREFIX = "is"
GET_PREFIX = "get"
SET_PREFIX = "set"


class AccessorRole(Enum):
    """Role an accessor method plays for its property."""

    GETTER = "getter"
    SETTER = "setter"


def decapitalize(name: str) -> str:
    """Lowercase the leading character unless the name starts with an acronym.

    When the first two characters are both uppercase the name is returned
    unchanged, so ``URL`` stays ``URL`` while ``Url`` becomes ``url``.
    """
    if not name:
        return name
    if len(name) > 1 and name[0].isupper() and name[1].isupper():
        return name
    return name[0].lower() + name[1:]


def to_property_name(method_name: str) -> str:
    """Derive the property name from an accessor method name.

    Two characters are stripped for ``is`` and three for ``get``/``set``.
    A single underscore left behind by a snake_case accessor
    (``get_first_name``) is dropped before decapitalizing.

    Args:
        method_name: Name of a getter or setter method.

    Returns:
        The derived property name; empty when nothing follows the prefix.
    """
    start = len(IS_PREFIX) if method_name.startswith(IS_PREFIX) else len(GET_PREFIX)
    stem = method_name[start:]
    if stem.startswith("_"):
        stem = stem[1:]
    return decapitalize(stem)


def is_getter_name(method_name: str, parameter_count: int) -> bool:
    return (
        (method_name.startswith(GET_PREFIX) or method_name.startswith(IS_PREFIX))
        and parameter_count == 0
        and bool(to_property_name(method_name))
    )


def is_setter_name(method_name: str, parameter_count: int) -> bool:
    return method_name.startswith(SET_PREFIX) and parameter_count == 1 and bool(to_property_name(method_name))


def accessor_role(method: MethodHandle) -> AccessorRole | None:
    """Classify a method as getter, setter, or neither.

    Methods backing a Python ``property`` keep the role recorded on their
    handle. Other methods are classified by their name and parameter count.
    """
    if method.bound_property is not None:
        return method.accessor_role
    if is_setter_name(method.name, method.parameter_count):
        return AccessorRole.SETTER
    if is_getter_name(method.name, method.parameter_count):
        return AccessorRole.GETTER
    return None


def accessor_property_name(method: MethodHandle) -> str:
    """Return the property an accessor method belongs to."""
    if method.bound_property is not None:
        return method.bound_property
    return to_property_name(method.name)


def _split_words(name: str, separator: str) -> str:
    result: list[str] = []
    for index, char in enumerate(name):
        if char.isupper() and index > 0 and result[-1] != separator:
            result.append(separator)
        result.append(char.lower())
    return "".join(result)


class PropertyNamingStrategy(Enum):
    """Translation of internal property names into external names."""

    IDENTITY = "IDENTITY"
    LOWER_CASE_WITH_UNDERSCORES = "LOWER_CASE_WITH_UNDERSCORES"
    LOWER_CASE_WITH_DASHES = "LOWER_CASE_WITH_DASHES"
    UPPER_CAMEL_CASE = "UPPER_CAMEL_CASE"
    UPPER_CAMEL_CASE_WITH_SPACES = "UPPER_CAMEL_CASE_WITH_SPACES"

    def translate(self, name: str) -> str:
        if not name or self is PropertyNamingStrategy.IDENTITY:
            return name
        if self is PropertyNamingStrategy.LOWER_CASE_WITH_UNDERSCORES:
            return _split_words(name, "_")
        if self is PropertyNamingStrategy.LOWER_CASE_WITH_DASHES:
            return _split_words(name, "-")
        if self is PropertyNamingStrategy.UPPER_CAMEL_CASE:
            return name[0].upper() + name[1:]
        # UPPER_CAMEL_CASE_WITH_SPACES
        words: list[str] = []
        for index, char in enumerate(name):
            if char.isupper() and index > 0 and words[-1] != " ":
                words.append(" ")
            words.append(char)
        spaced = "".join(words)
        return spaced[0].upper() + spaced[1:]
