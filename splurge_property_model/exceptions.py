"""Custom exception classes for the property model builder.

This module defines a small hierarchy of exceptions raised while building
class models. Each exception carries an optional ``details`` mapping with
structured context (for example the owning type and the clashing property
names) so callers can diagnose failures programmatically.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from typing import Any


class PropertyModelError(Exception):
    """Base exception for property model errors.

    Args:
        message: Human-readable error message.
        details: Optional mapping with structured diagnostic data.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PropertyNameClashError(PropertyModelError):
    """Raised when two properties expose the same read or write name.

    The error aborts construction of the owning class model. It is never
    recovered locally and propagates to whatever requested the model.

    Args:
        first_property: Internal name of the property checked first.
        second_property: Internal name of the clashing property.
        type_name: Qualified name of the type owning both properties.
    """

    def __init__(self, first_property: str, second_property: str, type_name: str):
        message = (
            f"Property {first_property} clashes with property {second_property} "
            f"by read or write name in class {type_name}"
        )
        details: dict[str, Any] = {
            "first_property": first_property,
            "second_property": second_property,
            "type_name": type_name,
        }
        super().__init__(message, details)
        self.first_property = first_property
        self.second_property = second_property
        self.type_name = type_name


class DescriptorError(PropertyModelError):
    """Raised when a type descriptor cannot be produced.

    Args:
        message: Description of the failure.
        type_name: Optional name of the type being described.
        source: Optional source identifier (module name or file path).
    """

    def __init__(self, message: str, type_name: str | None = None, source: str | None = None):
        details: dict[str, Any] = {}
        if type_name:
            details["type_name"] = type_name
        if source:
            details["source"] = source
        super().__init__(message, details)


class ConfigurationError(PropertyModelError):
    """Raised when a builder configuration is invalid.

    Args:
        message: Human readable description of the configuration problem.
        config_key: Optional configuration key that caused the error.
    """

    def __init__(self, message: str, config_key: str | None = None):
        details: dict[str, Any] = {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)
