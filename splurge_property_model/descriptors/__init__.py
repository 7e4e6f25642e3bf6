"""Type descriptors: the builder's read-only view of classes.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from .base import CreatorSpec, FieldHandle, MethodHandle, TypeDescriptor
from .runtime import RuntimeTypeDescriptor, describe_class, is_interface_class
from .source import SourceModuleReader, SourceTypeDescriptor

__all__ = [
    "CreatorSpec",
    "FieldHandle",
    "MethodHandle",
    "RuntimeTypeDescriptor",
    "SourceModuleReader",
    "SourceTypeDescriptor",
    "TypeDescriptor",
    "describe_class",
    "is_interface_class",
]
