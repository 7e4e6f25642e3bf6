"""splurge_property_model package.

Builds the bindable property model of Python classes by reconciling their
fields, accessor methods and interface contracts.

This initializer stays lightweight: submodules are imported lazily when a
public name is first accessed (for example ``from splurge_property_model
import ClassModelRegistry``).

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

__version__ = "2025.1.0"
__author__ = "Jim Schilling"
__description__ = "Property model builder for Python classes"

# Public API names. Submodules are imported lazily when accessed.
__all__ = [
    "main",
    "build_class_model",
    "inspect_source",
    "ClassModelRegistry",
    "ClassModel",
    "PropertyModel",
    "CreatorModel",
    "ModelConfig",
    "BuildContext",
    "Result",
    "ResultStatus",
    "EventBus",
    "LoggingSubscriber",
    "CustomizationRegistry",
    "PropertyNamingStrategy",
    "PropertyOrderStrategy",
    "RuntimeTypeDescriptor",
    "SourceModuleReader",
    "describe_class",
    "privileged_introspection",
    # Binding annotations
    "BindingName",
    "Transient",
    "Nillable",
    "DateFormat",
    "NumberFormat",
    "PropertyOrder",
    "annotate",
    "binding_name",
    "transient",
    "nillable",
    "date_format",
    "number_format",
    "property_order",
    "creator",
    # Exceptions
    "PropertyModelError",
    "PropertyNameClashError",
    "DescriptorError",
    "ConfigurationError",
]

_ANNOTATIONS = "splurge_property_model.annotations"
_EXCEPTIONS = "splurge_property_model.exceptions"


def __getattr__(name: str):
    """Lazily import submodules/attributes on demand to avoid circular imports."""
    import importlib

    mapping = {
        "main": "splurge_property_model.main",
        "cli": "splurge_property_model.cli",
        "build_class_model": "splurge_property_model.main",
        "inspect_source": "splurge_property_model.main",
        "ClassModelRegistry": "splurge_property_model.registry",
        "ClassModel": "splurge_property_model.model",
        "PropertyModel": "splurge_property_model.model",
        "CreatorModel": "splurge_property_model.model",
        "ModelConfig": "splurge_property_model.context",
        "BuildContext": "splurge_property_model.context",
        "Result": "splurge_property_model.result",
        "ResultStatus": "splurge_property_model.result",
        "EventBus": "splurge_property_model.events",
        "LoggingSubscriber": "splurge_property_model.events",
        "CustomizationRegistry": "splurge_property_model.customization",
        "PropertyNamingStrategy": "splurge_property_model.naming",
        "PropertyOrderStrategy": "splurge_property_model.policies",
        "RuntimeTypeDescriptor": "splurge_property_model.descriptors.runtime",
        "SourceModuleReader": "splurge_property_model.descriptors.source",
        "describe_class": "splurge_property_model.descriptors.runtime",
        "privileged_introspection": "splurge_property_model.access",
        "BindingName": _ANNOTATIONS,
        "Transient": _ANNOTATIONS,
        "Nillable": _ANNOTATIONS,
        "DateFormat": _ANNOTATIONS,
        "NumberFormat": _ANNOTATIONS,
        "PropertyOrder": _ANNOTATIONS,
        "annotate": _ANNOTATIONS,
        "binding_name": _ANNOTATIONS,
        "transient": _ANNOTATIONS,
        "nillable": _ANNOTATIONS,
        "date_format": _ANNOTATIONS,
        "number_format": _ANNOTATIONS,
        "property_order": _ANNOTATIONS,
        "creator": _ANNOTATIONS,
        "PropertyModelError": _EXCEPTIONS,
        "PropertyNameClashError": _EXCEPTIONS,
        "DescriptorError": _EXCEPTIONS,
        "ConfigurationError": _EXCEPTIONS,
    }

    if name not in mapping:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = importlib.import_module(mapping[name])

    # 'main' and 'cli' resolve to the submodule itself.
    if name in {"main", "cli"}:
        return module
    return getattr(module, name)


def __dir__():
    return sorted(list(globals().keys()) + __all__)
