"""Configuration validation using pydantic schemas.

``ValidatedModelConfig`` mirrors :class:`~splurge_property_model.context.ModelConfig`
and normalizes user supplied values (enum names in any case, log level
names, output formats) before they reach the builder.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError
from .naming import PropertyNamingStrategy
from .policies import PropertyOrderStrategy

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
OUTPUT_FORMATS = ("table", "json", "yaml")


class ValidatedModelConfig(BaseModel):
    """Validated version of ModelConfig with runtime validation."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    property_ordering: PropertyOrderStrategy = Field(
        default=PropertyOrderStrategy.LEXICOGRAPHICAL, description="Order of the properties of a class model"
    )
    naming_strategy: PropertyNamingStrategy = Field(
        default=PropertyNamingStrategy.IDENTITY, description="Translation of property names into read/write names"
    )
    log_level: str = Field(default="INFO", description="Default logging level")
    output_format: str = Field(default="table", description="Report format used by the command line")

    @field_validator("property_ordering", "naming_strategy", mode="before")
    @classmethod
    def normalize_enum_name(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper().replace("-", "_")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError(f"log_level must be a string, got {type(v).__name__}")
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(LOG_LEVELS)}, got '{v}'")
        return level

    @field_validator("output_format", mode="before")
    @classmethod
    def validate_output_format(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError(f"output_format must be a string, got {type(v).__name__}")
        output_format = v.strip().lower()
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of: {', '.join(OUTPUT_FORMATS)}, got '{v}'")
        return output_format


def validate_model_config(config_dict: dict[str, Any]) -> ValidatedModelConfig:
    """Validate a model configuration dictionary.

    Args:
        config_dict: Configuration dictionary to validate

    Returns:
        Validated configuration object

    Raises:
        ConfigurationError: If configuration is invalid
    """
    try:
        return ValidatedModelConfig(**config_dict)
    except PydanticValidationError as e:
        errors = e.errors()
        config_key = str(errors[0]["loc"][0]) if errors and errors[0].get("loc") else None
        raise ConfigurationError(f"Invalid model configuration: {e}", config_key=config_key) from e


def validate_model_config_object(config: Any) -> ValidatedModelConfig:
    """Validate an existing ModelConfig dataclass instance."""
    config_dict = {f.name: getattr(config, f.name) for f in dataclasses.fields(config)}
    return validate_model_config(config_dict)
