"""Build context and model configuration helpers.

``ModelConfig`` carries the options that shape class models (ordering and
naming strategies) and the command line (log level, report format).
``BuildContext`` carries the descriptor being modelled, the active
configuration, a run id for correlating events and a metadata mapping
through the build steps. ``ContextManager`` loads configuration files.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import dataclasses
import uuid
from dataclasses import dataclass, field
from typing import Any

import yaml

from .config_validation import validate_model_config, validate_model_config_object
from .descriptors.base import TypeDescriptor
from .exceptions import ConfigurationError
from .naming import PropertyNamingStrategy
from .policies import PropertyOrderStrategy
from .result import Result


@dataclass(frozen=True)
class ModelConfig:
    """Class model configuration.

    Values are serializable so callers can construct the configuration from
    dictionaries or YAML files.
    """

    property_ordering: PropertyOrderStrategy = PropertyOrderStrategy.LEXICOGRAPHICAL
    """Order of the properties declared by one class"""

    naming_strategy: PropertyNamingStrategy = PropertyNamingStrategy.IDENTITY
    """Translation of property names into read/write names"""

    log_level: str = "INFO"
    """Default logging level (DEBUG, INFO, WARNING, ERROR)"""

    output_format: str = "table"
    """Report format used by the command line (table, json, yaml)"""

    def with_override(self, **kwargs: Any) -> "ModelConfig":
        """Return a new ``ModelConfig`` with specified overrides.

        Overrides are validated and normalized the same way as values read
        from a configuration file.
        """
        return ModelConfig.from_dict({**self.to_dict(), **kwargs})

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ConfigurationError: If configuration is invalid.
        """
        validate_model_config_object(self)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ModelConfig":
        """Create config from dictionary.

        Unknown keys are ignored.

        Raises:
            ConfigurationError: If configuration is invalid.
        """
        filtered = {k: v for k, v in config_dict.items() if k in cls.__dataclass_fields__}
        validated = validate_model_config(filtered)
        return cls(
            property_ordering=validated.property_ordering,
            naming_strategy=validated.naming_strategy,
            log_level=validated.log_level,
            output_format=validated.output_format,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "property_ordering": self.property_ordering.value,
            "naming_strategy": self.naming_strategy.value,
            "log_level": self.log_level,
            "output_format": self.output_format,
        }


@dataclass(frozen=True)
class BuildContext:
    """Immutable context passed through the steps building one class model."""

    descriptor: TypeDescriptor
    config: ModelConfig
    run_id: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        descriptor: TypeDescriptor,
        config: ModelConfig | None = None,
        run_id: str | None = None,
    ) -> "BuildContext":
        """Construct a ``BuildContext``, generating a run id when omitted."""
        return cls(
            descriptor=descriptor,
            config=config or ModelConfig(),
            run_id=run_id or str(uuid.uuid4()),
            metadata={},
        )

    def with_metadata(self, key: str, value: Any) -> "BuildContext":
        return dataclasses.replace(self, metadata={**self.metadata, key: value})

    def with_config(self, **config_overrides: Any) -> "BuildContext":
        return dataclasses.replace(self, config=self.config.with_override(**config_overrides))

    def to_dict(self) -> dict[str, Any]:
        return {
            "descriptor": self.descriptor.name,
            "config": self.config.to_dict(),
            "run_id": self.run_id,
            "metadata": self.metadata,
        }

    def __str__(self) -> str:
        return f"BuildContext(type={self.descriptor.name}, run_id={self.run_id[:8]}...)"


class ContextManager:
    """Helpers for loading and validating model configuration.

    Methods return ``Result`` instances so callers can react to failures in
    a structured way.
    """

    @staticmethod
    def load_config_from_file(config_file: str) -> Result[ModelConfig]:
        """Load a ``ModelConfig`` from a YAML file.

        Unknown top-level keys are ignored.

        Args:
            config_file: Path to the YAML configuration file.

        Returns:
            A ``Result`` containing the constructed ``ModelConfig`` on
            success or an error describing the problem.
        """
        try:
            with open(config_file, encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except FileNotFoundError:
            return Result.failure(
                ConfigurationError(f"Configuration file not found: {config_file}"), {"config_file": config_file}
            )
        except (OSError, yaml.YAMLError) as e:
            return Result.failure(
                ConfigurationError(f"Error loading configuration: {e}"), {"config_file": config_file}
            )

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            return Result.failure(
                ConfigurationError("Configuration file must contain a dictionary"), {"config_file": config_file}
            )

        try:
            return Result.success(ModelConfig.from_dict(config_data))
        except ConfigurationError as e:
            return Result.failure(e, {"config_file": config_file})

    @staticmethod
    def validate_config(config: ModelConfig) -> Result[ModelConfig]:
        """Validate a ``ModelConfig`` instance."""
        try:
            config.validate()
        except ConfigurationError as e:
            return Result.failure(e)
        return Result.success(config)
