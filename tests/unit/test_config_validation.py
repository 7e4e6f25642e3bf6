import pytest
from pydantic import ValidationError

from splurge_property_model.config_validation import (
    ValidatedModelConfig,
    validate_model_config,
    validate_model_config_object,
)
from splurge_property_model.context import ModelConfig
from splurge_property_model.exceptions import ConfigurationError
from splurge_property_model.policies import PropertyOrderStrategy


def test_validated_config_defaults():
    validated = ValidatedModelConfig()

    assert validated.property_ordering is PropertyOrderStrategy.LEXICOGRAPHICAL
    assert validated.output_format == "table"


def test_unknown_keys_are_forbidden_by_schema():
    with pytest.raises(ConfigurationError):
        validate_model_config({"line_length": 80})


@pytest.mark.parametrize(
    "key,value",
    [
        ("log_level", "VERBOSE"),
        ("log_level", 10),
        ("output_format", "xml"),
        ("naming_strategy", "SNAKE"),
        ("property_ordering", "RANDOM"),
    ],
)
def test_invalid_values_report_config_key(key, value):
    with pytest.raises(ConfigurationError) as exc_info:
        validate_model_config({key: value})

    assert exc_info.value.details["config_key"] == key


def test_assignment_is_validated():
    validated = ValidatedModelConfig()

    with pytest.raises(ValidationError):
        validated.output_format = "xml"


def test_validate_config_object():
    validated = validate_model_config_object(ModelConfig())

    assert validated.log_level == "INFO"
