"""Unit tests for accessor naming rules and naming strategies."""

import pytest

from splurge_property_model.descriptors.base import MethodHandle
from splurge_property_model.naming import (
    AccessorRole,
    PropertyNamingStrategy,
    accessor_property_name,
    accessor_role,
    decapitalize,
    is_getter_name,
    is_setter_name,
    to_property_name,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Name", "name"),
        ("URL", "URL"),
        ("Url", "url"),
        ("X", "x"),
        ("", ""),
        ("already", "already"),
    ],
)
def test_decapitalize(name, expected):
    assert decapitalize(name) == expected


@pytest.mark.parametrize(
    "method_name,expected",
    [
        ("getName", "name"),
        ("setName", "name"),
        ("isActive", "active"),
        ("getURL", "URL"),
        ("getUrl", "url"),
        ("getX", "x"),
        ("get_first_name", "first_name"),
        ("is_valid", "valid"),
        ("setFooBar", "fooBar"),
        ("get", ""),
        ("is", ""),
    ],
)
def test_to_property_name(method_name, expected):
    assert to_property_name(method_name) == expected


def test_getter_and_setter_names_depend_on_parameter_count():
    assert is_getter_name("getName", 0)
    assert is_getter_name("isReady", 0)
    assert not is_getter_name("getName", 1)
    assert not is_getter_name("get", 0)

    assert is_setter_name("setName", 1)
    assert not is_setter_name("setName", 0)
    assert not is_setter_name("setName", 2)
    assert not is_setter_name("set", 1)


def test_accessor_role_for_plain_methods():
    getter = MethodHandle(name="getAge", owner="T", parameter_count=0)
    setter = MethodHandle(name="setAge", owner="T", parameter_count=1)
    other = MethodHandle(name="compute", owner="T", parameter_count=0)

    assert accessor_role(getter) is AccessorRole.GETTER
    assert accessor_role(setter) is AccessorRole.SETTER
    assert accessor_role(other) is None
    assert accessor_property_name(getter) == "age"


def test_accessor_role_for_python_property_uses_bound_name():
    handle = MethodHandle(
        name="celsius",
        owner="T",
        parameter_count=1,
        bound_property="celsius",
        accessor_role=AccessorRole.SETTER,
    )

    assert accessor_role(handle) is AccessorRole.SETTER
    assert accessor_property_name(handle) == "celsius"


@pytest.mark.parametrize(
    "strategy,expected",
    [
        (PropertyNamingStrategy.IDENTITY, "firstName"),
        (PropertyNamingStrategy.LOWER_CASE_WITH_UNDERSCORES, "first_name"),
        (PropertyNamingStrategy.LOWER_CASE_WITH_DASHES, "first-name"),
        (PropertyNamingStrategy.UPPER_CAMEL_CASE, "FirstName"),
        (PropertyNamingStrategy.UPPER_CAMEL_CASE_WITH_SPACES, "First Name"),
    ],
)
def test_naming_strategies(strategy, expected):
    assert strategy.translate("firstName") == expected


def test_naming_strategies_keep_empty_and_lowercase_names():
    for strategy in PropertyNamingStrategy:
        assert strategy.translate("") == ""
    assert PropertyNamingStrategy.LOWER_CASE_WITH_UNDERSCORES.translate("_private") == "_private"
