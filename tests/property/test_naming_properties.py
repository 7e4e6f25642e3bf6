"""Property-based tests for accessor naming rules and naming strategies."""

from hypothesis import given
from hypothesis import strategies as st

from splurge_property_model.naming import (
    PropertyNamingStrategy,
    decapitalize,
    is_getter_name,
    is_setter_name,
    to_property_name,
)
from tests.hypothesis_config import DEFAULT_SETTINGS
from tests.property.strategies import letter_names


@given(letter_names)
@DEFAULT_SETTINGS
def test_decapitalize_is_idempotent(name):
    once = decapitalize(name)

    assert decapitalize(once) == once
    assert once[1:] == name[1:]


@given(letter_names)
@DEFAULT_SETTINGS
def test_leading_acronyms_are_preserved(name):
    if len(name) > 1 and name[0].isupper() and name[1].isupper():
        assert decapitalize(name) == name
    else:
        assert decapitalize(name)[0] == name[0].lower()


@given(letter_names, st.sampled_from(["get", "set", "is"]))
@DEFAULT_SETTINGS
def test_prefix_is_stripped_before_decapitalizing(stem, prefix):
    assert to_property_name(prefix + stem) == decapitalize(stem)
    assert to_property_name(f"{prefix}_{stem}") == decapitalize(stem)


@given(letter_names)
@DEFAULT_SETTINGS
def test_accessor_names_require_parameter_counts(stem):
    assert is_getter_name("get" + stem, 0)
    assert not is_getter_name("get" + stem, 1)
    assert is_setter_name("set" + stem, 1)
    assert not is_setter_name("set" + stem, 0)


@given(letter_names)
@DEFAULT_SETTINGS
def test_identity_strategy(name):
    assert PropertyNamingStrategy.IDENTITY.translate(name) == name


@given(letter_names, st.sampled_from(["_", "-"]))
@DEFAULT_SETTINGS
def test_lower_case_strategies_only_insert_separators(name, separator):
    strategy = (
        PropertyNamingStrategy.LOWER_CASE_WITH_UNDERSCORES
        if separator == "_"
        else PropertyNamingStrategy.LOWER_CASE_WITH_DASHES
    )

    translated = strategy.translate(name)

    assert translated == translated.lower()
    assert translated.replace(separator, "") == name.lower()
    assert not translated.startswith(separator)


@given(letter_names)
@DEFAULT_SETTINGS
def test_upper_camel_case_strategies(name):
    upper = PropertyNamingStrategy.UPPER_CAMEL_CASE.translate(name)
    spaced = PropertyNamingStrategy.UPPER_CAMEL_CASE_WITH_SPACES.translate(name)

    assert upper == name[0].upper() + name[1:]
    assert spaced.replace(" ", "") == upper
