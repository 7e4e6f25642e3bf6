"""Integration tests for the ``inspect`` and ``version`` commands."""

import json

import pytest
import yaml
from typer.testing import CliRunner

from splurge_property_model import __version__
from splurge_property_model.cli import app

runner = CliRunner()

SOURCE = """
from typing import Annotated, Protocol

from splurge_property_model import BindingName, binding_name, creator


class Named(Protocol):
    @binding_name("label")
    def getName(self) -> str: ...


class Entity:
    id: int


class Person(Entity, Named):
    firstName: str
    home_address: Annotated[str, BindingName("address")]

    @creator
    def __init__(self, id: int, firstName: str) -> None:
        self.firstName = firstName

    def getName(self) -> str:
        return self.firstName
"""

CLASH = """
from typing import Annotated

from splurge_property_model import BindingName


class Broken:
    first: Annotated[str, BindingName("x")]
    second: Annotated[str, BindingName("x")]
"""


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "people.py"
    path.write_text(SOURCE, encoding="utf-8")
    return path


def test_inspect_table(source_file):
    result = runner.invoke(app, ["inspect", str(source_file)])

    assert result.exit_code == 0
    assert "Person (people.Entity)" in result.stdout
    assert "creator __init__(id->id, firstName->firstName)" in result.stdout


def test_inspect_json_with_naming_and_class_filter(source_file):
    result = runner.invoke(
        app,
        ["inspect", str(source_file), "--format", "json", "--naming", "lower_case_with_underscores", "-k", "Person"],
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert list(data) == ["Person"]
    properties = {p["property_name"]: p for p in data["Person"]["properties"]}
    assert list(properties) == ["id", "firstName", "home_address", "name"]
    assert properties["firstName"]["read_name"] == "first_name"
    assert properties["home_address"]["read_name"] == "address"
    assert properties["name"]["read_name"] == "label"
    assert properties["name"]["writable"] is False


def test_inspect_yaml_with_ordering_and_module(source_file):
    result = runner.invoke(
        app, ["inspect", str(source_file), "-f", "yaml", "--ordering", "reverse", "--module", "app.models"]
    )

    assert result.exit_code == 0
    data = yaml.safe_load(result.stdout)
    assert data["Person"]["type"] == "app.models.Person"
    assert [p["property_name"] for p in data["Person"]["properties"]] == ["id", "name", "home_address", "firstName"]


def test_inspect_uses_config_file(source_file, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("output_format: json\nnaming_strategy: UPPER_CAMEL_CASE\n", encoding="utf-8")

    result = runner.invoke(app, ["inspect", str(source_file), "--config", str(config), "-k", "Entity"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["Entity"]["properties"][0]["read_name"] == "Id"


def test_inspect_reports_name_clash(tmp_path):
    path = tmp_path / "broken.py"
    path.write_text(CLASH, encoding="utf-8")

    result = runner.invoke(app, ["inspect", str(path)])

    assert result.exit_code == 1
    assert "clashes with property" in result.output


def test_inspect_rejects_invalid_option(source_file):
    result = runner.invoke(app, ["inspect", str(source_file), "--ordering", "sideways"])

    assert result.exit_code == 2
    assert "Invalid option" in result.output


def test_inspect_bad_config_file(source_file, tmp_path):
    result = runner.invoke(app, ["inspect", str(source_file), "--config", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1
    assert "Error loading configuration file" in result.output


def test_inspect_missing_source(tmp_path):
    result = runner.invoke(app, ["inspect", str(tmp_path / "nope.py")])

    assert result.exit_code == 1
    assert "Cannot read" in result.output


def test_inspect_unknown_class(source_file):
    result = runner.invoke(app, ["inspect", str(source_file), "--class", "Ghost"])

    assert result.exit_code == 1
    assert "Ghost" in result.output


def test_inspect_module_without_classes(tmp_path):
    path = tmp_path / "constants.py"
    path.write_text("VALUE = 1\n", encoding="utf-8")

    result = runner.invoke(app, ["inspect", str(path)])

    assert result.exit_code == 0
    assert "No classes found" in result.stdout


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert result.stdout.strip() == f"splurge-property-model {__version__}"
