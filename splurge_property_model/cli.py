"""Command-line interface for the property model builder.

The ``inspect`` command reads a Python source file with libcst (the file
is never imported) and prints the property models of its classes. The
work is delegated to :func:`splurge_property_model.main.inspect_source`.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
from pathlib import Path
from typing import cast

import typer

from . import main as main_module
from .cli_helpers import attach_progress_handlers, create_event_bus, render_models, setup_logging_with_level
from .context import ContextManager, ModelConfig
from .exceptions import ConfigurationError, PropertyModelError

app = typer.Typer(
    name="splurge-property-model",
    help="Build bindable property models for Python classes",
    add_completion=False,
)

logger = logging.getLogger(__name__)


def _load_config(config_file: str | None) -> ModelConfig:
    if config_file is None:
        return ModelConfig()
    config_result = ContextManager.load_config_from_file(config_file)
    if not config_result.is_success():
        typer.echo(f"Error loading configuration file: {config_result.error}", err=True)
        raise typer.Exit(code=1)
    logger.debug(f"Loaded configuration from: {config_file}")
    return cast(ModelConfig, config_result.data)


@app.command("inspect")
def inspect_cmd(
    source_file: str = typer.Argument(..., help="Python source file to read"),
    class_names: list[str] = typer.Option(
        [], "--class", "-k", help="Qualified class name to model (repeatable); all classes when omitted"
    ),
    output_format: str | None = typer.Option(None, "--format", "-f", help="Output format: table, json or yaml"),
    ordering: str | None = typer.Option(
        None, "--ordering", help="Property ordering: LEXICOGRAPHICAL, ANY or REVERSE"
    ),
    naming: str | None = typer.Option(
        None,
        "--naming",
        help="Naming strategy: IDENTITY, LOWER_CASE_WITH_UNDERSCORES, LOWER_CASE_WITH_DASHES, "
        "UPPER_CAMEL_CASE or UPPER_CAMEL_CASE_WITH_SPACES",
    ),
    module_name: str | None = typer.Option(None, "--module", help="Module name; defaults to the file stem"),
    config_file: str | None = typer.Option(None, "--config", "-c", help="YAML configuration file"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging output", is_flag=True),
) -> None:
    """Print the property models of the classes defined in SOURCE_FILE."""
    config = _load_config(config_file)

    overrides: dict[str, str] = {}
    if output_format is not None:
        overrides["output_format"] = output_format
    if ordering is not None:
        overrides["property_ordering"] = ordering
    if naming is not None:
        overrides["naming_strategy"] = naming
    if debug:
        overrides["log_level"] = "DEBUG"
    if overrides:
        try:
            config = config.with_override(**overrides)
        except ConfigurationError as e:
            typer.echo(f"Invalid option: {e.message}", err=True)
            raise typer.Exit(code=2) from None

    setup_logging_with_level(config.log_level)

    path = Path(source_file)
    try:
        source_code = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Cannot read {source_file}: {e}", err=True)
        raise typer.Exit(code=1) from None

    event_bus = create_event_bus()
    attach_progress_handlers(event_bus)
    result = main_module.inspect_source(
        source_code,
        module_name=module_name or path.stem,
        config=config,
        class_names=class_names or None,
        event_bus=event_bus,
    )
    if result.is_error():
        error = result.error
        message = error.message if isinstance(error, PropertyModelError) else str(error)
        typer.echo(f"Error: {message}", err=True)
        raise typer.Exit(code=1)

    models = result.data or {}
    if not models:
        typer.echo(f"No classes found in {source_file}")
        return
    typer.echo(render_models(models, config.output_format))


@app.command("version")
def version() -> None:
    """Show the version of splurge-property-model."""
    from . import __version__

    typer.echo(f"splurge-property-model {__version__}")


def main() -> None:
    """Main entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
