"""Helpers used by the command line: logging, events and report rendering.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import json
import logging
from typing import Any

import yaml

from .events import EventBus, LoggingSubscriber
from .model import ClassModel, PropertyModel


def setup_logging_with_level(log_level: str) -> None:
    """Set up logging with a specific level."""
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger().setLevel(numeric_level)


def create_event_bus() -> EventBus:
    """Create and configure the event bus for the application."""
    return EventBus()


def attach_progress_handlers(event_bus: EventBus) -> LoggingSubscriber:
    """Attach a logging subscriber reporting build progress."""
    return LoggingSubscriber(event_bus)


def models_to_dict(models: dict[str, ClassModel]) -> dict[str, Any]:
    return {name: model.to_dict() for name, model in models.items()}


def render_json(models: dict[str, ClassModel]) -> str:
    return json.dumps(models_to_dict(models), indent=2)


def render_yaml(models: dict[str, ClassModel]) -> str:
    return yaml.safe_dump(models_to_dict(models), sort_keys=False)


_COLUMNS = ("property", "read name", "write name", "readable", "writable", "declared in")


def _row(model: PropertyModel) -> tuple[str, ...]:
    return (
        model.property_name,
        model.read_name,
        model.write_name,
        "yes" if model.readable else "no",
        "yes" if model.writable else "no",
        model.class_model.type.name,
    )


def render_table(models: dict[str, ClassModel]) -> str:
    """Render one plain-text table per class model."""
    blocks: list[str] = []
    for name, model in models.items():
        header = name if model.parent is None else f"{name} ({model.parent.type.name})"
        rows = [_COLUMNS, *(_row(p) for p in model.sorted_properties)]
        widths = [max(len(row[i]) for row in rows) for i in range(len(_COLUMNS))]
        lines = [header]
        for index, row in enumerate(rows):
            lines.append("  " + "  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip())
            if index == 0:
                lines.append("  " + "  ".join("-" * width for width in widths))
        if len(rows) == 1:
            lines.append("  (no properties)")
        creator = model.customization.creator
        if creator is not None:
            bound = ", ".join(
                f"{p.name}->{p.customization.property_model.property_name}"
                if p.customization.property_model is not None
                else f"{p.name}->?"
                for p in creator.parameters
            )
            lines.append(f"  creator {creator.name}({bound})")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


RENDERERS = {"table": render_table, "json": render_json, "yaml": render_yaml}


def render_models(models: dict[str, ClassModel], output_format: str) -> str:
    """Render class models in ``output_format`` (table, json or yaml).

    Raises:
        ValueError: If the format is unknown.
    """
    renderer = RENDERERS.get(output_format.lower())
    if renderer is None:
        raise ValueError(f"Unknown output format '{output_format}', expected one of: {', '.join(RENDERERS)}")
    return renderer(models)
