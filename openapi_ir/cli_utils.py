"""
CLI utilities for command line reconstruction and document loading.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
import yaml

DEFAULT_COMMAND = "openapi-ir"

YAML_SUFFIXES = (".yaml", ".yml")


def _display_value(value) -> str:
    # Existing files are shown by name only
    if isinstance(value, (str, Path)) and Path(str(value)).exists():
        return Path(str(value)).name
    return str(value)


def reconstruct_command_line(click_command: click.Command) -> str:
    """Return the invocation of click_command as it would be typed, for output headers.

    Options left at their default and empty values are omitted. Outside of a
    Click context the bare program name is returned.
    """
    try:
        ctx = click.get_current_context()
    except RuntimeError:
        return DEFAULT_COMMAND

    arguments = []
    options = []
    for param in click_command.params:
        value = ctx.params.get(param.name)
        if not value:
            continue
        if isinstance(param, click.Argument):
            arguments.append(_display_value(value))
        elif isinstance(param, click.Option) and value != param.default:
            options.append(param.opts[0])
            if not param.is_flag:
                options.append(_display_value(value))

    return " ".join([ctx.command_path or DEFAULT_COMMAND, *arguments, *options])


def load_document(path: str | Path) -> Any:
    """Load a JSON or YAML file, chosen by suffix."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(f)
        return json.load(f)


def dump_document(data: Any, output_format: str, header: str | None = None) -> str:
    """Render data as YAML or JSON; header becomes a leading YAML comment."""
    if output_format == "json":
        return json.dumps(data, indent=2) + "\n"
    out = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    if header:
        out = f"# {header}\n{out}"
    return out
