"""CLI utilities."""

import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console

from typelens.config.loader import load_config
from typelens.config.models import TypeLensConfig
from typelens.core.errors import ConfigError
from typelens.mcp.context import AppContext
from typelens.mcp.envelope import is_error

# Results go to stdout, diagnostics to stderr
_out = Console()
_err = Console(stderr=True)


def get_error_console() -> Console:
    return _err


def load_cli_config(root: Path | None) -> TypeLensConfig:
    """Load configuration for *root* (default: current directory).

    Raises:
        click.ClickException: If a config file is unreadable or invalid
    """
    try:
        return load_config((root or Path.cwd()).resolve())
    except ConfigError as e:
        raise click.ClickException(e.message) from e


def build_context(root: Path | None) -> AppContext:
    return AppContext.create(config=load_cli_config(root))


def emit(envelope: dict[str, Any], *, raw: bool = False) -> None:
    """Print an envelope as JSON and exit non-zero if it is an error."""
    text = json.dumps(envelope, ensure_ascii=False, indent=None if raw else 2)
    if raw:
        click.echo(text)
    else:
        _out.print_json(text)
    if is_error(envelope):
        _err.print(f"[red]{envelope['code']}[/red]: {envelope['message']}", highlight=False)
        raise SystemExit(1)
