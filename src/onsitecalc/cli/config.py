"""Utility commands to inspect the resolved onsitecalc settings."""
from __future__ import annotations

import json
from pathlib import Path

import typer

from ..config import get_settings

__all__ = ["app"]

app = typer.Typer(
    help="Inspect limits, logging and interpreter settings.",
    add_completion=False,
)


@app.command("show")
def show_settings(
    config_file: Path = typer.Option(
        None,
        "--config-file",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Alternative TOML/YAML configuration to use instead of environment variables.",
    ),
    refresh: bool = typer.Option(
        False,
        "--refresh",
        help="Ignore the cache and rebuild settings from environment variables or file.",
    ),
) -> None:
    """Print the resolved settings as JSON."""

    settings = get_settings(refresh=refresh, config_file=config_file)
    payload = {
        "config_source": str(config_file) if config_file else "environment",
        "settings": settings.as_dict(),
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
