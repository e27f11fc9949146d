from pathlib import Path
from typing import Optional

import json
import typer

from .._version import __version__
from ..engine import evaluate, format_feet_inches, format_total_inches, parse_quantity
from ..utils.logging import configure_json_logger, flush_handlers, log_event
from .config import app as config_app


__all__ = ["app", "run"]


app = typer.Typer(help="Feet, inches and fractions calculator", add_completion=False)

# Lets "-5 + 3" and "-3.5" through as arguments instead of unknown options.
_SIGNED_ARGUMENTS = {"ignore_unknown_options": True}


@app.callback(invoke_without_command=True)
def version_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show onsitecalc version and exit", is_eager=True),
) -> None:
    """Handle global options before any sub-command executes."""

    if version:
        typer.echo(f"onsitecalc {__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


app.add_typer(config_app, name="config")


@app.command("eval", context_settings=_SIGNED_ARGUMENTS)
def eval_command(
    expression: str = typer.Argument(..., help="Expression such as \"5 1/2 + 3 1/4\" or \"100 + 10%\""),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", dir_okay=False, help="Append JSONL evaluation events to this file"
    ),
) -> None:
    """Evaluate a measurement or arithmetic expression."""

    logger = configure_json_logger(log_file)
    trace_id = log_event(logger, "evaluate.request", expression=expression)
    result = evaluate(expression)
    log_event(logger, "evaluate.completed", trace_id=trace_id, ok=result.ok, display=result.display)
    flush_handlers(logger)

    if as_json:
        typer.echo(json.dumps(result.as_dict(), indent=2, ensure_ascii=False))
    elif result.ok:
        typer.echo(result.feet_inches)
        if result.measurement:
            typer.echo(result.total_inches)
    else:
        typer.echo(result.display)

    if not result.ok:
        raise typer.Exit(code=1)


@app.command("format", context_settings=_SIGNED_ARGUMENTS)
def format_command(
    inches: float = typer.Argument(..., help="Value in decimal inches"),
    as_json: bool = typer.Option(False, "--json", help="Print both renderings as JSON"),
) -> None:
    """Render decimal inches as feet-inches-fraction and total inches."""

    feet_inches = format_feet_inches(inches)
    total_inches = format_total_inches(inches)
    if as_json:
        typer.echo(json.dumps({"feet_inches": feet_inches, "total_inches": total_inches}, ensure_ascii=False))
        return
    typer.echo(feet_inches)
    typer.echo(total_inches)


@app.command("parse")
def parse_command(
    token: str = typer.Argument(..., help="Single measurement such as \"3' 5 1/2\""),
) -> None:
    """Print the number of inches a single measurement stands for."""

    typer.echo(repr(parse_quantity(token)))


def run() -> None:
    """Entry point compatible with ``python -m onsitecalc.cli.main`` and console scripts."""

    from typer.main import get_command

    cli = get_command(app)
    cli()


if __name__ == "__main__":  # pragma: no cover
    run()
