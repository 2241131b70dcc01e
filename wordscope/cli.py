from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .exit_codes import ExitCode
from .orchestration import list_anchors, run_inspection
from .reporting import render_anchor_listing, render_selection_report, report_to_dict

APP_NAME = "wordscope"
_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

app = typer.Typer(
    name=APP_NAME,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def configure_logging(*, quiet: bool = False) -> None:
    """Initialise application-wide logging."""

    level = logging.WARNING if quiet else logging.INFO
    root = logging.getLogger()

    if getattr(configure_logging, "_configured", False):
        root.setLevel(level)
        for handler in root.handlers:
            handler.setLevel(level)
        configure_logging._level = level
        return

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    configure_logging._configured = True
    configure_logging._level = level


def _is_quiet_mode() -> bool:
    """Determine if the CLI is currently running in quiet mode."""

    return getattr(configure_logging, "_level", logging.INFO) == logging.WARNING


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Reduce log output to warnings and errors.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the Wordscope version and exit.",
    ),
) -> None:
    """Configure logging and handle global options."""

    configure_logging(quiet=quiet)

    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ExitCode.SUCCESS))

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=int(ExitCode.SUCCESS))


@app.command("inspect")
def inspect(
    page: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="HTML page containing the selection.",
    ),
    select: str = typer.Option(
        ...,
        "--select",
        "-s",
        help="Visible text of the selection, exactly as rendered.",
    ),
    occurrence: int = typer.Option(
        1,
        "--occurrence",
        "-n",
        min=1,
        help="Which match of --select to use when the text repeats.",
    ),
    trim_start: int = typer.Option(
        0,
        "--trim-start",
        min=0,
        help="Drop this many characters from the start of the match (partial selections).",
    ),
    trim_end: int = typer.Option(
        0,
        "--trim-end",
        min=0,
        help="Drop this many characters from the end of the match.",
    ),
    profile: list[Path] = typer.Option(
        [],
        "--profile",
        "-p",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Selection profile YAML files to merge (pass multiple times).",
    ),
    prev_count: int | None = typer.Option(
        None,
        "--prev",
        min=0,
        help="Number of previous sentences to include.",
    ),
    next_count: int | None = typer.Option(
        None,
        "--next",
        min=0,
        help="Number of following sentences to include.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the report as JSON instead of tables.",
    ),
    wide: bool = typer.Option(
        False,
        "--wide",
        help="Allow longer context values in the table report.",
    ),
) -> None:
    """Show how a selection would be classified, adjusted and contextualised."""

    outcome = run_inspection(
        page,
        select,
        occurrence=occurrence,
        trim_start=trim_start,
        trim_end=trim_end,
        profile_paths=profile,
        prev_count=prev_count,
        next_count=next_count,
        wide=wide,
    )

    if outcome.report is None:
        raise typer.Exit(code=int(outcome.exit_code))

    if as_json:
        typer.echo(json.dumps(report_to_dict(outcome.report), ensure_ascii=False, indent=2))
        raise typer.Exit(code=int(outcome.exit_code))

    if outcome.message and not _is_quiet_mode():
        typer.echo(outcome.message)
        typer.echo("")
    typer.echo(render_selection_report(outcome.report))
    raise typer.Exit(code=int(outcome.exit_code))


@app.command("anchors")
def anchors(
    page: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="HTML page to scan for existing annotations.",
    ),
    profile: list[Path] = typer.Option(
        [],
        "--profile",
        "-p",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Selection profile YAML files to merge (pass multiple times).",
    ),
) -> None:
    """List annotations already wrapped in the page."""

    outcome = list_anchors(page, profile_paths=profile)
    if outcome.status == "success":
        typer.echo(render_anchor_listing(outcome.message or page.name, outcome.anchors))
    raise typer.Exit(code=int(outcome.exit_code))


def entrypoint() -> None:
    """Execute the Typer application."""

    app()


__all__ = ["app", "entrypoint", "configure_logging", "ExitCode"]
