from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated, Any

import click
import typer
from rich.console import Console
from rich.text import Text

from strictlines import __version__
from strictlines.audit import AuditResult, audit_project
from strictlines.config import ConfigError
from strictlines.logging_utils import configure_logging
from strictlines.policy import MODES, OptionError, RuleOption, parse_option
from strictlines.reporters.json_reporter import render_json
from strictlines.reporters.terminal import render_terminal
from strictlines.rules.lines_around_directive import LinesAroundDirective
from strictlines.rules.registry import builtin_rules
from strictlines.project import open_project

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="strictlines: blank-line policy checker for 'use strict' directives.",
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

_FORMATS = ("terminal", "json")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def _main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose logs (printed to stderr)."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only print problems."),
    ] = False,
    progress: Annotated[
        bool,
        typer.Option("--progress/--no-progress", help="Show a progress bar for long runs.", show_default=True),
    ] = True,
) -> None:
    """strictlines CLI."""

    if verbose and quiet:
        raise typer.BadParameter("Choose at most one: --verbose or --quiet.")
    configure_logging(verbose=verbose, quiet=quiet)
    ctx.obj = {"verbose": verbose, "quiet": quiet, "progress": progress}


def _cli_settings() -> dict[str, bool]:
    ctx = click.get_current_context(silent=True)
    if ctx is None or not isinstance(ctx.obj, dict):
        return {"verbose": False, "quiet": False, "progress": True}
    return {
        "verbose": bool(ctx.obj.get("verbose", False)),
        "quiet": bool(ctx.obj.get("quiet", False)),
        "progress": bool(ctx.obj.get("progress", True)),
    }


def _option_from_flags(mode: str | None, before: str | None, after: str | None) -> RuleOption | None:
    """Build a rule option from CLI flags, validated like the config file."""

    if mode is not None and (before is not None or after is not None):
        raise typer.BadParameter("Use either --mode or --before/--after, not both.")

    raw: Any
    if mode is not None:
        raw = mode
    elif before is not None or after is not None:
        raw = {key: value for key, value in (("before", before), ("after", after)) if value is not None}
    else:
        return None

    try:
        return parse_option(raw)
    except OptionError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _audit_with_optional_progress(
    path: Path,
    *,
    option: RuleOption | None,
    show_progress: bool,
) -> AuditResult:
    from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeElapsedColumn

    project = open_project(path)
    if option is not None:
        project = replace(project, config=project.config.with_rule_option(LinesAroundDirective.meta.rule_id, option))

    files = project.files()
    logger.debug("discovered %d candidate file(s)", len(files))

    if not show_progress or len(files) <= 1:
        return audit_project(project, files)

    progress = Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=err_console,
        transient=True,
    )
    task = progress.add_task("Check", total=len(files))
    with progress:
        return audit_project(project, files, on_file_checked=lambda _path: progress.advance(task, 1))


@app.command()
def check(
    path: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=True,
            resolve_path=True,
            help="File or directory to check (default: current directory).",
        ),
    ] = Path("."),
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
    mode: Annotated[
        str | None,
        typer.Option("--mode", help="Blank line policy for both sides: always, never."),
    ] = None,
    before: Annotated[
        str | None,
        typer.Option("--before", help="Blank line policy before the directive (requires --after)."),
    ] = None,
    after: Annotated[
        str | None,
        typer.Option("--after", help="Blank line policy after the directive (requires --before)."),
    ] = None,
) -> None:
    """Check blank lines around 'use strict' directives."""

    settings = _cli_settings()
    normalized_format = output_format.strip().lower()
    if normalized_format not in _FORMATS:
        raise typer.BadParameter(f"Unsupported format. Use: {', '.join(_FORMATS)}.")
    option = _option_from_flags(mode, before, after)

    try:
        result = _audit_with_optional_progress(
            path,
            option=option,
            show_progress=settings["progress"] and not settings["quiet"] and normalized_format == "terminal",
        )
    except ConfigError as exc:
        err_console.print(Text.assemble(("Configuration error: ", "bold red"), str(exc)))
        raise typer.Exit(code=2) from exc

    if normalized_format == "json":
        typer.echo(render_json(result.summary))
    elif not (settings["quiet"] and not result.summary.violations):
        render_terminal(result.summary, console=console)

    if result.summary.count("error"):
        raise typer.Exit(code=1)


@app.command()
def rules(
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
) -> None:
    """List built-in rules."""

    rows = [
        {
            "rule_id": rule.meta.rule_id,
            "title": rule.meta.title,
            "default_severity": rule.meta.default_severity,
            "description": rule.meta.description,
            "scopes": list(rule.scope_types),
        }
        for rule in builtin_rules()
    ]

    normalized = output_format.strip().lower()
    if normalized == "json":
        typer.echo(json.dumps(rows, indent=2, sort_keys=True))
        return
    if normalized != "terminal":
        raise typer.BadParameter(f"Unsupported format. Use: {', '.join(_FORMATS)}.")

    from rich.table import Table

    table = Table(title="strictlines rules")
    table.add_column("Rule")
    table.add_column("Severity")
    table.add_column("Description")
    for row in rows:
        table.add_row(row["rule_id"], row["default_severity"], row["description"])
    console.print(table)
    console.print(f"Options: {' | '.join(MODES)} or {{ before = MODE, after = MODE }}", highlight=False)
