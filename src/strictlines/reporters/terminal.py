from __future__ import annotations

from rich.console import Console
from rich.text import Text

from strictlines.engine.types import FileReport, ScanSummary, Violation

_SEVERITY_ICON = {"error": "✖", "warn": "⚠", "info": "ℹ"}
_SEVERITY_STYLE = {"error": "bold red", "warn": "yellow", "info": "dim"}


def render_terminal(summary: ScanSummary, *, console: Console) -> None:
    for report in summary.reports:
        if report.violations:
            _print_file(console, report)
    _print_summary(console, summary)


def _print_file(console: Console, report: FileReport) -> None:
    console.print(Text(report.relative_path, style="bold underline"))
    for v in report.violations:
        _print_violation(console, v, report.lines)
    console.print()


def _print_violation(console: Console, v: Violation, lines: tuple[str, ...]) -> None:
    style = _SEVERITY_STYLE[v.severity]
    line = Text()
    line.append(f"  {_SEVERITY_ICON[v.severity]} ", style=style)
    line.append(f"{v.span.start_line}:{v.span.start_col}".ljust(8), style="dim")
    line.append(v.message)
    line.append(f"  {v.rule_id}", style="dim")
    console.print(line)

    if 0 < v.line <= len(lines):
        console.print(f"     {v.line:>4} │ {lines[v.line - 1]}", style="dim", markup=False, highlight=False)


def _print_summary(console: Console, summary: ScanSummary) -> None:
    problems = len(summary.violations)
    if problems:
        files_hit = sum(1 for r in summary.reports if r.violations)
        noun = "problem" if problems == 1 else "problems"
        console.print(
            Text(f"✖ {problems} {noun} in {files_hit} of {summary.files_scanned} file(s) checked", style="bold red")
        )
    else:
        console.print(Text(f"✔ No problems in {summary.files_scanned} file(s) checked", style="bold green"))

    if summary.files_with_syntax_errors:
        names = ", ".join(summary.files_with_syntax_errors)
        console.print(Text(f"Syntax errors (partial results): {names}", style="yellow"))
