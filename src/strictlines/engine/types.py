from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from strictlines.engine.nodes import Span

Severity = Literal["info", "warn", "error"]


@dataclass(frozen=True, slots=True)
class Violation:
    rule_id: str
    severity: Severity
    message: str
    span: Span

    @property
    def line(self) -> int:
        return self.span.start_line


@dataclass(frozen=True, slots=True)
class FileReport:
    """Result of checking one file. `lines` holds the source for snippet output."""

    relative_path: str
    violations: tuple[Violation, ...] = ()
    syntax_errors: bool = False
    lines: tuple[str, ...] = ()

    def count(self, severity: Severity) -> int:
        return sum(1 for v in self.violations if v.severity == severity)


@dataclass(frozen=True, slots=True)
class ScanSummary:
    reports: tuple[FileReport, ...]  # sorted by relative path

    @property
    def files_scanned(self) -> int:
        return len(self.reports)

    @property
    def violations(self) -> tuple[Violation, ...]:
        return tuple(v for report in self.reports for v in report.violations)

    @property
    def files_with_syntax_errors(self) -> tuple[str, ...]:
        return tuple(r.relative_path for r in self.reports if r.syntax_errors)

    def count(self, severity: Severity) -> int:
        return sum(report.count(severity) for report in self.reports)
