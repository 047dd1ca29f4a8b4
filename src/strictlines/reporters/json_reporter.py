"""
Machine-readable report: one entry per checked file, in path order.

Positions are 1-based; `end_column` is exclusive.
"""

from __future__ import annotations

import json
from typing import Any

from strictlines import __version__
from strictlines.engine.types import FileReport, ScanSummary, Violation

REPORT_SCHEMA_VERSION = 1


def render_json(summary: ScanSummary) -> str:
    payload = {
        "schema_version": REPORT_SCHEMA_VERSION,
        "tool": {"name": "strictlines", "version": __version__},
        "totals": {
            "files": summary.files_scanned,
            "errors": summary.count("error"),
            "warnings": summary.count("warn"),
            "infos": summary.count("info"),
        },
        "files": [_file_entry(report) for report in summary.reports],
    }
    return json.dumps(payload, indent=2)


def _file_entry(report: FileReport) -> dict[str, Any]:
    return {
        "path": report.relative_path,
        "syntax_errors": report.syntax_errors,
        "messages": [_message(v) for v in report.violations],
    }


def _message(v: Violation) -> dict[str, Any]:
    return {
        "rule_id": v.rule_id,
        "severity": v.severity,
        "message": v.message,
        "line": v.span.start_line,
        "column": v.span.start_col,
        "end_line": v.span.end_line,
        "end_column": v.span.end_col,
    }
