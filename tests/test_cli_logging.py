from __future__ import annotations

import logging
from pathlib import Path

from typer.testing import CliRunner

from strictlines.audit import AuditResult
from strictlines.cli import app
from strictlines.engine.types import ScanSummary
from strictlines.logging_utils import log_level


def _fake_audit_project(project, files, **_kwargs) -> AuditResult:  # type: ignore[no-untyped-def]
    return AuditResult(project=project, summary=ScanSummary(reports=()))


def test_cli_verbose_enables_debug_logging(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "example.js").write_text("'use strict';\n", encoding="utf-8")
    monkeypatch.setattr("strictlines.cli.audit_project", _fake_audit_project)

    runner = CliRunner()
    res = runner.invoke(app, ["--verbose", "check", str(tmp_path), "--format", "json"])
    assert res.exit_code == 0
    assert "discovered 1 candidate file(s)" in res.output.lower()


def test_cli_quiet_suppresses_debug_logging(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "example.js").write_text("'use strict';\n", encoding="utf-8")
    monkeypatch.setattr("strictlines.cli.audit_project", _fake_audit_project)

    runner = CliRunner()
    res = runner.invoke(app, ["--quiet", "check", str(tmp_path), "--format", "json"])
    assert res.exit_code == 0
    assert "discovered" not in res.output.lower()


def test_cli_rejects_verbose_and_quiet_together(tmp_path: Path) -> None:
    runner = CliRunner()
    res = runner.invoke(app, ["--verbose", "--quiet", "check", str(tmp_path)])
    assert res.exit_code == 2


def test_log_level_mapping() -> None:
    assert log_level(verbose=False, quiet=False) == logging.INFO
    assert log_level(verbose=True, quiet=False) == logging.DEBUG
    assert log_level(verbose=False, quiet=True) == logging.WARNING
    assert log_level(verbose=True, quiet=True) == logging.DEBUG
