from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from strictlines.config import StrictLinesConfig
from strictlines.engine.detection import build_dispatch_table, check_source, configured_rules
from strictlines.engine.source_file import read_source_file
from strictlines.engine.types import FileReport, ScanSummary
from strictlines.project import Project, open_project

logger = logging.getLogger(__name__)

WORKERS_ENV = "STRICTLINES_WORKERS"
MAX_WORKERS = 32


@dataclass(frozen=True, slots=True)
class AuditResult:
    project: Project
    summary: ScanSummary


def audit_path(
    scan_path: Path,
    *,
    config: StrictLinesConfig | None = None,
    on_file_checked: Callable[[Path], None] | None = None,
) -> AuditResult:
    project = open_project(scan_path, config=config)
    return audit_project(project, project.files(), on_file_checked=on_file_checked)


def audit_project(
    project: Project,
    files: Sequence[Path],
    *,
    workers: int | None = None,
    on_file_checked: Callable[[Path], None] | None = None,
) -> AuditResult:
    """
    Parse and check `files` on a thread pool.

    Reports come back sorted by relative path whatever the worker count;
    unreadable files are left out.
    """

    table = build_dispatch_table(configured_rules(project.config))

    def check(path: Path) -> FileReport | None:
        source = read_source_file(project, path)
        return None if source is None else check_source(source, table, project.config)

    pool_size = max(1, min(workers or workers_from_env(), len(files)))
    logger.debug("checking %d file(s) under %s with %d worker(s)", len(files), project.root, pool_size)

    reports: list[FileReport] = []
    with ThreadPoolExecutor(max_workers=pool_size) as pool:
        for path, report in zip(files, pool.map(check, files), strict=True):
            if on_file_checked is not None:
                on_file_checked(path)
            if report is not None:
                reports.append(report)

    summary = ScanSummary(reports=tuple(sorted(reports, key=lambda r: r.relative_path)))
    logger.debug("found %d violation(s)", len(summary.violations))
    return AuditResult(project=project, summary=summary)


def workers_from_env() -> int:
    """
    Worker count from `STRICTLINES_WORKERS`, capped at `MAX_WORKERS`.

    Unset, empty or invalid values fall back to the CPU count.
    """

    default = min(os.cpu_count() or 1, MAX_WORKERS)
    raw = os.environ.get(WORKERS_ENV, "").strip()
    if not raw:
        return default
    try:
        workers = int(raw)
    except ValueError:
        workers = 0
    if workers < 1:
        logger.warning("ignoring %s=%r; expected a positive integer", WORKERS_ENV, raw)
        return default
    return min(workers, MAX_WORKERS)
