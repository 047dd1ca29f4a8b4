from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from strictlines.engine.javascript import ParsedSource, parse_javascript
from strictlines.project import Project
from strictlines.suppressions import Suppressions, suppressions_from_comments

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SourceFile:
    path: Path
    relative_path: str
    lines: tuple[str, ...]
    parsed: ParsedSource
    suppressions: Suppressions


def source_lines(text: str) -> tuple[str, ...]:
    # Numbered the way tree-sitter counts rows: only "\n" ends a line.
    return tuple(line.removesuffix("\r") for line in text.split("\n"))


def source_file_from_text(project: Project, path: Path, text: str) -> SourceFile:
    parsed = parse_javascript(text)
    relative_path = project.relative(path)
    if parsed.has_syntax_errors:
        logger.debug("%s: source has syntax errors; results may be incomplete", relative_path)
    return SourceFile(
        path=path,
        relative_path=relative_path,
        lines=source_lines(text),
        parsed=parsed,
        suppressions=suppressions_from_comments(parsed.source_code.comments),
    )


def read_source_file(project: Project, path: Path) -> SourceFile | None:
    """Read and parse `path`; unreadable files are logged and skipped."""

    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("skipping unreadable file %s: %s", path, exc)
        return None
    return source_file_from_text(project, path, text)
