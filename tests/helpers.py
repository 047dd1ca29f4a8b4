from __future__ import annotations

from strictlines.engine.detection import build_dispatch_table, check_source
from strictlines.engine.source_file import SourceFile, read_source_file, source_file_from_text
from strictlines.engine.types import Violation
from strictlines.project import Project
from strictlines.rules.lines_around_directive import LinesAroundDirective


def make_source(project: Project, *, relpath: str, content: str) -> SourceFile:
    path = project.root / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    source = read_source_file(project, path)
    assert source is not None
    return source


def check_js(project: Project, code: str, option: object | None = None) -> list[Violation]:
    source = source_file_from_text(project, project.root / "example.js", code)
    table = build_dispatch_table([LinesAroundDirective().configure(option)])
    return list(check_source(source, table, project.config).violations)


def messages(violations: list[Violation]) -> list[str]:
    return [v.message for v in violations]
