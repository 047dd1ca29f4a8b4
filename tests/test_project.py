from __future__ import annotations

from pathlib import Path

from strictlines.config import IgnoreConfig, StrictLinesConfig
from strictlines.engine.source_file import read_source_file, source_lines
from strictlines.project import Project, open_project


def _touch(path: Path, content: str = "var x;\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_files_filters_extensions_vendored_dirs_and_ignores(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[tool.strictlines.ignore]\npaths = ["*.min.js"]\n', encoding="utf-8")
    keep = [_touch(tmp_path / "a.js"), _touch(tmp_path / "lib" / "b.mjs"), _touch(tmp_path / "c.CJS")]
    _touch(tmp_path / "d.ts")
    _touch(tmp_path / "app.min.js")
    _touch(tmp_path / "node_modules" / "dep" / "index.js")
    _touch(tmp_path / "lib" / "coverage" / "report.js")

    project = open_project(tmp_path)
    assert project.root == tmp_path.resolve()
    assert project.files() == sorted(p.resolve() for p in keep)


def test_is_ignored_patterns(tmp_path: Path) -> None:
    config = StrictLinesConfig(ignore=IgnoreConfig(paths=("vendor/", "*.min.js", "src/**/gen/*.js", "generated")))
    project = Project(root=tmp_path, scan_path=tmp_path, config=config)

    assert project.is_ignored(tmp_path / "vendor" / "a.js")
    assert project.is_ignored(tmp_path / "lib" / "app.min.js")
    assert project.is_ignored(tmp_path / "src" / "x" / "gen" / "b.js")
    assert project.is_ignored(tmp_path / "lib" / "generated" / "c.js")
    assert not project.is_ignored(tmp_path / "src" / "app.js")
    assert not project.is_ignored(tmp_path / "lib" / "vendor" / "a.js")
    assert not project.is_ignored(Path("/elsewhere/vendor/a.js"))


def test_explicit_file_is_checked_regardless_of_extension(tmp_path: Path) -> None:
    script = _touch(tmp_path / "bin" / "tool", "#!/usr/bin/env node\n'use strict';\n")
    assert open_project(script).files() == [script.resolve()]


def test_root_is_nearest_pyproject_and_config_is_loaded_from_it(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[tool.strictlines]\nextensions = [".es6"]\n', encoding="utf-8")
    nested = tmp_path / "packages" / "web"
    nested.mkdir(parents=True)
    project = open_project(nested)
    assert project.root == tmp_path.resolve()
    assert project.scan_path == nested.resolve()
    assert project.config.extensions == (".es6",)


def test_explicit_config_skips_loading(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.strictlines\n", encoding="utf-8")
    config = StrictLinesConfig(extensions=(".js",))
    assert open_project(tmp_path, config=config).config is config


def test_relative_paths(tmp_path: Path) -> None:
    project = Project(root=tmp_path, scan_path=tmp_path, config=StrictLinesConfig())
    assert project.relative(tmp_path / "lib" / "app.js") == "lib/app.js"
    assert project.relative(Path("/elsewhere/app.js")) == "/elsewhere/app.js"


def test_source_lines_break_on_newline_only() -> None:
    assert source_lines("a\fb\r\nc\x85d\n") == ("a\fb", "c\x85d", "")


def test_read_source_file_parses_and_collects_suppressions(project: Project) -> None:
    path = _touch(project.root / "a.js", "'use strict'; // strictlines: disable=all\nvar x;\n")
    source = read_source_file(project, path)
    assert source is not None
    assert source.relative_path == "a.js"
    assert source.lines[:2] == ("'use strict'; // strictlines: disable=all", "var x;")
    assert source.parsed.has_syntax_errors is False
    assert source.suppressions.is_suppressed("lines-around-directive", line=1)


def test_unreadable_file_is_skipped_with_warning(project: Project, caplog) -> None:  # type: ignore[no-untyped-def]
    with caplog.at_level("WARNING", logger="strictlines.engine.source_file"):
        assert read_source_file(project, project.root / "missing.js") is None
    assert "unreadable" in caplog.text
