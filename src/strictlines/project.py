"""Locating the project root, its configuration and the files to check."""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from strictlines.config import StrictLinesConfig, load_config

logger = logging.getLogger(__name__)

# Installed, bundled or generated JavaScript; never walked.
VENDORED_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "bower_components",
        "jspm_packages",
        "coverage",
        "dist",
        "build",
    }
)


@dataclass(frozen=True, slots=True)
class Project:
    root: Path
    scan_path: Path
    config: StrictLinesConfig

    def relative(self, path: Path) -> str:
        """POSIX path of `path` relative to the project root, for reports."""

        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    def files(self) -> list[Path]:
        """
        Files to check, sorted.

        A file named explicitly is checked whatever its extension; directories
        are walked for the configured extensions. Ignore patterns apply to both.
        """

        if self.scan_path.is_file():
            candidates: Iterator[Path] = iter([self.scan_path])
        else:
            extensions = set(self.config.extensions)
            candidates = (p for p in _walk(self.scan_path) if p.suffix.lower() in extensions)

        return sorted(p for p in candidates if not self.is_ignored(p))

    def is_ignored(self, path: Path) -> bool:
        """
        Whether `path` matches one of the `ignore.paths` patterns.

        - `vendor/` (trailing slash): a directory prefix from the project root.
        - `src/**/gen/*.js` (contains a slash): a glob over the relative path.
        - `*.min.js`, `fixtures` (no slash): a glob over any single path segment.

        Paths outside the project root are never ignored.
        """

        try:
            relative = path.relative_to(self.root).as_posix()
        except ValueError:
            return False
        return any(_ignored_by(relative, pattern) for pattern in self.config.ignore.paths)


def open_project(scan_path: Path, *, config: StrictLinesConfig | None = None) -> Project:
    """
    Resolve `scan_path` into a project.

    The root is the nearest directory at or above `scan_path` holding a
    pyproject.toml, else the scanned directory. Configuration is read from the
    root unless `config` is given.
    """

    scan_path = scan_path.resolve()
    start = scan_path if scan_path.is_dir() else scan_path.parent
    root = next((d for d in (start, *start.parents) if (d / "pyproject.toml").is_file()), start)
    if config is None:
        config = load_config(root)
    return Project(root=root, scan_path=scan_path, config=config)


def _walk(directory: Path) -> Iterator[Path]:
    try:
        entries = list(os.scandir(directory))
    except OSError as exc:
        logger.warning("cannot list %s: %s", directory, exc)
        return
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            if entry.name not in VENDORED_DIRS:
                yield from _walk(Path(entry.path))
        elif entry.is_file():
            yield Path(entry.path)


def _ignored_by(relative: str, pattern: str) -> bool:
    pattern = pattern.replace("\\", "/").removeprefix("./")
    if not pattern:
        return False
    if pattern.endswith("/"):
        return relative.startswith(pattern)
    if "/" in pattern:
        return fnmatch.fnmatchcase(relative, pattern)
    return any(fnmatch.fnmatchcase(segment, pattern) for segment in relative.split("/"))
