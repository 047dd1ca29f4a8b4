from __future__ import annotations

from pathlib import Path

import pytest

from strictlines.config import StrictLinesConfig
from strictlines.project import Project


@pytest.fixture()
def project(tmp_path: Path) -> Project:
    return Project(root=tmp_path, scan_path=tmp_path, config=StrictLinesConfig())
