from __future__ import annotations

import logging
from pathlib import Path

import pytest

from formula_installer.formula import Formula
from formula_installer.source import SourceLocation

from .helpers import make_formula


@pytest.fixture
def formula() -> Formula:
    return make_formula()


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    src = tmp_path / "upstream"
    (src / "cmd" / "example1").mkdir(parents=True)
    (src / "Makefile").write_text("build:\n\tgo build -o bin/example1 ./cmd/example1\n", encoding="utf-8")
    (src / "cmd" / "example1" / "main.go").write_text("package main\n\nfunc main() {}\n", encoding="utf-8")
    (src / ".git").mkdir()
    (src / ".git" / "HEAD").write_text("ref: refs/heads/master\n", encoding="utf-8")
    return src


@pytest.fixture
def source(source_tree: Path) -> SourceLocation:
    return SourceLocation(url=str(source_tree), ref="master")


@pytest.fixture
def prefix(tmp_path: Path) -> Path:
    return tmp_path / "opt" / "pkg" / "bin"


@pytest.fixture(autouse=True)
def _reset_logging():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for h in root.handlers[:]:
        if h not in before:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    for attr in ("_formula_installer_configured", "_formula_installer_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)
