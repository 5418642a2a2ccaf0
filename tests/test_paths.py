from __future__ import annotations

from pathlib import Path

import pytest

from formula_installer.lib.paths import PathViolation, entry_subpath, join_subpath, project_path, split_subpath


def test_project_path_nests_import_path_under_src(tmp_path: Path) -> None:
    p = project_path(tmp_path, "github.com/dathan/go-grpc-video-call-manager")
    assert p == tmp_path / "src" / "github.com" / "dathan" / "go-grpc-video-call-manager"


def test_split_subpath_segments() -> None:
    assert split_subpath("bin/example1") == ["bin", "example1"]


@pytest.mark.parametrize(
    "rel",
    ["", "  ", "/etc/passwd", "../x", "a/../../x", "a//b", "a/./b", "a/", "a\\b", "a\0b"],
)
def test_split_subpath_rejects_unsafe_paths(rel: str) -> None:
    with pytest.raises(PathViolation):
        split_subpath(rel)


def test_join_subpath_rejects_symlink_escape(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    (root / "link").symlink_to(tmp_path)

    with pytest.raises(PathViolation, match="escapes"):
        join_subpath(root, "link/outside")


def test_entry_subpath_does_not_follow_final_symlink(tmp_path: Path) -> None:
    root = tmp_path / "bin"
    root.mkdir()
    (root / "tool").symlink_to(tmp_path / "elsewhere" / "tool")

    assert entry_subpath(root, "tool") == root / "tool"

    (root / "sub").symlink_to(tmp_path)
    with pytest.raises(PathViolation, match="escapes"):
        entry_subpath(root, "sub/tool")


def test_join_subpath_allows_missing_targets(tmp_path: Path) -> None:
    assert join_subpath(tmp_path, "bin/example1") == tmp_path / "bin" / "example1"
