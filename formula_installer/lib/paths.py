from __future__ import annotations

from pathlib import Path, PurePosixPath


class PathViolation(ValueError):
    pass


def split_subpath(rel: str) -> list[str]:
    """Split a slash-separated relative path into validated segments.

    Rejects absolute paths, empty segments, '.'/'..' segments and
    backslashes so the result can never point outside its root.
    """
    if not rel or not rel.strip():
        raise PathViolation("Empty path")
    if "\\" in rel or "\0" in rel:
        raise PathViolation(f"Invalid characters in path: {rel!r}")
    if PurePosixPath(rel).is_absolute():
        raise PathViolation(f"Absolute paths are not allowed: {rel}")

    parts = rel.split("/")
    for part in parts:
        if part in {"", ".", ".."}:
            raise PathViolation(f"Invalid path segment {part!r} in {rel!r}")
    return parts


def join_subpath(root: str | Path, rel: str) -> Path:
    """Join root and a validated relative path; the result stays under root."""
    base = Path(root)
    candidate = base.joinpath(*split_subpath(rel))
    try:
        candidate.resolve().relative_to(base.resolve())
    except ValueError as e:
        raise PathViolation(f"Path escapes {base}: {rel}") from e
    return candidate


def entry_subpath(root: str | Path, rel: str) -> Path:
    """Like join_subpath, but the last segment is never resolved.

    The entry itself may be a symlink pointing anywhere (it gets replaced,
    not followed); only its parent directory must stay under root.
    """
    base = Path(root)
    parts = split_subpath(rel)
    parent = base.joinpath(*parts[:-1])
    try:
        parent.resolve().relative_to(base.resolve())
    except ValueError as e:
        raise PathViolation(f"Path escapes {base}: {rel}") from e
    return parent / parts[-1]


def project_path(workspace_root: str | Path, import_path: str) -> Path:
    """Conventional location of a project inside a toolchain workspace.

    github.com/owner/repo -> <workspace_root>/src/github.com/owner/repo
    """
    return join_subpath(Path(workspace_root) / "src", import_path)
