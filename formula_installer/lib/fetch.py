"""Source collaborators: materialize a SourceLocation as a directory tree."""

from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from ..source import SourceLocation
from .assets import VCS_DIRS, copy_tree
from .command import run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    path: Path
    resolved_rev: Optional[str] = None


class Fetcher(Protocol):
    def fetch(self, source: SourceLocation, dest: Path) -> FetchResult:
        ...


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def dirhash(directory: Path) -> str:
    """Content hash of a directory tree, independent of file metadata.

    Files are sorted by relative path; each contributes
    sha256(relpath + "\\0" + contents) to an outer sha256. VCS directories
    are ignored.
    """
    files: list[str] = []
    for root, _dirs, filenames in os.walk(directory):
        for fname in filenames:
            rel = (Path(root) / fname).relative_to(directory)
            if any(p in VCS_DIRS for p in rel.parts):
                continue
            files.append(rel.as_posix())

    files.sort()

    outer = hashlib.sha256()
    for relpath in files:
        inner = hashlib.sha256()
        inner.update(relpath.encode("utf-8"))
        inner.update(b"\0")
        inner.update((directory / relpath).read_bytes())
        outer.update(inner.digest())
    return outer.hexdigest()


def verify_digest(source: SourceLocation, tree: Path) -> None:
    expected = source.expected_digest()
    if expected is None:
        return
    actual = dirhash(tree)
    if actual != expected:
        raise ValueError(
            f"Hash mismatch for {source.url} at {source.checkout}\n"
            f"  Expected: sha256:{expected}\n"
            f"  Got:      sha256:{actual}\n"
            f"\n"
            f"The source tree contents have changed. Verify and update the hash."
        )


@dataclass
class LocalFetcher:
    """Copy a local directory (plain path or file:// URL).

    A rev is not checked out here; the directory must be a git work tree
    whose HEAD already is that commit.
    """

    timeout_s: Optional[float] = None

    def fetch(self, source: SourceLocation, dest: Path) -> FetchResult:
        src = source.local_path
        if not src.is_dir():
            raise FileNotFoundError(f"Source directory not found: {src}")

        resolved = None
        if source.rev:
            head = run_cmd(["git", "-C", str(src), "rev-parse", "HEAD"], timeout_s=self.timeout_s)
            resolved = head.output.strip().lower()
            if not resolved.startswith(source.rev.lower()):
                raise ValueError(f"Local source {src} is at {resolved}, not the requested rev {source.rev}")

        logger.info("Copying local source %s", src)
        copy_tree(str(src), str(dest))
        verify_digest(source, dest)
        return FetchResult(path=dest, resolved_rev=resolved)


@dataclass
class GitFetcher:
    timeout_s: Optional[float] = None

    def fetch(self, source: SourceLocation, dest: Path) -> FetchResult:
        if source.rev:
            # A commit is not a valid --branch argument; clone fully, then check it out.
            run_cmd(["git", "clone", "--quiet", source.url, str(dest)], timeout_s=self.timeout_s)
            run_cmd(
                ["git", "-C", str(dest), "checkout", "--quiet", "--detach", source.rev],
                timeout_s=self.timeout_s,
            )
        else:
            run_cmd(
                ["git", "clone", "--quiet", "--depth", "1", "--branch", source.ref, source.url, str(dest)],
                timeout_s=self.timeout_s,
            )

        head = run_cmd(["git", "-C", str(dest), "rev-parse", "HEAD"], timeout_s=self.timeout_s)
        resolved = head.output.strip()
        logger.info("Fetched %s at %s (%s)", source.url, source.checkout, resolved)

        verify_digest(source, dest)
        return FetchResult(path=dest, resolved_rev=resolved)


def fetcher_for(source: SourceLocation, *, timeout_s: Optional[float] = None) -> Fetcher:
    if source.is_local:
        return LocalFetcher(timeout_s=timeout_s)
    return GitFetcher(timeout_s=timeout_s)
