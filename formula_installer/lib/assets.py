from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

VCS_DIRS = frozenset({".git", ".hg", ".svn"})


def copy_tree(src: str, dst: str, *, skip: frozenset[str] = VCS_DIRS) -> int:
    """Copy the contents of src into dst, returning the number of files copied.

    Top-level entries named in skip (VCS metadata) are not copied. Symlinks
    are copied as links.
    """
    s = Path(src)
    d = Path(dst)
    if not s.is_dir():
        raise FileNotFoundError(src)

    def _ignore(directory: str, names: list[str]) -> set[str]:
        if Path(directory) == s:
            return {n for n in names if n in skip}
        return set()

    shutil.copytree(s, d, symlinks=True, ignore=_ignore, dirs_exist_ok=True)

    copied = sum(len(files) for _root, _dirs, files in os.walk(d))
    logger.debug("Copied %d files %s -> %s", copied, str(s), str(d))
    return copied


def install_file(src: str, dest: str, *, mode: int = 0o755) -> Path:
    """Copy src to dest through a temp file in dest's directory, then rename.

    The rename is atomic, so dest is either the previous file or the complete
    new one, never a partial copy.
    """
    s = Path(src)
    d = Path(dest)
    if d.is_dir() and not d.is_symlink():
        raise IsADirectoryError(f"Install target is a directory: {d}")

    fd, tmp_name = tempfile.mkstemp(dir=str(d.parent), prefix=f".{d.name}.", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as out, s.open("rb") as inp:
            shutil.copyfileobj(inp, out)
            out.flush()
            os.fsync(out.fileno())
        os.chmod(tmp, mode)
        os.replace(tmp, d)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return d
