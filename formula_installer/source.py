from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

_COMMIT_RE = re.compile(r"^[0-9a-f]{40}$")


@dataclass(frozen=True)
class SourceLocation:
    """Where a project's source tree comes from.

    ref is the branch or tag to fetch. rev pins an exact commit and sha256
    pins the content of the fetched tree; without either the fetch follows
    whatever the ref points at today.
    """

    url: str
    ref: str = "master"
    rev: Optional[str] = None
    sha256: Optional[str] = None

    @property
    def is_local(self) -> bool:
        parsed = urlparse(self.url)
        if parsed.scheme == "file":
            return True
        return parsed.scheme == "" and Path(self.url).expanduser().exists()

    @property
    def local_path(self) -> Path:
        parsed = urlparse(self.url)
        if parsed.scheme == "file":
            return Path(parsed.path)
        return Path(self.url).expanduser()

    @property
    def is_pinned(self) -> bool:
        return bool(self.sha256) or bool(self.rev and _COMMIT_RE.match(self.rev.lower()))

    @property
    def checkout(self) -> str:
        return self.rev or self.ref

    def expected_digest(self) -> Optional[str]:
        if not self.sha256:
            return None
        value = self.sha256.strip().lower()
        if value.startswith("sha256:"):
            value = value[len("sha256:"):]
        return value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "ref": self.ref,
            "rev": self.rev,
            "sha256": self.sha256,
            "pinned": self.is_pinned,
        }
