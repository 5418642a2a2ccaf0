from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol

from .command import run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildEnv:
    """Environment handed to the build collaborator.

    Carries the toolchain root (e.g. GOPATH) explicitly instead of setting
    it on the installer's own process.
    """

    toolchain_var: str
    workspace_root: Path
    extra: Mapping[str, str] = field(default_factory=dict)

    def as_env(self) -> Dict[str, str]:
        env = dict(self.extra)
        env[self.toolchain_var] = str(self.workspace_root)
        return env


@dataclass(frozen=True)
class BuildResult:
    returncode: Optional[int]
    output: str
    timed_out: bool = False


class Builder(Protocol):
    def run(self, workdir: Path, target: str) -> BuildResult:
        ...


@dataclass
class MakeBuilder:
    env: BuildEnv
    make: str = "make"
    timeout_s: Optional[float] = None

    def run(self, workdir: Path, target: str) -> BuildResult:
        res = run_cmd(
            [self.make, target],
            check=False,
            env=self.env.as_env(),
            cwd=str(workdir),
            timeout_s=self.timeout_s,
        )
        return BuildResult(returncode=res.returncode, output=res.output, timed_out=res.timed_out)
