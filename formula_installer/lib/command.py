from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: Optional[int]
    output: str
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    timeout_s: float | None = None,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - stdout and stderr are captured together, in the order the child wrote them.
    - env is layered over the current environment for the child only.
    - A timeout kills the child; with check=False it is reported as timed_out.
    """

    argv_list = list(argv)
    logger.info("CMD %s%s", fmt_argv(argv_list), f" (cwd={cwd})" if cwd else "")

    try:
        p = subprocess.run(
            argv_list,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
            timeout=timeout_s,
        )
    except subprocess.TimeoutExpired as e:
        out = e.output or ""
        if isinstance(out, bytes):
            out = out.decode("utf-8", errors="replace")
        logger.warning("Command timed out after %ss: %s", timeout_s, fmt_argv(argv_list))
        result = CmdResult(argv=argv_list, returncode=None, output=out, timed_out=True)
        if check:
            raise RuntimeError(f"Command timed out after {timeout_s}s: {fmt_argv(argv_list)}\n{out}") from e
        return result

    if p.stdout:
        logger.debug("OUTPUT %s", p.stdout.strip())

    if check and p.returncode != 0:
        raise RuntimeError(f"Command failed ({p.returncode}): {fmt_argv(argv_list)}\n{p.stdout}")

    return CmdResult(argv=argv_list, returncode=p.returncode, output=p.stdout)
