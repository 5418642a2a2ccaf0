from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol

from ..errors import VerificationError
from .command import run_cmd

logger = logging.getLogger(__name__)


class Verifier(Protocol):
    def verify(self, binary: Path) -> None:
        ...


class NoopVerifier:
    """Placeholder smoke test that always passes."""

    def verify(self, binary: Path) -> None:
        logger.info("No smoke test defined for %s; skipping", binary)


@dataclass
class CommandVerifier:
    """Run the installed binary with self-check arguments; require exit 0."""

    args: List[str] = field(default_factory=list)
    timeout_s: Optional[float] = None

    def verify(self, binary: Path) -> None:
        res = run_cmd([str(binary), *self.args], check=False, timeout_s=self.timeout_s)
        if res.timed_out:
            raise VerificationError(f"Smoke test timed out after {self.timeout_s}s", output=res.output)
        if res.returncode != 0:
            raise VerificationError(
                f"Smoke test exited with status {res.returncode}",
                returncode=res.returncode,
                output=res.output,
            )


def verifier_for(test_args: Optional[List[str]], *, timeout_s: Optional[float] = None) -> Verifier:
    if test_args is None:
        return NoopVerifier()
    return CommandVerifier(args=list(test_args), timeout_s=timeout_s)
