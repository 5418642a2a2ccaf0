from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import InstallCtx
from ..errors import VerificationError

logger = logging.getLogger(__name__)


class VerifyStep:
    step_id = "60_verify"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        binary = ctx.installed_binary
        try:
            ctx.verifier.verify(binary)
        except OSError as e:
            raise VerificationError(f"Could not run smoke test for {binary}: {e}") from e

        logger.info("Post-install check passed")
        state.setdefault("installed", {})["verified"] = True
        return state
