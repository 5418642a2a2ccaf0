from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import InstallCtx
from ..errors import InstallWriteError
from ..lib.assets import install_file
from ..lib.fetch import sha256_file
from ..lib.paths import PathViolation

logger = logging.getLogger(__name__)


class InstallBinaryStep:
    step_id = "50_install_binary"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        prefix = ctx.prefix
        try:
            dest = ctx.installed_binary
        except PathViolation as e:
            raise InstallWriteError(f"Invalid binary name {ctx.formula.binary_name!r}: {e}") from e

        try:
            prefix.mkdir(parents=True, exist_ok=True)
            install_file(str(ctx.artifact_path), str(dest))
        except OSError as e:
            raise InstallWriteError(f"Cannot install {dest}: {e}") from e

        logger.info("Installed %s", dest)
        state["installed"] = {
            "path": str(dest),
            "sha256": sha256_file(dest),
            "formula": ctx.formula.name,
            "version": ctx.formula.full_version,
        }
        return state
