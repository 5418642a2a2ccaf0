from __future__ import annotations

import logging
import shutil
from typing import Any, Dict

from ..context import InstallCtx
from ..errors import LayoutError

logger = logging.getLogger(__name__)


class AcquireWorkspaceStep:
    step_id = "00_acquire_workspace"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        try:
            ctx.workspace_root.mkdir(parents=True, exist_ok=False)
        except OSError as e:
            raise LayoutError(f"Cannot create workspace {ctx.workspace_root}: {e}", step=self.step_id) from e

        env = ctx.build_env.as_env()
        logger.info("Workspace %s=%s", ctx.build_env.toolchain_var, ctx.workspace_root)

        # Build tools are assumed present; report the gap without failing.
        missing = [tool for tool in ctx.formula.build_dependencies if shutil.which(tool) is None]
        for tool in missing:
            logger.warning("Build dependency %r not found on PATH", tool)

        paths = state.setdefault("execution", {}).setdefault("paths", {})
        paths["staging_dir"] = str(ctx.staging_dir)
        paths["workspace_root"] = str(ctx.workspace_root)
        state["execution"]["build_env"] = env
        state["execution"]["missing_build_dependencies"] = missing
        return state
