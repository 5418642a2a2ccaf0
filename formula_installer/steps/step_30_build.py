from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import InstallCtx
from ..errors import BuildError

logger = logging.getLogger(__name__)


def _listing(ctx: InstallCtx) -> str:
    lines = []
    for p in sorted(ctx.project_path.rglob("*")):
        if ".git" in p.parts:
            continue
        rel = p.relative_to(ctx.project_path)
        lines.append(f"{rel}/" if p.is_dir() else str(rel))
    return "\n".join(lines)


class BuildStep:
    step_id = "30_build"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        target = ctx.formula.build_target
        try:
            res = ctx.builder.run(ctx.project_path, target)
        except OSError as e:
            raise BuildError(f"Could not start build target {target!r}: {e}", returncode=None, output="") from e

        state.setdefault("execution", {})["build"] = {"target": target, "returncode": res.returncode}

        if res.timed_out:
            raise BuildError(f"Build target {target!r} timed out", returncode=res.returncode, output=res.output)
        if res.returncode != 0:
            raise BuildError(f"Build target {target!r} failed", returncode=res.returncode, output=res.output)

        logger.info("Build target %r succeeded", target)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Project tree after build:\n%s", _listing(ctx))
        return state
