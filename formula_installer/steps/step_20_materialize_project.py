from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import InstallCtx
from ..errors import LayoutError
from ..lib.assets import VCS_DIRS, copy_tree
from ..lib.paths import PathViolation

logger = logging.getLogger(__name__)


class MaterializeProjectStep:
    """Nest the fetched tree at workspace/src/<import path>."""

    step_id = "20_materialize_project"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        try:
            project = ctx.project_path
        except PathViolation as e:
            raise LayoutError(f"Invalid import path {ctx.formula.import_path!r}: {e}") from e

        src = ctx.source_dir
        try:
            entries = [p for p in src.iterdir() if p.name not in VCS_DIRS]
        except OSError as e:
            raise LayoutError(f"Source tree {src} is not readable: {e}") from e
        if not entries:
            raise LayoutError(f"Source tree {src} is empty")

        if project.exists() and (not project.is_dir() or any(project.iterdir())):
            raise LayoutError(f"Project path {project} already exists")

        try:
            copied = copy_tree(str(src), str(project))
        except OSError as e:
            raise LayoutError(f"Cannot populate {project}: {e}") from e

        logger.info("Placed %d files at %s", copied, project)
        state.setdefault("execution", {}).setdefault("paths", {})["project_path"] = str(project)
        return state
