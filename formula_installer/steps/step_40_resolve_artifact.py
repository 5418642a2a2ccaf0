from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import InstallCtx
from ..errors import ArtifactMissingError
from ..lib.fetch import sha256_file
from ..lib.paths import PathViolation, split_subpath

logger = logging.getLogger(__name__)


class ResolveArtifactStep:
    step_id = "40_resolve_artifact"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        expected = ctx.formula.artifact
        try:
            split_subpath(expected)
        except PathViolation as e:
            raise ArtifactMissingError(f"Invalid artifact path {expected!r}: {e}", expected=expected) from e
        try:
            artifact = ctx.artifact_path
        except PathViolation as e:
            raise ArtifactMissingError(
                f"Artifact {expected} resolves outside the project tree {ctx.project_path}",
                expected=expected,
            ) from e

        if not artifact.is_file():
            found = ""
            if artifact.parent.is_dir():
                names = sorted(p.name for p in artifact.parent.iterdir())
                found = f" (found in {artifact.parent.name}/: {', '.join(names) or 'nothing'})"
            raise ArtifactMissingError(
                f"Build reported success but {expected} was not produced{found}",
                expected=expected,
            )

        digest = sha256_file(artifact)
        logger.info("Artifact %s sha256:%s", artifact, digest)
        state.setdefault("execution", {})["artifact"] = {"path": str(artifact), "sha256": digest}
        return state
