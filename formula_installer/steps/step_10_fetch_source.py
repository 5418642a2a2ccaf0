from __future__ import annotations

import logging
import subprocess
from typing import Any, Dict

from ..context import InstallCtx
from ..errors import FetchError

logger = logging.getLogger(__name__)


class FetchSourceStep:
    step_id = "10_fetch_source"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        source = ctx.source
        state["source"] = source.to_dict()

        if not source.is_pinned:
            if ctx.require_pinned:
                raise FetchError(
                    f"Source {source.url} at {source.ref!r} is not pinned; "
                    "pass a full commit (--rev) or a content hash (--sha256)"
                )
            logger.warning(
                "Source %s at %r is not pinned; the install is not reproducible",
                source.url,
                source.ref,
            )

        try:
            result = ctx.fetcher.fetch(source, ctx.source_dir)
        except (RuntimeError, OSError, ValueError, subprocess.SubprocessError) as e:
            raise FetchError(f"Failed to fetch {source.url} at {source.checkout}: {e}") from e

        state["source"]["resolved_rev"] = result.resolved_rev
        state.setdefault("execution", {}).setdefault("paths", {})["source_dir"] = str(result.path)
        return state
