from __future__ import annotations

import contextlib
import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from .context import InstallCtx, build_env_for
from .formula import Formula, load_formula
from .lib.builder import Builder, MakeBuilder
from .lib.fetch import Fetcher, fetcher_for
from .lib.verify import Verifier, verifier_for
from .pipeline import run_pipeline
from .source import SourceLocation
from .state_store import ensure_defaults
from .steps import (
    AcquireWorkspaceStep,
    BuildStep,
    FetchSourceStep,
    InstallBinaryStep,
    MaterializeProjectStep,
    ResolveArtifactStep,
    VerifyStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        AcquireWorkspaceStep(),
        FetchSourceStep(),
        MaterializeProjectStep(),
        BuildStep(),
        ResolveArtifactStep(),
        InstallBinaryStep(),
        VerifyStep(),
    ]


@dataclass(frozen=True)
class InstallResult:
    installed_binary: Path
    ran_steps: List[str]
    state: Dict[str, Any]


@contextlib.contextmanager
def staging_dir(name: str, *, keep: bool = False) -> Iterator[Path]:
    """A fresh private directory for one install, removed on every exit path."""
    path = Path(tempfile.mkdtemp(prefix=f"formula-{name}-"))
    try:
        yield path
    finally:
        if keep:
            logger.info("Keeping staging directory %s", path)
        else:
            shutil.rmtree(path, ignore_errors=True)


def install(
    source: SourceLocation,
    prefix: str | Path,
    *,
    formula: Optional[Formula] = None,
    fetcher: Optional[Fetcher] = None,
    builder: Optional[Builder] = None,
    verifier: Optional[Verifier] = None,
    state: Optional[Dict[str, Any]] = None,
    timeout_s: Optional[float] = None,
    require_pinned: bool = False,
    keep_workspace: bool = False,
) -> InstallResult:
    """Fetch, build and install one formula's binary into prefix.

    Collaborators default to the real ones (git or local copy, make, the
    formula's smoke test). state is the receipt mapping and is updated in
    place, including on failure. Raises an InstallError subclass naming the
    first step that failed.
    """

    formula = formula or load_formula()
    state = ensure_defaults(state if state is not None else {})
    state["formula"] = {"name": formula.name, "version": formula.full_version}

    with staging_dir(formula.name, keep=keep_workspace) as staging:
        if keep_workspace:
            state["execution"]["paths"]["kept_staging_dir"] = str(staging)

        ctx = InstallCtx(
            formula=formula,
            source=source,
            prefix=Path(prefix).expanduser().absolute(),
            staging_dir=staging,
            fetcher=fetcher or fetcher_for(source, timeout_s=timeout_s),
            builder=builder
            or MakeBuilder(env=build_env_for(formula, staging / "workspace"), timeout_s=timeout_s),
            verifier=verifier or verifier_for(formula.test_args, timeout_s=timeout_s),
            require_pinned=require_pinned,
        )

        result = run_pipeline(ctx=ctx, state=state, steps=build_steps())
        return InstallResult(
            installed_binary=ctx.installed_binary,
            ran_steps=result.ran_steps,
            state=result.state,
        )
