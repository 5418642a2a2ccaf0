from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .formula import Formula
from .lib.builder import BuildEnv, Builder
from .lib.fetch import Fetcher
from .lib.paths import entry_subpath, join_subpath, project_path
from .lib.verify import Verifier
from .source import SourceLocation


@dataclass(frozen=True)
class InstallCtx:
    formula: Formula
    source: SourceLocation
    prefix: Path
    staging_dir: Path
    fetcher: Fetcher
    builder: Builder
    verifier: Verifier
    require_pinned: bool = False

    @property
    def workspace_root(self) -> Path:
        return self.staging_dir / "workspace"

    @property
    def source_dir(self) -> Path:
        return self.staging_dir / "source"

    @property
    def project_path(self) -> Path:
        return project_path(self.workspace_root, self.formula.import_path)

    @property
    def artifact_path(self) -> Path:
        return join_subpath(self.project_path, self.formula.artifact)

    @property
    def installed_binary(self) -> Path:
        return entry_subpath(self.prefix, self.formula.binary_name)

    @property
    def build_env(self) -> BuildEnv:
        return build_env_for(self.formula, self.workspace_root)


def build_env_for(formula: Formula, workspace_root: Path) -> BuildEnv:
    return BuildEnv(
        toolchain_var=formula.toolchain_env_var,
        workspace_root=workspace_root,
        extra=formula.toolchain_env,
    )
