"""Formula installer (single recipe, step-driven).

Core design goals:
- Linear steps: acquire workspace, fetch, layout, build, resolve artifact,
  install, verify
- First failure aborts the run and names its step
- Toolchain root passed explicitly to the build, never set process-wide
- Atomic install of the binary
- Centralized logging and a receipt for every run
"""

from .errors import (
    ArtifactMissingError,
    BuildError,
    FetchError,
    InstallError,
    InstallWriteError,
    LayoutError,
    VerificationError,
)
from .formula import Formula, load_formula
from .installer import InstallResult, install
from .source import SourceLocation

__all__ = [
    "ArtifactMissingError",
    "BuildError",
    "FetchError",
    "Formula",
    "InstallError",
    "InstallResult",
    "InstallWriteError",
    "LayoutError",
    "SourceLocation",
    "VerificationError",
    "install",
    "load_formula",
]
