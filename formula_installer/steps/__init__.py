from .step_00_acquire_workspace import AcquireWorkspaceStep
from .step_10_fetch_source import FetchSourceStep
from .step_20_materialize_project import MaterializeProjectStep
from .step_30_build import BuildStep
from .step_40_resolve_artifact import ResolveArtifactStep
from .step_50_install_binary import InstallBinaryStep
from .step_60_verify import VerifyStep

__all__ = [
    "AcquireWorkspaceStep",
    "FetchSourceStep",
    "MaterializeProjectStep",
    "BuildStep",
    "ResolveArtifactStep",
    "InstallBinaryStep",
    "VerifyStep",
]
