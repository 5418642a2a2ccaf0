from __future__ import annotations

from typing import Optional


class InstallError(RuntimeError):
    """Base class for failures that abort an install run.

    Each subclass names the step it belongs to and the CLI exit code used
    to report it.
    """

    step: str = "install"
    exit_code: int = 1

    def __init__(self, message: str, *, step: Optional[str] = None) -> None:
        if step is not None:
            self.step = step
        self.detail = message
        super().__init__(f"[{self.step}] {message}")


class FetchError(InstallError):
    step = "10_fetch_source"
    exit_code = 10


class LayoutError(InstallError):
    step = "20_materialize_project"
    exit_code = 11


class BuildError(InstallError):
    step = "30_build"
    exit_code = 12

    def __init__(self, message: str, *, returncode: Optional[int], output: str) -> None:
        self.returncode = returncode
        self.output = output
        text = f"{message} (exit status {returncode})"
        if output.strip():
            text += f"\n--- build output ---\n{output.rstrip()}"
        super().__init__(text)


class ArtifactMissingError(InstallError):
    step = "40_resolve_artifact"
    exit_code = 13

    def __init__(self, message: str, *, expected: str) -> None:
        self.expected = expected
        super().__init__(message)


class InstallWriteError(InstallError):
    step = "50_install_binary"
    exit_code = 14


class VerificationError(InstallError):
    step = "60_verify"
    exit_code = 15

    def __init__(self, message: str, *, returncode: Optional[int] = None, output: str = "") -> None:
        self.returncode = returncode
        self.output = output
        text = message
        if output.strip():
            text += f"\n{output.rstrip()}"
        super().__init__(text)
