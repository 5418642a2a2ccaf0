from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from formula_installer.formula import Formula
from formula_installer.lib.builder import BuildResult

IMPORT_PATH = "github.com/example/proj"
ARTIFACT_BYTES = b"#!/bin/sh\necho example1\n"


class FakeBuilder:
    """Stands in for make: writes the given files under workdir."""

    def __init__(
        self,
        files: Optional[Dict[str, bytes]] = None,
        *,
        returncode: Optional[int] = 0,
        output: str = "",
        timed_out: bool = False,
    ) -> None:
        self.files = {"bin/example1": ARTIFACT_BYTES} if files is None else files
        self.returncode = returncode
        self.output = output
        self.timed_out = timed_out
        self.calls: List[Tuple[Path, str]] = []

    def run(self, workdir: Path, target: str) -> BuildResult:
        self.calls.append((workdir, target))
        assert (workdir / "Makefile").exists()
        if self.returncode == 0 and not self.timed_out:
            for rel, data in self.files.items():
                out = workdir / rel
                out.parent.mkdir(parents=True, exist_ok=True)
                out.write_bytes(data)
        return BuildResult(returncode=self.returncode, output=self.output, timed_out=self.timed_out)


class CountingVerifier:
    def __init__(self) -> None:
        self.calls: List[Path] = []

    def verify(self, binary: Path) -> None:
        self.calls.append(binary)


def make_formula(**overrides) -> Formula:
    raw = {
        "name": "example",
        "version": "master",
        "revision": 1,
        "import_path": IMPORT_PATH,
        "toolchain": {"env_var": "GOPATH"},
        "depends_on": {"build": ["make"]},
        "build": {"target": "build", "artifact": "bin/example1"},
        "install": {"name": "example1"},
        "test": {"args": None},
    }
    raw.update(overrides)
    return Formula(raw=raw)
