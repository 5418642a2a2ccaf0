from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _state_home() -> Path:
    return Path(os.environ.get("XDG_STATE_HOME") or Path.home() / ".local" / "state")


@dataclass(frozen=True)
class Paths:
    prefix_default: str = "/usr/local/bin"
    state_dir: str = field(default_factory=lambda: str(_state_home() / "formula-installer"))
    log_default: str = field(default_factory=lambda: str(_state_home() / "formula-installer" / "install.log"))

    def receipt_for(self, formula_name: str) -> str:
        return str(Path(self.state_dir) / "receipts" / f"{formula_name}.json")


PATHS = Paths()
