from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

FORMULAS_DIR = Path(__file__).resolve().parent / "formulas"
DEFAULT_FORMULA = "go-project-template"


@dataclass(frozen=True)
class Formula:
    raw: Dict[str, Any]

    @property
    def name(self) -> str:
        name = self.raw.get("name")
        if not name:
            raise ValueError("formula is missing 'name'")
        return str(name)

    @property
    def desc(self) -> str:
        return str(self.raw.get("desc") or "")

    @property
    def homepage(self) -> str:
        return str(self.raw.get("homepage") or "")

    @property
    def url(self) -> Optional[str]:
        return self.raw.get("url") or None

    @property
    def head(self) -> Optional[str]:
        return self.raw.get("head") or self.url

    @property
    def version(self) -> str:
        return str(self.raw.get("version") or "HEAD")

    @property
    def revision(self) -> int:
        return int(self.raw.get("revision") or 0)

    @property
    def import_path(self) -> str:
        value = self.raw.get("import_path")
        if not value:
            raise ValueError(f"formula {self.name!r} is missing 'import_path'")
        return str(value)

    @property
    def toolchain_env_var(self) -> str:
        return str(((self.raw.get("toolchain") or {}).get("env_var")) or "GOPATH")

    @property
    def toolchain_env(self) -> Dict[str, str]:
        extra = (self.raw.get("toolchain") or {}).get("env") or {}
        return {str(k): str(v) for k, v in extra.items()}

    @property
    def build_dependencies(self) -> List[str]:
        return [str(d) for d in ((self.raw.get("depends_on") or {}).get("build") or [])]

    @property
    def build_target(self) -> str:
        return str(((self.raw.get("build") or {}).get("target")) or "build")

    @property
    def artifact(self) -> str:
        value = (self.raw.get("build") or {}).get("artifact")
        if not value:
            raise ValueError(f"formula {self.name!r} is missing 'build.artifact'")
        return str(value)

    @property
    def binary_name(self) -> str:
        value = (self.raw.get("install") or {}).get("name")
        return str(value) if value else Path(self.artifact).name

    @property
    def test_args(self) -> Optional[List[str]]:
        """Arguments for the smoke test, or None for the placeholder check."""
        args = (self.raw.get("test") or {}).get("args")
        if args is None:
            return None
        if not isinstance(args, list):
            raise ValueError(f"formula {self.name!r}: 'test.args' must be a list, got {type(args).__name__}")
        return [str(a) for a in args]

    @property
    def full_version(self) -> str:
        if self.revision:
            return f"{self.version}_{self.revision}"
        return self.version

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "desc": self.desc,
            "homepage": self.homepage,
            "url": self.url,
            "head": self.head,
            "version": self.full_version,
            "import_path": self.import_path,
            "toolchain_env_var": self.toolchain_env_var,
            "build_dependencies": self.build_dependencies,
            "build_target": self.build_target,
            "artifact": self.artifact,
            "binary_name": self.binary_name,
            "test_args": self.test_args,
        }


def resolve_formula_path(name_or_path: Optional[str]) -> Path:
    """Map a bundled formula name (or an explicit file path) to a file."""
    if not name_or_path:
        name_or_path = DEFAULT_FORMULA
    p = Path(name_or_path)
    if p.suffix.lower() in {".yaml", ".yml"} or p.exists():
        return p
    return FORMULAS_DIR / f"{name_or_path}.yaml"


def load_formula(name_or_path: Optional[str] = None) -> Formula:
    p = resolve_formula_path(name_or_path)
    if not p.exists():
        raise FileNotFoundError(str(p))

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("formula must be YAML")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"formula must contain a mapping/object: {p}")

    formula = Formula(raw=raw)
    # Touch required keys so a broken formula fails before any work starts.
    _ = (formula.name, formula.import_path, formula.artifact, formula.test_args)
    return formula
