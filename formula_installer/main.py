from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, Optional

import yaml

from .errors import InstallError
from .formula import load_formula
from .installer import InstallResult, install
from .lib.env import PATHS
from .logging_utils import configure_logging
from .source import SourceLocation
from .state_store import ensure_defaults, record_error, save_receipt

logger = logging.getLogger(__name__)


def run(
    *,
    source: str,
    ref: str,
    prefix: str,
    rev: Optional[str] = None,
    sha256: Optional[str] = None,
    formula_path: Optional[str] = None,
    receipt_path: Optional[str] = None,
    log_path: str = PATHS.log_default,
    timeout_s: Optional[float] = None,
    require_pinned: bool = False,
    keep_workspace: bool = False,
    verbose: bool = False,
) -> InstallResult:
    """Run one install, writing a receipt whether it succeeds or fails."""

    actual_log_path = configure_logging(
        log_path=log_path,
        level=logging.DEBUG if verbose else logging.INFO,
    )

    formula = load_formula(formula_path)
    receipt_path = receipt_path or PATHS.receipt_for(formula.name)

    state: Dict[str, Any] = ensure_defaults({})
    state["execution"]["paths"]["log_path_requested"] = log_path
    state["execution"]["paths"]["log_path_actual"] = actual_log_path

    try:
        result = install(
            SourceLocation(url=source, ref=ref, rev=rev, sha256=sha256),
            prefix,
            formula=formula,
            state=state,
            timeout_s=timeout_s,
            require_pinned=require_pinned,
            keep_workspace=keep_workspace,
        )
        state.setdefault("execution", {}).setdefault("summary", {})["ran_steps"] = result.ran_steps
        return result
    except Exception as e:
        logger.exception("Install of %s failed", formula.name)
        record_error(state, step=(state.get("execution") or {}).get("current_step"), error=e)
        raise
    finally:
        save_receipt(receipt_path, state)


def cmd_install(args: argparse.Namespace) -> int:
    result = run(
        source=args.source,
        ref=args.ref,
        prefix=args.prefix,
        rev=args.rev,
        sha256=args.sha256,
        formula_path=args.formula,
        receipt_path=args.receipt,
        log_path=args.log,
        timeout_s=args.timeout,
        require_pinned=bool(args.require_pinned),
        keep_workspace=bool(args.keep_workspace),
        verbose=bool(args.verbose),
    )
    print(result.installed_binary)
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    formula = load_formula(args.formula)
    for key, value in formula.describe().items():
        print(f"{key}: {value}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="formula-installer",
        description="Fetch, build and install a single binary from a formula",
    )
    sub = p.add_subparsers(dest="command", required=True)

    install_p = sub.add_parser("install", help="Build and install the formula's binary")
    install_p.add_argument("--source", required=True, help="Git URL, file:// URL or local directory")
    install_p.add_argument("--ref", default="master", help="Branch or tag to fetch")
    install_p.add_argument("--prefix", default=PATHS.prefix_default, help="Directory to install the binary into")
    install_p.add_argument("--rev", default=None, help="Exact commit to check out (pins the source)")
    install_p.add_argument("--sha256", default=None, help="Expected content hash of the source tree")
    install_p.add_argument("--require-pinned", action="store_true", help="Refuse sources without --rev or --sha256")
    install_p.add_argument("--formula", default=None, help="Formula name or path to a formula YAML file")
    install_p.add_argument("--receipt", default=None, help="Path to the install receipt (json|yaml)")
    install_p.add_argument("--log", default=PATHS.log_default, help="Path to the installer log")
    install_p.add_argument("--timeout", type=float, default=None, help="Timeout in seconds for each external command")
    install_p.add_argument("--keep-workspace", action="store_true", help="Do not delete the staging directory")
    install_p.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    install_p.set_defaults(func=cmd_install)

    info_p = sub.add_parser("info", help="Show the resolved formula")
    info_p.add_argument("--formula", default=None, help="Formula name or path to a formula YAML file")
    info_p.set_defaults(func=cmd_info)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except InstallError as e:
        print(f"error: {e}", file=sys.stderr)
        return e.exit_code
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
