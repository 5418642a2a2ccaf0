from __future__ import annotations

import os
from pathlib import Path

import pytest

from formula_installer import VerificationError, install
from formula_installer.lib.assets import copy_tree, install_file
from formula_installer.lib.builder import BuildEnv, MakeBuilder
from formula_installer.lib.command import run_cmd
from formula_installer.lib.verify import CommandVerifier, NoopVerifier, verifier_for

from .helpers import FakeBuilder, make_formula


def _script(path: Path, body: str) -> Path:
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(0o755)
    return path


def test_run_cmd_merges_output_and_reports_status(tmp_path: Path) -> None:
    res = run_cmd(["sh", "-c", "echo out; echo err >&2; exit 3"], check=False, cwd=str(tmp_path))

    assert res.returncode == 3
    assert "out" in res.output
    assert "err" in res.output
    assert not res.ok


def test_run_cmd_check_raises_with_output() -> None:
    with pytest.raises(RuntimeError, match="boom"):
        run_cmd(["sh", "-c", "echo boom; exit 1"])


def test_run_cmd_timeout() -> None:
    res = run_cmd(["sh", "-c", "sleep 5"], check=False, timeout_s=0.2)

    assert res.timed_out
    assert res.returncode is None


def test_build_env_sets_toolchain_root(tmp_path: Path) -> None:
    env = BuildEnv(toolchain_var="GOPATH", workspace_root=tmp_path, extra={"GO111MODULE": "off"})
    assert env.as_env() == {"GOPATH": str(tmp_path), "GO111MODULE": "off"}


def test_make_builder_passes_env_without_touching_process(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("GOPATH", raising=False)
    fake_make = _script(tmp_path / "fake-make", 'echo "target=$1 gopath=$GOPATH pwd=$(pwd)"\n')
    workdir = tmp_path / "work"
    workdir.mkdir()

    builder = MakeBuilder(env=BuildEnv(toolchain_var="GOPATH", workspace_root=tmp_path / "ws"), make=str(fake_make))
    res = builder.run(workdir, "build")

    assert res.returncode == 0
    assert "target=build" in res.output
    assert f"gopath={tmp_path / 'ws'}" in res.output
    assert f"pwd={workdir.resolve()}" in res.output
    assert "GOPATH" not in os.environ


def test_make_builder_reports_failure(tmp_path: Path) -> None:
    fake_make = _script(tmp_path / "fake-make", 'echo "syntax error"\nexit 2\n')
    builder = MakeBuilder(env=BuildEnv(toolchain_var="GOPATH", workspace_root=tmp_path), make=str(fake_make))

    res = builder.run(tmp_path, "build")

    assert res.returncode == 2
    assert "syntax error" in res.output


def test_command_verifier(tmp_path: Path) -> None:
    ok = _script(tmp_path / "ok", 'test "$1" = "--version"\n')
    bad = _script(tmp_path / "bad", "echo broken\nexit 4\n")

    CommandVerifier(args=["--version"]).verify(ok)

    with pytest.raises(VerificationError) as excinfo:
        CommandVerifier(args=[]).verify(bad)
    assert excinfo.value.returncode == 4
    assert "broken" in str(excinfo.value)
    assert excinfo.value.exit_code == 15


def test_verifier_for_defaults_to_placeholder() -> None:
    assert isinstance(verifier_for(None), NoopVerifier)
    assert isinstance(verifier_for(["-h"]), CommandVerifier)


def test_failing_smoke_test_fails_install(source, prefix) -> None:
    formula = make_formula(test={"args": ["--self-check"]})
    builder = FakeBuilder(files={"bin/example1": b"#!/bin/sh\nexit 1\n"})

    with pytest.raises(VerificationError, match="60_verify"):
        install(source, prefix, formula=formula, builder=builder)

    # The binary stays installed; only the verdict is reported.
    assert (prefix / "example1").exists()


def test_passing_smoke_test(source, prefix) -> None:
    formula = make_formula(test={"args": ["--self-check"]})
    builder = FakeBuilder(files={"bin/example1": b'#!/bin/sh\ntest "$1" = "--self-check"\n'})

    result = install(source, prefix, formula=formula, builder=builder)

    assert result.state["installed"]["verified"] is True


def test_install_file_replaces_atomically(tmp_path: Path) -> None:
    src = tmp_path / "artifact"
    src.write_bytes(b"new")
    dest = tmp_path / "bin" / "tool"
    dest.parent.mkdir()
    dest.write_bytes(b"old")

    install_file(str(src), str(dest))

    assert dest.read_bytes() == b"new"
    assert os.access(dest, os.X_OK)
    assert sorted(p.name for p in dest.parent.iterdir()) == ["tool"]


def test_install_file_cleans_temp_on_failure(tmp_path: Path) -> None:
    dest_dir = tmp_path / "bin"
    dest_dir.mkdir()

    with pytest.raises(FileNotFoundError):
        install_file(str(tmp_path / "missing"), str(dest_dir / "tool"))

    assert list(dest_dir.iterdir()) == []


def test_copy_tree_skips_top_level_vcs_only(tmp_path: Path) -> None:
    src = tmp_path / "src"
    (src / ".git").mkdir(parents=True)
    (src / ".git" / "config").write_text("x", encoding="utf-8")
    (src / "vendor" / ".git").mkdir(parents=True)
    (src / "vendor" / ".git" / "keep").write_text("y", encoding="utf-8")
    (src / ".env.example").write_text("z", encoding="utf-8")

    copied = copy_tree(str(src), str(tmp_path / "dst"))

    assert copied == 2
    assert not (tmp_path / "dst" / ".git").exists()
    assert (tmp_path / "dst" / "vendor" / ".git" / "keep").exists()
    assert (tmp_path / "dst" / ".env.example").exists()
