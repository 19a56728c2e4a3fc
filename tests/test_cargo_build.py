import json
import subprocess
from types import SimpleNamespace

import pytest

from anchor_idl_cli.config import IdlCliConfig
from anchor_idl_cli.core.engine_core import cargo_build
from anchor_idl_cli.core.engine_core.base import AnchorIdlEngine
from anchor_idl_cli.core.idl_core.errors import EngineBuildError

PROGRAM = {
    "address": "",
    "metadata": {"name": "demo", "version": "0.1.0", "spec": "0.1.0"},
    "instructions": [
        {"name": "initialize", "discriminator": [1, 2, 3, 4, 5, 6, 7, 8], "accounts": [], "args": []}
    ],
    "accounts": [
        {"name": "Zeta", "discriminator": [9, 9, 9, 9, 9, 9, 9, 9]},
        {"name": "Alpha", "discriminator": [8, 8, 8, 8, 8, 8, 8, 8]},
    ],
    "types": [{"name": "Alpha", "type": {"kind": "struct"}}, {"name": "Zeta", "type": {"kind": "struct"}}],
}

EVENT = {
    "event": {"name": "Bumped", "discriminator": [7, 7, 7, 7, 7, 7, 7, 7]},
    "types": [{"name": "Bumped", "type": {"kind": "struct", "fields": [{"name": "by", "type": "u8"}]}}],
}


def _section(name, body):
    return [f"--- IDL begin {name} ---", body, f"--- IDL end {name} ---"]


def _stdout():
    lines = ["running 1 test", "test __anchor_private_print_idl ... ok"]
    lines += _section("address", '"Demo1111111111111111111111111111111111111111"')
    lines += _section("const", json.dumps({"name": "SEED", "type": "bytes", "value": "[115]"}))
    lines += _section("event", json.dumps(EVENT, indent=2))
    lines += _section("errors", json.dumps([{"code": 6000, "name": "Overflow"}]))
    lines += _section("program", json.dumps(PROGRAM, indent=2))
    lines.append("test result: ok. 1 passed; 0 failed")
    return "\n".join(lines)


def test_parse_merges_sections():
    idl = cargo_build.parse_build_output(_stdout())

    assert idl.address == "Demo1111111111111111111111111111111111111111"
    assert [c.name for c in idl.constants] == ["SEED"]
    assert [e.name for e in idl.events] == ["Bumped"]
    assert [e.code for e in idl.errors] == [6000]
    assert [a.name for a in idl.accounts] == ["Alpha", "Zeta"]
    assert [t.name for t in idl.types] == ["Alpha", "Bumped", "Zeta"]


def test_parse_without_program_section():
    with pytest.raises(EngineBuildError, match="program section"):
        cargo_build.parse_build_output("\n".join(_section("address", "X")))


def test_parse_invalid_section_json():
    with pytest.raises(EngineBuildError, match="errors section"):
        cargo_build.parse_build_output("\n".join(_section("errors", "{nope")))


def test_build_runs_cargo_with_flags(monkeypatch, tmp_path):
    calls = {}

    def fake_run(cmd, **kwargs):
        calls["cmd"] = cmd
        calls.update(kwargs)
        return SimpleNamespace(returncode=0, stdout=_stdout().encode("utf-8"))

    monkeypatch.setattr(subprocess, "run", fake_run)
    config = IdlCliConfig(cargo_bin="cargo", toolchain="nightly-2024-01-01")

    idl = AnchorIdlEngine(config).build(tmp_path, resolution=False, skip_lint=True, no_docs=True)

    assert idl.metadata.name == "demo"
    assert calls["cmd"][:4] == ["cargo", "+nightly-2024-01-01", "test", "__anchor_private_print_idl"]
    assert calls["cwd"] == str(tmp_path.resolve())
    env = calls["env"]
    assert env["ANCHOR_IDL_BUILD_RESOLUTION"] == "FALSE"
    assert env["ANCHOR_IDL_BUILD_SKIP_LINT"] == "TRUE"
    assert env["ANCHOR_IDL_BUILD_NO_DOCS"] == "TRUE"
    assert env["ANCHOR_IDL_BUILD_PROGRAM_PATH"] == str(tmp_path.resolve())


def test_build_failure_exit_code(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", lambda cmd, **kw: SimpleNamespace(returncode=101, stdout=b""))
    with pytest.raises(EngineBuildError, match="exit code 101"):
        cargo_build.build_idl(tmp_path, config=IdlCliConfig())


def test_build_missing_cargo(monkeypatch, tmp_path):
    def boom(cmd, **kw):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(subprocess, "run", boom)
    with pytest.raises(EngineBuildError, match="Failed to run"):
        cargo_build.build_idl(tmp_path, config=IdlCliConfig(cargo_bin="no-cargo"))


def test_build_log_echoes_stdout(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(
        subprocess, "run", lambda cmd, **kw: SimpleNamespace(returncode=0, stdout=_stdout().encode())
    )
    cargo_build.build_idl(tmp_path, config=IdlCliConfig(build_log=True))
    assert "test result: ok" in capsys.readouterr().err


def test_parse_keeps_last_program_only():
    other = dict(PROGRAM, metadata={"name": "other", "version": "0.2.0", "spec": "0.1.0"})
    lines = _section("address", "Other111")
    lines += _section("errors", json.dumps([{"code": 6001, "name": "Stale"}]))
    lines += _section("program", json.dumps(other))
    text = "\n".join(lines) + "\n" + _stdout()

    idl = cargo_build.parse_build_output(text)

    assert idl.metadata.name == "demo"
    assert [e.code for e in idl.errors] == [6000]
