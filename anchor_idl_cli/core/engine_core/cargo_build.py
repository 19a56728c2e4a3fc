"""Build an IDL from program source through ``cargo test``.

Anchor programs compiled with the ``idl-build`` feature expose a test named
``__anchor_private_print_idl`` that prints the IDL in marked sections::

    --- IDL begin address ---
    Prog1111111111111111111111111111111111111111
    --- IDL end address ---
    --- IDL begin program ---
    { ... }
    --- IDL end program ---

Events, constants and error codes are printed in their own sections and are
merged into the program section here.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from ...config import IdlCliConfig, get_config
from ..idl_core.errors import EngineBuildError
from ..idl_core.models import IdlDocument
from ..logging import log

TEST_NAME = "__anchor_private_print_idl"
_SECTIONS = ("address", "const", "event", "errors", "program")


def _flag(value: bool) -> str:
    return "TRUE" if value else "FALSE"


def build_command(config: IdlCliConfig) -> List[str]:
    return [
        config.cargo_bin,
        f"+{config.toolchain}",
        "test",
        TEST_NAME,
        "--features",
        "idl-build",
        "--",
        "--show-output",
        "--quiet",
    ]


def build_env(program_root: Path, resolution: bool, skip_lint: bool, no_docs: bool) -> Dict[str, str]:
    env = dict(os.environ)
    env.update(
        {
            "ANCHOR_IDL_BUILD_NO_DOCS": _flag(no_docs),
            "ANCHOR_IDL_BUILD_RESOLUTION": _flag(resolution),
            "ANCHOR_IDL_BUILD_SKIP_LINT": _flag(skip_lint),
            "ANCHOR_IDL_BUILD_PROGRAM_PATH": str(program_root),
            "RUSTFLAGS": "--cfg procmacro2_semver_exempt -A warnings",
        }
    )
    return env


def build_idl(
    program_root: Union[str, Path],
    resolution: bool = True,
    skip_lint: bool = False,
    no_docs: bool = False,
    *,
    config: Optional[IdlCliConfig] = None,
) -> IdlDocument:
    config = config or get_config()
    program_root = Path(program_root).resolve()
    cmd = build_command(config)
    log.debug(f"Running {' '.join(cmd)}", source="build", payload=str(program_root))

    try:
        proc = subprocess.run(
            cmd,
            cwd=str(program_root),
            stdout=subprocess.PIPE,
            stderr=None,
            text=False,
            shell=False,
            env=build_env(program_root, resolution, skip_lint, no_docs),
        )
    except OSError as exc:
        raise EngineBuildError(f"Failed to run {config.cargo_bin} in {program_root}") from exc

    stdout = (proc.stdout or b"").decode("utf-8", errors="replace")
    if config.build_log:
        print(stdout, file=sys.stderr)
    if proc.returncode != 0:
        raise EngineBuildError(
            f"Building IDL failed (exit code {proc.returncode}). "
            "Set ANCHOR_LOG=true to see the build output."
        )
    return parse_build_output(stdout)


class _ProgramParts:
    """Sections printed for one program, merged when its program section ends."""

    def __init__(self) -> None:
        self.address = ""
        self.constants: List[Any] = []
        self.events: List[Any] = []
        self.errors: List[Any] = []
        self.event_types: Dict[str, Any] = {}

    def merge(self, program: Dict[str, Any]) -> Dict[str, Any]:
        types = dict(self.event_types)
        for ty in program.get("types") or []:
            types[ty["name"]] = ty

        program["address"] = self.address
        program["constants"] = sorted(self.constants, key=_by_name)
        program["events"] = sorted(self.events, key=_by_name)
        program["errors"] = self.errors
        program["types"] = sorted(types.values(), key=_by_name)
        program["accounts"] = sorted(program.get("accounts") or [], key=_by_name)
        return program


def parse_build_output(stdout: str) -> IdlDocument:
    """Assemble the IDL from the marked sections of the test output.

    When several programs are printed the last one wins.
    """
    parts = _ProgramParts()
    program: Optional[Dict[str, Any]] = None

    section: Optional[str] = None
    buf: List[str] = []
    for line in stdout.splitlines():
        if section is None:
            for name in _SECTIONS:
                if line == f"--- IDL begin {name} ---":
                    section, buf = name, []
                    break
            continue

        if line != f"--- IDL end {section} ---":
            buf.append(line)
            continue

        body = "\n".join(buf)
        if section == "address":
            parts.address = "".join(ch for ch in body if ch.isalnum())
        elif section == "const":
            parts.constants.append(_load_section(section, body))
        elif section == "event":
            printed = _load_section(section, body)
            if not isinstance(printed, dict) or "event" not in printed:
                raise EngineBuildError("IDL event section has no `event` entry")
            parts.events.append(printed["event"])
            for ty in printed.get("types") or []:
                parts.event_types[ty["name"]] = ty
        elif section == "errors":
            parts.errors = _load_section(section, body)
        elif section == "program":
            program = parts.merge(_load_section(section, body))
            parts = _ProgramParts()
        section = None

    if program is None:
        raise EngineBuildError("Build output did not contain an IDL program section")

    try:
        return IdlDocument.model_validate(program)
    except ValidationError as exc:
        raise EngineBuildError(f"Built IDL does not match the expected shape:\n{exc}") from exc


def _load_section(section: str, body: str) -> Any:
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise EngineBuildError(f"Invalid JSON in IDL {section} section") from exc


def _by_name(item: Dict[str, Any]) -> str:
    return item.get("name", "")
