"""Patch a template IDL with the program id declared in source.

The template is handled as a plain JSON tree: only ``address`` is touched,
every other key keeps its value and position.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import (
    IoFailureError,
    MissingProgramNameError,
    SerializationError,
    TemplateParseError,
)
from .program_id import DECLARE_ID_MACRO, DEFAULT_SOURCE_FILE, read_program_id

PathLike = Union[str, Path]


@dataclass(frozen=True)
class PatchResult:
    program_id: str
    program_name: str
    output_path: Path


def load_template(path: PathLike) -> Dict[str, Any]:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise IoFailureError(f"Failed to read template IDL file {path}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TemplateParseError(f"Failed to parse template IDL {path} as JSON") from exc
    if not isinstance(data, dict):
        raise TemplateParseError(f"Template IDL {path} must be a JSON object")
    return data


def template_program_name(template: Dict[str, Any]) -> str:
    name = template.get("name")
    if not isinstance(name, str):
        raise MissingProgramNameError("Program name not found in template IDL")
    return name


def patch_address(template: Dict[str, Any], program_id: str) -> Dict[str, Any]:
    """Set ``address`` in place and return the same dict."""
    template["address"] = program_id
    return template


def resolve_output_path(
    program_root: PathLike,
    template: Dict[str, Any],
    output: Optional[PathLike] = None,
) -> Path:
    """Explicit ``output`` wins; otherwise ``<program_root>/target/idl/<name>.json``."""
    if output is not None:
        return Path(output)
    return Path(program_root) / "target" / "idl" / f"{template_program_name(template)}.json"


def dump_json(document: Any) -> str:
    try:
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    except (TypeError, ValueError) as exc:
        raise SerializationError("Failed to serialize IDL to JSON") from exc


def write_json(path: PathLike, document: Any) -> Path:
    """Serialize ``document`` fully, then create the parent dir and write it."""
    path = Path(path)
    text = document if isinstance(document, str) else dump_json(document)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IoFailureError(f"Failed to create output directory {path.parent}") from exc
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise IoFailureError(f"Failed to write IDL JSON to {path}") from exc
    return path


def extract_and_patch(
    program_root: PathLike,
    template_path: PathLike,
    output: Optional[PathLike] = None,
    *,
    source_file: str = DEFAULT_SOURCE_FILE,
    macro: str = DECLARE_ID_MACRO,
) -> PatchResult:
    template = load_template(template_path)
    program_name = template_program_name(template)
    program_id = read_program_id(program_root, source_file, macro)

    patch_address(template, program_id)
    output_path = resolve_output_path(program_root, template, output)
    write_json(output_path, template)
    return PatchResult(program_id=program_id, program_name=program_name, output_path=output_path)
