"""Command line entry points.

``anchor-idl`` builds, converts, validates and reports on IDLs;
``anchor-idl-extractor`` patches a template IDL with the declared program id.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_core import PydanticSerializationError

from . import __version__
from .config import IdlCliConfig, get_config
from .console import views
from .core.engine_core import IdlEngine, get_engine
from .core.idl_core.errors import (
    EngineConvertError,
    IdlCliError,
    IoFailureError,
    SerializationError,
)
from .core.idl_core.models import IdlDocument
from .core.idl_core.reporter import render_instructions
from .core.idl_core.template_patcher import extract_and_patch, write_json
from .core.idl_core.validator import validate_idl
from .core.logging import configure_console_log, log


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anchor-idl",
        description="Generate, convert, validate and inspect Anchor IDLs without the full Anchor CLI",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_build = sub.add_parser("build", help="Build the IDL of a program from source")
    p_build.add_argument("-p", "--path", type=Path, default=Path("."), help="Program directory")
    p_build.add_argument("-o", "--output", type=Path, help="Output file (defaults to <name>.json)")
    p_build.add_argument("--skip-lint", action="store_true", help="Skip the safety lint checks")
    p_build.add_argument("--no-docs", action="store_true", help="Leave doc comments out of the IDL")
    p_build.add_argument("--no-resolution", action="store_true", help="Do not resolve account addresses")

    p_convert = sub.add_parser("convert", help="Convert a legacy IDL to the current format")
    p_convert.add_argument("-i", "--input", type=Path, required=True)
    p_convert.add_argument("-o", "--output", type=Path, help="Output file (defaults to <stem>.converted.json)")

    p_validate = sub.add_parser("validate", help="Check the structure of an IDL")
    p_validate.add_argument("-i", "--input", type=Path, required=True)

    p_ix = sub.add_parser("instructions", help="List the instructions of an IDL")
    p_ix.add_argument("-i", "--input", type=Path, required=True)
    p_ix.add_argument("--names-only", action="store_true", help="Only print instruction names")

    p_extract = sub.add_parser("extract", help="Patch a template IDL with the program id from source")
    _add_extract_args(p_extract)
    return parser


def _add_extract_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-p", "--program-path", type=Path, required=True, help="Path to the program source")
    parser.add_argument("-t", "--template", type=Path, required=True, help="Path to the template IDL JSON file")
    parser.add_argument(
        "-o", "--output", type=Path, help="Output file path (defaults to target/idl/<program_name>.json)"
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
def read_idl(path: Path, engine: IdlEngine, failure: str) -> IdlDocument:
    log.debug(f"Reading IDL at: {path}", source="io")
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise IoFailureError(f"Failed to read IDL file at {path}") from exc
    try:
        return engine.convert(raw)
    except EngineConvertError as exc:
        raise EngineConvertError(f"{failure}: {exc}") from exc


def default_convert_output(input_path: Path) -> Path:
    """``a.json`` and ``a.b.json`` both become ``a.converted.json`` beside the input."""
    return input_path.with_name(f"{Path(input_path.stem).stem}.converted.json")


def idl_json(idl: IdlDocument) -> str:
    try:
        return idl.to_json() + "\n"
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        raise SerializationError(f"Failed to serialize IDL `{idl.metadata.name}` to JSON") from exc


def cmd_build(args: argparse.Namespace, engine: IdlEngine) -> int:
    log.debug(f"Building IDL for program at: {args.path}", source="build")
    log.start_timer("IDL build")
    idl = engine.build(args.path, not args.no_resolution, args.skip_lint, args.no_docs)
    log.end_timer("IDL build", source="build")

    output = args.output or Path(f"{idl.metadata.name}.json")
    write_json(output, idl_json(idl))
    log.success(f"Successfully built IDL and saved to {output}", source="build")
    return 0


def cmd_convert(args: argparse.Namespace, engine: IdlEngine) -> int:
    idl = read_idl(args.input, engine, "Failed to convert IDL")
    output = args.output or default_convert_output(args.input)
    write_json(output, idl_json(idl))
    log.success(f"Successfully converted IDL and saved to {output}", source="convert")
    return 0


def cmd_validate(args: argparse.Namespace, engine: IdlEngine) -> int:
    idl = read_idl(args.input, engine, "IDL validation failed")
    summary = validate_idl(idl)

    log.success("IDL validation successful!", source="validate")
    log.info(f"Program: {summary.program}", source="validate")
    log.info(f"Version: {summary.version}", source="validate")
    log.info(f"Accounts: {summary.accounts}", source="validate")
    log.info(f"Instructions: {summary.instructions}", source="validate")
    log.info(f"Types: {summary.types}", source="validate")
    views.kv_table(
        "IDL validation passed",
        {
            "Program": summary.program,
            "Version": summary.version,
            "Accounts": summary.accounts,
            "Instructions": summary.instructions,
            "Types": summary.types,
        },
    )
    return 0


def cmd_instructions(args: argparse.Namespace, engine: IdlEngine) -> int:
    idl = read_idl(args.input, engine, "Failed to parse IDL")
    views.lines(render_instructions(idl, names_only=args.names_only))
    return 0


def cmd_extract(args: argparse.Namespace, config: IdlCliConfig) -> int:
    log.debug(f"Program path: {args.program_path}", source="extract")
    log.debug(f"Template: {args.template}", source="extract")
    result = extract_and_patch(
        args.program_path,
        args.template,
        args.output,
        source_file=config.source_file,
        macro=config.macro_token,
    )
    log.debug(f"Program name from IDL: {result.program_name}", source="extract")
    views.panel(
        "IDL extracted",
        f"IDL extracted and updated successfully at {result.output_path}\nProgram ID: {result.program_id}",
    )
    return 0


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------
def _report(exc: IdlCliError) -> None:
    message = str(exc)
    cause = exc.__cause__
    while cause is not None:
        message = f"{message}\n  caused by: {cause}"
        cause = cause.__cause__
    log.debug(f"{type(exc).__name__} raised", source=exc.stage)
    views.failure(exc.stage, message)


def _setup(verbose: bool) -> IdlCliConfig:
    load_dotenv()
    config = get_config()
    configure_console_log(debug=verbose, level=config.log_level)
    return config


def main(argv: Optional[List[str]] = None, engine: Optional[IdlEngine] = None) -> int:
    args = build_parser().parse_args(argv)
    config = _setup(args.verbose)
    engine = engine or get_engine(config)

    try:
        if args.command == "build":
            return cmd_build(args, engine)
        if args.command == "convert":
            return cmd_convert(args, engine)
        if args.command == "validate":
            return cmd_validate(args, engine)
        if args.command == "instructions":
            return cmd_instructions(args, engine)
        return cmd_extract(args, config)
    except IdlCliError as exc:
        _report(exc)
        return 1


def extractor_main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="anchor-idl-extractor",
        description="Extract IDL from template and update with program ID",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _add_extract_args(parser)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)
    config = _setup(args.verbose)
    log.debug("Anchor IDL Extractor", source="extract")

    try:
        return cmd_extract(args, config)
    except IdlCliError as exc:
        _report(exc)
        return 1
