from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_SOURCE_FILE = "src/lib.rs"
DEFAULT_MACRO = "declare_id!"
DEFAULT_TOOLCHAIN = "nightly"


def _as_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    return v in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class IdlCliConfig:
    """Configuration container for the IDL toolkit."""

    # Console log level when -v/--verbose is not given
    log_level: str = "INFO"

    # IDL build (cargo test __anchor_private_print_idl)
    cargo_bin: str = "cargo"
    toolchain: str = DEFAULT_TOOLCHAIN
    # Echo captured build output to stderr (same knob as the anchor CLI)
    build_log: bool = False

    # Program id extraction
    source_file: str = DEFAULT_SOURCE_FILE
    macro_token: str = DEFAULT_MACRO


def get_config() -> IdlCliConfig:
    """Return an ``IdlCliConfig`` with environment overrides applied."""

    return IdlCliConfig(
        log_level=os.getenv("ANCHOR_IDL_LOG_LEVEL", "INFO"),
        cargo_bin=os.getenv("ANCHOR_IDL_CARGO", "cargo"),
        toolchain=os.getenv("RUSTUP_TOOLCHAIN") or DEFAULT_TOOLCHAIN,
        build_log=_as_bool(os.getenv("ANCHOR_LOG")),
        source_file=os.getenv("ANCHOR_IDL_SOURCE_FILE", DEFAULT_SOURCE_FILE),
        macro_token=os.getenv("ANCHOR_IDL_MACRO", DEFAULT_MACRO),
    )
