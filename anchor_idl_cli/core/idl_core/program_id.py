"""Find the program id declared in an Anchor program's entry source file."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from .errors import MacroNotFoundError, MalformedLiteralError, SourceNotFoundError

DECLARE_ID_MACRO = "declare_id!"
DEFAULT_SOURCE_FILE = "src/lib.rs"


def extract_program_id(source_code: str, macro: str = DECLARE_ID_MACRO) -> str:
    """Return the first quoted literal on the first line starting with ``macro``.

    >>> extract_program_id('use x;\\n  declare_id!("Prog111");')
    'Prog111'
    """
    declare_line = next(
        (line for line in source_code.splitlines() if line.strip().startswith(macro)),
        None,
    )
    if declare_line is None:
        raise MacroNotFoundError(f"Could not find {macro} in source code")

    after_macro = declare_line.index(macro) + len(macro)
    start = declare_line.find('"', after_macro)
    if start < 0:
        raise MalformedLiteralError(f"Invalid {macro} format: {declare_line.strip()}")
    end = declare_line.find('"', start + 1)
    if end < 0:
        raise MalformedLiteralError(f"Invalid {macro} format: {declare_line.strip()}")

    return declare_line[start + 1 : end]


def read_program_id(
    program_root: Union[str, Path],
    source_file: str = DEFAULT_SOURCE_FILE,
    macro: str = DECLARE_ID_MACRO,
) -> str:
    """Read ``<program_root>/<source_file>`` and extract its program id."""
    path = Path(program_root) / source_file
    try:
        source_code = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceNotFoundError(f"Failed to read {path}") from exc
    return extract_program_id(source_code, macro)
