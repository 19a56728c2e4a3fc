from __future__ import annotations

from typing import List

from .account_tree import render_accounts
from .models import IdlDocument, IdlInstruction
from .type_formatter import format_type


def render_instructions(idl: IdlDocument, names_only: bool = False) -> List[str]:
    """Build the instruction report for ``idl`` in document order.

    With ``names_only`` each instruction is reduced to its numbered name.
    """
    lines = [
        "",
        f"Program: {idl.metadata.name} (v{idl.metadata.version})",
        f"Address: {idl.address}",
        "",
        f"Instructions ({len(idl.instructions)}):",
    ]
    for idx, ix in enumerate(idl.instructions, 1):
        lines.append("")
        lines.append(f"{idx}. {ix.name}")
        if not names_only:
            lines.extend(_instruction_details(ix))
    return lines


def _instruction_details(ix: IdlInstruction) -> List[str]:
    lines: List[str] = []
    if ix.docs:
        lines.append("   Description:")
        lines.extend(f"     {doc}" for doc in ix.docs)

    if ix.args:
        lines.append("   Arguments:")
        for arg in ix.args:
            lines.append(f"     {arg.name} ({format_type(arg.ty)})")
            if arg.docs:
                lines.append(f"       {' '.join(arg.docs)}")
    else:
        lines.append("   Arguments: None")

    lines.append("   Accounts:")
    lines.extend(render_accounts(ix.accounts, 1))

    if ix.returns is not None:
        lines.append(f"   Returns: {format_type(ix.returns)}")
    return lines
