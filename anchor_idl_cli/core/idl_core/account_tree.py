from __future__ import annotations

from typing import List, Sequence

from .models import IdlInstructionAccount, IdlInstructionAccountItem, IdlInstructionAccounts

NONE_LINE = "None"


def _indent(depth: int) -> str:
    return "  " * (depth + 2)


def account_attributes(account: IdlInstructionAccount) -> List[str]:
    """Present attributes in fixed order: writable, signer, optional."""
    attrs = []
    if account.writable:
        attrs.append("writable")
    if account.signer:
        attrs.append("signer")
    if account.optional:
        attrs.append("optional")
    return attrs


def render_accounts(accounts: Sequence[IdlInstructionAccountItem], depth: int = 1) -> List[str]:
    """Render instruction accounts as indented lines, recursing into composites."""
    indent = _indent(depth)
    if not accounts:
        # sentinel sits one column left of the account names
        return [f"{indent[:-1]}{NONE_LINE}"]

    lines: List[str] = []
    for item in accounts:
        if isinstance(item, IdlInstructionAccounts):
            lines.append(f"{indent}{item.name}:")
            if item.accounts:
                lines.extend(render_accounts(item.accounts, depth + 1))
            continue

        attrs = account_attributes(item)
        attr_str = f" ({', '.join(attrs)})" if attrs else ""
        lines.append(f"{indent}{item.name}{attr_str}")
        if item.pda is not None:
            lines.append(f"{indent}  PDA with {len(item.pda.seeds)} seeds")
    return lines
