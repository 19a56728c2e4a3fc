"""Structural checks for a parsed IDL document.

Checks run in a fixed order and stop at the first failure:

1. ``address`` is non-empty
2. ``metadata.name`` is non-empty
3. ``metadata.version`` is non-empty
4. every account discriminator is non-empty
5. every instruction discriminator is non-empty
6. every event discriminator is non-empty
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import (
    EmptyDiscriminatorError,
    MissingAddressError,
    MissingNameError,
    MissingVersionError,
)
from .models import IdlDocument


@dataclass(frozen=True)
class IdlSummary:
    program: str
    version: str
    accounts: int
    instructions: int
    types: int


def validate_idl(idl: IdlDocument) -> IdlSummary:
    """Return a summary of ``idl`` or raise the first violated invariant."""
    if not idl.address:
        raise MissingAddressError()
    if not idl.metadata.name:
        raise MissingNameError()
    if not idl.metadata.version:
        raise MissingVersionError()

    for kind, items in (
        ("account", idl.accounts),
        ("instruction", idl.instructions),
        ("event", idl.events),
    ):
        for item in items:
            if not item.discriminator:
                raise EmptyDiscriminatorError(kind, item.name)

    return IdlSummary(
        program=idl.metadata.name,
        version=idl.metadata.version,
        accounts=len(idl.accounts),
        instructions=len(idl.instructions),
        types=len(idl.types),
    )
