"""Render IDL type expressions as display strings."""

from __future__ import annotations

from typing import Any

from .models import (
    IdlArrayLenGeneric,
    IdlGenericArgConst,
    IdlGenericArgType,
    IdlScalar,
    IdlTypeArray,
    IdlTypeDefined,
    IdlTypeGeneric,
    IdlTypeOption,
    IdlTypeVec,
)

UNKNOWN_TYPE = "<unknown type>"


def format_type(ty: Any) -> str:
    """Return the canonical display form of ``ty``, e.g. ``Option<Vec<pubkey>>``.

    Shapes outside the known variant set render as :data:`UNKNOWN_TYPE`.
    """
    if isinstance(ty, IdlScalar):
        return ty.value
    if isinstance(ty, IdlTypeOption):
        return f"Option<{format_type(ty.option)}>"
    if isinstance(ty, IdlTypeVec):
        return f"Vec<{format_type(ty.vec)}>"
    if isinstance(ty, IdlTypeArray):
        inner, length = ty.array
        if isinstance(length, IdlArrayLenGeneric):
            return f"[{format_type(inner)}; {length.generic}]"
        return f"[{format_type(inner)}; {length}]"
    if isinstance(ty, IdlTypeDefined):
        name = ty.defined.name
        if not ty.defined.generics:
            return name
        return f"{name}<{', '.join(_format_generic_arg(g) for g in ty.defined.generics)}>"
    if isinstance(ty, IdlTypeGeneric):
        return ty.generic
    # wildcard for type variants added in the future
    return UNKNOWN_TYPE


def _format_generic_arg(arg: Any) -> str:
    if isinstance(arg, IdlGenericArgType):
        return format_type(arg.ty)
    if isinstance(arg, IdlGenericArgConst):
        return arg.value
    return UNKNOWN_TYPE
