"""Parse current IDLs and convert legacy (pre-0.30) Anchor IDLs.

A document carrying ``metadata.spec`` is already in the current format and is
only validated. Without it the input is treated as a legacy IDL: names are
snake-cased, discriminators are generated, ``isMut``/``isSigner`` become
``writable``/``signer`` and account/event layouts move into ``types``.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from ..idl_core.errors import EngineConvertError
from ..idl_core.models import IDL_SPEC, IdlDocument
from .discriminator import gen_discriminator, to_snake_case

_LEGACY_SCALARS = {"publicKey": "pubkey"}


def convert_idl(raw: Union[bytes, str]) -> IdlDocument:
    """Return an :class:`IdlDocument` for current or legacy IDL JSON."""
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise EngineConvertError(f"IDL is not valid JSON: {exc}") from exc
    if not isinstance(value, dict):
        raise EngineConvertError("IDL must be a JSON object")

    metadata = value.get("metadata")
    spec = metadata.get("spec") if isinstance(metadata, dict) else None
    if spec is None:
        try:
            value = convert_legacy(value)
        except (KeyError, TypeError, AttributeError) as exc:
            raise EngineConvertError(f"Malformed legacy IDL: missing or invalid field {exc}") from exc
    elif spec != IDL_SPEC:
        raise EngineConvertError(f"IDL spec not supported: `{spec}`")

    try:
        return IdlDocument.model_validate(value)
    except ValidationError as exc:
        raise EngineConvertError(f"IDL does not match the expected shape:\n{exc}") from exc


def convert_legacy(idl: Dict[str, Any]) -> Dict[str, Any]:
    legacy_meta = idl.get("metadata") or {}
    address = legacy_meta.get("address")
    if not address:
        raise EngineConvertError("Program id missing in `idl.metadata.address` field")
    if "name" not in idl or "version" not in idl:
        raise EngineConvertError("Legacy IDL requires top-level `name` and `version`")

    metadata: Dict[str, Any] = {"name": idl["name"], "version": idl["version"], "spec": IDL_SPEC}
    for key in ("description", "repository", "deployments"):
        if legacy_meta.get(key) is not None:
            metadata[key] = legacy_meta[key]

    accounts = idl.get("accounts") or []
    events = idl.get("events") or []

    types = [_convert_type_def(acc) for acc in accounts]
    types += [_convert_type_def(ty) for ty in idl.get("types") or []]
    types += [_event_type_def(ev) for ev in events]

    out: Dict[str, Any] = {
        "address": address,
        "metadata": metadata,
        "instructions": [_convert_instruction(ix) for ix in idl.get("instructions") or []],
        "accounts": [
            {"name": acc["name"], "discriminator": gen_discriminator("account", acc["name"])}
            for acc in accounts
        ],
        "events": [
            {"name": ev["name"], "discriminator": gen_discriminator("event", ev["name"])}
            for ev in events
        ],
        "errors": [_convert_error(err) for err in idl.get("errors") or []],
        "types": types,
        "constants": [_convert_const(c) for c in idl.get("constants") or []],
    }
    if idl.get("docs"):
        out["docs"] = idl["docs"]
    return out


# ---------------------------------------------------------------------------
# Instructions
# ---------------------------------------------------------------------------
def _convert_instruction(ix: Dict[str, Any]) -> Dict[str, Any]:
    name = to_snake_case(ix["name"])
    out: Dict[str, Any] = {
        "name": name,
        "docs": ix.get("docs") or [],
        "discriminator": gen_discriminator("global", name),
        "accounts": [_convert_account_item(acc) for acc in ix.get("accounts") or []],
        "args": [_convert_field(arg) for arg in ix.get("args") or []],
    }
    if ix.get("returns") is not None:
        out["returns"] = convert_type(ix["returns"])
    return out


def _convert_account_item(item: Dict[str, Any]) -> Dict[str, Any]:
    if "accounts" in item:
        return {
            "name": to_snake_case(item["name"]),
            "accounts": [_convert_account_item(acc) for acc in item["accounts"]],
        }

    out: Dict[str, Any] = {
        "name": to_snake_case(item["name"]),
        "docs": item.get("docs") or [],
        "writable": bool(item.get("isMut", False)),
        "signer": bool(item.get("isSigner", False)),
        "optional": bool(item.get("isOptional", False)),
    }
    pda = item.get("pda")
    if isinstance(pda, dict):
        out["pda"] = _convert_pda(pda)
    if item.get("relations"):
        out["relations"] = [to_snake_case(r) for r in item["relations"]]
    return out


def _convert_pda(pda: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {"seeds": [_convert_seed(s) for s in pda.get("seeds") or []]}
    if pda.get("programId") is not None:
        out["program"] = _convert_seed(pda["programId"])
    return out


def _convert_seed(seed: Any) -> Any:
    if not isinstance(seed, dict):
        return seed
    kind = seed.get("kind")
    if kind == "const":
        value = seed.get("value")
        if isinstance(value, str):
            value = list(value.encode("utf-8"))
        return {"kind": "const", "value": value}
    if kind == "arg":
        return {"kind": "arg", "path": seed.get("path", "")}
    if kind == "account":
        out = {"kind": "account", "path": seed.get("path", "")}
        if seed.get("account"):
            out["account"] = seed["account"]
        return out
    return seed


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------
def convert_type(ty: Any) -> Any:
    """Map a legacy type expression to the current shape.

    Unrecognised shapes are returned unchanged.
    """
    if isinstance(ty, str):
        return _LEGACY_SCALARS.get(ty, ty)
    if not isinstance(ty, dict) or len(ty) != 1:
        return ty

    key, inner = next(iter(ty.items()))
    if key in ("option", "coption", "vec"):
        return {key: convert_type(inner)}
    if key == "array" and isinstance(inner, list) and len(inner) == 2:
        return {"array": [convert_type(inner[0]), _convert_array_len(inner[1])]}
    if key == "defined" and isinstance(inner, str):
        return {"defined": {"name": inner}}
    if key == "definedWithTypeArgs" and isinstance(inner, dict):
        return {
            "defined": {
                "name": inner.get("name", ""),
                "generics": [_convert_generic_arg(a) for a in inner.get("args") or []],
            }
        }
    return ty


def _convert_array_len(length: Any) -> Any:
    if isinstance(length, dict) and "generic" in length:
        return {"generic": length["generic"]}
    return length


def _convert_generic_arg(arg: Any) -> Dict[str, Any]:
    if isinstance(arg, dict) and "type" in arg:
        return {"kind": "type", "type": convert_type(arg["type"])}
    if isinstance(arg, dict) and "value" in arg:
        return {"kind": "const", "value": str(arg["value"])}
    return {"kind": "type", "type": convert_type(arg)}


def _convert_field(field: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": to_snake_case(field["name"]), "type": convert_type(field["type"])}
    if field.get("docs"):
        out["docs"] = field["docs"]
    return out


def _convert_fields(fields: Optional[List[Any]]) -> Optional[List[Any]]:
    if fields is None:
        return None
    # enum tuple variants list bare types; named variants list fields
    return [
        _convert_field(f) if isinstance(f, dict) and "name" in f else convert_type(f)
        for f in fields
    ]


def _convert_type_def_body(body: Dict[str, Any]) -> Dict[str, Any]:
    kind = body.get("kind")
    if kind == "struct":
        out: Dict[str, Any] = {"kind": "struct"}
        fields = _convert_fields(body.get("fields"))
        if fields:
            out["fields"] = fields
        return out
    if kind == "enum":
        variants = []
        for variant in body.get("variants") or []:
            converted: Dict[str, Any] = {"name": variant["name"]}
            fields = _convert_fields(variant.get("fields"))
            if fields:
                converted["fields"] = fields
            variants.append(converted)
        return {"kind": "enum", "variants": variants}
    if kind == "alias" and "value" in body:
        return {"kind": "type", "alias": convert_type(body["value"])}
    return body


def _convert_type_def(ty: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": ty["name"], "type": _convert_type_def_body(ty.get("type") or {})}
    if ty.get("docs"):
        out["docs"] = ty["docs"]
    if ty.get("generics"):
        out["generics"] = [{"kind": "type", "name": g} for g in ty["generics"]]
    return out


def _event_type_def(ev: Dict[str, Any]) -> Dict[str, Any]:
    fields = [
        {"name": to_snake_case(f["name"]), "type": convert_type(f["type"])}
        for f in ev.get("fields") or []
    ]
    body: Dict[str, Any] = {"kind": "struct"}
    if fields:
        body["fields"] = fields
    return {"name": ev["name"], "type": body}


def _convert_error(err: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {"code": err["code"], "name": err["name"]}
    if err.get("msg") is not None:
        out["msg"] = err["msg"]
    return out


def _convert_const(const: Dict[str, Any]) -> Dict[str, Any]:
    return {"name": const["name"], "type": convert_type(const["type"]), "value": str(const["value"])}
