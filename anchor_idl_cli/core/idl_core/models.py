"""Pydantic models for the Anchor IDL document (spec ``0.1.0``).

The type expression and account item unions are resolved by callable
discriminators so that JSON input and already-built model instances take the
same path. Type shapes the union does not know about are kept as raw JSON
values instead of failing validation.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

IDL_SPEC = "0.1.0"


class _IdlModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


# ---------------------------------------------------------------------------
# Type expressions
# ---------------------------------------------------------------------------
class IdlScalar(str, Enum):
    BOOL = "bool"
    U8 = "u8"
    I8 = "i8"
    U16 = "u16"
    I16 = "i16"
    U32 = "u32"
    I32 = "i32"
    F32 = "f32"
    U64 = "u64"
    I64 = "i64"
    F64 = "f64"
    U128 = "u128"
    I128 = "i128"
    U256 = "u256"
    I256 = "i256"
    BYTES = "bytes"
    STRING = "string"
    PUBKEY = "pubkey"


_SCALAR_NAMES = frozenset(s.value for s in IdlScalar)


class IdlTypeOption(BaseModel):
    option: IdlType


class IdlTypeVec(BaseModel):
    vec: IdlType


class IdlArrayLenGeneric(BaseModel):
    generic: str


IdlArrayLen = Union[int, IdlArrayLenGeneric]


class IdlTypeArray(BaseModel):
    array: Tuple[IdlType, IdlArrayLen]


class IdlGenericArgType(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["type"]
    ty: IdlType = Field(alias="type")


class IdlGenericArgConst(BaseModel):
    kind: Literal["const"]
    value: str


IdlGenericArg = Annotated[
    Union[IdlGenericArgType, IdlGenericArgConst], Field(discriminator="kind")
]


class IdlDefined(BaseModel):
    name: str
    generics: List[IdlGenericArg] = Field(default_factory=list)


class IdlTypeDefined(BaseModel):
    defined: IdlDefined


class IdlTypeGeneric(BaseModel):
    generic: str


_TYPE_MODEL_TAGS = {
    IdlTypeOption: "option",
    IdlTypeVec: "vec",
    IdlTypeArray: "array",
    IdlTypeDefined: "defined",
    IdlTypeGeneric: "generic",
}
_TYPE_KEY_TAGS = frozenset(_TYPE_MODEL_TAGS.values())


def _idl_type_tag(value: Any) -> str:
    if isinstance(value, IdlScalar):
        return "scalar"
    if isinstance(value, str):
        return "scalar" if value in _SCALAR_NAMES else "unknown"
    if isinstance(value, BaseModel):
        return _TYPE_MODEL_TAGS.get(type(value), "unknown")
    if isinstance(value, dict) and len(value) == 1:
        key = next(iter(value))
        if key in _TYPE_KEY_TAGS:
            return key
    return "unknown"


IdlType = Annotated[
    Union[
        Annotated[IdlScalar, Tag("scalar")],
        Annotated[IdlTypeOption, Tag("option")],
        Annotated[IdlTypeVec, Tag("vec")],
        Annotated[IdlTypeArray, Tag("array")],
        Annotated[IdlTypeDefined, Tag("defined")],
        Annotated[IdlTypeGeneric, Tag("generic")],
        Annotated[Any, Tag("unknown")],
    ],
    Discriminator(_idl_type_tag),
]


# ---------------------------------------------------------------------------
# Instruction accounts
# ---------------------------------------------------------------------------
class IdlPda(_IdlModel):
    seeds: List[Any]
    program: Optional[Any] = None


class IdlInstructionAccount(_IdlModel):
    name: str
    docs: List[str] = Field(default_factory=list)
    writable: bool = False
    signer: bool = False
    optional: bool = False
    address: Optional[str] = None
    pda: Optional[IdlPda] = None
    relations: List[str] = Field(default_factory=list)


class IdlInstructionAccounts(_IdlModel):
    name: str
    accounts: List[IdlInstructionAccountItem]


def _account_item_tag(value: Any) -> str:
    if isinstance(value, IdlInstructionAccounts):
        return "composite"
    if isinstance(value, dict) and "accounts" in value:
        return "composite"
    return "single"


IdlInstructionAccountItem = Annotated[
    Union[
        Annotated[IdlInstructionAccount, Tag("single")],
        Annotated[IdlInstructionAccounts, Tag("composite")],
    ],
    Discriminator(_account_item_tag),
]


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------
class IdlField(_IdlModel):
    name: str
    docs: List[str] = Field(default_factory=list)
    ty: IdlType = Field(alias="type")


class IdlInstruction(_IdlModel):
    name: str
    docs: List[str] = Field(default_factory=list)
    discriminator: List[int] = Field(default_factory=list)
    accounts: List[IdlInstructionAccountItem]
    args: List[IdlField]
    returns: Optional[IdlType] = None


class IdlAccount(_IdlModel):
    name: str
    discriminator: List[int] = Field(default_factory=list)


class IdlEvent(_IdlModel):
    name: str
    discriminator: List[int] = Field(default_factory=list)


class IdlErrorCode(_IdlModel):
    code: int
    name: str
    msg: Optional[str] = None


class IdlTypeDef(_IdlModel):
    name: str
    docs: List[str] = Field(default_factory=list)
    serialization: Optional[str] = None
    repr_: Optional[Dict[str, Any]] = Field(default=None, alias="repr")
    generics: List[Dict[str, Any]] = Field(default_factory=list)
    ty: Dict[str, Any] = Field(alias="type")


class IdlConst(_IdlModel):
    name: str
    docs: List[str] = Field(default_factory=list)
    ty: IdlType = Field(alias="type")
    value: str


class IdlMetadata(_IdlModel):
    name: str
    version: str
    spec: Optional[str] = None
    description: Optional[str] = None
    repository: Optional[str] = None
    dependencies: List[Dict[str, Any]] = Field(default_factory=list)
    contact: Optional[str] = None
    deployments: Optional[Dict[str, Any]] = None


class IdlDocument(_IdlModel):
    address: str
    metadata: IdlMetadata
    docs: List[str] = Field(default_factory=list)
    instructions: List[IdlInstruction]
    accounts: List[IdlAccount] = Field(default_factory=list)
    events: List[IdlEvent] = Field(default_factory=list)
    errors: List[IdlErrorCode] = Field(default_factory=list)
    types: List[IdlTypeDef] = Field(default_factory=list)
    constants: List[IdlConst] = Field(default_factory=list)

    @classmethod
    def from_json(cls, raw: Union[str, bytes]) -> "IdlDocument":
        return cls.model_validate_json(raw)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_defaults=True)

    def to_json(self) -> str:
        """Pretty JSON with defaulted fields left out, as Anchor writes it."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


for _model in (
    IdlTypeOption,
    IdlTypeVec,
    IdlTypeArray,
    IdlGenericArgType,
    IdlDefined,
    IdlTypeDefined,
    IdlInstructionAccounts,
    IdlField,
    IdlInstruction,
    IdlConst,
    IdlDocument,
):
    _model.model_rebuild()
del _model


__all__ = [
    "IDL_SPEC",
    "IdlScalar",
    "IdlType",
    "IdlTypeOption",
    "IdlTypeVec",
    "IdlTypeArray",
    "IdlArrayLen",
    "IdlArrayLenGeneric",
    "IdlGenericArgType",
    "IdlGenericArgConst",
    "IdlDefined",
    "IdlTypeDefined",
    "IdlTypeGeneric",
    "IdlPda",
    "IdlInstructionAccount",
    "IdlInstructionAccounts",
    "IdlInstructionAccountItem",
    "IdlField",
    "IdlInstruction",
    "IdlAccount",
    "IdlEvent",
    "IdlErrorCode",
    "IdlTypeDef",
    "IdlConst",
    "IdlMetadata",
    "IdlDocument",
]
