import copy
import json
import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from anchor_idl_cli.core.idl_core.models import IdlDocument

PROGRAM_ID = "Prog1111111111111111111111111111111111111111"

CURRENT_IDL = {
    "address": PROGRAM_ID,
    "metadata": {"name": "demo", "version": "0.1.0", "spec": "0.1.0"},
    "instructions": [
        {
            "name": "initialize",
            "docs": ["Create the counter."],
            "discriminator": [175, 175, 109, 31, 13, 152, 155, 237],
            "accounts": [
                {
                    "name": "counter",
                    "writable": True,
                    "pda": {"seeds": [{"kind": "const", "value": [99]}, {"kind": "account", "path": "payer"}]},
                },
                {
                    "name": "authority_group",
                    "accounts": [
                        {"name": "payer", "writable": True, "signer": True},
                        {"name": "vault", "writable": True},
                    ],
                },
                {"name": "system_program", "address": "11111111111111111111111111111111"},
            ],
            "args": [
                {"name": "start", "docs": ["Initial", "value"], "type": "u64"},
                {"name": "owners", "type": {"vec": "pubkey"}},
            ],
            "returns": {"option": "u8"},
        },
        {
            "name": "close",
            "discriminator": [98, 165, 201, 177, 108, 65, 206, 96],
            "accounts": [],
            "args": [],
        },
    ],
    "accounts": [{"name": "Counter", "discriminator": [255, 176, 4, 245, 188, 253, 124, 25]}],
    "events": [{"name": "Bumped", "discriminator": [1, 2, 3, 4, 5, 6, 7, 8]}],
    "types": [
        {
            "name": "Counter",
            "type": {"kind": "struct", "fields": [{"name": "count", "type": "u64"}]},
        },
        {
            "name": "Bumped",
            "type": {"kind": "struct", "fields": [{"name": "by", "type": "u8"}]},
        },
    ],
}

LEGACY_IDL = {
    "version": "0.2.0",
    "name": "legacy_demo",
    "instructions": [
        {
            "name": "initialize",
            "accounts": [
                {"name": "counter", "isMut": True, "isSigner": False},
                {"name": "payerAccount", "isMut": True, "isSigner": True},
                {
                    "name": "vaultGroup",
                    "accounts": [
                        {
                            "name": "vault",
                            "isMut": True,
                            "isSigner": False,
                            "isOptional": True,
                            "pda": {
                                "seeds": [
                                    {"kind": "const", "type": "string", "value": "vault"},
                                    {"kind": "account", "type": "publicKey", "path": "payerAccount"},
                                ]
                            },
                        }
                    ],
                },
            ],
            "args": [{"name": "startValue", "type": "u64"}],
        },
        {
            "name": "setOwner",
            "accounts": [],
            "args": [
                {"name": "newOwner", "type": "publicKey"},
                {"name": "limits", "type": {"array": ["u8", 4]}},
                {"name": "config", "type": {"option": {"defined": "Config"}}},
            ],
        },
    ],
    "accounts": [
        {"name": "Counter", "type": {"kind": "struct", "fields": [{"name": "count", "type": "u64"}]}}
    ],
    "types": [
        {
            "name": "Config",
            "type": {"kind": "struct", "fields": [{"name": "maxUsers", "type": "u16"}]},
        },
        {
            "name": "Mode",
            "type": {"kind": "enum", "variants": [{"name": "Open"}, {"name": "Fixed", "fields": ["u8"]}]},
        },
    ],
    "events": [{"name": "Bumped", "fields": [{"name": "by", "type": "u8", "index": False}]}],
    "errors": [{"code": 6000, "name": "Overflow", "msg": "Counter overflowed"}],
    "metadata": {"address": PROGRAM_ID},
}


@pytest.fixture
def idl_dict():
    return copy.deepcopy(CURRENT_IDL)


@pytest.fixture
def idl(idl_dict):
    return IdlDocument.model_validate(idl_dict)


@pytest.fixture
def legacy_idl_dict():
    return copy.deepcopy(LEGACY_IDL)


@pytest.fixture
def write_json_file(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return _write
