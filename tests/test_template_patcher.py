import copy
import json

import pytest

from anchor_idl_cli.core.idl_core.errors import (
    IoFailureError,
    MacroNotFoundError,
    MissingProgramNameError,
    TemplateParseError,
)
from anchor_idl_cli.core.idl_core.template_patcher import (
    extract_and_patch,
    load_template,
    patch_address,
    resolve_output_path,
    template_program_name,
    write_json,
)

TEMPLATE = {
    "version": "0.1.0",
    "name": "demo",
    "address": "PLACEHOLDER",
    "instructions": [{"name": "initialize", "accounts": [], "args": []}],
    "metadata": {"big": 18446744073709551615, "note": "ünïcode"},
}


@pytest.fixture
def program_root(tmp_path):
    root = tmp_path / "programs" / "demo"
    (root / "src").mkdir(parents=True)
    (root / "src" / "lib.rs").write_text('declare_id!("Demo1111111111111111111111111111111111111111");\n')
    return root


def test_patch_overwrites_address_in_place_keeping_key_order():
    template = copy.deepcopy(TEMPLATE)
    patched = patch_address(template, "New111")
    assert patched is template
    assert list(patched) == list(TEMPLATE)
    assert patched["address"] == "New111"
    assert {k: v for k, v in patched.items() if k != "address"} == {
        k: v for k, v in TEMPLATE.items() if k != "address"
    }


def test_patch_appends_missing_address():
    template = {"name": "demo"}
    assert list(patch_address(template, "X")) == ["name", "address"]


def test_patch_is_idempotent():
    once = patch_address(copy.deepcopy(TEMPLATE), "Same111")
    twice = patch_address(patch_address(copy.deepcopy(TEMPLATE), "Same111"), "Same111")
    assert once == twice


def test_missing_name():
    with pytest.raises(MissingProgramNameError):
        template_program_name({"address": "x"})
    with pytest.raises(MissingProgramNameError):
        template_program_name({"name": 3})


def test_default_output_path(tmp_path):
    assert resolve_output_path(tmp_path, TEMPLATE) == tmp_path / "target" / "idl" / "demo.json"


def test_explicit_output_path_is_verbatim(tmp_path):
    out = tmp_path / "custom" / "x.json"
    assert resolve_output_path(tmp_path, {}, out) == out


def test_load_template_errors(tmp_path):
    with pytest.raises(IoFailureError):
        load_template(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(TemplateParseError):
        load_template(bad)

    arr = tmp_path / "arr.json"
    arr.write_text("[1, 2]")
    with pytest.raises(TemplateParseError, match="JSON object"):
        load_template(arr)


def test_write_json_creates_parents_and_is_repeatable(tmp_path):
    out = tmp_path / "a" / "b" / "idl.json"
    write_json(out, {"name": "demo"})
    write_json(out, {"name": "demo"})
    assert json.loads(out.read_text(encoding="utf-8")) == {"name": "demo"}


def test_extract_and_patch_default_output(program_root, write_json_file):
    template_path = write_json_file("template.json", TEMPLATE)

    result = extract_and_patch(program_root, template_path)

    assert result.program_id == "Demo1111111111111111111111111111111111111111"
    assert result.program_name == "demo"
    assert result.output_path == program_root / "target" / "idl" / "demo.json"

    text = result.output_path.read_text(encoding="utf-8")
    written = json.loads(text)
    assert list(written) == list(TEMPLATE)
    assert written["address"] == result.program_id
    assert written["metadata"] == TEMPLATE["metadata"]
    assert "18446744073709551615" in text
    assert "ünïcode" in text
    assert text.startswith('{\n  "version": "0.1.0",')


def test_extract_and_patch_explicit_output(program_root, write_json_file, tmp_path):
    template_path = write_json_file("template.json", TEMPLATE)
    out = tmp_path / "nested" / "out.json"

    result = extract_and_patch(program_root, template_path, out)

    assert result.output_path == out
    assert json.loads(out.read_text())["address"] == result.program_id


def test_nothing_written_when_source_has_no_macro(program_root, write_json_file):
    (program_root / "src" / "lib.rs").write_text("pub mod nothing {}\n")
    template_path = write_json_file("template.json", TEMPLATE)

    with pytest.raises(MacroNotFoundError):
        extract_and_patch(program_root, template_path)
    assert not (program_root / "target").exists()


def test_template_name_checked_before_source(tmp_path, write_json_file):
    template_path = write_json_file("template.json", {"address": ""})
    with pytest.raises(MissingProgramNameError):
        extract_and_patch(tmp_path / "no-such-program", template_path)
