"""Every name-or-address tool routes identifiers the same way."""
from __future__ import annotations

from typing import Callable, Dict, Tuple

import pytest

from binja_bridge.binja.client import BinjaClient
from binja_bridge.features import data, functions, modify, rename, types
from binja_bridge.tests.fakes import FakePlugin
from binja_bridge.utils.identifiers import classify

Call = Callable[[BinjaClient, str], str]

DUAL_MODE: Dict[str, Tuple[Call, str, str]] = {
    "decompile_function": (
        lambda c, ident: functions.decompile_function(c, name=ident),
        "decompile",
        "name",
    ),
    "fetch_disassembly": (
        lambda c, ident: functions.fetch_disassembly(c, name=ident),
        "assembly",
        "name",
    ),
    "get_il": (
        lambda c, ident: functions.get_il(c, name_or_address=ident, view="mlil"),
        "il",
        "name",
    ),
    "get_stack_frame_vars": (
        lambda c, ident: functions.get_stack_frame_vars(c, function_identifier=ident),
        "getStackFrameVars",
        "name",
    ),
    "rename_multi_variables": (
        lambda c, ident: rename.rename_multi_variables(c, function_identifier=ident, pairs="a:b"),
        "renameVariables",
        "functionName",
    ),
    "retype_variable": (
        lambda c, ident: types.retype_variable(
            c, function_name=ident, variable_name="var_8", type_str="int"
        ),
        "retypeVariable",
        "functionName",
    ),
    "get_data_decl": (
        lambda c, ident: data.get_data_decl(c, name_or_address=ident),
        "getDataDecl",
        "name",
    ),
    "set_function_prototype": (
        lambda c, ident: modify.set_function_prototype(
            c, name_or_address=ident, prototype="int f(void)"
        ),
        "setFunctionPrototype",
        "name",
    ),
}

IDENTIFIERS = ["0x401000", "0X1F", "4198400", "  0x10  ", "main", "sub_401000", "401000h"]


def _plugin() -> FakePlugin:
    json_paths = [path for _call, path, _key in DUAL_MODE.values()]
    routes = {path: {"status": "ok"} for path in json_paths}
    routes["status"] = {"filename": "/tmp/a.bin"}
    return FakePlugin(routes)


@pytest.mark.parametrize("tool", sorted(DUAL_MODE))
@pytest.mark.parametrize("identifier", IDENTIFIERS)
def test_identifier_routing_matches_classifier(tool: str, identifier: str) -> None:
    call, path, name_key = DUAL_MODE[tool]
    plugin = _plugin()

    call(plugin.client(), identifier)

    [params] = plugin.params(path)
    ident = classify(identifier)
    if ident.is_address:
        assert params["address"] == identifier.strip()
        assert name_key not in params
    else:
        assert params[name_key] == identifier.strip()
        assert "address" not in params


@pytest.mark.parametrize("identifier", IDENTIFIERS)
def test_hexdump_data_picks_endpoint_by_kind(identifier: str) -> None:
    plugin = FakePlugin({"hexdump": "00 01", "hexdumpByName": "02 03"})

    text = data.hexdump_data(plugin.client(), name_or_address=identifier, length=16)

    if classify(identifier).is_address:
        assert text == "00 01"
        assert plugin.params("hexdump") == [{"address": identifier.strip(), "length": "16"}]
    else:
        assert text == "02 03"
        assert plugin.params("hexdumpByName") == [{"name": identifier.strip(), "length": "16"}]


def test_disassembly_sends_address_for_hex_and_name_for_symbols() -> None:
    plugin = FakePlugin(
        {
            "status": {"filename": "/tmp/a.bin"},
            "assembly": {"assembly": "push rbp\nmov rbp, rsp"},
        }
    )
    client = plugin.client()

    by_address = functions.fetch_disassembly(client, name="0x401000")
    by_name = functions.fetch_disassembly(client, name="main")

    assert plugin.params("assembly") == [{"address": "0x401000"}, {"name": "main"}]
    assert by_address == "File: /tmp/a.bin\n\npush rbp\nmov rbp, rsp"
    assert by_name.startswith("File: /tmp/a.bin\n\n")
