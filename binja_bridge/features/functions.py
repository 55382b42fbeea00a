"""Function listing, lookup and code views."""
from __future__ import annotations

from typing import Dict, List, Union

from ..binja.client import BinjaClient
from ..binja.models import Json
from ..utils.errors import InvalidArgument
from ..utils.identifiers import classify
from ..utils.logging import increment_counter
from ._common import active_filename, error_text, flag, join_lines, require, with_file

IL_VIEWS = ("hlil", "mlil", "llil")


def list_methods(client: BinjaClient, *, offset: int = 0, limit: int = 100) -> str:
    filename = active_filename(client)
    lines = client.get_lines("methods", {"offset": offset, "limit": limit})
    return f"File: {filename}\n{join_lines(lines)}"


def get_entry_points(client: BinjaClient) -> str:
    result = client.fetch_json("entryPoints", schema="entry_points")
    if not isinstance(result, Json):
        return error_text(result)
    entries = result.value.get("entry_points") or []
    return join_lines(f"{entry['address']}\t{entry.get('name') or '(unknown)'}" for entry in entries)


def search_functions_by_name(
    client: BinjaClient, *, query: str, offset: int = 0, limit: int = 100
) -> str:
    if not query:
        raise InvalidArgument("query string is required")
    lines = client.get_lines("searchFunctions", {"query": query, "offset": offset, "limit": limit})
    return join_lines(lines)


def _code_view(client: BinjaClient, path: str, field: str, params: Dict[str, Union[str, int]]) -> str:
    filename = active_filename(client)
    result = client.fetch_json(path, params)
    if not isinstance(result, Json):
        return with_file(filename, error_text(result))
    payload = result.value if isinstance(result.value, dict) else {}
    return with_file(filename, payload.get(field) or "")


def decompile_function(client: BinjaClient, *, name: str) -> str:
    key, value = classify(require(name, "name")).param("name")
    increment_counter("functions.decompile")
    return _code_view(client, "decompile", "decompiled", {key: value})


def fetch_disassembly(client: BinjaClient, *, name: str) -> str:
    key, value = classify(require(name, "name")).param("name")
    increment_counter("functions.assembly")
    return _code_view(client, "assembly", "assembly", {key: value})


def get_il(
    client: BinjaClient, *, name_or_address: str, view: str = "hlil", ssa: bool = False
) -> str:
    ident = classify(require(name_or_address, "name_or_address"))
    if view not in IL_VIEWS:
        raise InvalidArgument(f"view must be one of {', '.join(IL_VIEWS)}")
    key, value = ident.param("name")
    params: Dict[str, Union[str, int]] = {"view": view, "ssa": flag(ssa), key: value}
    increment_counter("functions.il")
    return _code_view(client, "il", "il", params)


def function_at(client: BinjaClient, *, address: str) -> str:
    return join_lines(client.get_lines("functionAt", {"address": require(address, "address")}))


def get_stack_frame_vars(client: BinjaClient, *, function_identifier: str) -> str:
    key, value = classify(require(function_identifier, "function_identifier")).param("name")
    result = client.fetch_json("getStackFrameVars", {key: value}, schema="stack_frame_vars")
    if not isinstance(result, Json):
        return error_text(result)
    variables: List[object] = result.value.get("stack_frame_vars") or []
    return join_lines(str(var) for var in variables)


__all__ = [
    "IL_VIEWS",
    "decompile_function",
    "fetch_disassembly",
    "function_at",
    "get_entry_points",
    "get_il",
    "get_stack_frame_vars",
    "list_methods",
    "search_functions_by_name",
]
