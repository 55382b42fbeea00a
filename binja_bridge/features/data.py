"""Data labels, hexdumps and data declarations."""
from __future__ import annotations

from typing import Any, Dict, Union

from ..binja.client import BinjaClient
from ..binja.models import Json
from ..utils.identifiers import classify
from ._common import dump, error_text, join_lines, require, with_length

NO_DECLARATION = "(no declaration)"


def list_data_items(client: BinjaClient, *, offset: int = 0, limit: int = 100) -> str:
    return join_lines(client.get_lines("data", {"offset": offset, "limit": limit}))


def hexdump_address(client: BinjaClient, *, address: str, length: int = -1) -> str:
    params: Dict[str, Union[str, int]] = {"address": require(address, "address")}
    return client.get_text("hexdump", with_length(params, length))


def hexdump_data(client: BinjaClient, *, name_or_address: str, length: int = -1) -> str:
    ident = classify(require(name_or_address, "name_or_address"))
    key, value = ident.param()
    path = "hexdump" if ident.is_address else "hexdumpByName"
    return client.get_text(path, with_length({key: value}, length))


def get_data_decl(client: BinjaClient, *, name_or_address: str, length: int = -1) -> str:
    ident = classify(require(name_or_address, "name_or_address"))
    key, value = ident.param()
    result = client.fetch_json("getDataDecl", with_length({key: value}, length))
    if not isinstance(result, Json):
        return error_text(result)
    payload: Any = result.value
    if not isinstance(payload, dict):
        return dump(payload)
    decl = payload.get("decl") or NO_DECLARATION
    hexdump = payload.get("hexdump") or ""
    address = payload.get("address") or ""
    name = payload.get("name") or ident.normalized
    return f"Declaration ({address} {name}):\n{decl}\n\nHexdump:\n{hexdump}"


__all__ = [
    "NO_DECLARATION",
    "get_data_decl",
    "hexdump_address",
    "hexdump_data",
    "list_data_items",
]
