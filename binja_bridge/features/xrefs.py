"""Cross references to addresses, fields and named types."""
from __future__ import annotations

from ..binja.client import BinjaClient
from ._common import join_lines, require


def get_xrefs_to(client: BinjaClient, *, address: str) -> str:
    return join_lines(client.get_lines("getXrefsTo", {"address": require(address, "address")}))


def get_xrefs_to_field(client: BinjaClient, *, struct_name: str, field_name: str) -> str:
    params = {
        "struct": require(struct_name, "struct_name"),
        "field": require(field_name, "field_name"),
    }
    return join_lines(client.get_lines("getXrefsToField", params))


def _by_name(client: BinjaClient, path: str, value: str, argument: str) -> str:
    return join_lines(client.get_lines(path, {"name": require(value, argument)}))


def get_xrefs_to_struct(client: BinjaClient, *, struct_name: str) -> str:
    return _by_name(client, "getXrefsToStruct", struct_name, "struct_name")


def get_xrefs_to_type(client: BinjaClient, *, type_name: str) -> str:
    return _by_name(client, "getXrefsToType", type_name, "type_name")


def get_xrefs_to_enum(client: BinjaClient, *, enum_name: str) -> str:
    return _by_name(client, "getXrefsToEnum", enum_name, "enum_name")


def get_xrefs_to_union(client: BinjaClient, *, union_name: str) -> str:
    return _by_name(client, "getXrefsToUnion", union_name, "union_name")


__all__ = [
    "get_xrefs_to",
    "get_xrefs_to_enum",
    "get_xrefs_to_field",
    "get_xrefs_to_struct",
    "get_xrefs_to_type",
    "get_xrefs_to_union",
]
