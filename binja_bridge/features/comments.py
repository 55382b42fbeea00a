"""Address and function comments."""
from __future__ import annotations

from ..binja.client import BinjaClient
from ._common import first_line, require

_DELETE = "DELETE"


def set_comment(client: BinjaClient, *, address: str, comment: str) -> str:
    return client.post("comment", {"address": require(address, "address"), "comment": comment})


def get_comment(client: BinjaClient, *, address: str) -> str:
    return first_line(client.get_lines("comment", {"address": require(address, "address")}))


def delete_comment(client: BinjaClient, *, address: str) -> str:
    return client.post("comment", {"address": require(address, "address"), "_method": _DELETE})


def set_function_comment(client: BinjaClient, *, function_name: str, comment: str) -> str:
    name = require(function_name, "function_name")
    return client.post("comment/function", {"name": name, "comment": comment})


def get_function_comment(client: BinjaClient, *, function_name: str) -> str:
    name = require(function_name, "function_name")
    return first_line(client.get_lines("comment/function", {"name": name}))


def delete_function_comment(client: BinjaClient, *, function_name: str) -> str:
    name = require(function_name, "function_name")
    return client.post("comment/function", {"name": name, "_method": _DELETE})


__all__ = [
    "delete_comment",
    "delete_function_comment",
    "get_comment",
    "get_function_comment",
    "set_comment",
    "set_function_comment",
]
