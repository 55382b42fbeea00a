"""Type definitions, lookup and variable retyping."""
from __future__ import annotations

from typing import Any, Dict, Union

from ..binja.client import BinjaClient
from ..binja.models import Json
from ..utils.identifiers import classify
from ._common import dump, error_text, flag, join_lines, require


def define_types(client: BinjaClient, *, c_code: str) -> str:
    result = client.fetch_json("defineTypes", {"cCode": require(c_code, "c_code")})
    if not isinstance(result, Json):
        return error_text(result)
    if isinstance(result.value, list):
        return "Defined types: " + ", ".join(str(name) for name in result.value)
    return dump(result.value)


def _type_listing(
    client: BinjaClient, path: str, params: Dict[str, Union[str, int]], include_libraries: bool
) -> str:
    params["includeLibraries"] = flag(include_libraries)
    return join_lines(client.get_lines(path, params))


def list_local_types(
    client: BinjaClient, *, offset: int = 0, count: int = 200, include_libraries: bool = False
) -> str:
    return _type_listing(
        client, "localTypes", {"offset": offset, "limit": count}, include_libraries
    )


def search_types(
    client: BinjaClient,
    *,
    query: str,
    offset: int = 0,
    count: int = 200,
    include_libraries: bool = False,
) -> str:
    params: Dict[str, Union[str, int]] = {
        "query": require(query, "query"),
        "offset": offset,
        "limit": count,
    }
    return _type_listing(client, "searchTypes", params, include_libraries)


def get_user_defined_type(client: BinjaClient, *, type_name: str) -> str:
    name = require(type_name, "type_name")
    return join_lines(client.get_lines("getUserDefinedType", {"name": name}))


def get_type_info(client: BinjaClient, *, type_name: str) -> str:
    result = client.fetch_json("getTypeInfo", {"name": require(type_name, "type_name")})
    if not isinstance(result, Json):
        return error_text(result)
    return dump(result.value, pretty=True)


def declare_c_type(client: BinjaClient, *, c_declaration: str) -> str:
    result = client.fetch_json(
        "declareCType", {"declaration": require(c_declaration, "c_declaration")}
    )
    if not isinstance(result, Json):
        return error_text(result)
    payload: Any = result.value
    if isinstance(payload, dict) and payload.get("defined_types"):
        names = ", ".join(payload["defined_types"])
        return f"Declared types ({payload.get('count') or 0}): {names}"
    return dump(payload)


def retype_variable(
    client: BinjaClient, *, function_name: str, variable_name: str, type_str: str
) -> str:
    key, value = classify(require(function_name, "function_name")).param("functionName")
    result = client.fetch_json(
        "retypeVariable",
        {
            key: value,
            "variableName": require(variable_name, "variable_name"),
            "type": require(type_str, "type_str"),
        },
    )
    if not isinstance(result, Json):
        return error_text(result)
    if isinstance(result.value, dict) and "status" in result.value:
        return str(result.value["status"])
    return dump(result.value)


def set_local_variable_type(
    client: BinjaClient, *, function_address: str, variable_name: str, new_type: str
) -> str:
    # the plugin resolves functionAddress as either an address or a name
    result = client.fetch_json(
        "setLocalVariableType",
        {
            "functionAddress": require(function_address, "function_address"),
            "variableName": require(variable_name, "variable_name"),
            "newType": require(new_type, "new_type"),
        },
    )
    if not isinstance(result, Json):
        return error_text(result)
    payload: Any = result.value
    if isinstance(payload, dict) and payload.get("status") == "ok":
        return (
            f"Retyped {payload.get('variable')} in {payload.get('function')} "
            f"to {payload.get('applied_type')}"
        )
    return dump(payload)


__all__ = [
    "declare_c_type",
    "define_types",
    "get_type_info",
    "get_user_defined_type",
    "list_local_types",
    "retype_variable",
    "search_types",
    "set_local_variable_type",
]
