"""Function, variable and data renaming."""
from __future__ import annotations

import json
from typing import Dict, Optional

from ..binja.client import BinjaClient
from ..binja.models import Json
from ..utils.errors import InvalidArgument
from ..utils.identifiers import classify
from ..utils.logging import increment_counter
from ._common import dump, error_text, require


def rename_function(client: BinjaClient, *, old_name: str, new_name: str) -> str:
    payload = {
        "oldName": require(old_name, "old_name"),
        "newName": require(new_name, "new_name"),
    }
    return client.post("renameFunction", payload)


def rename_single_variable(
    client: BinjaClient, *, function_name: str, variable_name: str, new_name: str
) -> str:
    result = client.fetch_json(
        "renameVariable",
        {
            "functionName": require(function_name, "function_name"),
            "variableName": require(variable_name, "variable_name"),
            "newName": require(new_name, "new_name"),
        },
    )
    if not isinstance(result, Json):
        return error_text(result)
    if isinstance(result.value, dict) and "status" in result.value:
        return str(result.value["status"])
    return dump(result.value)


def _checked_json(text: str, argument: str) -> str:
    try:
        json.loads(text)
    except json.JSONDecodeError:
        raise InvalidArgument(f"{argument} is not valid JSON") from None
    return text


def build_batch_params(
    function_identifier: str,
    *,
    mapping_json: Optional[str] = None,
    pairs: Optional[str] = None,
    renames_json: Optional[str] = None,
) -> Dict[str, str]:
    """Validate the batch-rename encoding and build the query parameters.

    When several encodings are given the first of ``renames_json``,
    ``mapping_json`` and ``pairs`` wins. Raises :class:`InvalidArgument`
    naming the offending input; nothing is sent for a rejected batch.
    """

    key, value = classify(require(function_identifier, "function_identifier")).param(
        "functionName"
    )
    if not (renames_json or mapping_json or pairs):
        raise InvalidArgument("provide mapping_json, renames_json, or pairs")

    params = {key: value}
    if renames_json:
        params["renames"] = _checked_json(renames_json, "renames_json")
    elif mapping_json:
        params["mapping"] = _checked_json(mapping_json, "mapping_json")
    else:
        params["pairs"] = str(pairs)
    return params


def rename_multi_variables(
    client: BinjaClient,
    *,
    function_identifier: str,
    mapping_json: Optional[str] = None,
    pairs: Optional[str] = None,
    renames_json: Optional[str] = None,
) -> str:
    params = build_batch_params(
        function_identifier,
        mapping_json=mapping_json,
        pairs=pairs,
        renames_json=renames_json,
    )
    increment_counter("rename.batch")
    result = client.fetch_json("renameVariables", params, schema="batch_rename")
    if not isinstance(result, Json):
        return error_text(result)
    return f"Batch rename: {result.value.get('renamed')}/{result.value.get('total')} applied"


def rename_data(client: BinjaClient, *, address: str, new_name: str) -> str:
    payload = {
        "address": require(address, "address"),
        "newName": require(new_name, "new_name"),
    }
    return client.post("renameData", payload)


__all__ = [
    "build_batch_params",
    "rename_data",
    "rename_function",
    "rename_multi_variables",
    "rename_single_variable",
]
