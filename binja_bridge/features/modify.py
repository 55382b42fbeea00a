"""Binary modification: prototypes, function creation and byte patches."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..binja.client import BinjaClient
from ..binja.models import Json, PatchResult
from ..utils.identifiers import classify
from ..utils.logging import increment_counter
from ._common import dump, error_text, flag, join_lines, require

NO_PLATFORMS = "(no platforms)"
PARTIAL_MARKER = " (PARTIAL WRITE)"


def set_function_prototype(client: BinjaClient, *, name_or_address: str, prototype: str) -> str:
    key, value = classify(require(name_or_address, "name_or_address")).param()
    params = {key: value, "prototype": require(prototype, "prototype")}
    result = client.fetch_json("setFunctionPrototype", params)
    if not isinstance(result, Json):
        return error_text(result)
    payload: Any = result.value
    if isinstance(payload, dict) and "status" in payload:
        return f"Applied prototype at {payload.get('address')}: {payload.get('applied_type')}"
    return dump(payload)


def make_function_at(client: BinjaClient, *, address: str, platform: Optional[str] = None) -> str:
    params: Dict[str, str] = {"address": require(address, "address")}
    if platform:
        params["platform"] = platform
    result = client.fetch_json("makeFunctionAt", params)
    if not isinstance(result, Json):
        return error_text(result)
    payload: Any = result.value
    status = payload.get("status") if isinstance(payload, dict) else None
    if status == "exists":
        return f"Function already exists at {payload.get('address')}: {payload.get('name')}"
    if status == "ok":
        return f"Created function at {payload.get('address')}: {payload.get('name')}"
    return dump(payload)


def list_platforms(client: BinjaClient) -> str:
    result = client.fetch_json("platforms", schema="platforms")
    if not isinstance(result, Json):
        return error_text(result)
    platforms = result.value.get("platforms")
    if not platforms:
        return NO_PLATFORMS
    return join_lines(platforms)


def format_patch(address: str, result: PatchResult) -> str:
    """Summarise a patch answer; partial writes carry a distinct marker."""

    written = result.get("bytes_written") or 0
    requested = result.get("bytes_requested") or 0
    lines: List[str] = [f"Patched {written}/{requested} bytes at {address}"]
    if result.get("status") == "partial":
        lines[0] += PARTIAL_MARKER
    if result.get("warning"):
        lines.append(f"Warning: {result['warning']}")
    if result.get("original_bytes"):
        lines.append(f"Original: {result['original_bytes']}")
    if result.get("patched_bytes"):
        lines.append(f"Patched:  {result['patched_bytes']}")
    if result.get("saved_to_file"):
        lines.append(f"Saved to file: {result.get('saved_path') or ''}")
    return join_lines(lines)


def patch_bytes(client: BinjaClient, *, address: str, data: str, save_to_file: bool = True) -> str:
    target = require(address, "address")
    params = {
        "address": target,
        "data": require(data, "data"),
        "save_to_file": flag(save_to_file),
    }
    increment_counter("modify.patch")
    result = client.fetch_json("patch", params, schema="patch")
    if not isinstance(result, Json):
        return error_text(result)
    if result.value.get("status") in ("ok", "partial"):
        return format_patch(target, result.value)
    return dump(result.value)


__all__ = [
    "NO_PLATFORMS",
    "format_patch",
    "list_platforms",
    "make_function_at",
    "patch_bytes",
    "set_function_prototype",
]
