"""Open binaries: status, listing and selection."""
from __future__ import annotations

from typing import Any, Mapping

from ..binja.client import BinjaClient
from ..binja.models import BinaryRecord, Json
from ._common import dump, error_text, first_line, join_lines, require


def get_binary_status(client: BinjaClient) -> str:
    return first_line(client.get_lines("status"))


def _selectors(record: Mapping[str, Any]) -> str:
    return ", ".join(str(selector) for selector in record.get("selectors") or [])


def format_binary(record: BinaryRecord) -> str:
    filename = record.get("filename")
    label = record.get("basename") or filename or "(unknown)"
    view = f" view={record['view_id']}" if record.get("view_id") else ""
    mark = " *active*" if record.get("active") else ""
    return (
        f"{record.get('id')}. {label}{view}{mark}\n"
        f"    path: {filename or '(no filename)'}\n"
        f"    selectors: {_selectors(record)}"
    )


def list_binaries(client: BinjaClient) -> str:
    result = client.fetch_json("binaries", schema="binaries")
    if not isinstance(result, Json):
        return error_text(result)
    return join_lines(format_binary(record) for record in result.value.get("binaries") or [])


def format_selection(selected: Mapping[str, Any]) -> str:
    filename = selected.get("filename") or ""
    display = selected.get("basename") or filename or "(unknown)"
    view = f" (view {selected['view_id']})" if selected.get("view_id") else ""
    path = f"\nFull path: {filename}" if filename else ""
    return (
        f"Selected {selected.get('id') or '?'}: {display}{view}{path}\n"
        f"Selectors: {_selectors(selected)}"
    )


def select_binary(client: BinjaClient, *, view: str) -> str:
    result = client.fetch_json("selectBinary", {"view": require(view, "view")}, schema="select_binary")
    if not isinstance(result, Json):
        return error_text(result)
    selected = result.value.get("selected")
    if selected:
        return format_selection(selected)
    return dump(result.value)


__all__ = [
    "format_binary",
    "format_selection",
    "get_binary_status",
    "list_binaries",
    "select_binary",
]
