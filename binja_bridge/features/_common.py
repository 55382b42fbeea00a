"""Formatting helpers shared by the tool features."""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Optional, Union

from ..binja.client import BinjaClient
from ..binja.models import Failure, Json, RemoteError
from ..utils.errors import ErrorKind, InvalidArgument, render_error
from ..utils.logging import increment_counter

NO_FILE = "(none)"

# The status query only labels the output; keep it from stalling a tool.
STATUS_TIMEOUT = 5.0


def active_filename(client: BinjaClient) -> str:
    """Best-effort name of the file currently open in Binary Ninja."""

    increment_counter("status.lookups")
    result = client.fetch_json("status", timeout=STATUS_TIMEOUT, schema="status")
    if isinstance(result, Json) and isinstance(result.value, dict):
        return result.value.get("filename") or NO_FILE
    return NO_FILE


def with_file(filename: str, body: str) -> str:
    return f"File: {filename}\n\n{body}"


def error_text(response: Union[RemoteError, Failure]) -> str:
    kind = ErrorKind.REMOTE if isinstance(response, RemoteError) else ErrorKind.TRANSPORT
    return render_error(response.message, kind=kind)


def join_lines(lines: Iterable[str]) -> str:
    return "\n".join(lines)


def first_line(lines: list[str]) -> str:
    return lines[0] if lines else ""


def dump(value: Any, *, pretty: bool = False) -> str:
    if pretty:
        return json.dumps(value, indent=2)
    return json.dumps(value, separators=(",", ":"))


def flag(value: bool) -> int:
    return 1 if value else 0


def require(value: Optional[str], argument: str, message: Optional[str] = None) -> str:
    """Return *value* unchanged, rejecting blank input before any request."""

    if value is None or not value.strip():
        raise InvalidArgument(message or f"{argument} is required")
    return value


def with_length(params: Dict[str, Union[str, int]], length: int) -> Dict[str, Union[str, int]]:
    """Add ``length`` unless it is the ``-1`` "defined size" sentinel."""

    if length is not None and length != -1:
        params["length"] = length
    return params


__all__ = [
    "NO_FILE",
    "STATUS_TIMEOUT",
    "active_filename",
    "dump",
    "error_text",
    "first_line",
    "flag",
    "join_lines",
    "require",
    "with_file",
    "with_length",
]
