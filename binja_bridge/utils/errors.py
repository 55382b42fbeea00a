"""Error kinds and rendering helpers for tool payloads."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional


class ErrorKind(str, Enum):
    """Where a failure originated."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    TRANSPORT = "TRANSPORT"
    REMOTE = "REMOTE"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class ErrorTemplate:
    """Default message for an error kind."""

    message: str


_TEMPLATES: Mapping[ErrorKind, ErrorTemplate] = {
    ErrorKind.INVALID_ARGUMENT: ErrorTemplate("invalid arguments"),
    ErrorKind.TRANSPORT: ErrorTemplate(
        "no response from server - is Binary Ninja running with the MCP plugin?"
    ),
    ErrorKind.REMOTE: ErrorTemplate("the Binary Ninja plugin rejected the request"),
    ErrorKind.INTERNAL: ErrorTemplate("internal error"),
}


class InvalidArgument(ValueError):
    """Raised by tool logic for arguments rejected before any request is made."""

    kind = ErrorKind.INVALID_ARGUMENT


def describe(kind: ErrorKind) -> str:
    """Return the default message for *kind*."""

    try:
        return _TEMPLATES[kind].message
    except KeyError:  # pragma: no cover - every kind has a template
        raise ValueError(f"No error template registered for {kind!s}") from None


def render_error(message: Optional[str] = None, *, kind: ErrorKind = ErrorKind.REMOTE) -> str:
    """Render a single ``Error: ...`` payload line."""

    text = message if message else describe(kind)
    return f"Error: {text}"


def is_error_text(text: str) -> bool:
    """Return ``True`` for text payloads produced by the transport error paths."""

    return text.startswith("Error")


__all__ = [
    "ErrorKind",
    "ErrorTemplate",
    "InvalidArgument",
    "describe",
    "is_error_text",
    "render_error",
]
