"""Response variants and lightweight type hints for plugin payloads."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, TypedDict, Union, NotRequired


class FailureReason(str, Enum):
    UNREACHABLE = "unreachable"
    TIMEOUT = "timeout"
    STATUS = "status"
    MALFORMED = "malformed"
    NOT_ALLOWED = "not_allowed"


@dataclass(frozen=True, slots=True)
class Text:
    body: str


@dataclass(frozen=True, slots=True)
class Lines:
    items: List[str]


@dataclass(frozen=True, slots=True)
class Json:
    value: Any


@dataclass(frozen=True, slots=True)
class RemoteError:
    """The plugin answered with an ``{"error": ...}`` envelope."""

    detail: Any
    status: Optional[int] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> str:
        if isinstance(self.detail, str):
            return self.detail
        return json.dumps(self.detail)


@dataclass(frozen=True, slots=True)
class Failure:
    """No usable answer reached us: network error, bad status or bad body."""

    message: str
    reason: FailureReason
    status: Optional[int] = None
    body: str = ""
    cause: str = ""


RemoteResponse = Union[Text, Lines, Json, RemoteError, Failure]


def is_failure(response: RemoteResponse) -> bool:
    return isinstance(response, (RemoteError, Failure))


class StringRecord(TypedDict, total=False):
    address: str
    length: int
    type: str
    value: str


class EntryPoint(TypedDict):
    address: str
    name: NotRequired[str]


class SectionRecord(TypedDict, total=False):
    name: str
    start: str
    end: str
    size: int
    semantics: str
    type: str


class BinaryRecord(TypedDict, total=False):
    id: int
    view_id: int
    filename: str
    basename: str
    selectors: List[Any]
    active: bool


class DataDecl(TypedDict, total=False):
    address: str
    name: str
    decl: str
    hexdump: str


class PatchResult(TypedDict, total=False):
    status: str
    original_bytes: str
    patched_bytes: str
    bytes_written: int
    bytes_requested: int
    saved_to_file: bool
    saved_path: str
    warning: str


__all__ = [
    "BinaryRecord",
    "DataDecl",
    "EntryPoint",
    "Failure",
    "FailureReason",
    "Json",
    "Lines",
    "PatchResult",
    "RemoteError",
    "RemoteResponse",
    "SectionRecord",
    "StringRecord",
    "Text",
    "is_failure",
]
