"""Whitelist of Binary Ninja plugin endpoints the bridge may call."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple


@dataclass(frozen=True)
class EndpointEntry:
    """A plugin path reachable with one HTTP method."""

    method: str
    path: str

    def allows(self, method: str, path: str) -> bool:
        return method.upper() == self.method and path.strip("/") == self.path


def _get(*paths: str) -> Tuple[EndpointEntry, ...]:
    return tuple(EndpointEntry("GET", path) for path in paths)


def _post(*paths: str) -> Tuple[EndpointEntry, ...]:
    return tuple(EndpointEntry("POST", path) for path in paths)


DEFAULT_ENDPOINTS: Dict[str, Iterable[EndpointEntry]] = {
    "GET": _get(
        "status",
        "binaries",
        "selectBinary",
        "methods",
        "entryPoints",
        "searchFunctions",
        "decompile",
        "il",
        "assembly",
        "renameVariable",
        "renameVariables",
        "comment",
        "comment/function",
        "defineTypes",
        "localTypes",
        "searchTypes",
        "getUserDefinedType",
        "getTypeInfo",
        "declareCType",
        "retypeVariable",
        "setLocalVariableType",
        "data",
        "hexdump",
        "hexdumpByName",
        "getDataDecl",
        "getXrefsTo",
        "getXrefsToField",
        "getXrefsToStruct",
        "getXrefsToType",
        "getXrefsToEnum",
        "getXrefsToUnion",
        "functionAt",
        "getStackFrameVars",
        "classes",
        "namespaces",
        "segments",
        "sections",
        "imports",
        "exports",
        "strings",
        "strings/filter",
        "setFunctionPrototype",
        "makeFunctionAt",
        "platforms",
        "patch",
        "formatValue",
        "convertNumber",
    ),
    "POST": _post(
        "renameFunction",
        "renameData",
        "comment",
        "comment/function",
    ),
}


def is_allowed(
    method: str,
    path: str,
    endpoints: Dict[str, Iterable[EndpointEntry]] = DEFAULT_ENDPOINTS,
) -> bool:
    """Return ``True`` when *path* is declared for *method*."""

    return any(entry.allows(method, path) for entry in endpoints.get(method.upper(), ()))


__all__ = ["DEFAULT_ENDPOINTS", "EndpointEntry", "is_allowed"]
