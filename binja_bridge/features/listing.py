"""Paginated program listings: classes, namespaces, segments, sections, symbols."""
from __future__ import annotations

from typing import Iterable, List, Mapping

from ..binja.client import BinjaClient
from ..binja.models import Json, SectionRecord
from ._common import active_filename, error_text, join_lines, with_file


def _page(client: BinjaClient, path: str, offset: int, limit: int) -> str:
    return join_lines(client.get_lines(path, {"offset": offset, "limit": limit}))


def list_classes(client: BinjaClient, *, offset: int = 0, limit: int = 100) -> str:
    return _page(client, "classes", offset, limit)


def list_namespaces(client: BinjaClient, *, offset: int = 0, limit: int = 100) -> str:
    return _page(client, "namespaces", offset, limit)


def list_segments(client: BinjaClient, *, offset: int = 0, limit: int = 100) -> str:
    return _page(client, "segments", offset, limit)


def list_imports(client: BinjaClient, *, offset: int = 0, limit: int = 100) -> str:
    return _page(client, "imports", offset, limit)


def list_exports(client: BinjaClient, *, offset: int = 0, limit: int = 100) -> str:
    return _page(client, "exports", offset, limit)


def format_section(section: Mapping[str, object]) -> str:
    start = section.get("start") or ""
    end = section.get("end") or ""
    name = section.get("name") or "(unnamed)"
    semantics = section.get("semantics") or section.get("type") or ""
    line = f"{start}-{end}\t{section.get('size')}\t{name}"
    return f"{line}\t{semantics}" if semantics else line


def _section_lines(sections: Iterable[SectionRecord]) -> List[str]:
    return [format_section(section) for section in sections]


def list_sections(client: BinjaClient, *, offset: int = 0, limit: int = 100) -> str:
    result = client.fetch_json("sections", {"offset": offset, "limit": limit}, schema="sections")
    filename = active_filename(client)
    if not isinstance(result, Json):
        return with_file(filename, error_text(result))
    lines = [f"File: {filename}"]
    lines.extend(_section_lines(result.value.get("sections") or []))
    return join_lines(lines)


__all__ = [
    "format_section",
    "list_classes",
    "list_exports",
    "list_imports",
    "list_namespaces",
    "list_sections",
    "list_segments",
]
