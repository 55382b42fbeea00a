"""Value formatting and number conversion."""
from __future__ import annotations

from ..binja.client import BinjaClient
from ..binja.models import Json
from ..utils.errors import InvalidArgument
from ._common import dump, error_text, join_lines, require


def _raw_text(text: str) -> str:
    # whitespace can be part of the value being converted
    if not text:
        raise InvalidArgument("text is required")
    return text


def format_value(client: BinjaClient, *, address: str, text: str, size: int = 0) -> str:
    params = {"address": require(address, "address"), "text": _raw_text(text), "size": size}
    return join_lines(client.get_lines("formatValue", params))


def convert_number(client: BinjaClient, *, text: str, size: int = 0) -> str:
    result = client.fetch_json("convertNumber", {"text": _raw_text(text), "size": size})
    if not isinstance(result, Json):
        return error_text(result)
    return dump(result.value, pretty=True)


__all__ = ["convert_number", "format_value"]
