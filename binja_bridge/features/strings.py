"""String listings, including the aggregated listing across pages."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Union

from ..binja.client import BinjaClient
from ..binja.models import Failure, Json, RemoteError
from ..utils.errors import InvalidArgument, render_error
from ..utils.logging import increment_counter
from ._common import join_lines

logger = logging.getLogger("binja.bridge.strings")

PageResponse = Union[Json, RemoteError, Failure]
PageFetcher = Callable[[int, int], PageResponse]


class AggregationError(RuntimeError):
    """A page fetch failed part way through an aggregated listing."""

    def __init__(self, offset: int, response: Union[RemoteError, Failure]) -> None:
        self.offset = offset
        self.response = response
        super().__init__(f"aggregation aborted at offset {offset}: {response.message}")


def aggregate_pages(
    fetch_page: PageFetcher, *, page_size: int, collection_key: str
) -> List[Any]:
    """Collect ``collection_key`` items from consecutive pages.

    Pages are requested at offsets ``0, page_size, 2 * page_size, ...``. The
    loop ends on an empty page, a page shorter than ``page_size`` or a payload
    without a list under ``collection_key``. A failed page raises
    :class:`AggregationError` and the items gathered so far are dropped.
    """

    if page_size < 1:
        raise InvalidArgument("batch_size must be at least 1")

    items: List[Any] = []
    offset = 0
    while True:
        response = fetch_page(offset, page_size)
        increment_counter("strings.pages")
        if isinstance(response, (RemoteError, Failure)):
            logger.warning(
                "aggregation.failed",
                extra={"offset": offset, "collected": len(items), "error": response.message},
            )
            raise AggregationError(offset, response)
        payload = response.value
        page = payload.get(collection_key) if isinstance(payload, dict) else None
        if not isinstance(page, list) or not page:
            break
        items.extend(page)
        if len(page) < page_size:
            break
        offset += page_size
    return items


def format_string_record(record: Any) -> str:
    if not isinstance(record, Mapping):
        return str(record)
    return (
        f"{record.get('address') or ''}\t{record.get('length')}\t"
        f"{record.get('type') or ''}\t{record.get('value') or ''}"
    )


def list_strings(client: BinjaClient, *, offset: int = 0, count: int = 100) -> str:
    return join_lines(client.get_lines("strings", {"offset": offset, "limit": count}))


def list_strings_filter(
    client: BinjaClient, *, offset: int = 0, count: int = 100, filter: str = ""
) -> str:
    params: Dict[str, Union[str, int]] = {"offset": offset, "limit": count, "filter": filter}
    return join_lines(client.get_lines("strings/filter", params))


def list_all_strings(client: BinjaClient, *, batch_size: int = 500) -> str:
    def fetch_page(offset: int, limit: int) -> PageResponse:
        return client.fetch_json("strings", {"offset": offset, "limit": limit})

    try:
        records = aggregate_pages(fetch_page, page_size=batch_size, collection_key="strings")
    except AggregationError as exc:
        return render_error(
            f"string listing aborted at offset {exc.offset}: {exc.response.message}"
        )
    return join_lines(format_string_record(record) for record in records)


__all__ = [
    "AggregationError",
    "aggregate_pages",
    "format_string_record",
    "list_all_strings",
    "list_strings",
    "list_strings_filter",
]
