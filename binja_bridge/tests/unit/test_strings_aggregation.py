from __future__ import annotations

from typing import List, Tuple

import httpx
import pytest

from binja_bridge.binja.models import Failure, FailureReason, Json, RemoteError
from binja_bridge.features import strings
from binja_bridge.features.strings import AggregationError, aggregate_pages
from binja_bridge.tests.fakes import FakePlugin
from binja_bridge.utils.errors import InvalidArgument


def _record(index: int) -> dict:
    return {"address": f"0x{index:x}", "length": 4, "type": "ascii", "value": f"s{index}"}


class PagedSource:
    def __init__(self, sizes: List[int]) -> None:
        self.pages = []
        counter = 0
        for size in sizes:
            self.pages.append([_record(counter + i) for i in range(size)])
            counter += size
        self.calls: List[Tuple[int, int]] = []

    def __call__(self, offset: int, limit: int):
        self.calls.append((offset, limit))
        index = len(self.calls) - 1
        page = self.pages[index] if index < len(self.pages) else []
        return Json({"strings": page})


def test_aggregator_stops_after_short_page() -> None:
    source = PagedSource([5, 5, 5, 2])

    items = aggregate_pages(source, page_size=5, collection_key="strings")

    assert len(source.calls) == 4
    assert [offset for offset, _limit in source.calls] == [0, 5, 10, 15]
    assert len(items) == 17
    assert [item["value"] for item in items] == [f"s{i}" for i in range(17)]


def test_aggregator_empty_first_page() -> None:
    source = PagedSource([0])

    assert aggregate_pages(source, page_size=5, collection_key="strings") == []
    assert len(source.calls) == 1


def test_aggregator_full_pages_then_empty_page() -> None:
    source = PagedSource([3, 3, 0])

    items = aggregate_pages(source, page_size=3, collection_key="strings")

    assert len(items) == 6
    assert len(source.calls) == 3


def test_missing_collection_terminates_without_error() -> None:
    calls = []

    def fetch(offset: int, limit: int):
        calls.append(offset)
        return Json({"unexpected": True})

    assert aggregate_pages(fetch, page_size=10, collection_key="strings") == []
    assert calls == [0]


def test_failed_page_aborts_with_offset() -> None:
    def fetch(offset: int, limit: int):
        if offset == 0:
            return Json({"strings": [_record(i) for i in range(limit)]})
        return Failure(message="GET strings failed: boom", reason=FailureReason.UNREACHABLE)

    with pytest.raises(AggregationError) as excinfo:
        aggregate_pages(fetch, page_size=2, collection_key="strings")

    assert excinfo.value.offset == 2
    assert isinstance(excinfo.value.response, Failure)


def test_page_size_must_be_positive() -> None:
    with pytest.raises(InvalidArgument):
        aggregate_pages(lambda o, l: Json({}), page_size=0, collection_key="strings")


def _strings_route(pages: List[List[dict]]):
    def reply(request: httpx.Request):
        offset = int(request.url.params["offset"])
        limit = int(request.url.params["limit"])
        index = offset // limit
        return {"strings": pages[index] if index < len(pages) else []}

    return reply


def test_list_all_strings_formats_records_in_order() -> None:
    pages = [[_record(0), _record(1)], [_record(2)]]
    plugin = FakePlugin({"strings": _strings_route(pages)})

    text = strings.list_all_strings(plugin.client(), batch_size=2)

    assert text.splitlines() == [
        "0x0\t4\tascii\ts0",
        "0x1\t4\tascii\ts1",
        "0x2\t4\tascii\ts2",
    ]
    assert plugin.params("strings") == [
        {"offset": "0", "limit": "2"},
        {"offset": "2", "limit": "2"},
    ]


def test_list_all_strings_reports_aborted_listing() -> None:
    def reply(request: httpx.Request):
        if request.url.params["offset"] == "0":
            return {"strings": [_record(0), _record(1)]}
        return {"error": "No binary loaded"}

    plugin = FakePlugin({"strings": reply})

    text = strings.list_all_strings(plugin.client(), batch_size=2)

    assert text == "Error: string listing aborted at offset 2: No binary loaded"


@pytest.mark.parametrize("collection", [None, "no strings", {"count": 0}])
def test_list_all_strings_ends_quietly_without_a_list(collection) -> None:
    plugin = FakePlugin({"strings": {"strings": collection}})

    text = strings.list_all_strings(plugin.client(), batch_size=5)

    assert text == ""
    assert len(plugin.calls("strings")) == 1


def test_list_all_strings_keeps_records_with_odd_fields() -> None:
    records = [
        {"address": "0x10", "length": "4", "type": "ascii", "value": "boot"},
        {"address": 32, "length": None, "type": None, "value": "init"},
        "raw entry",
    ]
    plugin = FakePlugin({"strings": {"strings": records}})

    text = strings.list_all_strings(plugin.client(), batch_size=5)

    assert text.splitlines() == [
        "0x10\t4\tascii\tboot",
        "32\tNone\t\tinit",
        "raw entry",
    ]
    assert len(plugin.calls("strings")) == 1


def test_remote_error_page_is_an_aggregation_error() -> None:
    with pytest.raises(AggregationError) as excinfo:
        aggregate_pages(
            lambda o, l: RemoteError(detail="nope"), page_size=1, collection_key="strings"
        )
    assert excinfo.value.offset == 0


def test_paginated_string_listings_forward_count_as_limit() -> None:
    plugin = FakePlugin({"strings": "a\nb\n", "strings/filter": "hello\n"})
    client = plugin.client()

    assert strings.list_strings(client, offset=10, count=2) == "a\nb\n"
    assert strings.list_strings_filter(client, filter="hel") == "hello\n"
    assert plugin.params("strings") == [{"offset": "10", "limit": "2"}]
    assert plugin.params("strings/filter") == [{"offset": "0", "limit": "100", "filter": "hel"}]
