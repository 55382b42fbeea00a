from __future__ import annotations

import httpx
import pytest

from binja_bridge.binja.client import NO_RESPONSE_HINT, BinjaClient
from binja_bridge.binja.models import Failure, FailureReason, Json, Lines, RemoteError, Text
from binja_bridge.tests.fakes import FakePlugin, unreachable_client
from binja_bridge.utils.config import BridgeConfig
from binja_bridge.utils.logging import request_scope


def test_unreachable_host_never_raises() -> None:
    client = unreachable_client()

    text = client.get_text("methods", {"offset": 0, "limit": 10})
    payload = client.get_json("status")
    lines = client.get_lines("methods")
    posted = client.post("renameFunction", {"oldName": "a", "newName": "b"})

    assert text.startswith("Error")
    assert NO_RESPONSE_HINT in text
    assert isinstance(payload, dict)
    assert payload["error"] == f"Request failed: {NO_RESPONSE_HINT}"
    assert len(lines) == 1 and lines[0].startswith("Error")
    assert posted.startswith("Error")


def test_unreachable_failure_is_tagged() -> None:
    result = unreachable_client().fetch_json("status")

    assert isinstance(result, Failure)
    assert result.reason is FailureReason.UNREACHABLE
    assert result.message == f"GET status failed: {NO_RESPONSE_HINT}"


def test_timeout_reports_configured_seconds() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = BinjaClient(BridgeConfig(timeout=12.5), transport=httpx.MockTransport(handler))
    result = client.fetch_text("decompile", {"name": "main"})

    assert isinstance(result, Failure)
    assert result.reason is FailureReason.TIMEOUT
    assert "timed out after 12.5s" in result.message


def test_error_envelope_passes_through_on_any_status() -> None:
    plugin = FakePlugin(
        {
            "decompile": httpx.Response(500, json={"error": "Function not found", "name": "x"}),
            "assembly": {"error": "No binary loaded"},
        }
    )
    client = plugin.client()

    failed = client.fetch_json("decompile", {"name": "x"})
    ok_status = client.fetch_json("assembly", {"name": "x"})

    assert isinstance(failed, RemoteError)
    assert failed.status == 500
    assert failed.message == "Function not found"
    assert client.get_json("decompile", {"name": "x"}) == {
        "error": "Function not found",
        "name": "x",
    }
    assert isinstance(ok_status, RemoteError)
    assert ok_status.status == 200


def test_structured_error_detail_is_json_encoded() -> None:
    plugin = FakePlugin({"il": {"error": {"reason": "bad view"}}})

    result = plugin.client().fetch_json("il", {"name": "main"})

    assert isinstance(result, RemoteError)
    assert result.message == '{"reason": "bad view"}'


def test_non_success_status_renders_status_and_body() -> None:
    plugin = FakePlugin({"methods": httpx.Response(503, text="  busy \n")})
    client = plugin.client()

    tagged = client.fetch_lines("methods")

    assert isinstance(tagged, Failure)
    assert tagged.reason is FailureReason.STATUS
    assert tagged.status == 503
    assert tagged.message == "Server returned 503: Service Unavailable"
    assert client.get_text("methods") == "Error 503: busy"
    assert client.get_json("methods") == {"error": "Error 503: Service Unavailable"}


def test_repeated_reads_of_one_canned_response_never_raise() -> None:
    canned = httpx.Response(500, json={"error": "Function not found"})
    canned.text
    plugin = FakePlugin({"decompile": canned})
    client = plugin.client()

    first = client.fetch_json("decompile", {"name": "x"})
    second = client.get_json("decompile", {"name": "x"})

    assert isinstance(first, RemoteError)
    assert first.message == "Function not found"
    assert second == {"error": "Function not found"}


def test_body_without_charset_is_decoded_as_utf8() -> None:
    body = "größe\nこんにちは".encode("utf-8")
    plugin = FakePlugin(
        {"strings": httpx.Response(200, content=body, headers={"Content-Type": "text/plain"})}
    )

    assert plugin.client().get_lines("strings") == ["größe", "こんにちは"]


def test_invalid_json_is_malformed() -> None:
    plugin = FakePlugin({"status": "<html>oops</html>"})
    client = plugin.client()

    tagged = client.fetch_json("status")
    payload = client.get_json("status")

    assert isinstance(tagged, Failure)
    assert tagged.reason is FailureReason.MALFORMED
    assert payload["error"].startswith("Invalid JSON response: ")


def test_schema_mismatch_is_malformed() -> None:
    plugin = FakePlugin({"entryPoints": {"entry_points": "not-a-list"}})

    result = plugin.client().fetch_json("entryPoints", schema="entry_points")

    assert isinstance(result, Failure)
    assert result.reason is FailureReason.MALFORMED
    assert result.message.startswith("Unexpected response from entryPoints")


def test_blocked_endpoint_never_reaches_transport() -> None:
    plugin = FakePlugin()
    client = plugin.client()

    text = client.get_text("shutdown")
    payload = client.get_json("shutdown")

    assert text == "Error: endpoint GET shutdown not allowed"
    assert payload == {"error": "endpoint GET shutdown not allowed"}
    assert plugin.requests == []


def test_lines_keep_trailing_empty_entry() -> None:
    plugin = FakePlugin({"methods": "main\nstart\n"})
    client = plugin.client()

    assert client.get_lines("methods") == ["main", "start", ""]
    tagged = client.fetch_lines("methods")
    assert isinstance(tagged, Lines)
    assert tagged.items == ["main", "start", ""]


def test_none_params_are_dropped() -> None:
    plugin = FakePlugin({"makeFunctionAt": {"status": "ok"}})

    result = plugin.client().fetch_json("makeFunctionAt", {"address": "0x10", "platform": None})

    assert isinstance(result, Json)
    assert plugin.params("makeFunctionAt") == [{"address": "0x10"}]


def test_post_mapping_is_sent_as_json() -> None:
    plugin = FakePlugin({"renameFunction": "Renamed successfully\n"})

    result = plugin.client().fetch_post("renameFunction", {"oldName": "a", "newName": "b"})

    assert isinstance(result, Text)
    assert result.body == "Renamed successfully"
    request = plugin.calls("renameFunction")[0]
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/json"
    assert plugin.bodies("renameFunction") == [{"oldName": "a", "newName": "b"}]


def test_post_string_is_sent_as_plain_text() -> None:
    plugin = FakePlugin({"comment": "ok"})

    plugin.client().post("comment", "raw body")

    request = plugin.calls("comment")[0]
    assert request.headers["content-type"].startswith("text/plain")
    assert request.content == b"raw body"


def test_requests_target_configured_base_url() -> None:
    plugin = FakePlugin({"status": {"filename": "a.bin"}})

    plugin.client(BridgeConfig(host="binja.local", port=9100)).get_json("status")

    assert str(plugin.requests[0].url).startswith("http://binja.local:9100/status")


def test_request_counters_are_recorded() -> None:
    plugin = FakePlugin({"status": {"filename": "a.bin"}, "comment": "ok"})
    client = plugin.client()

    with request_scope("binja.test", extra={"tool": "test"}) as ctx:
        client.get_json("status")
        client.get_text("status")
        client.post("comment", {"address": "0x1", "comment": "hi"})

    assert ctx.counters["binja.get"] == 2
    assert ctx.counters["binja.post"] == 1


def test_client_closes_session() -> None:
    plugin = FakePlugin()
    with plugin.client() as client:
        assert client.base_url == "http://localhost:9009"
    with pytest.raises(RuntimeError):
        client._session.get("/status")
