"""Tests for the generateContent client."""

import base64
from dataclasses import replace
import urllib.error

from conftest import FakeTransport

from lllm import client
from lllm.models import Answer, CompletionRequest, Failure


def test_empty_text_fails_without_request(config):
    transport = FakeTransport()
    result = client.complete(CompletionRequest(text=""), config, transport=transport)
    assert result == Failure("Input is empty. Please enter a query.")
    assert not transport.called


def test_missing_api_key_fails_without_request(config):
    transport = FakeTransport()
    cfg = replace(config, api_key="")
    result = client.complete(CompletionRequest(text="hi"), cfg, transport=transport)
    assert result == Failure("API Key is not configured. Please set it in the plugin settings.")
    assert not transport.called


def test_well_formed_response_yields_answer(config, answer_payload):
    transport = FakeTransport(payload=answer_payload)
    result = client.complete(CompletionRequest(text="hi"), config, transport=transport)
    assert result == Answer("bla bla bla")


def test_request_url_and_headers(config, answer_payload):
    transport = FakeTransport(payload=answer_payload)
    client.complete(CompletionRequest(text="hi"), config, transport=transport)
    call = transport.calls[0]
    assert call["url"] == "https://fake-endpoint.com/v1beta/models/test-model:generateContent?key=test-api-key"
    assert call["headers"]["Content-Type"] == "application/json"


def test_missing_candidates_yields_empty_answer(config):
    transport = FakeTransport(payload={"promptFeedback": {}})
    result = client.complete(CompletionRequest(text="hi"), config, transport=transport)
    assert result == Answer("")


def test_partial_response_shapes_yield_empty_answer():
    assert client.extract_answer({"candidates": []}) == ""
    assert client.extract_answer({"candidates": [{}]}) == ""
    assert client.extract_answer({"candidates": [{"content": {"parts": []}}]}) == ""
    assert client.extract_answer({"candidates": [{"content": {"parts": [{"inline_data": {}}]}}]}) == ""
    assert client.extract_answer(["not", "an", "object"]) == ""


def test_non_success_status_is_failure(config):
    transport = FakeTransport(status=503, payload={})
    result = client.complete(CompletionRequest(text="hi"), config, transport=transport)
    assert isinstance(result, Failure)
    assert result.message.startswith("Error querying LLM: ")
    assert "503" in result.message


def test_transport_exception_is_failure(config):
    transport = FakeTransport(error=urllib.error.URLError("connection refused"))
    result = client.complete(CompletionRequest(text="hi"), config, transport=transport)
    assert isinstance(result, Failure)
    assert result.message.startswith("Error querying LLM: ")
    assert "connection refused" in result.message


def test_invalid_json_is_failure(config):
    transport = FakeTransport(raw=b"<html>oops</html>")
    result = client.complete(CompletionRequest(text="hi"), config, transport=transport)
    assert isinstance(result, Failure)
    assert result.message.startswith("Error querying LLM: ")


def test_body_with_text_only():
    body = client.build_request_body(CompletionRequest(text="hello"))
    assert body == {"contents": [{"parts": [{"text": "hello"}]}]}


def test_body_with_image_system_prompt_and_tools():
    req = CompletionRequest(
        text="what is this",
        image=b"png-bytes",
        mime_type="image/png",
        system_prompt="Be brief.",
        tools_enabled=True,
    )
    body = client.build_request_body(req)
    parts = body["contents"][0]["parts"]
    assert parts[0] == {"text": "what is this"}
    assert parts[1] == {
        "inline_data": {"mime_type": "image/png", "data": base64.b64encode(b"png-bytes").decode("ascii")}
    }
    assert body["systemInstruction"] == {"parts": [{"text": "Be brief."}]}
    assert body["tools"] == [{"google_search": {}}]


def test_image_without_mime_type_is_not_attached():
    body = client.build_request_body(CompletionRequest(text="hi", image=b"png"))
    assert body["contents"][0]["parts"] == [{"text": "hi"}]


def test_request_from_config_attaches_successful_capture(config):
    from lllm.models import CaptureResult

    cfg = replace(config, tools_enabled=True)
    req = CompletionRequest.from_config("q", cfg, CaptureResult(image=b"x", mime_type="image/png"))
    assert req.image == b"x"
    assert req.mime_type == "image/png"
    assert req.system_prompt == "You are a test assistant."
    assert req.tools_enabled is True

    empty = CompletionRequest.from_config("q", cfg, CaptureResult.empty())
    assert empty.image is None and empty.mime_type is None


def test_redact_api_key():
    url = "https://x/models/m:generateContent?key=secret"
    assert client.redact_api_key(url) == "https://x/models/m:generateContent?key=***"


def test_urllib_transport_posts_json(monkeypatch):
    seen = {}

    class FakeResponse:
        status = 200

        def read(self):
            return b'{"ok": true}'

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

    def fake_urlopen(request):
        seen["method"] = request.get_method()
        seen["data"] = request.data
        seen["content_type"] = request.get_header("Content-type")
        return FakeResponse()

    monkeypatch.setattr(client.urllib.request, "urlopen", fake_urlopen)
    status, body = client.urllib_transport("https://x", b"{}", {"Content-Type": "application/json"})
    assert (status, body) == (200, b'{"ok": true}')
    assert seen == {"method": "POST", "data": b"{}", "content_type": "application/json"}
