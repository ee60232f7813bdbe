"""
Tests for the reasoning endpoint client
"""
import json
import logging

import httpx
import pytest

from vocalis.core.errors import UpstreamErrorKind
from vocalis.core.gemini_client import GeminiClient, ReasoningResult

API_URL = "https://llm.example.test/v1beta/models/gemini:generateContent"


def _completion(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def make_client(handler, **kwargs) -> GeminiClient:
    """Client whose HTTP layer is served by `handler`"""
    calls = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
    client = GeminiClient(api_url=API_URL, api_key=kwargs.pop("api_key", "k-123"), timeout=1.0,
                          http_client=http_client, **kwargs)
    client.calls = calls
    return client


@pytest.mark.asyncio
async def test_successful_completion_returns_text():
    client = make_client(lambda request: httpx.Response(200, json=_completion('{"type":"general"}')))

    result = await client.generate("hello")

    assert result == ReasoningResult(text='{"type":"general"}')
    assert result.ok
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_request_shape():
    client = make_client(lambda request: httpx.Response(200, json=_completion("ok")))

    await client.generate("the prompt")

    request = client.calls[0]
    assert request.method == "POST"
    assert str(request.url) == API_URL
    assert request.headers["x-goog-api-key"] == "k-123"
    assert json.loads(request.content) == {"contents": [{"parts": [{"text": "the prompt"}]}]}


@pytest.mark.asyncio
async def test_no_api_key_header_when_not_configured():
    client = make_client(lambda request: httpx.Response(200, json=_completion("ok")), api_key="")

    await client.generate("p")

    assert "x-goog-api-key" not in client.calls[0].headers


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 401, 429, 500, 503])
async def test_non_2xx_is_unavailable_without_retry(status_code):
    client = make_client(lambda request: httpx.Response(status_code, json={"error": "nope"}))

    result = await client.generate("p")

    assert result.error == UpstreamErrorKind.UNAVAILABLE
    assert result.text is None
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_timeout_is_reported():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    client = make_client(handler)

    result = await client.generate("p")

    assert result.error == UpstreamErrorKind.TIMEOUT
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_failure_is_logged_with_error_details(caplog):
    client = make_client(lambda request: httpx.Response(503))

    with caplog.at_level(logging.WARNING, logger="vocalis"):
        await client.generate("p")

    record = next(r for r in caplog.records if r.getMessage() == "Reasoning request failed")
    assert record.error["error_type"] == "UpstreamError"
    assert record.error["metadata"] == {"kind": "unavailable"}


@pytest.mark.asyncio
async def test_connection_error_is_unavailable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = make_client(handler)

    result = await client.generate("p")

    assert result.error == UpstreamErrorKind.UNAVAILABLE


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    b"<html>not json</html>",
    json.dumps({"candidates": []}).encode(),
    json.dumps({"candidates": [{"content": {"parts": [{}]}}]}).encode(),
    json.dumps({"candidates": [{"content": {"parts": [{"text": 5}]}}]}).encode(),
    json.dumps(["unexpected"]).encode(),
])
async def test_unusable_body_is_unavailable(body):
    client = make_client(lambda request: httpx.Response(200, content=body))

    result = await client.generate("p")

    assert result.error == UpstreamErrorKind.UNAVAILABLE


@pytest.mark.asyncio
async def test_unconfigured_endpoint_makes_no_request():
    client = make_client(lambda request: httpx.Response(200, json=_completion("ok")))
    client.api_url = None

    result = await client.generate("p")

    assert result.error == UpstreamErrorKind.UNAVAILABLE
    assert client.calls == []


@pytest.mark.asyncio
async def test_close_keeps_injected_client_open():
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    client = GeminiClient(api_url=API_URL, http_client=http_client)

    await client.close()

    assert not http_client.is_closed
    await http_client.aclose()
