"""
Tests for the API client
"""
import json

import httpx
import pytest

from vocalis.client import (RATE_LIMITED_RESPONSE, REQUEST_FAILED_RESPONSE,
                            AssistantClient, ClientError)
from vocalis.components.contracts import THROTTLED_RESPONSE, IntentKind
from vocalis.components.throttle import CommandThrottle


def make_client(handler, throttle=None):
    calls = []

    def recording_handler(request):
        calls.append(request)
        return handler(request)

    http_client = httpx.Client(base_url="http://api.test", transport=httpx.MockTransport(recording_handler))
    client = AssistantClient(
        token="tok",
        throttle=throttle or CommandThrottle(min_interval_ms=0),
        http_client=http_client,
    )
    return client, calls


def test_ask_returns_server_intent():
    client, calls = make_client(lambda r: httpx.Response(
        200, json={"type": "youtube-search", "userInput": "cats", "response": "Searching YouTube"}
    ))

    intent = client.ask("search youtube for cats")

    assert intent.kind == IntentKind.YOUTUBE_SEARCH
    assert calls[0].headers["Authorization"] == "Bearer tok"
    assert json.loads(calls[0].content) == {"command": "search youtube for cats"}


def test_ask_is_throttled_locally():
    ticks = iter([0, 1999, 2000])
    throttle = CommandThrottle(min_interval_ms=2000, clock=lambda: next(ticks))
    client, calls = make_client(
        lambda r: httpx.Response(200, json={"type": "general", "userInput": "x", "response": "y"}),
        throttle=throttle,
    )

    first = client.ask("x")
    second = client.ask("x")
    third = client.ask("x")

    assert first.kind == IntentKind.GENERAL
    assert second.kind == IntentKind.ERROR
    assert second.response == THROTTLED_RESPONSE
    assert third.kind == IntentKind.GENERAL
    assert len(calls) == 2


def test_rate_limited_by_server():
    client, _ = make_client(lambda r: httpx.Response(429))

    intent = client.ask("x")

    assert intent.kind == IntentKind.ERROR
    assert intent.response == RATE_LIMITED_RESPONSE
    assert intent.user_input == "x"


@pytest.mark.parametrize("response", [
    httpx.Response(500, json={"message": "Server error"}),
    httpx.Response(401, json={"message": "Not authenticated"}),
    httpx.Response(200, json={"type": "nonsense", "userInput": "x", "response": "y"}),
    httpx.Response(200, content=b"not json"),
])
def test_failures_become_error_intents(response):
    client, _ = make_client(lambda r: response)

    intent = client.ask("x")

    assert intent.kind == IntentKind.ERROR
    assert intent.response == REQUEST_FAILED_RESPONSE


def test_transport_failure_becomes_error_intent():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client, _ = make_client(handler)

    assert client.ask("x").kind == IntentKind.ERROR


def test_signin_stores_token_from_cookie():
    client, calls = make_client(lambda r: httpx.Response(
        200,
        json={"_id": "u1", "name": "Ada"},
        headers={"set-cookie": "token=fresh-token; HttpOnly; Path=/"},
    ))
    client.token = None

    body = client.signin("ada@example.com", "pw")

    assert body["_id"] == "u1"
    assert client.token == "fresh-token"


def test_api_errors_raise_client_error():
    client, _ = make_client(lambda r: httpx.Response(400, json={"message": "Invalid credentials"}))

    with pytest.raises(ClientError) as exc_info:
        client.signin("ada@example.com", "bad")

    assert str(exc_info.value) == "Invalid credentials"
    assert exc_info.value.status_code == 400


def test_against_app(client, signed_up, reasoning_client):
    """End to end through the FastAPI test client"""
    reasoning_client.queue('{"type": "instagram-open", "userInput": "instagram", "response": "Opening Instagram"}')
    api = AssistantClient(token=signed_up["token"], throttle=CommandThrottle(min_interval_ms=0), http_client=client)

    intent = api.ask("open instagram")

    assert intent.kind == IntentKind.INSTAGRAM_OPEN
    assert api.current_user()["history"] == ["open instagram"]
