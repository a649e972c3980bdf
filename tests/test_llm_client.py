import json

import httpx
import pytest

from quizgen.core.config import Settings, settings
from quizgen.services.llm_client import (
    MalformedResponseError,
    NetworkError,
    build_payload,
    extract_content,
    request_completion,
)


def completion_body(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


async def test_request_shape_and_content():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json=completion_body("[]"))

    content = await request_completion(
        "Génère 3 questions", "sk-secret", transport=httpx.MockTransport(handler)
    )

    assert content == "[]"
    request = seen["request"]
    assert request.method == "POST"
    assert str(request.url) == settings.completion_api_url
    assert request.headers["Authorization"] == "Bearer sk-secret"

    body = json.loads(request.content)
    assert body == {
        "model": "gpt-3.5-turbo",
        "messages": [{"role": "user", "content": "Génère 3 questions"}],
        "max_tokens": 1000,
        "temperature": 0.7,
    }


async def test_transport_failure_raises_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError):
        await request_completion("p", "k", transport=httpx.MockTransport(handler))


async def test_error_body_raises_malformed_response():
    def handler(request):
        return httpx.Response(401, json={"error": {"message": "Incorrect API key provided"}})

    with pytest.raises(MalformedResponseError):
        await request_completion("p", "bad", transport=httpx.MockTransport(handler))


async def test_non_json_body_raises_malformed_response():
    def handler(request):
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(MalformedResponseError):
        await request_completion("p", "k", transport=httpx.MockTransport(handler))


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"choices": []},
        {"choices": [{}]},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": None}}]},
        [],
    ],
)
def test_extract_content_missing_paths(data):
    with pytest.raises(MalformedResponseError):
        extract_content(data)


def test_sampling_parameters_ignore_environment(monkeypatch):
    monkeypatch.setenv("COMPLETION_MAX_TOKENS", "50")
    monkeypatch.setenv("COMPLETION_TEMPERATURE", "1.5")

    assert not hasattr(Settings(), "completion_max_tokens")

    payload = build_payload("p")
    assert payload["max_tokens"] == 1000
    assert payload["temperature"] == 0.7
