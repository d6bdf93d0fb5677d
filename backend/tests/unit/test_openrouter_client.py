"""Unit tests for the OpenRouterClient."""

import json

import httpx
import pytest

from studyrag.infrastructure.openrouter.openrouter_client import OpenRouterClient
from studyrag.domain.entities import ChatMessage, ContentPart
from studyrag.domain.exceptions import ChatProviderError


# ── Helpers ──


def _mock_openrouter_response(
    content: str = "Hello!",
    model: str = "openai/gpt-4o-mini",
    prompt_tokens: int = 10,
    completion_tokens: int = 5,
    total_tokens: int = 15,
    cost: float | None = 0.00014,
) -> dict:
    """Build a mock OpenRouter JSON response."""
    return {
        "id": "chatcmpl-test123",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "model": model,
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": total_tokens,
            **({
                "cost": cost,
            } if cost is not None else {}),
        },
    }


def _make_mock_transport(
    response_data: dict | None = None,
    status_code: int = 200,
    error_data: dict | None = None,
) -> httpx.MockTransport:
    """Create a mock transport that returns a fixed response."""

    def handler(request: httpx.Request) -> httpx.Response:
        if error_data:
            return httpx.Response(status_code, json=error_data)
        return httpx.Response(status_code, json=response_data or {})

    return httpx.MockTransport(handler)


# ── Tests ──


@pytest.mark.asyncio
async def test_complete_parses_response():
    """Non-streaming call correctly parses OpenRouter JSON response."""
    response_data = _mock_openrouter_response(content="The answer is 42.")
    transport = _make_mock_transport(response_data)
    client = OpenRouterClient(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=transport),
    )

    result = await client.complete(
        messages=[ChatMessage(role="user", content="What is 42?")],
        model="openai/gpt-4o-mini",
    )

    assert result.content == "The answer is 42."
    assert result.model == "openai/gpt-4o-mini"
    assert result.usage.prompt_tokens == 10
    assert result.usage.completion_tokens == 5
    assert result.usage.total_tokens == 15
    assert result.usage.cost == 0.00014
    assert result.provider == "openrouter"


@pytest.mark.asyncio
async def test_complete_error_handling():
    """Non-streaming call raises ChatProviderError on 4xx/5xx."""
    error_data = {"error": {"code": 429, "message": "Rate limit exceeded"}}
    transport = _make_mock_transport(error_data=error_data, status_code=429)
    client = OpenRouterClient(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=transport),
    )

    with pytest.raises(ChatProviderError) as exc_info:
        await client.complete(
            messages=[ChatMessage(role="user", content="Hi")],
            model="openai/gpt-4o-mini",
        )

    assert exc_info.value.status_code == 429
    assert "Rate limit" in exc_info.value.message


@pytest.mark.asyncio
async def test_complete_multimodal_message():
    """Multimodal messages are correctly serialized."""
    response_data = _mock_openrouter_response(content="I see an image.")
    transport = _make_mock_transport(response_data)
    client = OpenRouterClient(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=transport),
    )

    result = await client.complete(
        messages=[
            ChatMessage(
                role="user",
                content=[
                    ContentPart(type="text", text="What is this?"),
                    ContentPart(
                        type="image_url",
                        image_url={"url": "https://example.com/img.jpg"},
                    ),
                ],
            )
        ],
        model="openai/gpt-4o-mini",
    )

    assert result.content == "I see an image."


@pytest.mark.asyncio
async def test_provider_name():
    """Provider name is correctly reported."""
    client = OpenRouterClient(api_key="test-key")
    assert client.provider_name == "openrouter"


@pytest.mark.asyncio
async def test_complete_serializes_request():
    """Payload carries model, messages, sampling options and auth headers."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=_mock_openrouter_response())

    client = OpenRouterClient(
        api_key="test-key",
        base_url="https://openrouter.test/api/v1/",
        app_name="Study Assistant",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    await client.complete(
        messages=[
            ChatMessage(
                role="user",
                content=[
                    ContentPart(type="image_url", image_url={"url": "data:image/png;base64,AAAA"}),
                    ContentPart(type="text", text="Transcribe this."),
                ],
            )
        ],
        model="google/gemini-2.5-flash",
        temperature=0.0,
        max_tokens=4000,
    )

    request = captured[0]
    assert str(request.url) == "https://openrouter.test/api/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer test-key"
    assert request.headers["X-Title"] == "Study Assistant"
    body = json.loads(request.content)
    assert body["model"] == "google/gemini-2.5-flash"
    assert body["temperature"] == 0.0
    assert body["max_tokens"] == 4000
    assert body["messages"][0]["content"] == [
        {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}},
        {"type": "text", "text": "Transcribe this."},
    ]


@pytest.mark.asyncio
async def test_complete_omits_unset_sampling_options():
    captured: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(json.loads(request.content))
        return httpx.Response(200, json=_mock_openrouter_response())

    client = OpenRouterClient(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    await client.complete(messages=[ChatMessage(role="user", content="Hi")], model="m")

    assert "temperature" not in captured[0]
    assert "max_tokens" not in captured[0]


@pytest.mark.asyncio
async def test_complete_transport_failure_maps_to_503():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = OpenRouterClient(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(ChatProviderError) as exc_info:
        await client.complete(messages=[ChatMessage(role="user", content="Hi")], model="m")

    assert exc_info.value.status_code == 503
    assert "ConnectError" in exc_info.value.message


@pytest.mark.asyncio
async def test_complete_error_in_body_raises():
    """OpenRouter can return 200 with an error object in the body."""
    transport = _make_mock_transport({"error": {"code": 502, "message": "Upstream failed"}})
    client = OpenRouterClient(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=transport),
    )

    with pytest.raises(ChatProviderError) as exc_info:
        await client.complete(messages=[ChatMessage(role="user", content="Hi")], model="m")

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_complete_without_choices_raises():
    transport = _make_mock_transport({"choices": [], "model": "m"})
    client = OpenRouterClient(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=transport),
    )

    with pytest.raises(ChatProviderError, match="No choices"):
        await client.complete(messages=[ChatMessage(role="user", content="Hi")], model="m")
