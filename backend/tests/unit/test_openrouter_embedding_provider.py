"""Unit tests for the OpenRouterEmbeddingProvider."""

import json

import httpx
import pytest

from studyrag.domain.exceptions import EmbeddingProviderError
from studyrag.infrastructure.openrouter.openrouter_embedding_provider import (
    OpenRouterEmbeddingProvider,
)


# ── Helpers ──


def _embedding_response(vectors: list[list[float]], shuffle: bool = False) -> dict:
    data = [{"object": "embedding", "index": i, "embedding": v} for i, v in enumerate(vectors)]
    if shuffle:
        data.reverse()
    return {"object": "list", "data": data, "model": "openai/text-embedding-3-small"}


def _provider(handler, model: str = "openai/text-embedding-3-small") -> OpenRouterEmbeddingProvider:
    return OpenRouterEmbeddingProvider(
        api_key="test-key",
        model=model,
        model_dimensions=3,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


# ── Tests ──


@pytest.mark.asyncio
async def test_generate_embeddings_in_input_order():
    """Results are re-sorted by index even if the API returns them shuffled."""
    vectors = [[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_embedding_response(vectors, shuffle=True))

    result = await _provider(handler).generate_embeddings(["first", "second"])

    assert result == vectors


@pytest.mark.asyncio
async def test_request_payload():
    captured: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/embeddings")
        captured.append(json.loads(request.content))
        return httpx.Response(200, json=_embedding_response([[0.0, 0.0, 1.0]]))

    await _provider(handler).generate_embeddings(["Cells divide by mitosis."])

    assert captured[0] == {
        "model": "openai/text-embedding-3-small",
        "input": ["Cells divide by mitosis."],
        "dimensions": 3,
    }


@pytest.mark.asyncio
async def test_nomic_models_get_task_prefixes():
    inputs: list[list[str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        inputs.append(json.loads(request.content)["input"])
        return httpx.Response(200, json=_embedding_response([[1.0, 0.0, 0.0]]))

    provider = _provider(handler, model="nomic-ai/nomic-embed-text-v1.5")
    await provider.embed("chunk text")
    await provider.embed_query("user question")

    assert inputs == [["search_document: chunk text"], ["search_query: user question"]]


@pytest.mark.asyncio
async def test_empty_input_makes_no_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert await _provider(handler).generate_embeddings([]) == []


@pytest.mark.asyncio
async def test_http_error_status_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="invalid api key")

    with pytest.raises(EmbeddingProviderError) as exc_info:
        await _provider(handler).generate_embeddings(["x"])

    assert exc_info.value.status_code == 401
    assert "invalid api key" in exc_info.value.message


@pytest.mark.asyncio
async def test_transport_failure_maps_to_503():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(EmbeddingProviderError) as exc_info:
        await _provider(handler).generate_embeddings(["x"])

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_count_mismatch_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_embedding_response([[1.0, 0.0, 0.0]]))

    with pytest.raises(EmbeddingProviderError, match="Expected 2 embeddings"):
        await _provider(handler).generate_embeddings(["a", "b"])


def test_dimensions_reported():
    provider = OpenRouterEmbeddingProvider(api_key="k", model_dimensions=1536)
    assert provider.dimensions == 1536
