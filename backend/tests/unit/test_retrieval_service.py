"""Unit tests for the RetrievalService."""

import pytest

from studyrag.application.interfaces import EmbeddingProvider, VectorIndex, VectorSearchHit
from studyrag.application.services import RetrievalService


class FakeEmbeddingProvider(EmbeddingProvider):
    def __init__(self, vector: list[float] | None = None, fail: bool = False):
        self._vector = vector or [1.0, 0.0]
        self._fail = fail
        self.queries: list[str] = []

    @property
    def dimensions(self) -> int:
        return len(self._vector)

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        self.queries.extend(texts)
        if self._fail:
            raise TimeoutError("embedding timed out")
        return [list(self._vector) for _ in texts]


class RecordingVectorIndex(VectorIndex):
    """Returns canned hits and records search arguments."""

    def __init__(self, hits: list[VectorSearchHit] | None = None, fail: bool = False):
        self._hits = hits or []
        self._fail = fail
        self.searches: list[tuple[list[float], int, float]] = []

    async def upsert(self, entry_id, vector, text, metadata) -> None:
        raise NotImplementedError

    async def search(self, vector, k, min_score) -> list[VectorSearchHit]:
        self.searches.append((vector, k, min_score))
        if self._fail:
            raise ConnectionError("vector store down")
        return self._hits[:k]

    async def delete_by_filter(self, metadata) -> int:
        return 0


def _hit(text: str, score: float, filename: str = "bio.pdf", chunk_index: int = 0) -> VectorSearchHit:
    return VectorSearchHit(
        text=text,
        score=score,
        metadata={"document_id": 1, "filename": filename, "chunk_index": chunk_index, "total_chunks": 3},
    )


@pytest.mark.asyncio
async def test_retrieve_maps_hits_to_chunks_in_rank_order():
    index = RecordingVectorIndex([_hit("first", 0.9, chunk_index=2), _hit("second", 0.7, chunk_index=0)])
    service = RetrievalService(FakeEmbeddingProvider(), index)

    results = await service.retrieve("What is a cell?")

    assert [r.chunk.text for r in results] == ["first", "second"]
    assert [r.score for r in results] == [0.9, 0.7]
    assert results[0].chunk.filename == "bio.pdf"
    assert results[0].chunk.chunk_index == 2
    assert results[0].chunk.total_chunks == 3


@pytest.mark.asyncio
async def test_retrieve_uses_configured_defaults():
    provider = FakeEmbeddingProvider([0.3, 0.4])
    index = RecordingVectorIndex()
    service = RetrievalService(provider, index)

    await service.retrieve("photosynthesis")

    assert provider.queries == ["photosynthesis"]
    assert index.searches == [([0.3, 0.4], 5, 0.3)]


@pytest.mark.asyncio
async def test_retrieve_overrides():
    index = RecordingVectorIndex()
    service = RetrievalService(FakeEmbeddingProvider(), index, top_k=8, min_score=0.5)

    await service.retrieve("q")
    await service.retrieve("q", k=2, min_score=0.1)

    assert [(k, s) for _, k, s in index.searches] == [(8, 0.5), (2, 0.1)]


@pytest.mark.asyncio
async def test_retrieve_does_not_post_filter_scores():
    """The score floor is enforced by the index, not re-applied here."""
    index = RecordingVectorIndex([_hit("low", 0.1)])
    service = RetrievalService(FakeEmbeddingProvider(), index)

    results = await service.retrieve("q")

    assert len(results) == 1


@pytest.mark.asyncio
async def test_missing_metadata_falls_back_to_unknown():
    index = RecordingVectorIndex([VectorSearchHit(text="orphan", score=0.8, metadata={})])
    service = RetrievalService(FakeEmbeddingProvider(), index)

    results = await service.retrieve("q")

    assert results[0].chunk.filename == "Unknown"
    assert results[0].chunk.chunk_index is None


@pytest.mark.asyncio
async def test_embedding_failure_yields_empty_result():
    index = RecordingVectorIndex([_hit("never", 0.9)])
    service = RetrievalService(FakeEmbeddingProvider(fail=True), index)

    assert await service.retrieve("q") == []
    assert index.searches == []


@pytest.mark.asyncio
async def test_search_failure_yields_empty_result():
    service = RetrievalService(FakeEmbeddingProvider(), RecordingVectorIndex(fail=True))

    assert await service.retrieve("q") == []


@pytest.mark.asyncio
async def test_malformed_hit_payload_yields_empty_result():
    index = RecordingVectorIndex([VectorSearchHit(text="garbled", score=0.9, metadata=None)])
    service = RetrievalService(FakeEmbeddingProvider(), index)

    assert await service.retrieve("q") == []
