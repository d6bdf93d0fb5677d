"""Retrieval service — similarity search over indexed chunks for a question."""

import logging
import time

from studyrag.application.interfaces.embedding_provider import EmbeddingProvider
from studyrag.application.interfaces.vector_index import VectorIndex
from studyrag.domain.entities import Chunk, RetrievalResult, RetrievedChunk

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5
DEFAULT_MIN_SCORE = 0.3


class RetrievalService:
    """Embeds a query and returns the top-K chunks above a similarity floor.

    Any failure of the embedding call or the index search yields an empty
    result, which callers treat exactly like "nothing relevant found".
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_index: VectorIndex,
        *,
        top_k: int = DEFAULT_TOP_K,
        min_score: float = DEFAULT_MIN_SCORE,
    ):
        self._embedding_provider = embedding_provider
        self._vector_index = vector_index
        self._top_k = top_k
        self._min_score = min_score

    async def retrieve(
        self,
        query: str,
        *,
        k: int | None = None,
        min_score: float | None = None,
    ) -> RetrievalResult:
        """Return chunks ranked by descending cosine similarity to the query."""
        k = self._top_k if k is None else k
        min_score = self._min_score if min_score is None else min_score
        start = time.monotonic()

        try:
            query_vector = await self._embedding_provider.embed_query(query)
            hits = await self._vector_index.search(query_vector, k, min_score)
            results = [
                RetrievedChunk(
                    chunk=Chunk.from_index_payload(hit.text, hit.metadata),
                    score=hit.score,
                )
                for hit in hits
            ]
        except Exception as e:
            logger.warning("Retrieval failed, answering from no context: %s", e, exc_info=True)
            return []

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "Retrieved %d chunks (k=%d, min_score=%.2f) in %dms",
            len(results),
            k,
            min_score,
            duration_ms,
        )
        return results
