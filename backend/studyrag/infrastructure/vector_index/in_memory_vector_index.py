"""Process-local implementation of the VectorIndex port.

Exact cosine-similarity scan over all entries. Contents are lost on restart;
intended for development, demos and tests.
"""

import asyncio
import logging
import math
import uuid
from dataclasses import dataclass
from typing import Any

from studyrag.application.interfaces.vector_index import VectorIndex, VectorSearchHit

logger = logging.getLogger(__name__)


@dataclass
class _StoredEntry:
    vector: list[float]
    text: str
    metadata: dict[str, Any]


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine similarity of two vectors; 0.0 when either has zero length."""
    if len(a) != len(b):
        raise ValueError(f"Vector dimension mismatch: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


class InMemoryVectorIndex(VectorIndex):
    """Dictionary-backed vector index keyed by entry ID."""

    def __init__(self):
        self._entries: dict[uuid.UUID, _StoredEntry] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    async def upsert(
        self,
        entry_id: uuid.UUID,
        vector: list[float],
        text: str,
        metadata: dict[str, Any],
    ) -> None:
        async with self._lock:
            self._entries[entry_id] = _StoredEntry(list(vector), text, dict(metadata))

    async def search(
        self,
        vector: list[float],
        k: int,
        min_score: float,
    ) -> list[VectorSearchHit]:
        if k <= 0:
            return []

        async with self._lock:
            entries = list(self._entries.values())

        scored = [
            (cosine_similarity(vector, entry.vector), entry)
            for entry in entries
        ]
        scored = [(score, entry) for score, entry in scored if score >= min_score]
        scored.sort(key=lambda pair: pair[0], reverse=True)

        return [
            VectorSearchHit(text=entry.text, score=score, metadata=dict(entry.metadata))
            for score, entry in scored[:k]
        ]

    async def delete_by_filter(self, metadata: dict[str, Any]) -> int:
        if not metadata:
            raise ValueError("delete_by_filter requires at least one metadata key")

        async with self._lock:
            doomed = [
                entry_id
                for entry_id, entry in self._entries.items()
                if all(str(entry.metadata.get(key)) == str(value) for key, value in metadata.items())
            ]
            for entry_id in doomed:
                del self._entries[entry_id]

        if doomed:
            logger.info("Deleted %d vector entries matching %s", len(doomed), metadata)
        return len(doomed)
