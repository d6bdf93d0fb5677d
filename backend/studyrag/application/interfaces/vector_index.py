"""Abstract interface (port) for the vector index / nearest-neighbour search engine."""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class VectorSearchHit:
    """A single ranked record returned by a vector similarity search."""

    text: str
    score: float  # cosine similarity, 1.0 = identical
    metadata: dict[str, Any] = field(default_factory=dict)


class VectorIndex(ABC):
    """Port for vector storage and similarity search.

    Backends must support metadata-filtered deletion so that a deleted
    document's vectors can be purged.
    """

    @abstractmethod
    async def upsert(
        self,
        entry_id: uuid.UUID,
        vector: list[float],
        text: str,
        metadata: dict[str, Any],
    ) -> None:
        """Insert or replace the entry identified by ``entry_id``."""
        ...

    @abstractmethod
    async def search(
        self,
        vector: list[float],
        k: int,
        min_score: float,
    ) -> list[VectorSearchHit]:
        """Return at most ``k`` hits with score >= ``min_score``, best first."""
        ...

    @abstractmethod
    async def delete_by_filter(self, metadata: dict[str, Any]) -> int:
        """Delete every entry whose metadata matches all given key/value pairs.

        Returns:
            Number of deleted entries.
        """
        ...
