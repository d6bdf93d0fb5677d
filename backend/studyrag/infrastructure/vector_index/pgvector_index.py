"""PostgreSQL + pgvector implementation of the VectorIndex port."""

import logging
import uuid
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studyrag.application.interfaces.vector_index import VectorIndex, VectorSearchHit
from studyrag.infrastructure.database.models import VectorEntryModel

logger = logging.getLogger(__name__)


class PgVectorIndex(VectorIndex):
    """Vector index stored in the ``vector_entries`` table.

    Each call runs in its own session and transaction, so the index is safe
    to share across requests. Similarity is cosine: ``1 - (embedding <=> query)``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def upsert(
        self,
        entry_id: uuid.UUID,
        vector: list[float],
        text: str,
        metadata: dict[str, Any],
    ) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await session.merge(
                    VectorEntryModel(
                        id=entry_id,
                        content=text,
                        metadata_=metadata,
                        embedding=vector,
                    )
                )

    async def search(
        self,
        vector: list[float],
        k: int,
        min_score: float,
    ) -> list[VectorSearchHit]:
        """Find the ``k`` entries most similar to ``vector`` above ``min_score``."""
        if k <= 0:
            return []

        distance = VectorEntryModel.embedding.cosine_distance(vector).label("distance")
        stmt = (
            select(
                VectorEntryModel.content,
                VectorEntryModel.metadata_.label("metadata_"),
                distance,
            )
            .where(VectorEntryModel.embedding.cosine_distance(vector) <= 1 - min_score)
            .order_by(distance)
            .limit(k)
        )

        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()

        hits = [
            VectorSearchHit(
                text=row.content,
                score=1.0 - float(row.distance),
                metadata=row.metadata_ or {},
            )
            for row in rows
        ]
        logger.debug("pgvector search returned %d hits (k=%d, min_score=%.2f)", len(hits), k, min_score)
        return hits

    async def delete_by_filter(self, metadata: dict[str, Any]) -> int:
        """Delete entries whose JSONB metadata matches every key/value pair."""
        if not metadata:
            raise ValueError("delete_by_filter requires at least one metadata key")

        stmt = delete(VectorEntryModel)
        for key, value in metadata.items():
            stmt = stmt.where(VectorEntryModel.metadata_[key].astext == str(value))

        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(stmt)

        count = result.rowcount or 0
        if count > 0:
            logger.info("Deleted %d vector entries matching %s", count, metadata)
        return count
