"""Indexing service — orchestrates text chunking, embedding generation, and vector storage.

This is an application service that coordinates:
1. Splitting document text into overlapping chunks
2. Generating one embedding per chunk via the EmbeddingProvider
3. Upserting vectors + chunk text + metadata into the VectorIndex
"""

import logging
import time

from studyrag.application.interfaces.embedding_provider import EmbeddingProvider
from studyrag.application.interfaces.vector_index import VectorIndex
from studyrag.application.services.chunker import (
    DEFAULT_OVERLAP,
    DEFAULT_WINDOW_SIZE,
    chunk_document,
    validate_window,
)
from studyrag.domain.entities import Chunk, IndexedEntry
from studyrag.domain.exceptions import IndexingError, ValidationError

logger = logging.getLogger(__name__)

_DEFAULT_BATCH_SIZE = 50  # Max texts per embedding API call


class IndexingService:
    """Application service for writing a document's chunks into the vector index.

    Handles the full flow: chunk text → generate embeddings → upsert entries.
    Failures are reported as IndexingError; retrying is left to the caller.
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_index: VectorIndex,
        *,
        window_size: int = DEFAULT_WINDOW_SIZE,
        overlap: int = DEFAULT_OVERLAP,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ):
        validate_window(window_size, overlap)
        if batch_size <= 0:
            raise ValidationError(f"batch_size must be positive, got {batch_size}")
        self._embedding_provider = embedding_provider
        self._vector_index = vector_index
        self._window_size = window_size
        self._overlap = overlap
        self._batch_size = batch_size

    async def index(self, document_id: int, filename: str, text: str) -> int:
        """Chunk, embed and upsert one document.

        Entries left over from an earlier attempt for the same document are
        removed first, so a retry replaces rather than duplicates them.

        Returns:
            Number of chunks indexed.

        Raises:
            ValidationError: If the text is empty.
            IndexingError: If the embedding service or the vector index fails.
        """
        if not text or not text.strip():
            raise ValidationError(f"Document '{filename}' has no text to index")

        start = time.monotonic()
        chunks = chunk_document(
            document_id,
            filename,
            text,
            window_size=self._window_size,
            overlap=self._overlap,
        )
        logger.info("Split document %s (%s) into %d chunks", document_id, filename, len(chunks))

        try:
            await self._vector_index.delete_by_filter({"document_id": document_id})

            entries = await self._embed_chunks(chunks)

            for entry in entries:
                await self._vector_index.upsert(
                    entry.id,
                    entry.vector,
                    entry.chunk.text,
                    entry.chunk.index_metadata(),
                )
        except Exception as e:
            logger.error("Indexing failed for document %s: %s", document_id, e)
            raise IndexingError(document_id, str(e)) from e

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "Indexed document %s: %d chunks in %dms",
            document_id,
            len(entries),
            duration_ms,
        )
        return len(entries)

    async def remove(self, document_id: int) -> int:
        """Best-effort removal of every vector entry belonging to a document.

        Returns:
            Number of removed entries, or 0 when the index call failed.
        """
        try:
            removed = await self._vector_index.delete_by_filter({"document_id": document_id})
        except Exception:
            logger.exception(
                "Could not purge vector entries for document %s; they stay searchable",
                document_id,
            )
            return 0

        logger.info("Removed %d vector entries for document %s", removed, document_id)
        return removed

    async def _embed_chunks(self, chunks: list[Chunk]) -> list[IndexedEntry]:
        """Embed chunk texts in batches, keeping chunk order."""
        texts = [c.text for c in chunks]
        vectors: list[list[float]] = []

        for batch_start in range(0, len(texts), self._batch_size):
            batch = texts[batch_start : batch_start + self._batch_size]
            batch_vectors = await self._embedding_provider.generate_embeddings(batch)
            if len(batch_vectors) != len(batch):
                raise RuntimeError(
                    f"Embedding service returned {len(batch_vectors)} vectors for {len(batch)} chunks"
                )
            vectors.extend(batch_vectors)

        return [
            IndexedEntry(vector=vector, chunk=chunk)
            for chunk, vector in zip(chunks, vectors, strict=True)
        ]
