"""Vector index factory — selects the backend from the VECTOR_BACKEND setting."""

import logging

from studyrag.application.interfaces.vector_index import VectorIndex
from studyrag.config import Settings

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("pgvector", "memory")


def create_vector_index(settings: Settings) -> VectorIndex:
    """Build the configured vector index.

    Raises:
        ValueError: If VECTOR_BACKEND is not one of the supported backends.
    """
    backend = settings.vector_backend.lower()

    if backend == "pgvector":
        from studyrag.infrastructure.database.session import async_session_factory
        from studyrag.infrastructure.vector_index.pgvector_index import PgVectorIndex

        logger.info("Using pgvector vector index (dimensions=%d)", settings.embedding_dimensions)
        return PgVectorIndex(async_session_factory)

    if backend == "memory":
        from studyrag.infrastructure.vector_index.in_memory_vector_index import InMemoryVectorIndex

        logger.warning("Using in-memory vector index — contents are lost on restart")
        return InMemoryVectorIndex()

    raise ValueError(
        f"Invalid VECTOR_BACKEND: {settings.vector_backend}. "
        f"Must be one of: {', '.join(SUPPORTED_BACKENDS)}."
    )
