"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from studyrag.config import get_settings
from studyrag.application.interfaces import ChatProvider, EmbeddingProvider, VectorIndex
from studyrag.application.services import (
    AnswerService,
    DocumentService,
    IndexingService,
    RetrievalService,
)
from studyrag.infrastructure.database.session import get_db_session
from studyrag.infrastructure.database.repositories import SQLAlchemyDocumentRepository
from studyrag.infrastructure.extractors.multi_format_text_extractor import MultiFormatTextExtractor
from studyrag.infrastructure.openrouter import OpenRouterClient, OpenRouterEmbeddingProvider
from studyrag.infrastructure.storage.local_file_storage import LocalFileStorage
from studyrag.infrastructure.vector_index import create_vector_index


# ── Process-wide clients ─────────────────────────────────────────────


@lru_cache
def get_embedding_provider() -> EmbeddingProvider:
    """Shared embedding client, created on first use."""
    settings = get_settings()
    return OpenRouterEmbeddingProvider(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        app_name=settings.openrouter_app_name,
        model=settings.embedding_model,
        model_dimensions=settings.embedding_dimensions,
        timeout=settings.http_timeout_seconds,
    )


@lru_cache
def get_chat_provider() -> ChatProvider:
    """Shared chat-completion client, created on first use."""
    settings = get_settings()
    return OpenRouterClient(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        app_name=settings.openrouter_app_name,
        timeout=settings.http_timeout_seconds,
    )


@lru_cache
def get_vector_index() -> VectorIndex:
    """Shared vector index; the in-memory backend must outlive single requests."""
    return create_vector_index(get_settings())


# ── Application services ─────────────────────────────────────────────


def get_indexing_service() -> IndexingService:
    """Provides an IndexingService bound to the shared embedding client and index."""
    settings = get_settings()
    return IndexingService(
        embedding_provider=get_embedding_provider(),
        vector_index=get_vector_index(),
        window_size=settings.chunk_window_size,
        overlap=settings.chunk_overlap,
        batch_size=settings.embedding_batch_size,
    )


def get_retrieval_service() -> RetrievalService:
    """Provides a RetrievalService using the configured top-k and score floor."""
    settings = get_settings()
    return RetrievalService(
        embedding_provider=get_embedding_provider(),
        vector_index=get_vector_index(),
        top_k=settings.retrieval_top_k,
        min_score=settings.retrieval_min_score,
    )


async def get_document_service(
    session: AsyncSession = Depends(get_db_session),
    indexing_service: IndexingService = Depends(get_indexing_service),
) -> AsyncGenerator[DocumentService, None]:
    """Provides a DocumentService with storage, extraction and indexing wired up."""
    settings = get_settings()

    repository = SQLAlchemyDocumentRepository(session)
    storage = LocalFileStorage(upload_dir=settings.upload_dir)

    # Images are transcribed by the vision model only when OpenRouter is configured
    vision_provider = get_chat_provider() if settings.openrouter_api_key.strip() else None
    extractor = MultiFormatTextExtractor(
        vision_provider=vision_provider,
        ocr_model=settings.ocr_model,
    )

    yield DocumentService(
        document_repository=repository,
        file_storage=storage,
        text_extractor=extractor,
        indexing_service=indexing_service,
        max_file_size=settings.max_upload_size_bytes,
        allowed_extensions=settings.allowed_extensions,
    )


async def get_answer_service(
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
) -> AsyncGenerator[AnswerService, None]:
    """Provides an AnswerService backed by retrieval and the answer model."""
    settings = get_settings()
    yield AnswerService(
        retrieval_service=retrieval_service,
        chat_provider=get_chat_provider(),
        model=settings.answer_model,
        temperature=settings.answer_temperature,
    )
