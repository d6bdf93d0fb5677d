"""Shared fixtures for API tests — the app wired to in-memory collaborators."""

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from studyrag.application.interfaces import ChatProvider, DocumentRepository, EmbeddingProvider
from studyrag.application.services import (
    AnswerService,
    DocumentService,
    IndexingService,
    RetrievalService,
)
from studyrag.domain.entities import ChatCompletionResult, Document, TokenUsage
from studyrag.domain.exceptions import ChatProviderError
from studyrag.infrastructure.dependencies import get_answer_service, get_document_service
from studyrag.infrastructure.extractors.multi_format_text_extractor import MultiFormatTextExtractor
from studyrag.infrastructure.storage.local_file_storage import LocalFileStorage
from studyrag.infrastructure.vector_index import InMemoryVectorIndex
from studyrag.main import app

_VOCABULARY = ("photosynthesis", "chlorophyll", "mitochondria", "atp", "dna", "gene")


class KeywordEmbeddingProvider(EmbeddingProvider):
    """Bag-of-keywords embeddings: texts sharing topic words are similar."""

    def __init__(self):
        self.fail = False

    @property
    def dimensions(self) -> int:
        return len(_VOCABULARY) + 1

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        if self.fail:
            raise ConnectionError("embedding service unreachable")
        return [self._vectorize(t) for t in texts]

    @staticmethod
    def _vectorize(text: str) -> list[float]:
        words = text.lower().replace(".", " ").replace("?", " ").split()
        # Small constant component keeps unrelated texts at a low, non-zero score
        return [float(words.count(term)) for term in _VOCABULARY] + [0.05]


class ScriptedChatProvider(ChatProvider):
    def __init__(self):
        self.fail = False
        self.prompts: list[str] = []

    @property
    def provider_name(self) -> str:
        return "scripted"

    async def complete(self, messages, model, *, temperature=None, max_tokens=None):
        self.prompts.append(messages[-1].content)
        if self.fail:
            raise ChatProviderError("scripted", 503, "upstream unavailable")
        return ChatCompletionResult(
            model=model,
            content="Photosynthesis turns light into chemical energy.",
            finish_reason="stop",
            usage=TokenUsage(total_tokens=12),
        )


class InMemoryDocumentRepository(DocumentRepository):
    def __init__(self):
        self._documents: dict[int, Document] = {}
        self._next_id = 1

    async def get_by_id(self, document_id: int) -> Document | None:
        return self._documents.get(document_id)

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[Document]:
        documents = sorted(self._documents.values(), key=lambda d: d.id, reverse=True)
        return documents[skip : skip + limit]

    async def create(self, document: Document) -> Document:
        document.id = self._next_id
        self._next_id += 1
        self._documents[document.id] = document
        return document

    async def update(self, document: Document) -> Document:
        self._documents[document.id] = document
        return document

    async def delete(self, document_id: int) -> bool:
        return self._documents.pop(document_id, None) is not None


@pytest.fixture
def embedding_provider() -> KeywordEmbeddingProvider:
    return KeywordEmbeddingProvider()


@pytest.fixture
def chat_provider() -> ScriptedChatProvider:
    return ScriptedChatProvider()


@pytest.fixture
def vector_index() -> InMemoryVectorIndex:
    return InMemoryVectorIndex()


@pytest.fixture
async def client(tmp_path, embedding_provider, chat_provider, vector_index) -> AsyncIterator[AsyncClient]:
    repository = InMemoryDocumentRepository()
    indexing_service = IndexingService(embedding_provider, vector_index, window_size=200, overlap=20)
    retrieval_service = RetrievalService(embedding_provider, vector_index, top_k=5, min_score=0.3)

    async def _document_service():
        yield DocumentService(
            document_repository=repository,
            file_storage=LocalFileStorage(upload_dir=str(tmp_path)),
            text_extractor=MultiFormatTextExtractor(),
            indexing_service=indexing_service,
        )

    async def _answer_service():
        yield AnswerService(retrieval_service, chat_provider, model="test-model")

    app.dependency_overrides[get_document_service] = _document_service
    app.dependency_overrides[get_answer_service] = _answer_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()
