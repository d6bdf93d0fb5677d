from .chat_provider import ChatProvider
from .document_repository import DocumentRepository
from .embedding_provider import EmbeddingProvider
from .text_extractor import TextExtractor
from .vector_index import VectorIndex, VectorSearchHit

__all__ = [
    "ChatProvider",
    "DocumentRepository",
    "EmbeddingProvider",
    "TextExtractor",
    "VectorIndex",
    "VectorSearchHit",
]
