from .chat_message import ChatMessage, ContentPart, TokenUsage, ChatCompletionResult
from .chunk import Chunk, IndexedEntry
from .document import Document, IndexStatus
from .retrieval import Answer, RetrievedChunk, RetrievalResult

__all__ = [
    "ChatMessage",
    "ContentPart",
    "TokenUsage",
    "ChatCompletionResult",
    "Chunk",
    "IndexedEntry",
    "Document",
    "IndexStatus",
    "Answer",
    "RetrievedChunk",
    "RetrievalResult",
]
