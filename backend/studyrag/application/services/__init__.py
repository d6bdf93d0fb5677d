from .answer_service import AnswerService
from .document_service import DocumentService
from .indexing_service import IndexingService
from .retrieval_service import RetrievalService

__all__ = [
    "AnswerService",
    "DocumentService",
    "IndexingService",
    "RetrievalService",
]
