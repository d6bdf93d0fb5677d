from .chat import ChatQueryRequest, ChatQueryResponse
from .documents import DocumentDetailSchema, DocumentSummarySchema, UploadResultSchema

__all__ = [
    "ChatQueryRequest",
    "ChatQueryResponse",
    "DocumentDetailSchema",
    "DocumentSummarySchema",
    "UploadResultSchema",
]
