"""Domain entity for uploaded study documents."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class IndexStatus(str, Enum):
    """Vector-indexing state of a document."""

    PENDING = "pending"
    INDEXED = "indexed"
    INDEX_FAILED = "index_failed"


@dataclass
class Document:
    """An uploaded document and its extracted text.

    The record survives indexing failures so indexing can be retried
    later from ``content_text``.
    """

    filename: str
    file_type: str
    file_size: int
    content_text: str = ""
    stored_path: str | None = None
    status: IndexStatus = IndexStatus.PENDING
    chunk_count: int = 0
    error_message: str | None = None
    id: int | None = None
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def mark_indexed(self, chunk_count: int) -> None:
        self.status = IndexStatus.INDEXED
        self.chunk_count = chunk_count
        self.error_message = None
        self.updated_at = datetime.now(timezone.utc)

    def mark_index_failed(self, error_message: str) -> None:
        self.status = IndexStatus.INDEX_FAILED
        self.chunk_count = 0
        self.error_message = error_message
        self.updated_at = datetime.now(timezone.utc)
