"""Pydantic schemas for document API responses."""

from pydantic import BaseModel


class DocumentSummarySchema(BaseModel):
    """Lightweight document representation for list views."""
    id: int
    filename: str
    file_type: str
    file_size: int
    status: str
    chunk_count: int
    uploaded_at: str
    error_message: str | None = None


class DocumentDetailSchema(DocumentSummarySchema):
    """Full document representation for detail view."""
    content_preview: str | None = None
    content_length: int = 0
    updated_at: str


class UploadResultSchema(BaseModel):
    """Response after uploading a document."""
    document: DocumentSummarySchema
    message: str
