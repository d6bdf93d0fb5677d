"""Pydantic schemas for the document question-answering API."""

from pydantic import BaseModel, Field


class ChatQueryRequest(BaseModel):
    """A natural-language question about the uploaded documents."""
    question: str = Field(..., description="Question to answer from the indexed documents")


class ChatQueryResponse(BaseModel):
    """Grounded answer plus the distinct source filenames, in rank order."""
    answer: str
    sources: list[str] = Field(default_factory=list)
