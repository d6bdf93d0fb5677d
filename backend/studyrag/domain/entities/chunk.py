"""Domain entities for document chunks and their vector-index records."""

import uuid
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Chunk:
    """A bounded, overlap-aware window of a document's extracted text.

    ``chunk_index`` is 0-based and dense within a document; ``total_chunks``
    is identical for every chunk of the same document. Both may be ``None``
    for chunks rebuilt from index payloads that lack the metadata.
    """

    text: str
    document_id: int | None
    filename: str
    chunk_index: int | None
    total_chunks: int | None

    def index_metadata(self) -> dict[str, Any]:
        """Metadata stored next to the vector, as consumed by delete-by-filter and search."""
        return {
            "document_id": self.document_id,
            "filename": self.filename,
            "chunk_index": self.chunk_index,
            "total_chunks": self.total_chunks,
        }

    @classmethod
    def from_index_payload(cls, text: str, metadata: dict[str, Any]) -> "Chunk":
        """Rebuild a chunk from a search payload, tolerating missing metadata."""
        return cls(
            text=text,
            document_id=_as_int(metadata.get("document_id")),
            filename=str(metadata.get("filename") or "Unknown"),
            chunk_index=_as_int(metadata.get("chunk_index")),
            total_chunks=_as_int(metadata.get("total_chunks")),
        )


@dataclass(frozen=True)
class IndexedEntry:
    """A vector-index record: one embedding per chunk, replaced rather than edited."""

    vector: list[float]
    chunk: Chunk
    id: uuid.UUID = field(default_factory=uuid.uuid4)


def _as_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
