"""SQLAlchemy ORM model for vector index entries with pgvector embeddings."""

import uuid

from sqlalchemy import Column, DateTime, Index, Text, func
from sqlalchemy.dialects.postgresql import JSONB, UUID

from pgvector.sqlalchemy import Vector

from studyrag.config import get_settings
from studyrag.infrastructure.database.base import Base

EMBEDDING_DIMENSIONS = get_settings().embedding_dimensions


class VectorEntryModel(Base):
    """One embedded chunk in the vector index.

    Chunk provenance (document_id, filename, chunk_index, total_chunks) lives
    in the JSONB ``metadata`` column so entries can be filtered and purged
    without a foreign key to the documents table.
    """

    __tablename__ = "vector_entries"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    content = Column(Text, nullable=False)
    metadata_ = Column("metadata", JSONB, nullable=False, server_default="{}")
    embedding = Column(Vector(EMBEDDING_DIMENSIONS), nullable=False)  # HNSW max: 2000 dims
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_vector_entries_metadata_gin", metadata_, postgresql_using="gin"),
        Index("idx_vector_entries_embedding_hnsw", embedding, postgresql_using="hnsw",
              postgresql_ops={"embedding": "vector_cosine_ops"}),
    )
