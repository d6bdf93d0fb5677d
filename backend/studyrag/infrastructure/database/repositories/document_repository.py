"""Concrete document repository implementation backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from studyrag.application.interfaces import DocumentRepository
from studyrag.domain.entities import Document, IndexStatus
from studyrag.infrastructure.database.models import DocumentModel


class SQLAlchemyDocumentRepository(DocumentRepository):
    """Implements the DocumentRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: DocumentModel) -> Document:
        """Map ORM model → domain entity."""
        return Document(
            id=model.id,
            filename=model.filename,
            file_type=model.file_type,
            file_size=model.file_size,
            content_text=model.content_text,
            stored_path=model.stored_path,
            status=IndexStatus(model.status),
            chunk_count=model.chunk_count,
            error_message=model.error_message,
            uploaded_at=model.uploaded_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Document) -> DocumentModel:
        """Map domain entity → ORM model (for creation)."""
        return DocumentModel(
            filename=entity.filename,
            file_type=entity.file_type,
            file_size=entity.file_size,
            content_text=entity.content_text,
            stored_path=entity.stored_path,
            status=entity.status.value,
            chunk_count=entity.chunk_count,
            error_message=entity.error_message,
            uploaded_at=entity.uploaded_at,
        )

    async def get_by_id(self, document_id: int) -> Document | None:
        result = await self._session.get(DocumentModel, document_id)
        return self._to_entity(result) if result else None

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[Document]:
        stmt = (
            select(DocumentModel)
            .order_by(DocumentModel.uploaded_at.desc(), DocumentModel.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, document: Document) -> Document:
        model = self._to_model(document)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, document: Document) -> Document:
        model = await self._session.get(DocumentModel, document.id)
        if model is None:
            raise ValueError(f"Document {document.id} not found in database")
        model.status = document.status.value
        model.chunk_count = document.chunk_count
        model.error_message = document.error_message
        model.content_text = document.content_text
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, document_id: int) -> bool:
        model = await self._session.get(DocumentModel, document_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
