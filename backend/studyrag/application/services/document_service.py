"""Document service — orchestrates upload, text extraction, indexing and deletion."""

import logging
from pathlib import Path

from studyrag.application.interfaces import DocumentRepository, TextExtractor
from studyrag.application.services.indexing_service import IndexingService
from studyrag.domain.entities import Document
from studyrag.domain.exceptions import (
    DocumentProcessingError,
    EntityNotFoundError,
    IndexingError,
    ValidationError,
)
from studyrag.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage
from studyrag.infrastructure.storage.local_file_storage import LocalFileStorage

logger = logging.getLogger(__name__)
plog = PipelineLogger("DocumentService")

_DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
_DEFAULT_ALLOWED_EXTENSIONS = (
    "pdf", "docx", "pptx", "xlsx", "msg", "txt", "md", "csv", "jpg", "jpeg", "png",
)


def file_extension(filename: str | None) -> str:
    """Lower-case extension without the dot, or an empty string."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


class DocumentService:
    """Application service for the document lifecycle.

    Pipeline: Validate → Store → Extract Text → Save Record → Index.
    An indexing failure does not fail the upload: the record is kept with
    status ``index_failed`` and can be re-indexed later.
    """

    def __init__(
        self,
        document_repository: DocumentRepository,
        file_storage: LocalFileStorage,
        text_extractor: TextExtractor,
        indexing_service: IndexingService,
        *,
        max_file_size: int = _DEFAULT_MAX_FILE_SIZE,
        allowed_extensions: tuple[str, ...] | list[str] = _DEFAULT_ALLOWED_EXTENSIONS,
    ):
        self._document_repo = document_repository
        self._storage = file_storage
        self._extractor = text_extractor
        self._indexing_service = indexing_service
        self._max_file_size = max_file_size
        self._allowed_extensions = {ext.lower() for ext in allowed_extensions}

    # ── Upload ───────────────────────────────────────────────────────

    async def upload(self, content: bytes, filename: str) -> Document:
        """Validate, store, extract and index an uploaded document.

        Raises:
            ValidationError: For empty, oversized, unsupported or text-less files.
            DocumentProcessingError: If an accepted file cannot be read.
        """
        plog.separator(f"Processing: {filename}")
        plog.step_start(PipelineStage.UPLOAD, f"Received file '{filename}'", size_bytes=len(content))
        try:
            self._validate_upload(content, filename)
        except ValidationError as e:
            plog.step_error(PipelineStage.ERROR, f"Rejected '{filename}'", error=e)
            raise

        stored = await self._storage.store_file(content, filename)
        plog.step_complete(
            PipelineStage.STORAGE, f"Stored '{filename}'",
            path=stored.stored_path, mime_type=stored.mime_type,
        )

        try:
            text = await self._extract_text(stored.stored_path, stored.mime_type, filename)
        except ValidationError:
            await self._storage.delete_file(stored.stored_path)
            raise
        except Exception as e:
            await self._storage.delete_file(stored.stored_path)
            raise DocumentProcessingError(filename, str(e)) from e

        document = await self._document_repo.create(
            Document(
                filename=filename,
                file_type=file_extension(filename),
                file_size=len(content),
                content_text=text,
                stored_path=stored.stored_path,
            )
        )
        plog.detail("Database record created", id=document.id)

        return await self._index(document)

    # ── Query Operations ─────────────────────────────────────────────

    async def get_document(self, document_id: int) -> Document:
        document = await self._document_repo.get_by_id(document_id)
        if document is None:
            raise EntityNotFoundError("Document", document_id)
        return document

    async def list_documents(self, skip: int = 0, limit: int = 100) -> list[Document]:
        """List documents, newest upload first."""
        return await self._document_repo.get_all(skip=skip, limit=limit)

    # ── Lifecycle ────────────────────────────────────────────────────

    async def reindex(self, document_id: int) -> Document:
        """Re-run indexing from the stored text.

        Raises:
            EntityNotFoundError: If the document does not exist.
            IndexingError: If indexing fails again (the status is still recorded).
        """
        document = await self.get_document(document_id)
        document = await self._index(document)
        if document.error_message:
            raise IndexingError(document_id, document.error_message)
        return document

    async def delete(self, document_id: int) -> None:
        """Delete the record, its stored file, and (best effort) its vector entries."""
        plog.step_start(PipelineStage.CLEANUP, "Deleting document", document_id=document_id)
        document = await self.get_document(document_id)

        await self._document_repo.delete(document_id)
        removed = await self._indexing_service.remove(document_id)
        if document.stored_path:
            await self._storage.delete_file(document.stored_path)

        plog.step_complete(
            PipelineStage.COMPLETE,
            f"Deleted '{document.filename}'",
            document_id=document_id,
            vector_entries=removed,
        )

    # ── Internal Pipeline ────────────────────────────────────────────

    def _validate_upload(self, content: bytes, filename: str) -> None:
        if not content:
            raise ValidationError("Cannot process empty file")

        if len(content) > self._max_file_size:
            limit_mb = self._max_file_size // (1024 * 1024)
            raise ValidationError(f"File size exceeds maximum allowed size of {limit_mb}MB")

        if file_extension(filename) not in self._allowed_extensions:
            allowed = ", ".join(sorted(self._allowed_extensions))
            raise ValidationError(f"File type not supported. Allowed types: {allowed}")

    async def _extract_text(self, file_path: str, mime_type: str, filename: str) -> str:
        with plog.timed_step(PipelineStage.TEXT_EXTRACTION, f"Extracting text from '{filename}'"):
            try:
                text = await self._extractor.extract_text(file_path, mime_type)
            except ValueError as e:
                raise ValidationError(str(e)) from e

        text = text.strip()
        if not text:
            logger.warning("No text could be extracted from file: %s", filename)
            raise ValidationError("No text content found in the document")

        plog.stats(characters=len(text), file=Path(file_path).name)
        return text

    async def _index(self, document: Document) -> Document:
        """Index a document and record the outcome on its record."""
        plog.step_start(PipelineStage.INDEXING, f"Indexing '{document.filename}'", document_id=document.id)
        try:
            count = await self._indexing_service.index(
                document.id, document.filename, document.content_text
            )
        except (IndexingError, ValidationError) as e:
            plog.step_error(PipelineStage.INDEXING, f"Indexing failed for '{document.filename}'", error=e)
            document.mark_index_failed(str(e))
        else:
            plog.step_complete(PipelineStage.INDEXING, f"Indexed '{document.filename}'", chunks=count)
            document.mark_indexed(count)

        return await self._document_repo.update(document)
