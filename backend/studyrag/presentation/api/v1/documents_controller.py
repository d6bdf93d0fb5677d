"""Documents API controller — upload, list, reindex and delete study documents."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status

from studyrag.application.schemas import (
    DocumentDetailSchema,
    DocumentSummarySchema,
    UploadResultSchema,
)
from studyrag.application.services import DocumentService
from studyrag.domain.entities import Document, IndexStatus
from studyrag.domain.exceptions import (
    DocumentProcessingError,
    EntityNotFoundError,
    IndexingError,
    ValidationError,
)
from studyrag.infrastructure.dependencies import get_document_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["Documents"])

_PREVIEW_CHARS = 2000


# ── Helpers ──────────────────────────────────────────────────────────

def _to_summary(doc: Document) -> DocumentSummarySchema:
    return DocumentSummarySchema(
        id=doc.id,
        filename=doc.filename,
        file_type=doc.file_type,
        file_size=doc.file_size,
        status=doc.status.value,
        chunk_count=doc.chunk_count,
        uploaded_at=doc.uploaded_at.isoformat(),
        error_message=doc.error_message,
    )


def _to_detail(doc: Document) -> DocumentDetailSchema:
    # Preview: first 2000 chars of extracted text
    preview = None
    if doc.content_text:
        preview = doc.content_text[:_PREVIEW_CHARS] + (
            "..." if len(doc.content_text) > _PREVIEW_CHARS else ""
        )

    return DocumentDetailSchema(
        **_to_summary(doc).model_dump(),
        content_preview=preview,
        content_length=len(doc.content_text),
        updated_at=doc.updated_at.isoformat(),
    )


# ── Endpoints ────────────────────────────────────────────────────────

@router.post("/upload", response_model=UploadResultSchema, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile,
    service: DocumentService = Depends(get_document_service),
) -> UploadResultSchema:
    """Upload a document, extract its text and index it for question answering.

    An indexing failure does not fail the upload; the document is returned
    with status ``index_failed`` and can be re-indexed later.
    """
    content = await file.read()
    try:
        document = await service.upload(content, file.filename or "untitled")
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DocumentProcessingError as e:
        logger.error("Upload of '%s' could not be processed: %s", e.filename, e.message)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    if document.status == IndexStatus.INDEXED:
        message = f"Document uploaded and indexed into {document.chunk_count} chunks"
    else:
        message = "Document uploaded, but indexing failed; retry with reindex"

    return UploadResultSchema(document=_to_summary(document), message=message)


@router.get("", response_model=list[DocumentSummarySchema])
async def list_documents(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: DocumentService = Depends(get_document_service),
) -> list[DocumentSummarySchema]:
    """List uploaded documents, newest first."""
    documents = await service.list_documents(skip=skip, limit=limit)
    return [_to_summary(d) for d in documents]


@router.get("/{document_id}", response_model=DocumentDetailSchema)
async def get_document(
    document_id: int,
    service: DocumentService = Depends(get_document_service),
) -> DocumentDetailSchema:
    """Retrieve a single document with a preview of its extracted text."""
    try:
        document = await service.get_document(document_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return _to_detail(document)


@router.post("/{document_id}/reindex", response_model=DocumentSummarySchema)
async def reindex_document(
    document_id: int,
    service: DocumentService = Depends(get_document_service),
) -> DocumentSummarySchema:
    """Re-run chunking, embedding and indexing from the stored text."""
    try:
        document = await service.reindex(document_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except IndexingError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return _to_summary(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: int,
    service: DocumentService = Depends(get_document_service),
) -> None:
    """Delete a document, its stored file and its vector entries."""
    try:
        await service.delete(document_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
