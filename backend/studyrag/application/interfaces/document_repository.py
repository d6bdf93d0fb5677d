"""Abstract repository interface (port) for document metadata."""

from abc import ABC, abstractmethod

from studyrag.domain.entities import Document


class DocumentRepository(ABC):
    """Port for document persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, document_id: int) -> Document | None:
        """Retrieve a single document by its ID."""
        ...

    @abstractmethod
    async def get_all(self, skip: int = 0, limit: int = 100) -> list[Document]:
        """Retrieve documents, newest upload first."""
        ...

    @abstractmethod
    async def create(self, document: Document) -> Document:
        """Persist a new document and return it with the generated ID."""
        ...

    @abstractmethod
    async def update(self, document: Document) -> Document:
        """Update an existing document's indexing state."""
        ...

    @abstractmethod
    async def delete(self, document_id: int) -> bool:
        """Delete a document. Returns True if deleted, False if not found."""
        ...
