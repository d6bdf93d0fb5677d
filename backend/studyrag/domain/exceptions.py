"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ValidationError(Exception):
    """Raised for invalid input or configuration, before any remote call is made."""


class IndexingError(Exception):
    """Raised when a document could not be embedded or written to the vector index.

    Partially written entries of that document are not usable; the caller
    decides whether to retry.
    """

    def __init__(self, document_id: int | str, message: str):
        self.document_id = document_id
        self.message = message
        super().__init__(f"Indexing failed for document '{document_id}': {message}")


class GenerationError(Exception):
    """Raised when the generative model fails after retrieval succeeded."""


class ChatProviderError(Exception):
    """Raised when a chat provider returns an error.

    Provider-agnostic — works for OpenRouter, Groq, OpenAI, etc.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")


class EmbeddingProviderError(Exception):
    """Raised when an embedding provider returns an error or a malformed response."""

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")


class DocumentProcessingError(Exception):
    """Raised when an accepted upload cannot be read (corrupt file, OCR failure)."""

    def __init__(self, filename: str, message: str):
        self.filename = filename
        self.message = message
        super().__init__(f"Failed to process document '{filename}': {message}")
