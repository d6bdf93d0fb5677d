"""Abstract interface (port) for text extraction from various file formats."""

from abc import ABC, abstractmethod


class TextExtractor(ABC):
    """Port for text extraction — implemented in the infrastructure layer."""

    @abstractmethod
    async def extract_text(self, file_path: str, mime_type: str | None = None) -> str:
        """Extract text content from a file.

        Args:
            file_path: Absolute path to the file on disk.
            mime_type: MIME type of the file; detected from the extension when omitted.

        Returns:
            The extracted plain text (may be empty).

        Raises:
            ValueError: If the file type is not supported.
        """
        ...

    @abstractmethod
    def can_extract(self, mime_type: str) -> bool:
        """Check if the extractor supports the given MIME type."""
        ...
