"""Abstract interface (port) for embedding generation."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Port for generating text embeddings — implemented in the infrastructure layer."""

    @abstractmethod
    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Args:
            texts: List of text strings to embed.

        Returns:
            List of embedding vectors, one per input text, in input order.
            Each vector has the same dimensionality (determined by the model).
        """
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Return the dimensionality of the embedding vectors produced by this provider."""
        ...

    async def embed(self, text: str) -> list[float]:
        """Embed a single document text."""
        vectors = await self.generate_embeddings([text])
        return vectors[0]

    async def embed_query(self, query: str) -> list[float]:
        """Embed a search query. Providers with query-specific modes override this."""
        return await self.embed(query)
