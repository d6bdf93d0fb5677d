"""Domain entities for the read path — retrieval results and answers."""

from dataclasses import dataclass, field

from studyrag.domain.entities.chunk import Chunk


@dataclass(frozen=True)
class RetrievedChunk:
    """A chunk returned by similarity search, with its cosine similarity score."""

    chunk: Chunk
    score: float


# Ranked by descending score, length <= K, every score >= the configured floor.
RetrievalResult = list[RetrievedChunk]


@dataclass
class Answer:
    """Answer to a question, with the distinct source filenames in rank order."""

    text: str
    sources: list[str] = field(default_factory=list)
