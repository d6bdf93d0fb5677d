"""Formats retrieved chunks into the context block of a grounding prompt."""

from studyrag.domain.entities import RetrievalResult


def assemble_context(results: RetrievalResult) -> str:
    """Concatenate chunks in rank order, each preceded by a source header.

    The header uses the chunk's stamped index, or its position in
    ``results`` when the index metadata is missing.
    """
    parts: list[str] = []
    for position, result in enumerate(results):
        chunk = result.chunk
        chunk_index = chunk.chunk_index if chunk.chunk_index is not None else position
        parts.append(f"Source: {chunk.filename}, Chunk: {chunk_index}\n{chunk.text}\n\n")
    return "".join(parts).rstrip()
