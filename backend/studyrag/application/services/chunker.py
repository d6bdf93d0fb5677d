"""Fixed-window text chunker with overlap and whitespace boundary snapping.

Splits extracted document text into overlapping character windows. A
window that would end mid-word is pulled back to the nearest preceding
whitespace; the dropped partial word reappears at the start of the next
window through the overlap.
"""

import logging

from studyrag.domain.entities import Chunk
from studyrag.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 500
DEFAULT_OVERLAP = 50


def validate_window(window_size: int, overlap: int) -> None:
    """Reject window/overlap combinations that cannot make progress."""
    if window_size <= 0:
        raise ValidationError(f"window_size must be positive, got {window_size}")
    if overlap < 0:
        raise ValidationError(f"overlap must not be negative, got {overlap}")
    if overlap >= window_size:
        raise ValidationError(
            f"overlap ({overlap}) must be smaller than window_size ({window_size})"
        )


def chunk_text(
    text: str,
    window_size: int = DEFAULT_WINDOW_SIZE,
    overlap: int = DEFAULT_OVERLAP,
) -> list[str]:
    """Split text into trimmed, overlapping windows in document order.

    Empty or whitespace-only input yields no windows. Text shorter than
    ``window_size`` yields a single window equal to the trimmed input.
    """
    validate_window(window_size, overlap)

    windows: list[str] = []
    length = len(text)
    start = 0

    while start < length:
        end = min(start + window_size, length)
        if end < length:
            end = _snap_to_whitespace(text, start, end)

        window = text[start:end].strip()
        if window:
            windows.append(window)

        if end >= length:
            break

        next_start = max(end - overlap, start + 1)
        if next_start == start:
            logger.warning("Chunking stalled at position %d; keeping %d chunks", start, len(windows))
            break
        start = next_start

    return windows


def chunk_document(
    document_id: int | None,
    filename: str,
    text: str,
    *,
    window_size: int = DEFAULT_WINDOW_SIZE,
    overlap: int = DEFAULT_OVERLAP,
) -> list[Chunk]:
    """Chunk a document and stamp positional metadata on every chunk.

    ``total_chunks`` is only known once the full pass has finished, so the
    windows are buffered first and the chunks are built afterwards.
    """
    windows = chunk_text(text, window_size, overlap)
    total = len(windows)
    return [
        Chunk(
            text=window,
            document_id=document_id,
            filename=filename,
            chunk_index=i,
            total_chunks=total,
        )
        for i, window in enumerate(windows)
    ]


def _snap_to_whitespace(text: str, start: int, end: int) -> int:
    """Move ``end`` back to the nearest whitespace at or before it, but after ``start``."""
    for pos in range(end, start, -1):
        if text[pos].isspace():
            return pos
    return end
