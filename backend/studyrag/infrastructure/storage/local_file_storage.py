"""Local filesystem storage for uploaded documents.

Storage layout:
    <upload_dir>/documents/<stem>_<YYYYMMDD_HHmmss>_<token>.<ext>
"""

import logging
import mimetypes
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class StoredFile:
    """Result of storing a single file on disk."""

    stored_path: str
    filename: str
    file_size: int
    mime_type: str


def _datetime_stamp() -> str:
    """Return a UTC datetime stamp suitable for filenames: YYYYMMDD_HHmmss."""
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _sanitise(name: str, max_len: int = 80) -> str:
    """Replace non-word characters with underscores and truncate."""
    return re.sub(r"[^\w\-]", "_", name)[:max_len].strip("_") or "unnamed"


class LocalFileStorage:
    """Infrastructure adapter for local file storage."""

    def __init__(self, upload_dir: str):
        self._upload_dir = Path(upload_dir)
        self._upload_dir.mkdir(parents=True, exist_ok=True)

    async def store_file(self, content: bytes, filename: str) -> StoredFile:
        """Store an uploaded file in ``<upload_dir>/documents/``.

        The stored name is augmented with a UTC datetime stamp and a random
        token so same-named uploads never share a path:
        ``<stem>_<YYYYMMDD_HHmmss>_<token>.<ext>``. The returned ``filename``
        stays the user's original name.
        """
        files_dir = self._upload_dir / "documents"
        files_dir.mkdir(parents=True, exist_ok=True)

        stem = Path(filename).stem
        suffix = Path(filename).suffix  # includes the dot
        stamped_name = f"{_sanitise(stem)}_{_datetime_stamp()}_{uuid.uuid4().hex[:8]}{suffix}"

        dest_path = files_dir / stamped_name
        # "xb" fails rather than overwriting another upload's file
        with dest_path.open("xb") as f:
            f.write(content)

        mime_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"

        logger.info("Stored file: %s (%d bytes)", dest_path, len(content))

        return StoredFile(
            stored_path=str(dest_path),
            filename=filename,
            file_size=len(content),
            mime_type=mime_type,
        )

    async def delete_file(self, stored_path: str) -> bool:
        """Delete a stored file from disk.

        Returns True if successfully deleted, False if not found.
        """
        file_path = Path(stored_path)
        if not file_path.exists():
            return False

        file_path.unlink(missing_ok=True)
        logger.info("Deleted file from disk: %s", stored_path)
        return True
