"""Multi-format text extractor — extracts text from PDF, DOCX, PPTX, XLSX, MSG, images, and plain text."""

import base64
import logging
import mimetypes
from pathlib import Path

from studyrag.application.interfaces.chat_provider import ChatProvider
from studyrag.application.interfaces.text_extractor import TextExtractor
from studyrag.domain.entities import ChatMessage, ContentPart

logger = logging.getLogger(__name__)

_OCR_SYSTEM_PROMPT = """You are an OCR engine. Transcribe all readable text in the image exactly as it appears.
Preserve line breaks and reading order. Do not describe the image, summarise, or add commentary.
If the image contains no readable text, return an empty response."""


class MultiFormatTextExtractor(TextExtractor):
    """Infrastructure adapter that extracts text from various file formats.

    Implements the TextExtractor interface using format-specific libraries:
    - PDF: PyMuPDF (fitz)
    - DOCX: python-docx
    - PPTX: python-pptx
    - XLSX: openpyxl
    - MSG: extract-msg
    - TXT/CSV/MD: built-in
    - Images: OCR through a vision-capable chat model (when configured)
    """

    # Format → handler method mapping
    _HANDLERS: dict[str, str] = {
        "application/pdf": "_extract_pdf",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "_extract_docx",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation": "_extract_pptx",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "_extract_xlsx",
        "application/vnd.ms-outlook": "_extract_msg",
        "text/plain": "_extract_text",
        "text/csv": "_extract_text",
        "text/markdown": "_extract_text",
        "image/png": "_extract_image",
        "image/jpeg": "_extract_image",
    }

    # Extension → MIME type, for platforms whose mimetypes table lacks an entry
    _EXTENSION_TYPES: dict[str, str] = {
        ".pdf": "application/pdf",
        ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ".msg": "application/vnd.ms-outlook",
        ".txt": "text/plain",
        ".csv": "text/csv",
        ".md": "text/markdown",
        ".png": "image/png",
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
    }

    def __init__(
        self,
        vision_provider: ChatProvider | None = None,
        ocr_model: str = "",
    ):
        self._vision_provider = vision_provider
        self._ocr_model = ocr_model

    def can_extract(self, mime_type: str) -> bool:
        """Check if this extractor supports the given MIME type."""
        if mime_type.startswith("image/") and self._vision_provider is None:
            return False
        return mime_type in self._HANDLERS

    async def extract_text(self, file_path: str, mime_type: str | None = None) -> str:
        """Extract text from a file at the given path.

        Args:
            file_path: Absolute path to the file.
            mime_type: Optional MIME type override. If not given, detected from extension.

        Returns:
            Extracted text content.

        Raises:
            ValueError: If the file type is not supported.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        mime_type = self._resolve_mime_type(path, mime_type)

        if not self.can_extract(mime_type):
            raise ValueError(f"Unsupported file type: {mime_type} ({path.name})")

        handler = getattr(self, self._HANDLERS[mime_type])
        text = await handler(file_path, mime_type)

        logger.info(
            "Extracted %d characters from %s (%s)",
            len(text),
            path.name,
            mime_type,
        )
        return text

    def _resolve_mime_type(self, path: Path, mime_type: str | None) -> str:
        if mime_type and mime_type in self._HANDLERS:
            return mime_type
        guessed = self._EXTENSION_TYPES.get(path.suffix.lower())
        if guessed:
            return guessed
        return mime_type or mimetypes.guess_type(str(path))[0] or "application/octet-stream"

    # ── Format-specific handlers ─────────────────────────────────────

    async def _extract_pdf(self, file_path: str, mime_type: str) -> str:
        """Extract text from PDF using PyMuPDF."""
        import fitz  # PyMuPDF

        doc = fitz.open(file_path)
        pages: list[str] = []

        for page_num, page in enumerate(doc):
            text = page.get_text("text")
            if text.strip():
                pages.append(text)
            else:
                logger.debug("Page %d appears to be scanned (no text layer)", page_num + 1)

        doc.close()

        if not pages:
            logger.warning("PDF has no extractable text — may require OCR: %s", file_path)
            return ""

        return "\n\n".join(pages)

    async def _extract_docx(self, file_path: str, mime_type: str) -> str:
        """Extract text from DOCX using python-docx."""
        from docx import Document

        doc = Document(file_path)
        parts: list[str] = []

        # Paragraphs
        for para in doc.paragraphs:
            if para.text.strip():
                parts.append(para.text)

        # Tables
        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    parts.append(" | ".join(cells))

        return "\n".join(parts)

    async def _extract_pptx(self, file_path: str, mime_type: str) -> str:
        """Extract slide text (text frames, tables, speaker notes) using python-pptx."""
        from pptx import Presentation

        prs = Presentation(file_path)
        parts: list[str] = []

        for slide_num, slide in enumerate(prs.slides, start=1):
            slide_parts: list[str] = []

            for shape in slide.shapes:
                if shape.has_text_frame:
                    text = shape.text_frame.text.strip()
                    if text:
                        slide_parts.append(text)
                elif shape.has_table:
                    for row in shape.table.rows:
                        cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                        if cells:
                            slide_parts.append(" | ".join(cells))

            if slide.has_notes_slide:
                notes = slide.notes_slide.notes_text_frame.text.strip()
                if notes:
                    slide_parts.append(f"Notes: {notes}")

            # Blank slides contribute nothing, so an empty deck yields ""
            if slide_parts:
                parts.append(f"--- Slide {slide_num} ---")
                parts.extend(slide_parts)

        return "\n".join(parts)

    async def _extract_xlsx(self, file_path: str, mime_type: str) -> str:
        """Extract text from XLSX using openpyxl."""
        from openpyxl import load_workbook

        wb = load_workbook(file_path, read_only=True, data_only=True)
        parts: list[str] = []

        for sheet_name in wb.sheetnames:
            ws = wb[sheet_name]
            parts.append(f"--- Sheet: {sheet_name} ---")

            for row in ws.iter_rows(values_only=True):
                cells = [str(cell) for cell in row if cell is not None]
                if cells:
                    parts.append(" | ".join(cells))

        wb.close()
        return "\n".join(parts)

    async def _extract_msg(self, file_path: str, mime_type: str) -> str:
        """Extract text from Outlook MSG files."""
        import extract_msg

        msg = extract_msg.Message(file_path)
        parts = [
            f"From: {msg.sender or ''}",
            f"To: {msg.to or ''}",
            f"Subject: {msg.subject or ''}",
            f"Date: {msg.date or ''}",
            "",
            msg.body or "",
        ]
        msg.close()
        return "\n".join(parts)

    async def _extract_text(self, file_path: str, mime_type: str) -> str:
        """Extract text from plain text files (TXT, CSV, MD)."""
        path = Path(file_path)
        # Try UTF-8 first, then fall back to latin-1
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            return path.read_text(encoding="latin-1")

    async def _extract_image(self, file_path: str, mime_type: str) -> str:
        """Transcribe an image through the vision-capable chat model."""
        image_base64 = base64.b64encode(Path(file_path).read_bytes()).decode("ascii")
        messages = [
            ChatMessage(role="system", content=_OCR_SYSTEM_PROMPT),
            ChatMessage(
                role="user",
                content=[
                    ContentPart(
                        type="image_url",
                        image_url={"url": f"data:{mime_type};base64,{image_base64}"},
                    ),
                    ContentPart(type="text", text="Extract all text from this image."),
                ],
            ),
        ]

        result = await self._vision_provider.complete(
            messages, self._ocr_model, temperature=0.0, max_tokens=4000
        )
        logger.info(
            "Vision OCR extracted %d characters (model=%s, tokens=%d)",
            len(result.content),
            result.model or self._ocr_model,
            result.usage.total_tokens,
        )
        return result.content.strip()
