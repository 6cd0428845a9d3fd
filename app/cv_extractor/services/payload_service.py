"""
Payload encoding for the extraction request.

Turns an accepted upload into either base64 bytes (images, PDF, plain text)
or plain text extracted from a DOCX package with python-docx.
"""

import base64
import io
import logging

from ..models import (
    BinaryPayload,
    FileClassification,
    FileDisposition,
    TextPayload,
    UploadedFile,
)
from .exceptions import CVExtractionError
from .file_classifier import PDF_MEDIA_TYPE

logger = logging.getLogger(__name__)

PDF_HEADER = b"%PDF"
PDF_HEADER_WINDOW = 1024


class PayloadEncodingError(CVExtractionError):
    """Raised when an uploaded file cannot be read or its text extracted."""

    error_code = "read_failure"
    default_message = "Could not read your file. It may be empty or corrupt."


class PayloadService:
    """
    Service for building the model payload from an uploaded file.

    Binary files pass through untouched as base64; DOCX files are reduced to
    their plain text, dropping all styling.
    """

    def __init__(self, table_cell_separator: str = "\t"):
        """
        Initialize the payload service.

        Args:
            table_cell_separator: Joins the cells of one table row in DOCX text.
        """
        self.table_cell_separator = table_cell_separator

    def encode(
        self, file: UploadedFile, classification: FileClassification
    ) -> TextPayload | BinaryPayload:
        """
        Encode an accepted file.

        Args:
            file: The uploaded file.
            classification: Its (accepted) classification.

        Returns:
            TextPayload for DOCX documents, BinaryPayload otherwise.

        Raises:
            PayloadEncodingError: If the file is empty or cannot be decoded.
            ValueError: If the classification is not an accepted one.
        """
        if classification.disposition == FileDisposition.ACCEPTED_TEXT_EXTRACT:
            return TextPayload(content=self.extract_docx_text(file.content))
        if classification.disposition == FileDisposition.ACCEPTED_BINARY:
            return self.encode_binary(file.content, classification.media_type)
        raise ValueError(
            f"Cannot encode a file classified as {classification.disposition.value}"
        )

    def encode_binary(self, content: bytes, media_type: str) -> BinaryPayload:
        """
        Base64-encode file bytes verbatim.

        Raises:
            PayloadEncodingError: If the content is empty or is not a PDF
                although declared as one.
        """
        if not content:
            raise PayloadEncodingError("Empty file provided")

        # Readers accept the header anywhere in the first KiB
        if media_type == PDF_MEDIA_TYPE and PDF_HEADER not in content[:PDF_HEADER_WINDOW]:
            raise PayloadEncodingError(
                "Invalid PDF file: no PDF header in the first 1024 bytes"
            )

        logger.info("Encoding %d bytes of %s as base64", len(content), media_type)
        return BinaryPayload(
            media_type=media_type,
            base64=base64.b64encode(content).decode("ascii"),
        )

    def extract_docx_text(self, content: bytes) -> str:
        """
        Extract the plain text of a DOCX document in reading order.

        Paragraphs become lines; each table row becomes one line of cells.

        Raises:
            PayloadEncodingError: If the package is corrupt or holds no text.
        """
        if not content:
            raise PayloadEncodingError("Empty file provided")

        from docx import Document
        from docx.table import Table

        try:
            document = Document(io.BytesIO(content))
        except Exception as e:
            logger.error("Could not open DOCX package: %s", e)
            raise PayloadEncodingError(f"Invalid or corrupted DOCX file: {e}") from e

        lines: list[str] = []
        for block in document.iter_inner_content():
            if isinstance(block, Table):
                lines.extend(self._table_lines(block))
            elif block.text.strip():
                lines.append(block.text)

        text = "\n".join(lines).strip()
        if not text:
            raise PayloadEncodingError("No text found in DOCX document")

        logger.info("Extracted %d characters of text from DOCX", len(text))
        return text

    def _table_lines(self, table) -> list[str]:
        lines = []
        # Merged cells appear once per grid column and row they span
        seen = set()
        for row in table.rows:
            cells: list[str] = []
            for cell in row.cells:
                if cell._tc in seen:
                    continue
                seen.add(cell._tc)
                text = cell.text.strip()
                if text:
                    cells.append(text)
            if cells:
                lines.append(self.table_cell_separator.join(cells))
        return lines


# Singleton instance for convenience
_payload_service: PayloadService | None = None


def get_payload_service() -> PayloadService:
    """Get or create the payload service singleton."""
    global _payload_service
    if _payload_service is None:
        _payload_service = PayloadService()
    return _payload_service
