"""
Classification of uploaded CV files.

Decides from the declared media type, the file name and the byte size
whether a file is sent to the model as raw bytes, has its text extracted
first, or is refused. No file content is read here.
"""

import logging
import mimetypes
from pathlib import PurePath

from ..config import MAX_UPLOAD_BYTES
from ..models import FileClassification, FileDisposition
from .exceptions import CVExtractionError

logger = logging.getLogger(__name__)


PDF_MEDIA_TYPE = "application/pdf"
TEXT_MEDIA_TYPE = "text/plain"
DOCX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)
LEGACY_DOC_MEDIA_TYPE = "application/msword"
GENERIC_MEDIA_TYPES = {"", "application/octet-stream"}

SUPPORTED_MEDIA_TYPES = ["image/*", PDF_MEDIA_TYPE, TEXT_MEDIA_TYPE, DOCX_MEDIA_TYPE]
SUPPORTED_EXTENSIONS = [".jpg", ".jpeg", ".png", ".webp", ".gif", ".pdf", ".txt", ".docx"]


# =============================================================================
# Exceptions
# =============================================================================


class FileRejectedError(CVExtractionError):
    """Raised when an uploaded file is refused before any model call."""

    error_code = "invalid_format"
    default_message = "Please upload a valid file format (JPG, PNG, PDF, DOCX, TXT)."


class InvalidFormatError(FileRejectedError):
    """The file type is not supported."""


class LegacyFormatError(FileRejectedError):
    """The file is a legacy binary .doc document."""

    error_code = "legacy_format"
    default_message = (
        "The classic .doc format is not supported as it is a legacy format. "
        "Please re-save the file as a .docx or PDF for best results."
    )


class FileTooLargeError(FileRejectedError):
    """The file exceeds the upload size ceiling."""

    error_code = "file_too_large"

    def __init__(self, detail: str | None = None, max_bytes: int = MAX_UPLOAD_BYTES):
        max_mb = max_bytes / (1024 * 1024)
        super().__init__(
            detail,
            user_message=f"File is too large. The maximum size is {max_mb:g} MB.",
        )


# =============================================================================
# Classification
# =============================================================================


def _suffix(filename: str | None) -> str:
    return PurePath(filename or "").suffix.lower()


def effective_media_type(media_type: str | None, filename: str | None) -> str:
    """
    Return the declared media type, or one guessed from the file name.

    Browsers sometimes send an empty type or application/octet-stream; in
    that case the suffix decides.
    """
    declared = (media_type or "").split(";")[0].strip().lower()
    if declared not in GENERIC_MEDIA_TYPES:
        return declared
    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or declared


def classify_file(
    media_type: str | None,
    filename: str | None,
    size: int,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> FileClassification:
    """
    Classify an uploaded file.

    Size is checked first, so an oversized file is refused whatever its type.
    The legacy .doc check runs before any acceptance check.

    Args:
        media_type: Media type declared by the client.
        filename: Original file name.
        size: File size in bytes.
        max_bytes: Upload size ceiling.

    Returns:
        FileClassification with the disposition and effective media type.
    """
    suffix = _suffix(filename)
    resolved = effective_media_type(media_type, filename)

    if size > max_bytes:
        return FileClassification(
            disposition=FileDisposition.REJECTED_TOO_LARGE,
            media_type=resolved,
            reason=f"{size} bytes exceeds limit of {max_bytes} bytes",
        )

    if resolved == LEGACY_DOC_MEDIA_TYPE or suffix == ".doc":
        return FileClassification(
            disposition=FileDisposition.REJECTED_LEGACY,
            media_type=resolved,
            reason="legacy .doc format",
        )

    if resolved == DOCX_MEDIA_TYPE or suffix == ".docx":
        return FileClassification(
            disposition=FileDisposition.ACCEPTED_TEXT_EXTRACT,
            media_type=DOCX_MEDIA_TYPE,
        )

    if resolved == TEXT_MEDIA_TYPE or suffix == ".txt":
        return FileClassification(
            disposition=FileDisposition.ACCEPTED_BINARY,
            media_type=TEXT_MEDIA_TYPE,
        )

    if resolved.startswith("image/") or resolved == PDF_MEDIA_TYPE:
        return FileClassification(
            disposition=FileDisposition.ACCEPTED_BINARY,
            media_type=resolved,
        )

    return FileClassification(
        disposition=FileDisposition.REJECTED_INVALID,
        media_type=resolved,
        reason=f"unsupported media type {resolved or 'unknown'!r}",
    )


def ensure_accepted(
    classification: FileClassification,
    filename: str | None = None,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> FileClassification:
    """
    Raise the matching FileRejectedError for a rejected classification.

    Returns:
        The classification unchanged when the file was accepted.
    """
    if classification.accepted:
        return classification

    logger.info("Rejected upload %r: %s", filename, classification.reason)

    disposition = classification.disposition
    if disposition == FileDisposition.REJECTED_TOO_LARGE:
        raise FileTooLargeError(classification.reason, max_bytes=max_bytes)
    if disposition == FileDisposition.REJECTED_LEGACY:
        raise LegacyFormatError(classification.reason)
    raise InvalidFormatError(classification.reason)
