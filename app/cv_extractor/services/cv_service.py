"""
CV extraction pipeline: classify, encode, then ask the model.
"""

import logging
from datetime import date

from ..config import get_settings
from ..models import ExtractedCandidateProfile, FileClassification, UploadedFile
from .ai import AIService, get_ai_service
from .file_classifier import classify_file, ensure_accepted
from .payload_service import PayloadService, get_payload_service

logger = logging.getLogger(__name__)


class CVService:
    """
    Turns one uploaded CV into an ExtractedCandidateProfile.

    Holds no per-request state; every call to extract() is independent.
    """

    def __init__(
        self,
        ai_service: AIService | None = None,
        payload_service: PayloadService | None = None,
        max_upload_bytes: int | None = None,
    ):
        self.ai_service = ai_service or get_ai_service()
        self.payload_service = payload_service or get_payload_service()
        self.max_upload_bytes = (
            max_upload_bytes
            if max_upload_bytes is not None
            else get_settings().max_upload_bytes
        )

    def check_file(
        self, media_type: str | None, filename: str | None, size: int
    ) -> FileClassification:
        """
        Classify a file from its metadata alone and raise if it is refused.

        Lets callers refuse an upload before reading its content.
        """
        classification = classify_file(media_type, filename, size, self.max_upload_bytes)
        ensure_accepted(classification, filename, self.max_upload_bytes)
        return classification

    async def extract(
        self, file: UploadedFile, today: date | None = None
    ) -> ExtractedCandidateProfile:
        """
        Extract a candidate profile from an uploaded CV.

        Rejected files raise before anything is read or sent to the model.

        Raises:
            InvalidFormatError, FileTooLargeError, LegacyFormatError: The file
                was refused by classification.
            PayloadEncodingError: The file could not be read.
            AIServiceError: The model call failed.
            ResponseParseError: The model response was not a valid profile.
        """
        classification = self.check_file(file.media_type, file.filename, file.size)

        logger.info(
            "Processing CV: %s (%d bytes, %s, %s)",
            file.filename,
            file.size,
            classification.media_type,
            classification.disposition.value,
        )

        payload = self.payload_service.encode(file, classification)
        return await self.ai_service.extract_profile(payload, file.filename, today=today)


_cv_service: CVService | None = None


def get_cv_service() -> CVService:
    """Get or create the CV service singleton."""
    global _cv_service
    if _cv_service is None:
        _cv_service = CVService()
    return _cv_service
