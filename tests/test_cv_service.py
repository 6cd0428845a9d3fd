"""Tests for the end-to-end extraction pipeline."""

import base64

import pytest

from app.cv_extractor.models import UploadedFile
from app.cv_extractor.services.ai import AIService, AIServiceError, ResponseParseError
from app.cv_extractor.services.cv_service import CVService
from app.cv_extractor.services.file_classifier import (
    DOCX_MEDIA_TYPE,
    FileTooLargeError,
    InvalidFormatError,
    LegacyFormatError,
)
from app.cv_extractor.services.payload_service import PayloadEncodingError

MIB = 1024 * 1024


class TestExtractScenarios:
    """Tests for CVService.extract."""

    @pytest.mark.asyncio
    async def test_jpeg_scenario(self, cv_service, fake_openai, profile_data):
        """Test that a 2 MiB JPEG resolves to exactly the model's record."""
        content = b"\xff\xd8\xff\xe0" + b"\x00" * (2 * MIB - 4)
        file = UploadedFile.from_bytes(content, "jane.jpg", "image/jpeg")

        profile = await cv_service.extract(file)

        assert profile.model_dump(by_alias=True) == profile_data
        assert len(fake_openai.calls) == 1
        image_part = fake_openai.calls[0]["messages"][1]["content"][0]
        prefix = "data:image/jpeg;base64,"
        assert image_part["image_url"]["url"].startswith(prefix)
        encoded = image_part["image_url"]["url"][len(prefix):]
        assert base64.b64decode(encoded) == content

    @pytest.mark.asyncio
    async def test_docx_sends_extracted_text(
        self, cv_service, fake_openai, sample_docx_bytes
    ):
        """Test that a DOCX is sent as plain text."""
        file = UploadedFile.from_bytes(sample_docx_bytes, "jane.docx", DOCX_MEDIA_TYPE)

        await cv_service.extract(file)

        text_part = fake_openai.calls[0]["messages"][1]["content"][0]
        assert text_part["type"] == "text"
        assert "D.O.B: 12 March 1996" in text_part["text"]

    @pytest.mark.asyncio
    async def test_legacy_doc_makes_no_call(self, cv_service, fake_openai):
        """Test that resume.doc is rejected with guidance and nothing is sent."""
        file = UploadedFile.from_bytes(b"\xd0\xcf\x11\xe0", "resume.doc", "application/msword")

        with pytest.raises(LegacyFormatError) as exc_info:
            await cv_service.extract(file)

        assert "re-save" in exc_info.value.user_message
        assert fake_openai.calls == []

    @pytest.mark.asyncio
    async def test_oversized_pdf_makes_no_call(self, cv_service, fake_openai):
        """Test that a 20 MiB PDF is size-rejected and nothing is sent."""
        file = UploadedFile(
            content=b"%PDF-1.4",
            media_type="application/pdf",
            filename="big.pdf",
            size=20 * MIB,
        )

        with pytest.raises(FileTooLargeError):
            await cv_service.extract(file)

        assert fake_openai.calls == []

    @pytest.mark.asyncio
    async def test_unsupported_format_makes_no_call(self, cv_service, fake_openai):
        file = UploadedFile.from_bytes(b"PK\x03\x04", "cv.zip", "application/zip")

        with pytest.raises(InvalidFormatError):
            await cv_service.extract(file)

        assert fake_openai.calls == []

    @pytest.mark.asyncio
    async def test_read_failure_makes_no_call(self, cv_service, fake_openai):
        """Test that a corrupt file fails as a read error, not a model error."""
        file = UploadedFile.from_bytes(b"not a pdf", "cv.pdf", "application/pdf")

        with pytest.raises(PayloadEncodingError) as exc_info:
            await cv_service.extract(file)

        assert not isinstance(exc_info.value, AIServiceError)
        assert fake_openai.calls == []

    @pytest.mark.asyncio
    async def test_invalid_json_is_contract_violation(self, openai_factory):
        """Test that a non-JSON response never yields a partial record."""
        client = openai_factory("Sure! Here is the profile: {fullName: Jane}")
        service = CVService(
            ai_service=AIService(api_key="k", model="m", client=client),
            max_upload_bytes=15 * MIB,
        )
        file = UploadedFile.from_bytes(b"Jane Doe CV", "cv.txt", "text/plain")

        with pytest.raises(ResponseParseError):
            await service.extract(file)

        assert len(client.calls) == 1

    @pytest.mark.asyncio
    async def test_ceiling_is_configurable(self, ai_service, fake_openai):
        service = CVService(ai_service=ai_service, max_upload_bytes=10)
        file = UploadedFile.from_bytes(b"x" * 11, "cv.txt", "text/plain")

        with pytest.raises(FileTooLargeError):
            await service.extract(file)

        assert fake_openai.calls == []


class TestCheckFile:
    """Tests for CVService.check_file."""

    def test_refuses_from_metadata(self, cv_service):
        with pytest.raises(FileTooLargeError):
            cv_service.check_file("application/pdf", "big.pdf", 20 * MIB)
        with pytest.raises(LegacyFormatError):
            cv_service.check_file("application/msword", "resume.doc", 10)

    def test_returns_accepted_classification(self, cv_service):
        classification = cv_service.check_file(DOCX_MEDIA_TYPE, "cv.docx", 10)
        assert classification.accepted
