"""
AI service package for candidate profile extraction.

- extraction: prompt, request construction and the structured output call
- exceptions: model call and response contract errors

The AIService class owns the OpenAI client and delegates to these modules.
"""

import logging
from datetime import date
from typing import Any

from ...models import (
    NOTICE_PERIOD_DEFAULT,
    SALARY_REQUIREMENT_DEFAULT,
    BinaryPayload,
    ExtractedCandidateProfile,
    Qualification,
    TextPayload,
    WorkExperience,
)
from .exceptions import AIServiceError, ResponseParseError
from .extraction import (
    RESPONSE_MODEL,
    build_extraction_prompt,
    build_messages,
    extract_profile as _extract_profile,
)

logger = logging.getLogger(__name__)

__all__ = [
    "AIService",
    "AIServiceError",
    "ResponseParseError",
    "RESPONSE_MODEL",
    "build_extraction_prompt",
    "build_messages",
    "get_ai_service",
]


class AIService:
    """
    Service for AI-powered CV analysis.

    Uses an OpenAI chat model with vision and file inputs to turn a CV into
    an ExtractedCandidateProfile.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        use_mock: bool | None = None,
        client: Any = None,
    ):
        """
        Initialize the AI service.

        Args:
            api_key: OpenAI API key. If None, reads from config/environment.
            model: OpenAI model to use. If None, reads from config.
            use_mock: If True, return mock data instead of calling OpenAI.
                If None, mock mode is used only in debug mode without an
                API key.
            client: Pre-built OpenAI-compatible client.
        """
        if api_key is None or model is None or use_mock is None:
            from ...config import get_settings

            settings = get_settings()
            if api_key is None:
                api_key = settings.openai_api_key
            if model is None:
                model = settings.openai_model
            if use_mock is None:
                use_mock = settings.debug and client is None and not api_key

        self.api_key = api_key
        self.model = model
        self._client = client
        self.use_mock = use_mock

        if self.use_mock:
            logger.warning(
                "AI Service running in MOCK MODE. Set OPENAI_API_KEY in .env for real extraction."
            )
        elif client is None and not self.api_key:
            logger.warning(
                "OPENAI_API_KEY is not set; extraction requests will fail."
            )

    @property
    def client(self):
        """Lazy-load the OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise AIServiceError(
                    "OpenAI API key not provided. Set OPENAI_API_KEY environment variable."
                )
            from openai import OpenAI

            self._client = OpenAI(api_key=self.api_key)
        return self._client

    async def extract_profile(
        self,
        payload: TextPayload | BinaryPayload,
        source_file: str,
        today: date | None = None,
    ) -> ExtractedCandidateProfile:
        """
        Extract a candidate profile from an encoded CV.

        Delegates to the extraction module.

        Args:
            payload: Text or base64 payload built from the upload.
            source_file: Original filename.
            today: Reference date for the age calculation.

        Returns:
            The extracted profile.

        Raises:
            AIServiceError: If no API key is configured outside mock mode,
                or the model call fails.
        """
        return await _extract_profile(
            payload,
            source_file,
            client=None if self.use_mock else self.client,
            model=self.model,
            use_mock=self.use_mock,
            get_mock_profile=self._get_mock_profile if self.use_mock else None,
            today=today,
        )

    def _get_mock_profile(self) -> ExtractedCandidateProfile:
        """Return a mock candidate profile for development."""
        return ExtractedCandidateProfile(
            full_name="MOCK Candidate",
            age=30,
            drivers_license=True,
            own_transport=True,
            notice_period=NOTICE_PERIOD_DEFAULT,
            salary_requirement=SALARY_REQUIREMENT_DEFAULT,
            work_history=[
                WorkExperience(
                    company="Mock Company Ltd",
                    position="DEVELOPMENT MODE",
                    duration="Jan 2020 – Present",
                    reason_for_leaving="Set OPENAI_API_KEY for real extraction",
                ),
            ],
            qualifications=[
                Qualification(
                    institution="Mock University",
                    course="BSc Mock Studies",
                    year="2016 – 2019",
                ),
            ],
        )


# =============================================================================
# Singleton Factory
# =============================================================================

_ai_service: AIService | None = None


def get_ai_service() -> AIService:
    """Get or create the AI service singleton."""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service
