"""
Candidate profile extraction from CV documents.

Uses OpenAI structured outputs with ExtractedCandidateProfile as the response
format, so the response always has the shape of the profile model.
"""

import asyncio
import base64
import binascii
import codecs
import logging
from datetime import date
from typing import Any, Callable

from pydantic import ValidationError

from ...models import (
    NOTICE_PERIOD_DEFAULT,
    SALARY_REQUIREMENT_DEFAULT,
    BinaryPayload,
    ExtractedCandidateProfile,
    TextPayload,
)
from ..file_classifier import PDF_MEDIA_TYPE, TEXT_MEDIA_TYPE
from .exceptions import AIServiceError, ResponseParseError

logger = logging.getLogger(__name__)


# =============================================================================
# Extraction Prompts
# =============================================================================

EXTRACTION_SYSTEM_PROMPT = """You are an expert HR assistant.
Your task is to analyze the provided CV document (which could be an image, PDF, or text document) and extract specific information into a structured JSON format.
Be as accurate as possible. Follow the provided schema precisely.

Return data in the EXACT JSON format specified by the response schema."""


def build_extraction_prompt(today: date | None = None) -> str:
    """
    Build the extraction instruction sent after the CV content.

    Args:
        today: Reference date for the age calculation. Defaults to today.
    """
    current_year = (today or date.today()).year
    return f"""Extract the candidate profile from this CV.

## Extraction Rules:

1. **Age**: Calculate the candidate's age from their Date of Birth (D.O.B). The current year is {current_year}.
2. **Transport**: Determine whether the candidate has a driver's license and their own transport. Assume they have their own transport if they have a license, unless the CV says otherwise.
3. **Completeness**: Extract ALL work history entries and ALL qualifications, in the order they appear in the CV.
4. **Defaults**: If the notice period is not mentioned, use "{NOTICE_PERIOD_DEFAULT}". If the salary requirement is not mentioned, use "{SALARY_REQUIREMENT_DEFAULT}".
5. **Durations**: Format durations exactly as they appear in the CV (e.g., "Sep 2023 – Present").
6. **Reason for leaving**: If not stated, infer it from context or write "Not specified"."""


# Structured output schema; the SDK derives the strict JSON schema from it
RESPONSE_MODEL = ExtractedCandidateProfile


# =============================================================================
# Request Construction
# =============================================================================


TEXT_FALLBACK_ENCODINGS = ("utf-8", "cp1252")


def decode_text(raw: bytes) -> str:
    """
    Decode a plain-text CV.

    A UTF-8 or UTF-16 byte order mark decides the encoding. Otherwise UTF-8
    is tried, then Windows-1252; only if both fail are undecodable bytes
    replaced.
    """
    if raw.startswith(codecs.BOM_UTF8):
        return raw[len(codecs.BOM_UTF8):].decode("utf-8", errors="replace")
    if raw.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return raw.decode("utf-16", errors="replace")

    for encoding in TEXT_FALLBACK_ENCODINGS:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue

    logger.warning("Plain-text CV is neither UTF-8 nor Windows-1252, replacing bad bytes")
    return raw.decode("utf-8", errors="replace")


def build_payload_content(
    payload: TextPayload | BinaryPayload, source_file: str = "cv"
) -> dict[str, Any]:
    """
    Convert an encoded payload into a chat message content part.

    Images become data URLs, PDFs become inline file parts and text
    (extracted or plain) becomes a text part.
    """
    if isinstance(payload, TextPayload):
        return {"type": "text", "text": payload.content}

    if payload.media_type.startswith("image/"):
        return {
            "type": "image_url",
            "image_url": {
                "url": f"data:{payload.media_type};base64,{payload.base64}",
                "detail": "high",
            },
        }

    if payload.media_type == PDF_MEDIA_TYPE:
        return {
            "type": "file",
            "file": {
                "filename": source_file,
                "file_data": f"data:{PDF_MEDIA_TYPE};base64,{payload.base64}",
            },
        }

    if payload.media_type == TEXT_MEDIA_TYPE:
        try:
            raw = base64.b64decode(payload.base64, validate=True)
        except binascii.Error as e:
            raise AIServiceError(f"Invalid base64 payload: {e}") from e
        return {"type": "text", "text": decode_text(raw)}

    raise AIServiceError(f"Unsupported payload media type: {payload.media_type}")


def build_messages(
    payload: TextPayload | BinaryPayload,
    source_file: str = "cv",
    today: date | None = None,
) -> list[dict[str, Any]]:
    """Build the chat messages for one extraction request."""
    return [
        {"role": "system", "content": EXTRACTION_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                build_payload_content(payload, source_file),
                {"type": "text", "text": build_extraction_prompt(today)},
            ],
        },
    ]


# =============================================================================
# Main Extraction Function
# =============================================================================


async def extract_profile(
    payload: TextPayload | BinaryPayload,
    source_file: str,
    client: Any,  # OpenAI client
    model: str = "gpt-4.1",
    use_mock: bool = False,
    get_mock_profile: Callable[[], ExtractedCandidateProfile] | None = None,
    today: date | None = None,
) -> ExtractedCandidateProfile:
    """
    Extract a candidate profile from one encoded CV payload.

    Issues exactly one chat-completions request. The blocking SDK call runs
    in a worker thread.

    Args:
        payload: The encoded CV content.
        source_file: Original filename, for logs and PDF file parts.
        client: OpenAI client instance.
        model: Model name to use.
        use_mock: If True, return the mock profile instead of calling OpenAI.
        get_mock_profile: Function returning the mock profile.
        today: Reference date for the age calculation.

    Returns:
        The parsed ExtractedCandidateProfile.

    Raises:
        AIServiceError: If the request fails.
        ResponseParseError: If the response is empty, is not JSON, or does
            not match the profile shape.
    """
    if use_mock and get_mock_profile:
        logger.info("Extracting profile (MOCK MODE) for: %s", source_file)
        return get_mock_profile()

    logger.info(
        "Extracting profile from '%s' (%s payload) with model %s",
        source_file,
        payload.kind,
        model,
    )

    try:
        messages = build_messages(payload, source_file, today)

        # chat.completions.parse validates the response against the model
        response = await asyncio.to_thread(
            client.chat.completions.parse,
            model=model,
            messages=messages,
            response_format=RESPONSE_MODEL,
        )

        message = response.choices[0].message
        if message.refusal:
            raise AIServiceError(f"Model refused the request: {message.refusal}")

        profile = message.parsed
        if profile is None:
            logger.error("OpenAI returned no parsed response")
            raise ResponseParseError("Empty response from OpenAI")

    except ValidationError as e:
        logger.error(
            "Extraction response does not match the profile schema: %d error(s)",
            e.error_count(),
        )
        raise ResponseParseError(f"Response does not match profile schema: {e}") from e
    except AIServiceError:
        raise
    except Exception as e:
        logger.exception("Profile extraction failed")
        raise AIServiceError(f"Profile extraction failed: {e}") from e

    logger.info(
        "Extracted profile for '%s': %d job(s), %d qualification(s)",
        source_file,
        len(profile.work_history),
        len(profile.qualifications),
    )
    return profile
