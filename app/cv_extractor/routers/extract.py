"""
Router for CV extraction endpoints.

Handles:
- CV upload and profile extraction
- Candidate summary rendering
- Supported format discovery
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from ..config import Settings, get_settings
from ..models import (
    ErrorResponse,
    ExtractedCandidateProfile,
    ExtractResponse,
    SummaryResponse,
    SupportedFormatsResponse,
    UploadedFile,
)
from ..services.cv_service import CVService, get_cv_service
from ..services.file_classifier import SUPPORTED_EXTENSIONS, SUPPORTED_MEDIA_TYPES
from ..services.payload_service import PayloadEncodingError
from ..services.summary_service import render_candidate_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["extract"])

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse},
    status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
}


@router.get("/formats", response_model=SupportedFormatsResponse)
async def supported_formats(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SupportedFormatsResponse:
    """List the accepted media types, file extensions and size ceiling."""
    return SupportedFormatsResponse(
        media_types=SUPPORTED_MEDIA_TYPES,
        extensions=SUPPORTED_EXTENSIONS,
        max_upload_bytes=settings.max_upload_bytes,
    )


@router.post("/extract", response_model=ExtractResponse, responses=ERROR_RESPONSES)
async def extract_cv(
    file: Annotated[UploadFile, File(description="CV file (image, PDF, TXT or DOCX)")],
    cv_service: Annotated[CVService, Depends(get_cv_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    request_token: Annotated[
        int | None,
        Form(description="Caller's request token, echoed back in the response"),
    ] = None,
) -> ExtractResponse:
    """
    Extract a candidate profile from an uploaded CV.

    Returns the structured profile together with the candidate summary
    document. Pipeline failures are mapped to error responses by the
    application's exception handlers.
    """
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No filename provided",
        )

    try:
        # Refuse on the multipart metadata before buffering the content
        if file.size is not None:
            cv_service.check_file(file.content_type, file.filename, file.size)

        try:
            content = await file.read()
        except OSError as e:
            logger.error("Could not read upload %s: %s", file.filename, e)
            raise PayloadEncodingError(f"Could not read upload: {e}") from e

        uploaded = UploadedFile.from_bytes(content, file.filename, file.content_type)
        profile = await cv_service.extract(uploaded)
    finally:
        await file.close()

    return ExtractResponse(
        request_token=request_token,
        source_file=file.filename,
        profile=profile,
        summary=render_candidate_summary(profile, settings.summary_recipient_name),
    )


@router.post("/summary", response_model=SummaryResponse)
async def candidate_summary(
    profile: ExtractedCandidateProfile,
    settings: Annotated[Settings, Depends(get_settings)],
) -> SummaryResponse:
    """Render the candidate summary document for a profile."""
    return SummaryResponse(
        summary=render_candidate_summary(profile, settings.summary_recipient_name)
    )
