"""
Pydantic models for the CV extraction pipeline.

Defines strict types for uploaded files, encoded payloads, the extracted
candidate profile and the HTTP request/response bodies.
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    computed_field,
)
from pydantic.alias_generators import to_camel

NOTICE_PERIOD_DEFAULT = "Available immediately"
SALARY_REQUIREMENT_DEFAULT = "Not specified"


# =============================================================================
# Uploaded Files & Classification
# =============================================================================


class UploadedFile(BaseModel):
    """
    A single uploaded document, held for the duration of one extraction.

    Attributes:
        content: Raw byte content of the file.
        media_type: Media type declared by the client (may be empty).
        filename: Original file name.
        size: Size in bytes.
    """

    content: bytes = Field(..., repr=False)
    media_type: str = Field(default="")
    filename: str = Field(default="")
    size: int = Field(..., ge=0)

    @classmethod
    def from_bytes(
        cls, content: bytes, filename: str, media_type: str | None = None
    ) -> "UploadedFile":
        """Build an UploadedFile whose size is the length of its content."""
        return cls(
            content=content,
            media_type=media_type or "",
            filename=filename,
            size=len(content),
        )


class FileDisposition(str, Enum):
    """How an uploaded file is routed (or why it is refused)."""

    ACCEPTED_BINARY = "accepted_binary"
    ACCEPTED_TEXT_EXTRACT = "accepted_text_extract"
    REJECTED_LEGACY = "rejected_legacy"
    REJECTED_INVALID = "rejected_invalid"
    REJECTED_TOO_LARGE = "rejected_too_large"


class FileClassification(BaseModel):
    """Result of classifying an uploaded file."""

    model_config = ConfigDict(frozen=True)

    disposition: FileDisposition
    media_type: str = Field(
        default="",
        description="Effective media type (declared, or guessed from the file name)",
    )
    reason: str | None = Field(
        default=None,
        description="Why the file was rejected, for logs",
    )

    @property
    def accepted(self) -> bool:
        return self.disposition in (
            FileDisposition.ACCEPTED_BINARY,
            FileDisposition.ACCEPTED_TEXT_EXTRACT,
        )


# =============================================================================
# Encoded Payloads
# =============================================================================


class TextPayload(BaseModel):
    """Plain text extracted from a word-processor document."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    content: str


class BinaryPayload(BaseModel):
    """Base64-encoded file bytes paired with their media type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["binary"] = "binary"
    media_type: str
    base64: str = Field(..., repr=False)


EncodedPayload = Annotated[TextPayload | BinaryPayload, Field(discriminator="kind")]


# =============================================================================
# Candidate Profile
# =============================================================================


class _ProfileModel(BaseModel):
    """Immutable profile record serialised with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class WorkExperience(_ProfileModel):
    """One entry of the candidate's work history."""

    company: StrictStr = Field(..., description="The name of the company.")
    position: StrictStr = Field(..., description="The job title or position.")
    duration: StrictStr = Field(
        ...,
        description=(
            "The start and end dates of the employment, verbatim from the CV "
            "(e.g., 'Sep 2023 – Present')."
        ),
    )
    reason_for_leaving: StrictStr = Field(
        ...,
        description=(
            "The reason for leaving the job. If not specified, infer from context "
            "or write 'Not specified'."
        ),
    )


class Qualification(_ProfileModel):
    """One educational qualification."""

    institution: StrictStr = Field(
        ..., description="The name of the educational institution."
    )
    course: StrictStr = Field(
        ..., description="The name of the certificate, diploma, or degree."
    )
    year: StrictStr = Field(
        ...,
        description="The year or duration of the study (e.g., 'Mar 2021 – May 2022').",
    )


class ExtractedCandidateProfile(_ProfileModel):
    """
    Structured candidate record produced by a successful extraction.

    All fields are required. Work history and qualifications keep the order
    in which the model returned them. This model is also the structured
    output schema sent to OpenAI.
    """

    full_name: StrictStr = Field(..., description="The full name of the candidate.")
    age: StrictInt = Field(
        ...,
        ge=0,
        description="The candidate's age, calculated from their Date of Birth and the current year.",
    )
    drivers_license: StrictBool = Field(
        ..., description="Does the candidate have a driver's license?"
    )
    own_transport: StrictBool = Field(
        ..., description="Does the candidate have their own transport?"
    )
    notice_period: StrictStr = Field(
        ...,
        description=f"The candidate's notice period. If not mentioned, state '{NOTICE_PERIOD_DEFAULT}'.",
    )
    salary_requirement: StrictStr = Field(
        ...,
        description=f"The candidate's required salary. If not mentioned, state '{SALARY_REQUIREMENT_DEFAULT}'.",
    )
    work_history: list[WorkExperience] = Field(
        ..., description="The candidate's professional work experience."
    )
    qualifications: list[Qualification] = Field(
        ..., description="The candidate's educational qualifications."
    )


# =============================================================================
# API Request/Response Models
# =============================================================================


class ExtractResponse(BaseModel):
    """Response model for the extract endpoint."""

    request_token: int | None = Field(
        default=None,
        description="Token supplied by the caller, echoed back so stale responses can be ignored",
    )
    source_file: str = Field(..., description="Original filename of the processed CV")
    profile: ExtractedCandidateProfile
    summary: str = Field(..., description="Candidate summary document for the clipboard")


class SummaryResponse(BaseModel):
    """Response model for the summary endpoint."""

    summary: str


class SupportedFormatsResponse(BaseModel):
    """Formats accepted by the extract endpoint."""

    media_types: list[str]
    extensions: list[str]
    max_upload_bytes: int

    @computed_field
    @property
    def max_upload_mb(self) -> float:
        return round(self.max_upload_bytes / (1024 * 1024), 2)


class ErrorResponse(BaseModel):
    """Error body returned for any failed extraction."""

    detail: str
    error_code: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    message: str | None = None
    version: str = Field(default="1.0.0")
