"""
Shared exceptions for AI service modules.
"""

from ..exceptions import CVExtractionError


class AIServiceError(CVExtractionError):
    """Raised when the call to the extraction model fails."""

    error_code = "model_call_failure"


class ResponseParseError(AIServiceError):
    """Raised when the model response is not a valid candidate profile."""

    error_code = "response_parse_failure"
