"""
Base exception for every failure of the extraction pipeline.
"""

GENERIC_FAILURE_MESSAGE = (
    "Failed to extract information from the CV. Please try again."
)


class CVExtractionError(Exception):
    """
    Raised when a CV cannot be turned into a candidate profile.

    Attributes:
        user_message: Human-readable text shown to the user.
        error_code: Stable machine-readable code for the failure kind.
    """

    error_code = "extraction_failed"
    default_message = GENERIC_FAILURE_MESSAGE

    def __init__(self, detail: str | None = None, user_message: str | None = None):
        self.detail = detail or self.default_message
        self.user_message = user_message or self.default_message
        super().__init__(self.detail)
