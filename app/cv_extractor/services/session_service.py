"""
Extraction state for a front end.

Keeps the idle / extracting / success / failed state of one user's
extraction as an explicit immutable record. Every extraction attempt gets a
request token; a result is applied only if its token is the latest one
issued, so a slow earlier request can never overwrite a newer one. Selecting
another file or resetting also issues a token.
"""

import logging
from enum import Enum
from typing import Awaitable, Callable

from pydantic import BaseModel, ConfigDict

from ..models import ExtractedCandidateProfile, UploadedFile
from .exceptions import GENERIC_FAILURE_MESSAGE, CVExtractionError

logger = logging.getLogger(__name__)


class ExtractionStatus(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    SUCCESS = "success"
    FAILED = "failed"


class ExtractionState(BaseModel):
    """Snapshot of the extraction state."""

    model_config = ConfigDict(frozen=True)

    status: ExtractionStatus = ExtractionStatus.IDLE
    file_name: str | None = None
    profile: ExtractedCandidateProfile | None = None
    error: str | None = None
    request_token: int = 0


class ExtractionSession:
    """
    Drives ExtractionState through one user's extractions.

    There is no cancellation: a superseded request still runs to completion,
    its outcome is just not applied.
    """

    def __init__(self):
        self._state = ExtractionState()
        self._latest_token = 0

    @property
    def state(self) -> ExtractionState:
        return self._state

    @property
    def latest_token(self) -> int:
        return self._latest_token

    def select_file(self, file_name: str) -> ExtractionState:
        """
        Select a new file, clearing any previous result or error.

        Any extraction still in flight becomes stale.
        """
        self._latest_token += 1
        self._state = ExtractionState(
            status=ExtractionStatus.IDLE,
            file_name=file_name,
            request_token=self._latest_token,
        )
        return self._state

    def reset(self) -> ExtractionState:
        """Return to the initial state; any extraction in flight becomes stale."""
        self._latest_token += 1
        self._state = ExtractionState(request_token=self._latest_token)
        return self._state

    def begin(self) -> int:
        """Start an extraction attempt and return its request token."""
        self._latest_token += 1
        self._state = ExtractionState(
            status=ExtractionStatus.EXTRACTING,
            file_name=self._state.file_name,
            request_token=self._latest_token,
        )
        return self._latest_token

    def is_current(self, token: int) -> bool:
        return token == self._latest_token

    def complete(self, token: int, profile: ExtractedCandidateProfile) -> bool:
        """
        Apply a successful result.

        Returns:
            False if the token is stale and the result was ignored.
        """
        if not self.is_current(token):
            logger.info("Ignoring stale result for token %d (latest %d)", token, self._latest_token)
            return False
        self._state = self._state.model_copy(
            update={"status": ExtractionStatus.SUCCESS, "profile": profile, "error": None}
        )
        return True

    def fail(self, token: int, message: str) -> bool:
        """
        Apply a failure.

        Returns:
            False if the token is stale and the failure was ignored.
        """
        if not self.is_current(token):
            logger.info("Ignoring stale failure for token %d (latest %d)", token, self._latest_token)
            return False
        self._state = self._state.model_copy(
            update={"status": ExtractionStatus.FAILED, "profile": None, "error": message}
        )
        return True

    async def run(
        self,
        file: UploadedFile,
        extract: Callable[[UploadedFile], Awaitable[ExtractedCandidateProfile]],
    ) -> ExtractionState:
        """
        Run one extraction and apply its outcome if still current.

        Returns:
            The session state after the attempt (which reflects a newer
            attempt if this one was superseded).
        """
        if self._state.file_name != file.filename:
            self.select_file(file.filename)
        token = self.begin()
        try:
            profile = await extract(file)
        except CVExtractionError as e:
            self.fail(token, e.user_message)
        except Exception:
            logger.exception("Unexpected error extracting %s", file.filename)
            self.fail(token, GENERIC_FAILURE_MESSAGE)
        else:
            self.complete(token, profile)
        return self._state
