"""
Error taxonomy for video generation jobs.

Every backend or transport failure is caught where it happens, turned into
one of the classes below, and stored on the job as a JobError. Only
JobAlreadyInProgress is ever raised to the caller of the controller.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Classified failure kinds."""
    CREDENTIAL_UNAVAILABLE = "credential_unavailable"
    CREDENTIAL_NOT_SELECTED = "credential_not_selected"
    INVALID_CREDENTIAL = "invalid_credential"
    SUBMISSION_FAILED = "submission_failed"
    OPERATION_ERROR = "operation_error"
    MISSING_ARTIFACT = "missing_artifact"
    DOWNLOAD_FAILED = "download_failed"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    JOB_ALREADY_IN_PROGRESS = "job_already_in_progress"


@dataclass(frozen=True)
class JobError:
    """Classified error stored on a failed job."""
    kind: ErrorKind
    message: str
    status_code: Optional[int] = None


class VideoJobError(Exception):
    """Base class for classified video job failures."""

    kind: ErrorKind = ErrorKind.OPERATION_ERROR
    default_message = "Video generation failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_job_error(self) -> JobError:
        return JobError(kind=self.kind, message=self.message)


class CredentialUnavailable(VideoJobError):
    """The host environment has no credential-selection capability at all."""
    kind = ErrorKind.CREDENTIAL_UNAVAILABLE
    default_message = "No credential environment found. Video generation may not work as expected."


class CredentialNotSelected(VideoJobError):
    kind = ErrorKind.CREDENTIAL_NOT_SELECTED
    default_message = "Please select an API key before generating a video."


class InvalidCredential(VideoJobError):
    """The backend could not resolve the selected credential."""
    kind = ErrorKind.INVALID_CREDENTIAL
    default_message = "Your API key is invalid. Select a new key and try again."


class SubmissionFailed(VideoJobError):
    kind = ErrorKind.SUBMISSION_FAILED
    default_message = "Could not start video generation"


class OperationError(VideoJobError):
    kind = ErrorKind.OPERATION_ERROR
    default_message = "Video generation failed during the operation."


class MissingArtifact(VideoJobError):
    kind = ErrorKind.MISSING_ARTIFACT
    default_message = "No video URI found in the completed operation."


class DownloadFailed(VideoJobError):
    kind = ErrorKind.DOWNLOAD_FAILED
    default_message = "Failed to download the video"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)

    def to_job_error(self) -> JobError:
        return JobError(kind=self.kind, message=self.message, status_code=self.status_code)


class UnsupportedMediaType(VideoJobError):
    kind = ErrorKind.UNSUPPORTED_MEDIA_TYPE
    default_message = "Please upload a valid image file."


class JobAlreadyInProgress(VideoJobError):
    kind = ErrorKind.JOB_ALREADY_IN_PROGRESS
    default_message = "A video job is already in progress"


class JobStateError(Exception):
    """Raised when a transition is attempted on a job that cannot take it."""


def is_invalid_credential_message(message: Optional[str], pattern: str) -> bool:
    """Check whether a backend message signals an unresolvable credential."""
    if not message or not pattern:
        return False
    return pattern.lower() in message.lower()


def classify_backend_error(
    error: BaseException,
    fallback: type[VideoJobError],
    pattern: str,
) -> VideoJobError:
    """
    Classify an exception raised by the generation backend.

    The same rule applies at submission time and at every polling tick:
    a message matching the invalid-credential pattern becomes
    InvalidCredential, anything else becomes ``fallback``.

    Args:
        error: The exception raised by the backend
        fallback: Error class used when the message does not match
        pattern: Case-insensitive substring that marks a bad credential

    Returns:
        The classified error (never raised here)
    """
    if isinstance(error, VideoJobError):
        return error

    message = str(error) or type(error).__name__
    if is_invalid_credential_message(message, pattern):
        return InvalidCredential()

    return fallback(f"{fallback.default_message}: {message}")
