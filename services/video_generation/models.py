"""
Job model for long-running video synthesis.

A Job moves through:

    idle -> awaiting_credential
    idle -> submitting -> polling -> downloading -> succeeded
                 |            |           |
                 +------------+-----------+-> failed | cancelled

The transition methods on Job are the only way state changes, so the
invariants below always hold:
- result_artifact is set only while succeeded
- last_error is set only while failed
- operation_handle is set only while polling or downloading
- succeeded, failed and cancelled accept no further transitions
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .errors import JobError, JobStateError


class AspectRatio(str, Enum):
    """Supported output aspect ratios."""
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"


class JobStatus(str, Enum):
    """Status of a video job."""
    IDLE = "idle"
    AWAITING_CREDENTIAL = "awaiting_credential"
    SUBMITTING = "submitting"
    POLLING = "polling"
    DOWNLOADING = "downloading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELLED})
ACTIVE_STATUSES = frozenset({JobStatus.SUBMITTING, JobStatus.POLLING, JobStatus.DOWNLOADING})


class CredentialState(str, Enum):
    UNKNOWN = "unknown"
    ABSENT = "absent"
    PRESENT = "present"


@dataclass(frozen=True)
class EncodedImage:
    """An image prepared for upload."""
    data: str  # base64
    media_type: str
    preview_ref: str  # file:// URI the UI can display
    size_bytes: int = 0


@dataclass(frozen=True)
class LocalArtifact:
    """A downloaded video on local disk."""
    path: Path
    uri: str
    source_uri: str
    media_type: str = "video/mp4"
    size_bytes: int = 0


class JobInput(BaseModel):
    """What the user asked for."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    prompt: str
    seed_image: EncodedImage
    aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("prompt must not be empty")
        return value


@dataclass
class Job:
    """A single requested long-running generation."""

    input: JobInput
    job_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: JobStatus = JobStatus.IDLE
    operation_handle: Optional[str] = None
    result_artifact: Optional[LocalArtifact] = None
    last_error: Optional[JobError] = None
    progress_message: str = ""
    created_at: datetime = field(default_factory=datetime.utcnow)
    resolved_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def _require(self, *allowed: JobStatus):
        if self.status not in allowed:
            raise JobStateError(
                f"Job {self.job_id} cannot leave {self.status.value} "
                f"(expected one of: {', '.join(s.value for s in allowed)})"
            )

    def _resolve(self, status: JobStatus):
        self.status = status
        self.operation_handle = None
        self.resolved_at = datetime.utcnow()

    def mark_awaiting_credential(self):
        self._require(JobStatus.IDLE)
        self.status = JobStatus.AWAITING_CREDENTIAL

    def mark_submitting(self):
        self._require(JobStatus.IDLE)
        self.status = JobStatus.SUBMITTING

    def mark_polling(self, operation_handle: str):
        self._require(JobStatus.SUBMITTING)
        if not operation_handle:
            raise JobStateError("Polling requires an operation handle")
        self.operation_handle = operation_handle
        self.status = JobStatus.POLLING

    def mark_downloading(self):
        self._require(JobStatus.POLLING)
        self.status = JobStatus.DOWNLOADING

    def mark_succeeded(self, artifact: LocalArtifact):
        self._require(JobStatus.DOWNLOADING)
        self._resolve(JobStatus.SUCCEEDED)
        self.result_artifact = artifact

    def mark_failed(self, error: JobError):
        self._require(*ACTIVE_STATUSES)
        self._resolve(JobStatus.FAILED)
        self.last_error = error

    def mark_cancelled(self):
        self._require(*ACTIVE_STATUSES)
        self._resolve(JobStatus.CANCELLED)


@dataclass(frozen=True)
class JobSnapshot:
    """Read-only projection of a job handed to the consumer."""
    job_id: Optional[str]
    status: JobStatus
    progress_message: str = ""
    result_artifact: Optional[LocalArtifact] = None
    last_error: Optional[JobError] = None
    credential_state: CredentialState = CredentialState.UNKNOWN
    notice: Optional[str] = None

    @classmethod
    def from_job(
        cls,
        job: Optional[Job],
        credential_state: CredentialState,
        notice: Optional[str] = None,
    ) -> "JobSnapshot":
        if job is None:
            return cls(job_id=None, status=JobStatus.IDLE,
                       credential_state=credential_state, notice=notice)
        return cls(
            job_id=job.job_id,
            status=job.status,
            progress_message=job.progress_message,
            result_artifact=job.result_artifact,
            last_error=job.last_error,
            credential_state=credential_state,
            notice=notice,
        )
