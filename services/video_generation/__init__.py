"""
Video Generation Service

Long-running video synthesis against a hosted generation API:
- Credential Gate: is a usable API key selected?
- Artifact Encoder: image upload encoding and video download
- Operation Poller: submit, then poll an operation handle to completion
- Controller: one job lifecycle with cancellation

Backend and transport failures never escape as exceptions; they are
classified and stored on the job.
"""

from .artifacts import encode_for_upload, materialize_download
from .backend import GenAIVideoBackend, OperationStatus, VideoBackend
from .controller import VideoJobController
from .credentials import CredentialGate, CredentialHost, EnvCredentialHost
from .errors import ErrorKind, JobAlreadyInProgress, JobError, VideoJobError
from .models import (
    AspectRatio,
    CredentialState,
    EncodedImage,
    Job,
    JobInput,
    JobSnapshot,
    JobStatus,
    LocalArtifact,
)
from .poller import OperationPoller, PollResult

__all__ = [
    "encode_for_upload",
    "materialize_download",
    "GenAIVideoBackend",
    "OperationStatus",
    "VideoBackend",
    "VideoJobController",
    "CredentialGate",
    "CredentialHost",
    "EnvCredentialHost",
    "ErrorKind",
    "JobAlreadyInProgress",
    "JobError",
    "VideoJobError",
    "AspectRatio",
    "CredentialState",
    "EncodedImage",
    "Job",
    "JobInput",
    "JobSnapshot",
    "JobStatus",
    "LocalArtifact",
    "OperationPoller",
    "PollResult",
]
