"""
Video Job Controller - one coherent lifecycle per video job.

Sequences Credential Gate -> submission -> polling -> download and
publishes a JobSnapshot to the consumer on every transition.

At most one job is active at a time. The job body runs in its own
asyncio task so cancel() can interrupt the wait between polls (or any
in-flight request) instead of just ignoring its result.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from core.config import Config, get_config

from .artifacts import materialize_download
from .backend import GenAIVideoBackend, VideoBackend
from .credentials import CredentialGate, CredentialHost, EnvCredentialHost
from .errors import (
    CredentialNotSelected,
    DownloadFailed,
    InvalidCredential,
    JobAlreadyInProgress,
    OperationError,
    VideoJobError,
)
from .models import ACTIVE_STATUSES, Job, JobInput, JobSnapshot, JobStatus, LocalArtifact
from .poller import OperationPoller

logger = logging.getLogger(__name__)

Downloader = Callable[..., Awaitable[LocalArtifact]]


class VideoJobController:
    """
    Orchestrates a single long-running video job.

    Usage:
        controller = VideoJobController(on_update=render)

        job = await controller.start_video_job(
            JobInput(prompt="...", seed_image=encode_for_upload("cat.png"))
        )

        # From another task, e.g. a signal handler
        controller.cancel()
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        backend: Optional[VideoBackend] = None,
        credential_host: Optional[CredentialHost] = None,
        poller: Optional[OperationPoller] = None,
        gate: Optional[CredentialGate] = None,
        downloader: Optional[Downloader] = None,
        on_update: Optional[Callable[[JobSnapshot], None]] = None,
    ):
        """
        Initialize the controller.

        Args:
            config: Optional config override
            backend: Generation backend (google-genai if None)
            credential_host: Host key environment (process config if None)
            poller: Optional poller override (built from backend if None)
            gate: Optional credential gate override
            downloader: Coroutine function used to fetch the final video
            on_update: Callback receiving a JobSnapshot on every transition
        """
        self.config = config or get_config()
        self.poller = poller or OperationPoller(
            backend or GenAIVideoBackend(self.config), self.config
        )
        self.gate = gate or CredentialGate(
            credential_host if credential_host is not None else EnvCredentialHost(self.config)
        )
        self.downloader = downloader or materialize_download
        self.on_update = on_update

        self._job: Optional[Job] = None
        self._task: Optional[asyncio.Task] = None
        self._starting = False
        self._message_index = 0

    @property
    def job(self) -> Optional[Job]:
        return self._job

    @property
    def status(self) -> JobStatus:
        return self._job.status if self._job else JobStatus.IDLE

    def snapshot(self) -> JobSnapshot:
        return JobSnapshot.from_job(self._job, self.gate.state, self.gate.notice)

    def _emit(self):
        """Publish the current state via callback."""
        job = self._job
        if job:
            logger.info(f"Job {job.job_id}: {job.status.value}")
        if self.on_update:
            try:
                self.on_update(self.snapshot())
            except Exception as e:
                logger.warning(f"Update callback failed: {e}")

    def _advance_message(self):
        messages = self.config.video.progress_messages
        if not messages or self._job is None:
            return
        self._message_index = (self._message_index + 1) % len(messages)
        self._job.progress_message = messages[self._message_index]
        self._emit()

    def _fail(self, job: Job, error: VideoJobError):
        if isinstance(error, InvalidCredential):
            self.gate.invalidate()
        job.mark_failed(error.to_job_error())
        logger.error(f"Job {job.job_id} failed ({error.kind.value}): {error.message}")
        self._emit()

    async def start_video_job(self, job_input: JobInput) -> Job:
        """
        Run a video job to a resting state.

        Returns once the job is succeeded, failed, cancelled or awaiting a
        credential. Backend and transport failures are stored on the job,
        not raised.

        Raises:
            JobAlreadyInProgress: If another job is still active
        """
        if self._starting:
            raise JobAlreadyInProgress(f"Job {self._job.job_id} is still starting")
        if self._job is not None and self._job.status in ACTIVE_STATUSES:
            raise JobAlreadyInProgress(
                f"Job {self._job.job_id} is still {self._job.status.value}"
            )

        messages = self.config.video.progress_messages
        self._message_index = 0
        job = Job(input=job_input, progress_message=messages[0] if messages else "")
        self._job = job

        # Held until the job is submitting or has come to rest
        self._starting = True
        try:
            if not self.gate.is_present:
                await self.gate.probe()
                if not self.gate.is_present:
                    if not self.gate.notice:
                        self.gate.notice = CredentialNotSelected().message
                    job.mark_awaiting_credential()
                    self._emit()
                    return job

            job.mark_submitting()
            self._emit()
            if job.status is not JobStatus.SUBMITTING:
                return job

            self._task = asyncio.create_task(self._run(job))
        finally:
            self._starting = False

        try:
            await self._task
        except asyncio.CancelledError:
            if job.status is JobStatus.CANCELLED:
                return job
            # The caller was cancelled, not the job
            if job.status in ACTIVE_STATUSES:
                job.mark_cancelled()
                self._emit()
            raise
        finally:
            self._task = None

        return job

    async def _run(self, job: Job):
        try:
            await self._execute(job)
        except Exception as e:
            logger.exception(f"Job {job.job_id} hit an unexpected error")
            if job.is_active:
                self._fail(job, OperationError(f"Unexpected error: {type(e).__name__}: {e}"))

    async def _execute(self, job: Job):
        try:
            handle = await self.poller.submit(job.input)
        except VideoJobError as e:
            self._fail(job, e)
            return

        job.mark_polling(handle)
        self._emit()

        result = await self.poller.poll_until_done(handle, on_tick=self._advance_message)
        if not result.succeeded:
            self._fail(job, result.error)
            return

        job.mark_downloading()
        self._emit()

        try:
            artifact = await self.downloader(
                result.artifact_uri,
                api_key=self.config.api.google_api_key,
                output_dir=self.config.download.output_dir,
                credential_param=self.config.download.credential_param,
                timeout=self.config.download.timeout_seconds,
            )
        except DownloadFailed as e:
            self._fail(job, e)
            return
        except Exception as e:
            self._fail(
                job, DownloadFailed(f"{DownloadFailed.default_message}: {type(e).__name__}: {e}")
            )
            return

        job.mark_succeeded(artifact)
        self._emit()

    def cancel(self) -> JobStatus:
        """
        Cancel the active job.

        Takes effect immediately: the job is marked cancelled before this
        returns and the running task is cancelled, so no further status
        query is sent. A no-op when nothing is active.
        """
        job = self._job
        if job is None or job.status not in ACTIVE_STATUSES:
            return self.status

        job.mark_cancelled()
        if self._task is not None and not self._task.done():
            self._task.cancel()

        self._emit()
        return job.status

    async def request_credential(self):
        """Open the host's credential picker."""
        await self.gate.request_selection()
        self._emit()
