"""
Operation Poller - turns a submitted job into a terminal outcome.

Polling uses a constant interval with no cap and no backoff; video
generations take minutes and the user can cancel at any time. The wait
between polls is a plain awaitable sleep, so cancelling the task that runs
poll_until_done stops the loop before the next status query is sent.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from core.config import Config, get_config

from .backend import VideoBackend
from .errors import (
    InvalidCredential,
    MissingArtifact,
    OperationError,
    SubmissionFailed,
    VideoJobError,
    classify_backend_error,
    is_invalid_credential_message,
)
from .models import JobInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollResult:
    """Terminal outcome of polling: an artifact URI or a classified error."""
    artifact_uri: Optional[str] = None
    error: Optional[VideoJobError] = None
    polls: int = 0

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.artifact_uri is not None


class OperationPoller:
    """
    Submits generation requests and polls them to completion.

    Usage:
        poller = OperationPoller(GenAIVideoBackend())

        handle = await poller.submit(job_input)
        result = await poller.poll_until_done(handle, on_tick=advance_message)
        if result.succeeded:
            ...
    """

    def __init__(
        self,
        backend: VideoBackend,
        config: Optional[Config] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.backend = backend
        self.config = config or get_config()
        self._sleep = sleep

    @property
    def poll_interval(self) -> float:
        return self.config.video.poll_interval_seconds

    def _classify(self, error: BaseException, fallback: type) -> VideoJobError:
        return classify_backend_error(
            error, fallback, self.config.video.invalid_credential_pattern
        )

    async def submit(self, job_input: JobInput) -> str:
        """
        Submit a generation request.

        Returns:
            The operation handle

        Raises:
            InvalidCredential: If the backend could not resolve the key
            SubmissionFailed: On any other backend or transport error
        """
        try:
            handle = await self.backend.submit_video_job(
                prompt=job_input.prompt,
                seed_image=job_input.seed_image,
                aspect_ratio=job_input.aspect_ratio,
                resolution_hint=self.config.video.resolution,
            )
        except Exception as e:
            classified = self._classify(e, SubmissionFailed)
            logger.error(f"Submission failed ({classified.kind.value}): {e}")
            raise classified from e

        if not handle:
            raise SubmissionFailed(f"{SubmissionFailed.default_message}: no operation handle returned")

        return handle

    async def poll_until_done(
        self,
        operation_handle: str,
        on_tick: Optional[Callable[[], None]] = None,
    ) -> PollResult:
        """
        Poll an operation until it reaches a terminal state.

        Args:
            operation_handle: Handle returned by submit()
            on_tick: Called after each wait, before the next query

        Returns:
            PollResult with the artifact URI, or the classified error
        """
        polls = 0

        while True:
            polls += 1
            try:
                status = await self.backend.get_operation_status(operation_handle)
            except Exception as e:
                error = self._classify(e, OperationError)
                logger.error(f"Poll {polls} for {operation_handle} failed ({error.kind.value}): {e}")
                return PollResult(error=error, polls=polls)

            if status.done:
                break

            logger.debug(f"Operation {operation_handle} not done after poll {polls}")
            await self._sleep(self.poll_interval)

            if on_tick:
                try:
                    on_tick()
                except Exception as e:
                    logger.warning(f"Tick callback failed: {e}")

        if status.error_message:
            if is_invalid_credential_message(
                status.error_message, self.config.video.invalid_credential_pattern
            ):
                error = InvalidCredential()
            else:
                error = OperationError(status.error_message)
            logger.error(f"Operation {operation_handle} failed: {status.error_message}")
            return PollResult(error=error, polls=polls)

        if not status.artifact_uri:
            logger.warning(f"No artifact URI in completed operation {operation_handle}")
            return PollResult(error=MissingArtifact(), polls=polls)

        logger.info(f"Operation {operation_handle} completed after {polls} polls")
        return PollResult(artifact_uri=status.artifact_uri, polls=polls)
