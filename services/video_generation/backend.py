"""
Generation backend adapter.

VideoBackend is the contract the poller talks to; GenAIVideoBackend
implements it on the google-genai SDK (Veo models). Tests substitute
their own VideoBackend.
"""

import base64
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from google import genai
from google.genai import types

from core.config import Config, get_config

from .models import AspectRatio, EncodedImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationStatus:
    """One status reading of a long-running operation."""
    done: bool
    error_message: Optional[str] = None
    artifact_uri: Optional[str] = None


class VideoBackend(ABC):
    """Hosted video synthesis API."""

    @abstractmethod
    async def submit_video_job(
        self,
        prompt: str,
        seed_image: EncodedImage,
        aspect_ratio: AspectRatio,
        resolution_hint: str,
    ) -> str:
        """Start a generation and return its opaque operation handle."""

    @abstractmethod
    async def get_operation_status(self, operation_handle: str) -> OperationStatus:
        """Read the current state of an operation."""


class GenAIVideoBackend(VideoBackend):
    """
    Veo video generation through the google-genai SDK.

    The operation handle is the operation's resource name. The SDK client
    is built lazily from the configured key and rebuilt when the key
    changes, so a key chosen in the picker takes effect on the next job.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()
        self._client: Optional[genai.Client] = None
        self._client_key: Optional[str] = None

    def _get_client(self) -> genai.Client:
        """Get or create the SDK client for the current key."""
        api_key = self.config.api.google_api_key
        if self._client is None or self._client_key != api_key:
            self._client = genai.Client(api_key=api_key)
            self._client_key = api_key
        return self._client

    async def submit_video_job(
        self,
        prompt: str,
        seed_image: EncodedImage,
        aspect_ratio: AspectRatio,
        resolution_hint: str,
    ) -> str:
        client = self._get_client()

        logger.info(
            f"Veo request: model={self.config.video.model}, "
            f"aspect_ratio={aspect_ratio.value}, prompt={prompt[:50]}..."
        )

        operation = await client.aio.models.generate_videos(
            model=self.config.video.model,
            prompt=prompt,
            image=types.Image(
                image_bytes=base64.b64decode(seed_image.data),
                mime_type=seed_image.media_type,
            ),
            config=types.GenerateVideosConfig(
                number_of_videos=self.config.video.number_of_videos,
                resolution=resolution_hint,
                aspect_ratio=aspect_ratio.value,
            ),
        )

        if not operation.name:
            raise RuntimeError("Backend returned an operation without a name")

        logger.info(f"Veo operation created: {operation.name}")
        return operation.name

    async def get_operation_status(self, operation_handle: str) -> OperationStatus:
        client = self._get_client()
        operation = await client.aio.operations.get(
            types.GenerateVideosOperation(name=operation_handle)
        )

        if not operation.done:
            return OperationStatus(done=False)

        if operation.error:
            return OperationStatus(
                done=True,
                error_message=operation.error.get("message")
                or "Video generation failed during the operation.",
            )

        artifact_uri = None
        response = operation.response
        if response and response.generated_videos:
            video = response.generated_videos[0].video
            artifact_uri = video.uri if video else None

        return OperationStatus(done=True, artifact_uri=artifact_uri)
