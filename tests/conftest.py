"""
Shared fixtures for the video generation tests.

Run with:
    python -m pytest tests/ -v
"""

import base64
import os
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import Config
from services.video_generation.backend import OperationStatus, VideoBackend
from services.video_generation.credentials import CredentialHost
from services.video_generation.models import EncodedImage, JobInput, LocalArtifact

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

INVALID_KEY_MESSAGE = '404 NOT_FOUND. {"error": {"message": "Requested entity was not found."}}'


@pytest.fixture
def config(tmp_path):
    """Config with a key set and downloads going to a temp dir."""
    cfg = Config()
    cfg.api.google_api_key = "test-key"
    cfg.download.output_dir = str(tmp_path / "output")
    return cfg


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "seed.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def seed_image():
    return EncodedImage(
        data=base64.b64encode(PNG_BYTES).decode("ascii"),
        media_type="image/png",
        preview_ref="file:///tmp/seed.png",
        size_bytes=len(PNG_BYTES),
    )


@pytest.fixture
def job_input(seed_image):
    return JobInput(
        prompt="A cinematic shot of this object falling through the clouds",
        seed_image=seed_image,
        aspect_ratio="16:9",
    )


@pytest.fixture
def backend():
    """Backend that accepts the job and finishes on the first poll."""
    mock = MagicMock(spec=VideoBackend)
    mock.submit_video_job = AsyncMock(return_value="operations/op-123")
    mock.get_operation_status = AsyncMock(
        return_value=OperationStatus(done=True, artifact_uri="https://files.example/video.mp4")
    )
    return mock


@pytest.fixture
def credential_host():
    """Host with a key already selected."""
    mock = MagicMock(spec=CredentialHost)
    mock.has_credential = AsyncMock(return_value=True)
    mock.open_credential_picker = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def downloader(tmp_path):
    """Download stand-in that records the URI it was asked for."""

    async def fake_download(remote_uri, **kwargs):
        path = tmp_path / "video.mp4"
        path.write_bytes(b"\x00\x00\x00\x18ftypmp42")
        return LocalArtifact(
            path=path,
            uri=path.as_uri(),
            source_uri=remote_uri,
            size_bytes=path.stat().st_size,
        )

    return AsyncMock(side_effect=fake_download)
