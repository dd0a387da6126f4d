"""
CLI entry point tests.

Run with:
    python -m pytest tests/test_main.py -v
"""

import asyncio
import signal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

import main
from services.video_generation import VideoJobController


class TestGenerateVideo:
    """Signal wiring around a job run."""

    @pytest.mark.asyncio
    async def test_signal_handlers_removed_when_job_raises(self, config, png_file):
        controller = MagicMock(spec=VideoJobController)
        controller.start_video_job = AsyncMock(side_effect=RuntimeError("controller bug"))

        with patch("core.config.get_config", return_value=config), patch(
            "services.video_generation.VideoJobController", return_value=controller
        ):
            with pytest.raises(RuntimeError):
                await main.generate_video(str(png_file), "A slow pan", prompt_for_key=False)

        loop = asyncio.get_running_loop()
        assert not loop.remove_signal_handler(signal.SIGINT)
        assert not loop.remove_signal_handler(signal.SIGTERM)

    @pytest.mark.asyncio
    async def test_invalid_image_returns_none(self, config, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_text("not an image")

        with patch("core.config.get_config", return_value=config):
            assert await main.generate_video(str(notes), "A slow pan") is None
