#!/usr/bin/env python3
"""
Creative Suite - Video Synthesis Entry Point

Turns a still image and a prompt into a short video using a hosted
video model, polling the long-running operation until it finishes.

Usage:
    # Generate a video from a seed image
    python main.py generate --image cat.png --prompt "Cinematic shot of this falling through clouds"

    # Portrait output into a custom folder
    python main.py generate -i cat.png -p "Drone shot pulling away" --aspect-ratio 9:16 -o ./videos

    # Check configuration
    python main.py check
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import Optional

from pydantic import ValidationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("creativesuite")

DEFAULT_PROMPT = "An epic, cinematic shot of this object falling through the clouds."


async def generate_video(
    image_path: str,
    prompt: str,
    aspect_ratio: str = "16:9",
    output_dir: Optional[str] = None,
    prompt_for_key: bool = True,
):
    """
    Generate a video from a seed image.

    Args:
        image_path: Path to the seed image
        prompt: Text description of the motion
        aspect_ratio: "16:9" or "9:16"
        output_dir: Directory for the downloaded video
        prompt_for_key: Offer the key picker when no usable key is selected

    Returns:
        The finished Job, or None if the input was rejected
    """
    from cli.job_monitor import JobMonitor
    from core.config import get_config
    from services.video_generation import (
        ErrorKind,
        JobInput,
        JobStatus,
        VideoJobController,
        VideoJobError,
        encode_for_upload,
    )

    config = get_config()
    if output_dir:
        config.download.output_dir = output_dir

    try:
        job_input = JobInput(
            prompt=prompt,
            seed_image=encode_for_upload(image_path),
            aspect_ratio=aspect_ratio,
        )
    except (VideoJobError, ValidationError, OSError) as e:
        logger.error(f"Invalid input: {e}")
        return None

    controller = VideoJobController(config=config, on_update=JobMonitor())

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, controller.cancel)

    try:
        job = await controller.start_video_job(job_input)

        # One retry after the user picks a key
        needs_key = job.status == JobStatus.AWAITING_CREDENTIAL or (
            job.last_error is not None and job.last_error.kind == ErrorKind.INVALID_CREDENTIAL
        )
        if needs_key and prompt_for_key and sys.stdin.isatty():
            await controller.request_credential()
            job = await controller.start_video_job(job_input)
    finally:
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.remove_signal_handler(sig)

    if job.status == JobStatus.SUCCEEDED:
        logger.info(f"Video ready: {job.result_artifact.path}")

    return job


def check_config() -> int:
    """Print configuration issues. Returns a process exit code."""
    from core.config import get_config

    issues = get_config().validate()
    if not issues:
        print("Configuration OK")
        return 0

    for issue in issues:
        print(f"  - {issue}")
    return 1


def main():
    parser = argparse.ArgumentParser(
        description="Creative Suite - AI Video Synthesis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Generate a landscape video
    python main.py generate --image photo.jpg --prompt "Slow dolly zoom"

    # Generate a portrait video
    python main.py generate --image photo.jpg --aspect-ratio 9:16

    # Validate configuration
    python main.py check
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Generate a video from an image")
    gen_parser.add_argument("--image", "-i", required=True, help="Seed image path")
    gen_parser.add_argument("--prompt", "-p", default=DEFAULT_PROMPT, help="Video prompt")
    gen_parser.add_argument(
        "--aspect-ratio",
        "-a",
        choices=["16:9", "9:16"],
        default="16:9",
        help="Output aspect ratio",
    )
    gen_parser.add_argument("--output", "-o", help="Output directory")
    gen_parser.add_argument(
        "--no-key-prompt",
        action="store_true",
        help="Never ask for an API key interactively",
    )

    # Check command
    subparsers.add_parser("check", help="Validate configuration")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "generate":
        from services.video_generation import JobStatus

        job = asyncio.run(
            generate_video(
                image_path=args.image,
                prompt=args.prompt,
                aspect_ratio=args.aspect_ratio,
                output_dir=args.output,
                prompt_for_key=not args.no_key_prompt,
            )
        )
        sys.exit(0 if job and job.status == JobStatus.SUCCEEDED else 1)

    elif args.command == "check":
        sys.exit(check_config())


if __name__ == "__main__":
    main()
