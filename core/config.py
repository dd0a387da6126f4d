"""
Configuration management for the Creative Suite video tool.

Centralizes all configuration including:
- API credentials
- Video model and polling settings
- Artifact download settings
"""

import os
from dataclasses import dataclass, field
from typing import Optional


DEFAULT_PROGRESS_MESSAGES = [
    "Warming up the digital director's chair...",
    "Writing the script for the opening scenes...",
    "Casting pixels in their roles...",
    "Rendering the opening sequence...",
    "This can take a few minutes, great art needs time!",
    "Polishing the final frames...",
    "Almost ready for the premiere...",
]


@dataclass
class APIConfig:
    """API configuration for the hosted generation service."""

    # GOOGLE_API_KEY wins; API_KEY is what the hosted studio injects
    google_api_key: str = field(
        default_factory=lambda: os.getenv("GOOGLE_API_KEY") or os.getenv("API_KEY", "")
    )


@dataclass
class VideoConfig:
    """Video synthesis settings."""

    model: str = field(
        default_factory=lambda: os.getenv("VIDEO_MODEL", "veo-3.1-fast-generate-preview")
    )
    resolution: str = "720p"
    number_of_videos: int = 1

    # Constant interval, no cap: generations take minutes, not seconds
    poll_interval_seconds: float = 10.0

    # The backend has no structured code for a revoked key, only this text
    invalid_credential_pattern: str = "Requested entity was not found"

    progress_messages: list[str] = field(
        default_factory=lambda: list(DEFAULT_PROGRESS_MESSAGES)
    )


@dataclass
class DownloadConfig:
    """Settings for fetching finished videos."""
    output_dir: str = field(default_factory=lambda: os.getenv("VIDEO_OUTPUT_DIR", "output"))
    timeout_seconds: float = 600.0
    credential_param: str = "key"


@dataclass
class Config:
    """Main configuration class."""

    api: APIConfig = field(default_factory=APIConfig)
    video: VideoConfig = field(default_factory=VideoConfig)
    download: DownloadConfig = field(default_factory=DownloadConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if not self.api.google_api_key:
            issues.append("No API key configured (GOOGLE_API_KEY or API_KEY)")

        if self.video.poll_interval_seconds <= 0:
            issues.append("Poll interval must be positive")

        if not self.video.progress_messages:
            issues.append("At least one progress message is required")

        if not self.video.invalid_credential_pattern:
            issues.append("Invalid-credential pattern must not be empty")

        return issues


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reload_config():
    """Reload configuration from environment."""
    global _config
    _config = Config.from_env()
