"""
Creative Suite Core Components

Provides foundational infrastructure for the generation tools:
- Configuration loaded from the environment
"""

from .config import Config, get_config, reload_config

__all__ = ["Config", "get_config", "reload_config"]
