"""
Creative Suite CLI Tools

Command-line tools for driving video generation from a terminal.

Tools:
- job_monitor: Per-transition rendering of job snapshots
"""

from .job_monitor import JobMonitor, format_snapshot

__all__ = ["JobMonitor", "format_snapshot"]
