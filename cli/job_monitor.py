"""
Terminal rendering for video job snapshots.

Prints one line per controller transition with status colors and the
rotating progress message.
"""

import sys
from datetime import datetime
from typing import Optional, TextIO

from services.video_generation.models import JobSnapshot, JobStatus


# ANSI color codes
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"


def colored(text: str, color: str) -> str:
    """Apply color to text."""
    return f"{color}{text}{Colors.RESET}"


STATUS_STYLE = {
    JobStatus.IDLE: ("•", Colors.DIM),
    JobStatus.AWAITING_CREDENTIAL: ("🔑", Colors.YELLOW),
    JobStatus.SUBMITTING: ("🚀", Colors.CYAN),
    JobStatus.POLLING: ("⏳", Colors.BLUE),
    JobStatus.DOWNLOADING: ("⬇️", Colors.CYAN),
    JobStatus.SUCCEEDED: ("✅", Colors.GREEN),
    JobStatus.FAILED: ("❌", Colors.RED),
    JobStatus.CANCELLED: ("⏹️", Colors.YELLOW),
}


def format_snapshot(snapshot: JobSnapshot, now: Optional[datetime] = None) -> str:
    """Format a snapshot as one or more display lines."""
    icon, color = STATUS_STYLE.get(snapshot.status, ("•", Colors.WHITE))
    timestamp = (now or datetime.now()).strftime("%H:%M:%S")

    lines = [
        f"{colored(timestamp, Colors.DIM)} {icon} "
        f"{colored(snapshot.status.value.upper(), color + Colors.BOLD)}"
    ]

    if snapshot.status in (JobStatus.SUBMITTING, JobStatus.POLLING) and snapshot.progress_message:
        lines[0] += f" {snapshot.progress_message}"

    if snapshot.notice:
        lines.append(colored(f"    ⚠️  {snapshot.notice}", Colors.YELLOW))

    if snapshot.last_error:
        error = snapshot.last_error
        lines.append(colored(f"    {error.message}", Colors.RED))
        detail = f"    kind={error.kind.value}"
        if error.status_code is not None:
            detail += f" status={error.status_code}"
        lines.append(colored(detail, Colors.DIM))

    if snapshot.result_artifact:
        artifact = snapshot.result_artifact
        size_mb = artifact.size_bytes / 1024 / 1024
        lines.append(f"    🎬 {colored(str(artifact.path), Colors.GREEN)} ({size_mb:.1f} MB)")

    return "\n".join(lines)


class JobMonitor:
    """Snapshot callback that writes formatted lines to a stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self.last: Optional[JobSnapshot] = None

    def __call__(self, snapshot: JobSnapshot):
        # Skip repeats (e.g. a no-op cancel)
        if snapshot == self.last:
            return
        self.last = snapshot
        print(format_snapshot(snapshot), file=self.stream, flush=True)
