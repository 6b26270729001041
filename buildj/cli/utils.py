"""
Shared utilities for CLI commands.

Provides console output helpers, progress display and child process
execution used across the built-in commands.
"""

import logging
import subprocess
import sys
import time
from pathlib import Path
from typing import List, Mapping, Optional, TextIO

from buildj.core.config import LauncherConfig
from buildj.core.progress import format_status
from buildj.toolchain.resolver import ToolchainResolver

logger = logging.getLogger(__name__)


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)


class ConsoleProgress:
    """
    Single-line progress display for downloads and digest computation.

    Updates are throttled; a new line is started when the label changes or
    when a known total is reached.
    """

    def __init__(self, stream: Optional[TextIO] = None, interval: float = 0.2):
        self.stream = stream or sys.stderr
        self.interval = interval
        self._label: Optional[str] = None
        self._last_time: Optional[float] = None

    def __call__(self, label: str, processed: int, total: Optional[int]):
        if self._label is not None and label != self._label:
            self.end()
        self._label = label

        done = total is not None and total > 0 and processed >= total
        now = time.monotonic()
        if (
            not done
            and self._last_time is not None
            and now - self._last_time < self.interval
        ):
            return
        self._last_time = now

        self.stream.write(f"\r{format_status(label, processed, total)}")
        self.stream.flush()
        if done:
            self.end()

    def end(self):
        """Terminate the current progress line, if any."""
        if self._label is not None:
            self.stream.write("\n")
            self.stream.flush()
            self._label = None
            self._last_time = None


# ============================================================================
# Engine wiring
# ============================================================================


def make_resolver(
    config: LauncherConfig, progress: Optional[ConsoleProgress] = None
) -> ToolchainResolver:
    """Create a resolver reporting progress to the console."""
    return ToolchainResolver(config, progress_callback=progress or ConsoleProgress())


def log_environment(env: Mapping[str, str]):
    """Dump the child environment at debug level."""
    logger.debug("-----BEGIN ENVIRONMENT VARIABLES-----")
    for key, value in env.items():
        logger.debug(f"{key}={value}")
    logger.debug("-----END ENVIRONMENT VARIABLES-----")


# ============================================================================
# Process execution
# ============================================================================


def run_command(
    cmd: List[str], env: Mapping[str, str], cwd: Optional[Path] = None
) -> int:
    """
    Run a command to completion.

    Returns:
        The child's exit code, or 127 if it could not be started
    """
    logger.debug(f"Running cmd: {cmd[0]}, args: {cmd[1:]}")
    try:
        result = subprocess.run(cmd, env=dict(env), cwd=cwd)
    except OSError as e:
        print_error(f"Run command {cmd[0]} failed: {e}")
        return 127
    return result.returncode
