"""
JXA executor.

Runs a finished script through ``osascript -l JavaScript`` and returns its
trimmed stdout. One process per call, a hard 30 second timeout, and no
retries: scripts mutate a live OmniFocus database and are not idempotent.
"""

import asyncio
import logging
import subprocess

from ..utils.errors import ScriptExecutionError
from ..utils.settings import OSASCRIPT_TIMEOUT_MS, get_osascript_path

logger = logging.getLogger(__name__)


def _run_osascript(script: str, timeout_ms: int) -> str:
    cmd = [get_osascript_path(), "-l", "JavaScript", "-e", script]
    timeout_sec = timeout_ms / 1000

    logger.debug(f"Running JXA script ({len(script)} chars, timeout {timeout_sec:g}s)")

    try:
        # subprocess.run kills the child when the timeout expires
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout_sec,
        )
    except subprocess.TimeoutExpired as e:
        stderr = e.stderr or ""
        if isinstance(stderr, bytes):
            stderr = stderr.decode(errors="replace")
        logger.warning(f"osascript timed out after {timeout_sec:g}s")
        reason = f"osascript timed out after {timeout_sec:g} seconds"
        raise ScriptExecutionError(
            f"OmniFocus query failed: {stderr.strip() or reason}", stderr=stderr
        ) from e
    except OSError as e:
        # binary missing or not executable (e.g. not running on macOS)
        raise ScriptExecutionError(f"OmniFocus query failed: {e}") from e

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        logger.warning(f"osascript exited with status {result.returncode}: {stderr[:200]}")
        reason = f"osascript exited with status {result.returncode}"
        raise ScriptExecutionError(
            f"OmniFocus query failed: {stderr or reason}",
            stderr=stderr,
            returncode=result.returncode,
        )

    return (result.stdout or "").strip()


async def run_jxa(script: str, timeout_ms: int = OSASCRIPT_TIMEOUT_MS) -> str:
    """
    Execute a JXA script and return trimmed stdout.

    The blocking subprocess call runs in a worker thread, so several tool
    calls can have scripts in flight at once.

    Raises:
        ScriptExecutionError: non-zero exit, timeout, or osascript missing.
            The message embeds osascript's stderr when there is any.
    """
    return await asyncio.to_thread(_run_osascript, script, timeout_ms)
