"""Subprocess helpers that attach operation context to failures."""

import logging
import os
import subprocess
import time
from collections.abc import Mapping

logger = logging.getLogger(__name__)

# Upper bound for a single gh invocation; there is no other timeout layer.
GH_COMMAND_TIMEOUT = 60


def _build_timing_description(cmd: list[str]) -> str:
    """Describe a command for debug timing output.

    Field values that look like free text (messages) are replaced with their
    length so multi-line annotations do not flood the log.
    """
    parts: list[str] = []
    for arg in cmd:
        if arg.startswith("message="):
            value = arg.removeprefix("message=")
            parts.append(f"message=<{len(value)} chars>")
        else:
            parts.append(arg)
    return " ".join(parts)


def build_subprocess_env(extra: Mapping[str, str] | None) -> dict[str, str] | None:
    """Copy the current environment and overlay extra variables.

    Returns None (inherit the parent environment) when there is nothing to add.
    """
    if not extra:
        return None
    env = os.environ.copy()
    env.update(extra)
    return env


def run_subprocess_with_context(
    cmd: list[str],
    *,
    operation_context: str,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command, capturing text output.

    Args:
        cmd: Command and arguments
        operation_context: Human description used in error messages
            (e.g., "fetch tag 'v1'")
        env: Extra environment variables layered over os.environ
        timeout: Seconds before the process is killed

    Returns:
        The completed process (stdout/stderr as text), whatever its exit code

    Raises:
        RuntimeError: If the command is missing or times out. The message
            includes operation_context.
    """
    description = _build_timing_description(cmd)
    logger.debug("Running: %s", description)
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            env=build_subprocess_env(env),
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        msg = f"Failed to {operation_context}: command not found: {cmd[0]}"
        raise RuntimeError(msg) from e
    except subprocess.TimeoutExpired as e:
        msg = f"Failed to {operation_context}: timed out after {timeout}s"
        raise RuntimeError(msg) from e

    elapsed = time.monotonic() - start
    logger.debug("Finished in %.2fs (exit %d): %s", elapsed, result.returncode, description)

    return result
