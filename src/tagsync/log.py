"""Logging setup for the tagsync CLI.

Library code logs through `logging.getLogger(__name__)` or a logger handed
to it. The CLI decides where records go: plain lines on stderr, or GitHub
Actions workflow commands when running inside a workflow.
"""

import logging
import os
import sys
from collections.abc import MutableMapping
from typing import Any

DRY_RUN_PREFIX = "[dry-run] "

TagSyncLogger = logging.Logger | logging.LoggerAdapter

# Handler added by configure_logging, replaced on reconfiguration.
_installed_handler: logging.Handler | None = None


class DryRunLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that prefixes every message with a dry-run marker."""

    def __init__(self, logger: logging.Logger, prefix: str = DRY_RUN_PREFIX) -> None:
        super().__init__(logger, {})
        self._prefix = prefix

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{self._prefix}{msg}", kwargs


class GitHubActionsFormatter(logging.Formatter):
    """Format records as GitHub Actions workflow commands.

    INFO records are printed as-is; DEBUG, WARNING and ERROR records become
    ::debug::, ::warning:: and ::error:: commands so they are annotated in the
    workflow UI.
    """

    _COMMANDS = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = self._COMMANDS.get(record.levelno)
        if command is None:
            return message
        # Workflow command data must be single-line; percent-encode per Actions rules.
        escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"::{command}::{escaped}"


def running_in_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def configure_logging(*, debug: bool) -> None:
    """Send log records to stderr.

    Args:
        debug: Include DEBUG records (subprocess calls, resolved SHAs)
    """
    handler = logging.StreamHandler(sys.stderr)
    if running_in_github_actions():
        handler.setFormatter(GitHubActionsFormatter("%(message)s"))
    elif debug:
        handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(message)s"))

    global _installed_handler
    root = logging.getLogger()
    if _installed_handler is not None:
        root.removeHandler(_installed_handler)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    _installed_handler = handler
