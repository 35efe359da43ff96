"""Tests for logging setup and formatters."""

import logging

import pytest

from tagsync.log import (
    DryRunLoggerAdapter,
    GitHubActionsFormatter,
    configure_logging,
    running_in_github_actions,
)


def _record(level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord("tagsync.test", level, __file__, 1, msg, None, None)


def test_dry_run_adapter_prefixes_messages(caplog: pytest.LogCaptureFixture) -> None:
    adapter = DryRunLoggerAdapter(logging.getLogger("tagsync.test"))

    with caplog.at_level(logging.INFO, logger="tagsync.test"):
        adapter.info("Would create tag '%s'.", "v1")

    assert caplog.messages == ["[dry-run] Would create tag 'v1'."]


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        (logging.DEBUG, "::debug::hello"),
        (logging.INFO, "hello"),
        (logging.WARNING, "::warning::hello"),
        (logging.ERROR, "::error::hello"),
        (logging.CRITICAL, "::error::hello"),
    ],
)
def test_github_actions_formatter_levels(level: int, expected: str) -> None:
    formatter = GitHubActionsFormatter("%(message)s")

    assert formatter.format(_record(level, "hello")) == expected


def test_github_actions_formatter_escapes_command_data() -> None:
    """Multi-line messages stay on one workflow-command line."""
    formatter = GitHubActionsFormatter("%(message)s")

    formatted = formatter.format(_record(logging.ERROR, "100% failed\r\nsecond line"))

    assert formatted == "::error::100%25 failed%0D%0Asecond line"


def test_running_in_github_actions(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    assert running_in_github_actions() is True

    monkeypatch.delenv("GITHUB_ACTIONS")
    assert running_in_github_actions() is False


def test_configure_logging_replaces_own_handler(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reconfiguring swaps the installed handler instead of stacking another."""
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
    root = logging.getLogger()
    before = len(root.handlers)

    configure_logging(debug=False)
    assert root.level == logging.INFO
    configure_logging(debug=True)

    assert root.level == logging.DEBUG
    assert len(root.handlers) == before + 1


def test_configure_logging_uses_actions_formatter(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    root = logging.getLogger()
    before = set(root.handlers)

    configure_logging(debug=False)

    (added,) = [handler for handler in root.handlers if handler not in before]
    assert isinstance(added.formatter, GitHubActionsFormatter)
