"""Tests for the printing GitHubTagOps wrapper and context wiring."""

import pytest

from tagsync.core.context import create_context
from tagsync.gateway.github.tag_ops.fake import FakeGitHubTagOps
from tagsync.gateway.github.tag_ops.printing import PrintingGitHubTagOps
from tagsync.gateway.github.tag_ops.real import RealGitHubTagOps
from tagsync.gateway.github.types import GitHubRepoLocation

LOCATION = GitHubRepoLocation(owner="octo", repo="widgets")


class TestPrintingGitHubTagOps:
    def test_prints_then_delegates(self, capsys: pytest.CaptureFixture[str]) -> None:
        fake = FakeGitHubTagOps()
        ops = PrintingGitHubTagOps(fake)

        tag_sha = ops.create_tag_object(LOCATION, "v1", "Release", "abc")
        ops.create_tag_ref(LOCATION, "v1", "abc")
        ops.update_tag_ref(LOCATION, "v1", "def")

        assert fake.created_tag_objects == [("v1", "Release", "abc")]
        assert fake.get_tag_object(LOCATION, tag_sha).commit_sha == "abc"
        assert fake.created_refs == [("v1", "abc")]
        assert fake.updated_refs == [("v1", "def")]
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "gh api: POST git/tags tag=v1 object=abc" in captured.err
        assert "gh api: POST git/refs ref=refs/tags/v1 sha=abc" in captured.err
        assert "gh api: PATCH git/refs/tags/v1 sha=def force=true" in captured.err

    def test_reads_are_silent(self, capsys: pytest.CaptureFixture[str]) -> None:
        fake = FakeGitHubTagOps(commits={"main": "abc"}, lightweight_tags={"v1": "abc"})
        ops = PrintingGitHubTagOps(fake)

        assert ops.get_commit_sha(LOCATION, "main") == "abc"
        assert ops.get_tag_ref(LOCATION, "v1").sha == "abc"

        assert fake.resolved_refs == ["main"]
        assert fake.inspected_tags == ["v1"]
        assert capsys.readouterr().err == ""


def test_create_context_wraps_real_gateway_when_verbose() -> None:
    plain = create_context(LOCATION, token=None, verbose=False)
    verbose = create_context(LOCATION, token="t", verbose=True)

    assert isinstance(plain.tag_ops, RealGitHubTagOps)
    assert isinstance(verbose.tag_ops, PrintingGitHubTagOps)
    assert isinstance(verbose.tag_ops._wrapped, RealGitHubTagOps)
    assert verbose.location == LOCATION
