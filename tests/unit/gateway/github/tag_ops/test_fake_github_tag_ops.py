"""Tests for FakeGitHubTagOps."""

import pytest

from tagsync.gateway.github.tag_ops.fake import FakeGitHubTagOps
from tagsync.gateway.github.types import GitHubApiError, GitHubRepoLocation, GitRefTarget

LOCATION = GitHubRepoLocation(owner="octo", repo="widgets")


class TestQueries:
    def test_absent_tag_is_404(self) -> None:
        ops = FakeGitHubTagOps()

        with pytest.raises(GitHubApiError) as exc_info:
            ops.get_tag_ref(LOCATION, "v1")

        assert exc_info.value.is_not_found
        assert ops.inspected_tags == ["v1"]

    def test_lightweight_tag_points_at_commit(self) -> None:
        ops = FakeGitHubTagOps(lightweight_tags={"v1": "abc"})

        assert ops.get_tag_ref(LOCATION, "v1") == GitRefTarget(sha="abc", type="commit")

    def test_annotated_tag_points_at_tag_object(self) -> None:
        ops = FakeGitHubTagOps(annotated_tags={"v1": ("abc", "Release")})

        target = ops.get_tag_ref(LOCATION, "v1")
        tag_object = ops.get_tag_object(LOCATION, target.sha)

        assert target.type == "tag"
        assert tag_object.commit_sha == "abc"
        assert tag_object.message == "Release"

    def test_unknown_ref_is_422(self) -> None:
        ops = FakeGitHubTagOps(commits={"main": "abc"})

        with pytest.raises(GitHubApiError) as exc_info:
            ops.get_commit_sha(LOCATION, "dev")

        assert exc_info.value.status == 422
        assert ops.resolved_refs == ["dev"]

    def test_injected_errors(self) -> None:
        ops = FakeGitHubTagOps(
            ref_errors={"main": RuntimeError("ref boom")},
            tag_errors={"v1": RuntimeError("tag boom")},
        )

        with pytest.raises(RuntimeError, match="ref boom"):
            ops.get_commit_sha(LOCATION, "main")
        with pytest.raises(RuntimeError, match="tag boom"):
            ops.get_tag_ref(LOCATION, "v1")


class TestMutations:
    def test_create_tag_ref_is_visible_to_queries(self) -> None:
        ops = FakeGitHubTagOps()

        ops.create_tag_ref(LOCATION, "v1", "abc")

        assert ops.get_tag_ref(LOCATION, "v1") == GitRefTarget(sha="abc", type="commit")
        assert ops.created_refs == [("v1", "abc")]

    def test_create_existing_ref_is_422(self) -> None:
        ops = FakeGitHubTagOps(lightweight_tags={"v1": "abc"})

        with pytest.raises(GitHubApiError) as exc_info:
            ops.create_tag_ref(LOCATION, "v1", "def")

        assert exc_info.value.status == 422
        assert ops.created_refs == []

    def test_annotated_create_round_trip(self) -> None:
        ops = FakeGitHubTagOps()

        tag_sha = ops.create_tag_object(LOCATION, "v1", "Release", "abc")
        ops.create_tag_ref(LOCATION, "v1", tag_sha)

        target = ops.get_tag_ref(LOCATION, "v1")
        assert target == GitRefTarget(sha=tag_sha, type="tag")
        assert ops.get_tag_object(LOCATION, tag_sha).commit_sha == "abc"
        assert ops.created_tag_objects == [("v1", "Release", "abc")]

    def test_update_tag_ref_moves_existing_ref(self) -> None:
        ops = FakeGitHubTagOps(annotated_tags={"v1": ("abc", "Release")})

        ops.update_tag_ref(LOCATION, "v1", "def")

        assert ops.get_tag_ref(LOCATION, "v1") == GitRefTarget(sha="def", type="commit")
        assert ops.updated_refs == [("v1", "def")]

    def test_tracking_lists_are_copies(self) -> None:
        ops = FakeGitHubTagOps()
        ops.create_tag_ref(LOCATION, "v1", "abc")

        ops.created_refs.clear()

        assert ops.created_refs == [("v1", "abc")]
