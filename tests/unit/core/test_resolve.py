"""Tests for ref resolution and existing-tag inspection."""

import pytest

from tagsync.core.errors import RefResolutionFailed, TagInspectionFailed
from tagsync.core.resolve import inspect_existing_tag, inspect_existing_tags, resolve_refs
from tagsync.core.types import ExistingTagState
from tagsync.gateway.github.tag_ops.fake import FakeGitHubTagOps
from tagsync.gateway.github.types import GitHubApiError, GitHubRepoLocation, GitRefTarget

LOCATION = GitHubRepoLocation(owner="octo", repo="widgets")
SHA_MAIN = "1" * 40
SHA_DEV = "2" * 40


class DanglingTagObjectOps(FakeGitHubTagOps):
    """Fake whose tag refs all point at tag objects that cannot be read."""

    def get_tag_ref(self, location: GitHubRepoLocation, tag_name: str) -> GitRefTarget:
        return GitRefTarget(sha="deadbeef", type="tag")


class TestResolveRefs:
    def test_resolves_each_distinct_ref_once(self) -> None:
        """Repeated refs cost a single provider call."""
        ops = FakeGitHubTagOps(commits={"main": SHA_MAIN, "dev": SHA_DEV})

        shas = resolve_refs(ops, LOCATION, ["main", "dev", "main", "main"], max_workers=4)

        assert dict(shas) == {"main": SHA_MAIN, "dev": SHA_DEV}
        assert sorted(ops.resolved_refs) == ["dev", "main"]

    def test_empty_input_makes_no_calls(self) -> None:
        ops = FakeGitHubTagOps()

        assert dict(resolve_refs(ops, LOCATION, [])) == {}
        assert ops.resolved_refs == []

    def test_result_is_read_only(self) -> None:
        ops = FakeGitHubTagOps(commits={"main": SHA_MAIN})
        shas = resolve_refs(ops, LOCATION, ["main"])

        with pytest.raises(TypeError):
            shas["main"] = SHA_DEV  # type: ignore[index]

    def test_unknown_ref_raises(self) -> None:
        ops = FakeGitHubTagOps(commits={"main": SHA_MAIN})

        with pytest.raises(RefResolutionFailed) as exc_info:
            resolve_refs(ops, LOCATION, ["main", "no-such-branch"])

        error = exc_info.value
        assert error.ref == "no-such-branch"
        assert isinstance(error.cause, GitHubApiError)
        assert str(error).startswith("Failed to resolve ref 'no-such-branch' to a SHA: ")

    def test_earliest_failure_is_reported(self) -> None:
        """With several failures, the first ref in input order wins."""
        ops = FakeGitHubTagOps(
            ref_errors={
                "first": RuntimeError("first broke"),
                "second": RuntimeError("second broke"),
            }
        )

        with pytest.raises(RefResolutionFailed) as exc_info:
            resolve_refs(ops, LOCATION, ["first", "second"])

        assert exc_info.value.ref == "first"

    def test_every_ref_is_attempted_before_failing(self) -> None:
        ops = FakeGitHubTagOps(
            commits={"main": SHA_MAIN},
            ref_errors={"bad": RuntimeError("boom")},
        )

        with pytest.raises(RefResolutionFailed):
            resolve_refs(ops, LOCATION, ["bad", "main"], max_workers=1)

        assert sorted(ops.resolved_refs) == ["bad", "main"]


class TestInspectExistingTag:
    def test_absent_tag_returns_none(self) -> None:
        ops = FakeGitHubTagOps()

        assert inspect_existing_tag(ops, LOCATION, "v1") is None

    def test_lightweight_tag(self) -> None:
        ops = FakeGitHubTagOps(lightweight_tags={"v1": SHA_MAIN})

        state = inspect_existing_tag(ops, LOCATION, "v1")

        assert state == ExistingTagState(commit_sha=SHA_MAIN, is_annotated=False)

    def test_annotated_tag_is_dereferenced(self) -> None:
        """commit_sha is the wrapped commit, not the tag object's SHA."""
        ops = FakeGitHubTagOps(annotated_tags={"v1": (SHA_MAIN, "Release 1")})

        state = inspect_existing_tag(ops, LOCATION, "v1")

        assert state == ExistingTagState(
            commit_sha=SHA_MAIN, is_annotated=True, annotation_message="Release 1"
        )

    def test_provider_error_raises(self) -> None:
        error = GitHubApiError("Server Error (HTTP 500)", status=500, operation_context="x")
        ops = FakeGitHubTagOps(tag_errors={"v1": error})

        with pytest.raises(TagInspectionFailed) as exc_info:
            inspect_existing_tag(ops, LOCATION, "v1")

        assert exc_info.value.tag_name == "v1"
        assert exc_info.value.cause is error
        assert "Failed to check if tag 'v1' exists" in str(exc_info.value)

    def test_subprocess_failure_raises(self) -> None:
        ops = FakeGitHubTagOps(tag_errors={"v1": RuntimeError("gh timed out")})

        with pytest.raises(TagInspectionFailed):
            inspect_existing_tag(ops, LOCATION, "v1")

    def test_unreadable_tag_object_raises(self) -> None:
        """A 404 on the tag object is a failure, not an absent tag."""
        ops = DanglingTagObjectOps()

        with pytest.raises(TagInspectionFailed) as exc_info:
            inspect_existing_tag(ops, LOCATION, "v1")

        assert isinstance(exc_info.value.cause, GitHubApiError)
        assert exc_info.value.cause.is_not_found


class TestInspectExistingTags:
    def test_maps_every_name(self) -> None:
        ops = FakeGitHubTagOps(lightweight_tags={"v1": SHA_MAIN})

        states = inspect_existing_tags(ops, LOCATION, ["v1", "v2"], max_workers=2)

        assert dict(states) == {
            "v1": ExistingTagState(commit_sha=SHA_MAIN, is_annotated=False),
            "v2": None,
        }

    def test_duplicate_names_are_inspected_once(self) -> None:
        ops = FakeGitHubTagOps()

        inspect_existing_tags(ops, LOCATION, ["v1", "v1"])

        assert ops.inspected_tags == ["v1"]

    def test_failure_aborts(self) -> None:
        ops = FakeGitHubTagOps(tag_errors={"v2": RuntimeError("boom")})

        with pytest.raises(TagInspectionFailed) as exc_info:
            inspect_existing_tags(ops, LOCATION, ["v1", "v2"])

        assert exc_info.value.tag_name == "v2"
