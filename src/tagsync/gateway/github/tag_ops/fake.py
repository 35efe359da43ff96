"""Fake implementation of GitHub tag operations for testing."""

from __future__ import annotations

import threading

from tagsync.gateway.github.tag_ops.abc import GitHubTagOps
from tagsync.gateway.github.types import (
    AnnotatedTagObject,
    GitHubApiError,
    GitHubRepoLocation,
    GitRefTarget,
)


class FakeGitHubTagOps(GitHubTagOps):
    """In-memory fake implementation of GitHub tag operations.

    This fake accepts pre-configured state in its constructor and tracks
    calls and mutations for test assertions. Mutations update the in-memory
    state, so running a reconciliation twice against the same fake sees the
    results of the first run.

    Constructor Injection:
    ---------------------
    - commits: Mapping of ref (branch, tag, SHA) to commit SHA
    - lightweight_tags: Mapping of tag name to commit SHA
    - annotated_tags: Mapping of tag name to (commit SHA, message)
    - ref_errors: Mapping of ref to the exception get_commit_sha raises
    - tag_errors: Mapping of tag name to the exception get_tag_ref raises

    Call / Mutation Tracking:
    ------------------------
    - resolved_refs: refs passed to get_commit_sha, in call order
    - inspected_tags: tag names passed to get_tag_ref, in call order
    - created_tag_objects: (tag_name, message, commit_sha) from create_tag_object()
    - created_refs: (tag_name, sha) from create_tag_ref()
    - updated_refs: (tag_name, sha) from update_tag_ref()
    """

    def __init__(
        self,
        *,
        commits: dict[str, str] | None = None,
        lightweight_tags: dict[str, str] | None = None,
        annotated_tags: dict[str, tuple[str, str]] | None = None,
        ref_errors: dict[str, Exception] | None = None,
        tag_errors: dict[str, Exception] | None = None,
    ) -> None:
        """Create FakeGitHubTagOps with pre-configured state.

        Args:
            commits: Ref to commit SHA; unknown refs fail with a 422 error
            lightweight_tags: Existing lightweight tags (name -> commit SHA)
            annotated_tags: Existing annotated tags (name -> (commit SHA, message))
            ref_errors: Errors to raise when resolving specific refs
            tag_errors: Errors to raise when fetching specific tag refs
        """
        self._commits = dict(commits) if commits is not None else {}
        self._ref_errors = dict(ref_errors) if ref_errors is not None else {}
        self._tag_errors = dict(tag_errors) if tag_errors is not None else {}
        self._lock = threading.Lock()
        self._next_object_id = 0

        self._refs: dict[str, GitRefTarget] = {}
        self._tag_objects: dict[str, AnnotatedTagObject] = {}
        for name, commit_sha in (lightweight_tags or {}).items():
            self._refs[name] = GitRefTarget(sha=commit_sha, type="commit")
        for name, (commit_sha, message) in (annotated_tags or {}).items():
            tag_object = self._store_tag_object(message, commit_sha)
            self._refs[name] = GitRefTarget(sha=tag_object.sha, type="tag")

        # Call / mutation tracking
        self._resolved_refs: list[str] = []
        self._inspected_tags: list[str] = []
        self._created_tag_objects: list[tuple[str, str, str]] = []
        self._created_refs: list[tuple[str, str]] = []
        self._updated_refs: list[tuple[str, str]] = []

    def _store_tag_object(self, message: str, commit_sha: str) -> AnnotatedTagObject:
        self._next_object_id += 1
        tag_object = AnnotatedTagObject(
            sha=f"tag-object-{self._next_object_id}",
            message=message,
            commit_sha=commit_sha,
        )
        self._tag_objects[tag_object.sha] = tag_object
        return tag_object

    # ============================================================================
    # Query Operations
    # ============================================================================

    def get_tag_ref(self, location: GitHubRepoLocation, tag_name: str) -> GitRefTarget:
        """Return the stored ref target, or raise a 404 GitHubApiError."""
        with self._lock:
            self._inspected_tags.append(tag_name)
        if tag_name in self._tag_errors:
            raise self._tag_errors[tag_name]
        target = self._refs.get(tag_name)
        if target is None:
            raise GitHubApiError(
                "Not Found (HTTP 404)",
                status=404,
                operation_context=f"fetch tag ref '{tag_name}'",
            )
        return target

    def get_tag_object(self, location: GitHubRepoLocation, tag_sha: str) -> AnnotatedTagObject:
        """Return a stored tag object, or raise a 404 GitHubApiError."""
        tag_object = self._tag_objects.get(tag_sha)
        if tag_object is None:
            raise GitHubApiError(
                "Not Found (HTTP 404)",
                status=404,
                operation_context=f"fetch tag object {tag_sha}",
            )
        return tag_object

    def get_commit_sha(self, location: GitHubRepoLocation, ref: str) -> str:
        """Resolve a ref from the pre-configured commits mapping."""
        with self._lock:
            self._resolved_refs.append(ref)
        if ref in self._ref_errors:
            raise self._ref_errors[ref]
        sha = self._commits.get(ref)
        if sha is None:
            raise GitHubApiError(
                f"No commit found for SHA: {ref} (HTTP 422)",
                status=422,
                operation_context=f"resolve ref '{ref}'",
            )
        return sha

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    def create_tag_object(
        self, location: GitHubRepoLocation, tag_name: str, message: str, commit_sha: str
    ) -> str:
        """Store a new tag object and return its SHA."""
        with self._lock:
            tag_object = self._store_tag_object(message, commit_sha)
            self._created_tag_objects.append((tag_name, message, commit_sha))
        return tag_object.sha

    def create_tag_ref(self, location: GitHubRepoLocation, tag_name: str, sha: str) -> None:
        """Create a tag ref; fails with 422 if it already exists, like the API."""
        with self._lock:
            if tag_name in self._refs:
                raise GitHubApiError(
                    "Reference already exists (HTTP 422)",
                    status=422,
                    operation_context=f"create tag ref '{tag_name}'",
                )
            self._refs[tag_name] = self._target_for(sha)
            self._created_refs.append((tag_name, sha))

    def update_tag_ref(self, location: GitHubRepoLocation, tag_name: str, sha: str) -> None:
        """Force-move a tag ref (mutates internal state)."""
        with self._lock:
            self._refs[tag_name] = self._target_for(sha)
            self._updated_refs.append((tag_name, sha))

    def _target_for(self, sha: str) -> GitRefTarget:
        if sha in self._tag_objects:
            return GitRefTarget(sha=sha, type="tag")
        return GitRefTarget(sha=sha, type="commit")

    # ============================================================================
    # Tracking Properties
    # ============================================================================

    @property
    def resolved_refs(self) -> list[str]:
        """Refs passed to get_commit_sha, in call order."""
        return self._resolved_refs.copy()

    @property
    def inspected_tags(self) -> list[str]:
        """Tag names passed to get_tag_ref, in call order."""
        return self._inspected_tags.copy()

    @property
    def created_tag_objects(self) -> list[tuple[str, str, str]]:
        """Tag objects created during the test as (tag_name, message, commit_sha)."""
        return self._created_tag_objects.copy()

    @property
    def created_refs(self) -> list[tuple[str, str]]:
        """Tag refs created during the test as (tag_name, sha)."""
        return self._created_refs.copy()

    @property
    def updated_refs(self) -> list[tuple[str, str]]:
        """Tag refs force-updated during the test as (tag_name, sha)."""
        return self._updated_refs.copy()
