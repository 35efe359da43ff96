"""Abstract base class for GitHub tag operations."""

from __future__ import annotations

from abc import ABC, abstractmethod

from tagsync.gateway.github.types import AnnotatedTagObject, GitHubRepoLocation, GitRefTarget


class GitHubTagOps(ABC):
    """Abstract interface for remote tag operations.

    This interface contains both query and mutation operations for tags.
    All implementations (real, fake, dry-run, printing) must implement this interface.
    Implementations must be safe to call from several threads at once for the
    query operations.
    """

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def get_tag_ref(self, location: GitHubRepoLocation, tag_name: str) -> GitRefTarget:
        """Fetch the object a tag ref points at.

        Args:
            location: Repository to read from
            tag_name: Tag name without the refs/tags/ prefix (e.g., 'v1')

        Returns:
            The ref's target SHA and object type

        Raises:
            GitHubApiError: status 404 when the tag does not exist, other
                statuses for any other failure
        """
        ...

    @abstractmethod
    def get_tag_object(self, location: GitHubRepoLocation, tag_sha: str) -> AnnotatedTagObject:
        """Fetch an annotated tag object by its SHA.

        Args:
            location: Repository to read from
            tag_sha: SHA of the tag object (not of the commit)

        Returns:
            Tag message and the commit it wraps

        Raises:
            GitHubApiError: If the object cannot be fetched
        """
        ...

    @abstractmethod
    def get_commit_sha(self, location: GitHubRepoLocation, ref: str) -> str:
        """Resolve any commit-ish (branch, tag, SHA) to a commit SHA.

        Raises:
            GitHubApiError: If the provider cannot resolve the ref
        """
        ...

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    @abstractmethod
    def create_tag_object(
        self, location: GitHubRepoLocation, tag_name: str, message: str, commit_sha: str
    ) -> str:
        """Create an annotated tag object wrapping a commit.

        This does not create a ref; point a tag ref at the returned SHA.

        Returns:
            SHA of the new tag object
        """
        ...

    @abstractmethod
    def create_tag_ref(self, location: GitHubRepoLocation, tag_name: str, sha: str) -> None:
        """Create refs/tags/<tag_name> pointing at sha (commit or tag object)."""
        ...

    @abstractmethod
    def update_tag_ref(self, location: GitHubRepoLocation, tag_name: str, sha: str) -> None:
        """Force-move refs/tags/<tag_name> to sha, wherever it currently points."""
        ...
