"""Printing GitHub tag operations wrapper for verbose output.

This module provides a wrapper that prints styled output for tag mutations
before delegating to the wrapped implementation.
"""

import click

from tagsync.gateway.github.tag_ops.abc import GitHubTagOps
from tagsync.gateway.github.types import AnnotatedTagObject, GitHubRepoLocation, GitRefTarget
from tagsync.output.output import user_output


class PrintingGitHubTagOps(GitHubTagOps):
    """Wrapper that prints tag mutations before delegating to inner implementation.

    Usage:
        printing_ops = PrintingGitHubTagOps(real_ops)
    """

    def __init__(self, wrapped: GitHubTagOps) -> None:
        self._wrapped = wrapped

    def _emit(self, message: str) -> None:
        user_output(message)

    def _format_call(self, description: str) -> str:
        return click.style(f"gh api: {description}", dim=True)

    # ============================================================================
    # Query Operations (delegate without printing)
    # ============================================================================

    def get_tag_ref(self, location: GitHubRepoLocation, tag_name: str) -> GitRefTarget:
        """Fetch tag ref (read-only, no printing)."""
        return self._wrapped.get_tag_ref(location, tag_name)

    def get_tag_object(self, location: GitHubRepoLocation, tag_sha: str) -> AnnotatedTagObject:
        """Fetch tag object (read-only, no printing)."""
        return self._wrapped.get_tag_object(location, tag_sha)

    def get_commit_sha(self, location: GitHubRepoLocation, ref: str) -> str:
        """Resolve ref (read-only, no printing)."""
        return self._wrapped.get_commit_sha(location, ref)

    # ============================================================================
    # Mutation Operations (print before delegating)
    # ============================================================================

    def create_tag_object(
        self, location: GitHubRepoLocation, tag_name: str, message: str, commit_sha: str
    ) -> str:
        """Create tag object with printed output."""
        self._emit(self._format_call(f"POST git/tags tag={tag_name} object={commit_sha}"))
        return self._wrapped.create_tag_object(location, tag_name, message, commit_sha)

    def create_tag_ref(self, location: GitHubRepoLocation, tag_name: str, sha: str) -> None:
        """Create ref with printed output."""
        self._emit(self._format_call(f"POST git/refs ref=refs/tags/{tag_name} sha={sha}"))
        self._wrapped.create_tag_ref(location, tag_name, sha)

    def update_tag_ref(self, location: GitHubRepoLocation, tag_name: str, sha: str) -> None:
        """Force-update ref with printed output."""
        self._emit(self._format_call(f"PATCH git/refs/tags/{tag_name} sha={sha} force=true"))
        self._wrapped.update_tag_ref(location, tag_name, sha)
