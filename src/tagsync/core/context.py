"""Dependencies for a reconciliation run."""

from dataclasses import dataclass

from tagsync.gateway.github.tag_ops.abc import GitHubTagOps
from tagsync.gateway.github.tag_ops.printing import PrintingGitHubTagOps
from tagsync.gateway.github.tag_ops.real import RealGitHubTagOps
from tagsync.gateway.github.types import GitHubRepoLocation


@dataclass(frozen=True)
class TagSyncContext:
    """Immutable context holding the gateway and target repository.

    Created at the CLI entry point and passed through Click's context object.
    Tests construct it directly with a FakeGitHubTagOps.
    """

    tag_ops: GitHubTagOps
    location: GitHubRepoLocation


def create_context(
    location: GitHubRepoLocation,
    *,
    token: str | None,
    verbose: bool,
) -> TagSyncContext:
    """Create the production context.

    Args:
        location: Repository to reconcile
        token: GitHub token for gh, or None to use gh's own login
        verbose: Echo each mutating API call to stderr

    Returns:
        TagSyncContext backed by RealGitHubTagOps
    """
    tag_ops: GitHubTagOps = RealGitHubTagOps(token=token)
    if verbose:
        tag_ops = PrintingGitHubTagOps(tag_ops)
    return TagSyncContext(tag_ops=tag_ops, location=location)
