"""Type definitions for GitHub tag operations."""

from dataclasses import dataclass
from typing import Literal

GitObjectType = Literal["commit", "tag"]


@dataclass(frozen=True)
class GitHubRepoLocation:
    """Owner and name of the repository being tagged."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class GitRefTarget:
    """Object a tag ref points at.

    type is "commit" for lightweight tags and "tag" for annotated tags.
    """

    sha: str
    type: GitObjectType


@dataclass(frozen=True)
class AnnotatedTagObject:
    """Dereferenced annotated tag object."""

    sha: str  # the tag object's own SHA
    message: str
    commit_sha: str  # commit the tag object wraps


class GitHubApiError(RuntimeError):
    """A GitHub API call failed.

    status holds the HTTP status when the provider reported one
    (404 for absent refs), otherwise None.
    """

    def __init__(self, message: str, *, status: int | None, operation_context: str) -> None:
        self.status = status
        self.operation_context = operation_context
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.status == 404
