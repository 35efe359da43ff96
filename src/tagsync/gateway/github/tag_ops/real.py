"""Production GitHub tag operations using the gh CLI's REST access."""

import json
import re
from urllib.parse import quote

from tagsync.gateway.github.tag_ops.abc import GitHubTagOps
from tagsync.gateway.github.types import (
    AnnotatedTagObject,
    GitHubApiError,
    GitHubRepoLocation,
    GitRefTarget,
)
from tagsync.subprocess_utils import GH_COMMAND_TIMEOUT, run_subprocess_with_context

# gh reports API failures on stderr as e.g. "gh: Not Found (HTTP 404)"
_HTTP_STATUS_RE = re.compile(r"\(HTTP (\d{3})\)")


def parse_http_status(stderr: str) -> int | None:
    """Extract the HTTP status from gh api error output, if present."""
    match = _HTTP_STATUS_RE.search(stderr)
    if match is None:
        return None
    return int(match.group(1))


def _repo_path(location: GitHubRepoLocation) -> str:
    return f"repos/{quote(location.owner, safe='')}/{quote(location.repo, safe='')}"


class RealGitHubTagOps(GitHubTagOps):
    """Production implementation using `gh api`.

    All operations execute actual gh commands via subprocess. When a token is
    given it is passed as GH_TOKEN; otherwise gh's own authentication applies.
    """

    def __init__(self, *, token: str | None = None) -> None:
        self._env = {"GH_TOKEN": token} if token else None

    def _gh_api(self, args: list[str], *, operation_context: str) -> str:
        """Run `gh api <args>` and return stdout.

        Raises:
            GitHubApiError: On non-zero exit, with the parsed HTTP status
            RuntimeError: If gh is missing or times out
        """
        result = run_subprocess_with_context(
            ["gh", "api", *args],
            operation_context=operation_context,
            env=self._env,
            timeout=GH_COMMAND_TIMEOUT,
        )
        if result.returncode != 0:
            stderr = result.stderr.strip()
            msg = f"Failed to {operation_context}"
            if stderr:
                msg = f"{msg}: {stderr}"
            raise GitHubApiError(
                msg,
                status=parse_http_status(stderr),
                operation_context=operation_context,
            )
        return result.stdout

    # ============================================================================
    # Query Operations
    # ============================================================================

    def get_tag_ref(self, location: GitHubRepoLocation, tag_name: str) -> GitRefTarget:
        """Fetch a tag ref via GET /repos/{owner}/{repo}/git/ref/tags/{tag}."""
        operation_context = f"fetch tag ref '{tag_name}'"
        stdout = self._gh_api(
            [f"{_repo_path(location)}/git/ref/tags/{quote(tag_name, safe='/')}"],
            operation_context=operation_context,
        )
        try:
            target = json.loads(stdout)["object"]
            return GitRefTarget(sha=target["sha"], type=target["type"])
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            msg = f"Failed to {operation_context}: unexpected response"
            raise GitHubApiError(msg, status=None, operation_context=operation_context) from e

    def get_tag_object(self, location: GitHubRepoLocation, tag_sha: str) -> AnnotatedTagObject:
        """Fetch a tag object via GET /repos/{owner}/{repo}/git/tags/{sha}."""
        operation_context = f"fetch tag object {tag_sha}"
        stdout = self._gh_api(
            [f"{_repo_path(location)}/git/tags/{tag_sha}"],
            operation_context=operation_context,
        )
        try:
            data = json.loads(stdout)
            return AnnotatedTagObject(
                sha=data["sha"],
                message=data["message"],
                commit_sha=data["object"]["sha"],
            )
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            msg = f"Failed to {operation_context}: unexpected response"
            raise GitHubApiError(msg, status=None, operation_context=operation_context) from e

    def get_commit_sha(self, location: GitHubRepoLocation, ref: str) -> str:
        """Resolve a ref via GET /repos/{owner}/{repo}/commits/{ref}."""
        stdout = self._gh_api(
            [f"{_repo_path(location)}/commits/{quote(ref, safe='/')}", "--jq", ".sha"],
            operation_context=f"resolve ref '{ref}'",
        )
        sha = stdout.strip()
        if not sha:
            msg = f"Failed to resolve ref '{ref}': empty SHA in response"
            raise GitHubApiError(msg, status=None, operation_context=f"resolve ref '{ref}'")
        return sha

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    def create_tag_object(
        self, location: GitHubRepoLocation, tag_name: str, message: str, commit_sha: str
    ) -> str:
        """Create a tag object via POST /repos/{owner}/{repo}/git/tags."""
        stdout = self._gh_api(
            [
                "--method",
                "POST",
                f"{_repo_path(location)}/git/tags",
                "-f",
                f"tag={tag_name}",
                "-f",
                f"message={message}",
                "-f",
                f"object={commit_sha}",
                "-f",
                "type=commit",
                "--jq",
                ".sha",
            ],
            operation_context=f"create tag object for '{tag_name}'",
        )
        return stdout.strip()

    def create_tag_ref(self, location: GitHubRepoLocation, tag_name: str, sha: str) -> None:
        """Create a ref via POST /repos/{owner}/{repo}/git/refs."""
        self._gh_api(
            [
                "--method",
                "POST",
                f"{_repo_path(location)}/git/refs",
                "-f",
                f"ref=refs/tags/{tag_name}",
                "-f",
                f"sha={sha}",
            ],
            operation_context=f"create tag ref '{tag_name}'",
        )

    def update_tag_ref(self, location: GitHubRepoLocation, tag_name: str, sha: str) -> None:
        """Force-update a ref via PATCH /repos/{owner}/{repo}/git/refs/tags/{tag}."""
        self._gh_api(
            [
                "--method",
                "PATCH",
                f"{_repo_path(location)}/git/refs/tags/{quote(tag_name, safe='/')}",
                "-f",
                f"sha={sha}",
                "-F",
                "force=true",
            ],
            operation_context=f"update tag ref '{tag_name}'",
        )
