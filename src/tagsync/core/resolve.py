"""Read remote state: resolve refs to commits and inspect existing tags.

Both phases fan out over a thread pool and wait for every task before
returning. A single failure aborts the whole phase; when several tasks fail,
the error for the earliest input is the one raised.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from types import MappingProxyType
from typing import TypeVar

from tagsync.core.errors import RefResolutionFailed, TagInspectionFailed
from tagsync.core.types import ExistingTagState
from tagsync.gateway.github.tag_ops.abc import GitHubTagOps
from tagsync.gateway.github.types import GitHubApiError, GitHubRepoLocation

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8

T = TypeVar("T")


def _fan_out(
    keys: list[str],
    fn: Callable[[str], T],
    *,
    max_workers: int,
) -> dict[str, Future[T]]:
    """Submit fn(key) for every key and wait for all of them to finish."""
    futures: dict[str, Future[T]] = {}
    if not keys:
        return futures
    with ThreadPoolExecutor(max_workers=min(max_workers, len(keys))) as executor:
        for key in keys:
            futures[key] = executor.submit(fn, key)
    return futures


def resolve_refs(
    tag_ops: GitHubTagOps,
    location: GitHubRepoLocation,
    refs: Iterable[str],
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Mapping[str, str]:
    """Resolve each distinct ref to a commit SHA, one provider call per ref.

    Args:
        tag_ops: Gateway used for get_commit_sha
        location: Repository the refs belong to
        refs: Refs to resolve; duplicates are collapsed before any call
        max_workers: Upper bound on concurrent provider calls

    Returns:
        Read-only mapping of ref to commit SHA

    Raises:
        RefResolutionFailed: If any ref cannot be resolved
    """
    distinct = list(dict.fromkeys(refs))
    logger.debug("Resolving %d distinct ref(s) in %s", len(distinct), location.full_name)

    futures = _fan_out(
        distinct,
        lambda ref: tag_ops.get_commit_sha(location, ref),
        max_workers=max_workers,
    )

    resolved: dict[str, str] = {}
    for ref, future in futures.items():
        try:
            resolved[ref] = future.result()
        except RuntimeError as e:
            raise RefResolutionFailed(ref, e) from e
        logger.debug("Resolved ref '%s' to %s", ref, resolved[ref])
    return MappingProxyType(resolved)


def inspect_existing_tag(
    tag_ops: GitHubTagOps,
    location: GitHubRepoLocation,
    tag_name: str,
) -> ExistingTagState | None:
    """Fetch the current state of one tag.

    Annotated tags are dereferenced to the commit they wrap, so the returned
    commit_sha is always comparable with a desired commit SHA.

    Returns:
        The tag's state, or None if the tag does not exist

    Raises:
        TagInspectionFailed: On any provider error other than "not found"
    """
    try:
        target = tag_ops.get_tag_ref(location, tag_name)
    except GitHubApiError as e:
        if e.is_not_found:
            return None
        raise TagInspectionFailed(tag_name, e) from e
    except RuntimeError as e:
        raise TagInspectionFailed(tag_name, e) from e

    if target.type != "tag":
        return ExistingTagState(commit_sha=target.sha, is_annotated=False)

    # A ref pointing at a tag object that cannot be read is a failure, even on 404.
    try:
        tag_object = tag_ops.get_tag_object(location, target.sha)
    except RuntimeError as e:
        raise TagInspectionFailed(tag_name, e) from e

    return ExistingTagState(
        commit_sha=tag_object.commit_sha,
        is_annotated=True,
        annotation_message=tag_object.message,
    )


def inspect_existing_tags(
    tag_ops: GitHubTagOps,
    location: GitHubRepoLocation,
    tag_names: Iterable[str],
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Mapping[str, ExistingTagState | None]:
    """Inspect every tag concurrently.

    Returns:
        Read-only mapping of tag name to its state (None when absent)

    Raises:
        TagInspectionFailed: If any inspection fails
    """
    names = list(dict.fromkeys(tag_names))
    logger.debug("Checking %d tag(s) in %s", len(names), location.full_name)

    futures = _fan_out(
        names,
        lambda name: inspect_existing_tag(tag_ops, location, name),
        max_workers=max_workers,
    )
    return MappingProxyType({name: future.result() for name, future in futures.items()})
