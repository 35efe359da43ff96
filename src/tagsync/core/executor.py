"""Carry out planned tag operations against the remote repository."""

from tagsync.core.errors import UnknownOperationKind
from tagsync.core.types import (
    CreateTagOperation,
    SkipTagOperation,
    TagOperation,
    TagResult,
    UpdateTagOperation,
)
from tagsync.gateway.github.tag_ops.abc import GitHubTagOps
from tagsync.gateway.github.types import GitHubRepoLocation
from tagsync.log import TagSyncLogger


def _annotated_suffix(is_annotated: bool) -> str:
    return " (annotated)" if is_annotated else ""


def _ref_target_sha(
    tag_ops: GitHubTagOps,
    location: GitHubRepoLocation,
    operation: CreateTagOperation | UpdateTagOperation,
) -> str:
    """SHA the tag ref should point at.

    Lightweight tags point at the commit. Annotated tags need a tag object
    first, and the ref points at the tag object's SHA.
    """
    if not operation.annotation:
        return operation.sha
    return tag_ops.create_tag_object(location, operation.name, operation.annotation, operation.sha)


def _create(
    tag_ops: GitHubTagOps,
    location: GitHubRepoLocation,
    operation: CreateTagOperation,
    *,
    logger: TagSyncLogger,
    dry_run: bool,
) -> TagResult:
    if dry_run:
        logger.info(
            "Would create tag '%s' at commit SHA %s%s.",
            operation.name,
            operation.sha,
            _annotated_suffix(bool(operation.annotation)),
        )
        return "created"

    logger.info(
        "Tag '%s' does not exist, creating with commit SHA %s.", operation.name, operation.sha
    )
    target_sha = _ref_target_sha(tag_ops, location, operation)
    tag_ops.create_tag_ref(location, operation.name, target_sha)
    return "created"


def _update(
    tag_ops: GitHubTagOps,
    location: GitHubRepoLocation,
    operation: UpdateTagOperation,
    *,
    logger: TagSyncLogger,
    dry_run: bool,
) -> TagResult:
    reasons = ", ".join(operation.reasons)
    if dry_run:
        logger.info("Would update tag '%s' to %s.", operation.name, reasons)
        return "updated"

    if operation.existing_sha == operation.sha:
        logger.info("Tag '%s' exists with same commit but %s.", operation.name, reasons)
    else:
        logger.info(
            "Tag '%s' exists%s, updating to %s.",
            operation.name,
            _annotated_suffix(operation.existing_is_annotated),
            reasons,
        )
    target_sha = _ref_target_sha(tag_ops, location, operation)
    tag_ops.update_tag_ref(location, operation.name, target_sha)
    return "updated"


def _skip(operation: SkipTagOperation, *, logger: TagSyncLogger) -> TagResult:
    if operation.reason == "policy_skip":
        logger.info("Tag '%s' exists, skipping.", operation.name)
    else:
        logger.info(
            "Tag '%s' already exists with desired commit SHA %s%s.",
            operation.name,
            operation.sha,
            _annotated_suffix(operation.existing_is_annotated),
        )
    return "skipped"


def execute_tag_operation(
    tag_ops: GitHubTagOps,
    location: GitHubRepoLocation,
    operation: TagOperation,
    *,
    logger: TagSyncLogger,
    dry_run: bool,
) -> TagResult:
    """Execute one planned operation.

    Create and update issue at most one ref mutation (plus a tag object for
    annotated tags). Updates always force-move the ref. Skip and dry-run
    issue no mutation at all; dry-run only logs the planned action.

    Returns:
        How the tag was classified

    Raises:
        UnknownOperationKind: If operation is not a planned tag operation
        GitHubApiError: If a mutation fails
    """
    if isinstance(operation, CreateTagOperation):
        return _create(tag_ops, location, operation, logger=logger, dry_run=dry_run)
    if isinstance(operation, UpdateTagOperation):
        return _update(tag_ops, location, operation, logger=logger, dry_run=dry_run)
    if isinstance(operation, SkipTagOperation):
        return _skip(operation, logger=logger)
    raise UnknownOperationKind(operation)
