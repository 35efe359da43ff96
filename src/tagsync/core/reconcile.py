"""Run one reconciliation pass: derive, parse, read remote state, plan, execute."""

import logging
from dataclasses import dataclass, field

from tagsync.core.context import TagSyncContext
from tagsync.core.derive import DEFAULT_DERIVE_TEMPLATE, derive_tags
from tagsync.core.executor import execute_tag_operation
from tagsync.core.planner import plan_tag_operations
from tagsync.core.resolve import DEFAULT_MAX_WORKERS, inspect_existing_tags, resolve_refs
from tagsync.core.specs import parse_tag_specs
from tagsync.core.types import DesiredTag, ReconcileReport, TagOperation, WhenExists
from tagsync.log import DryRunLoggerAdapter, TagSyncLogger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileRequest:
    """Everything a run needs besides the gateway.

    tags are raw `name[:ref[:annotation]]` entries; derived entries are
    appended after them when derive_from is set.
    """

    tags: list[str] = field(default_factory=list)
    derive_from: str | None = None
    derive_template: str = DEFAULT_DERIVE_TEMPLATE
    default_ref: str | None = None
    default_annotation: str = ""
    when_exists: WhenExists = "update"
    dry_run: bool = False
    max_workers: int = DEFAULT_MAX_WORKERS


def collect_tag_entries(request: ReconcileRequest) -> list[str]:
    """Explicit entries followed by entries derived from the version, if any."""
    entries = list(request.tags)
    if request.derive_from:
        derived = derive_tags(request.derive_from, request.derive_template)
        logger.debug("Derived tags from '%s': %s", request.derive_from, ", ".join(derived))
        entries.extend(derived)
    return entries


def build_desired_tags(ctx: TagSyncContext, request: ReconcileRequest) -> list[DesiredTag]:
    """Parse entries and resolve every distinct ref once."""
    parsed = parse_tag_specs(
        collect_tag_entries(request),
        default_ref=request.default_ref,
        default_annotation=request.default_annotation,
    )
    shas = resolve_refs(ctx.tag_ops, ctx.location, parsed.refs, max_workers=request.max_workers)
    return [
        DesiredTag(name=name, ref=target.ref, sha=shas[target.ref], annotation=target.annotation)
        for name, target in parsed.targets.items()
    ]


def plan_reconciliation(ctx: TagSyncContext, request: ReconcileRequest) -> list[TagOperation]:
    """Compute the operations for a run without executing any of them.

    Raises:
        TagSyncError: Any parse, resolution, inspection or policy failure
    """
    desired_tags = build_desired_tags(ctx, request)
    existing = inspect_existing_tags(
        ctx.tag_ops,
        ctx.location,
        [tag.name for tag in desired_tags],
        max_workers=request.max_workers,
    )
    return plan_tag_operations(desired_tags, existing, request.when_exists)


def reconcile_tags(
    ctx: TagSyncContext,
    request: ReconcileRequest,
    *,
    run_logger: logging.Logger | None = None,
) -> ReconcileReport:
    """Bring the remote tags in line with the request.

    All tags are planned before the first operation executes, so any abort
    (including a 'fail' policy conflict) happens before any mutation.

    Args:
        ctx: Gateway and repository
        request: Desired tags and policy
        run_logger: Logger for per-tag messages (defaults to this module's)

    Returns:
        Report of created, updated and skipped tags (all empty in dry-run mode)

    Raises:
        TagSyncError: If the run aborts
        GitHubApiError: If a mutation fails part way through execution
    """
    base_logger = run_logger if run_logger is not None else logger
    op_logger: TagSyncLogger = DryRunLoggerAdapter(base_logger) if request.dry_run else base_logger

    if request.dry_run:
        op_logger.info("Dry-run mode enabled, no changes will be made.")

    operations = plan_reconciliation(ctx, request)

    results: dict[str, list[str]] = {"created": [], "updated": [], "skipped": []}
    for operation in operations:
        result = execute_tag_operation(
            ctx.tag_ops,
            ctx.location,
            operation,
            logger=op_logger,
            dry_run=request.dry_run,
        )
        results[result].append(operation.name)

    if request.dry_run:
        return ReconcileReport(created=[], updated=[], skipped=[], dry_run=True)

    return ReconcileReport(
        created=results["created"],
        updated=results["updated"],
        skipped=results["skipped"],
        dry_run=False,
    )
