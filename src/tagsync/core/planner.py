"""Decide what to do with each desired tag.

Planning is pure: it only looks at desired and already-fetched state. Every
tag is planned before any operation runs, so a 'fail' policy conflict is
raised before the first mutation.

    no existing state             -> create
    existing, when_exists=fail    -> abort the run (TagAlreadyExists)
    existing, when_exists=skip    -> skip (policy_skip)
    existing, when_exists=update  -> skip (already_matches) if commit and
                                     annotation both match, else update
"""

from collections.abc import Iterable, Mapping

from tagsync.core.errors import TagAlreadyExists
from tagsync.core.types import (
    CreateTagOperation,
    DesiredTag,
    ExistingTagState,
    SkipTagOperation,
    TagOperation,
    UpdateTagOperation,
    WhenExists,
)


def _commit_matches(desired: DesiredTag, existing: ExistingTagState) -> bool:
    return existing.commit_sha == desired.sha


def _annotation_matches(desired: DesiredTag, existing: ExistingTagState) -> bool:
    if existing.is_annotated and desired.annotation:
        return existing.annotation_message == desired.annotation
    return not existing.is_annotated and not desired.annotation


def update_reasons(desired: DesiredTag, existing: ExistingTagState) -> list[str]:
    """Describe what differs between an existing tag and its desired state.

    Returns an empty list when nothing differs.
    """
    reasons: list[str] = []

    if not _commit_matches(desired, existing):
        reasons.append(f"commit SHA {desired.sha} (was {existing.commit_sha})")

    if not _annotation_matches(desired, existing):
        if desired.annotation and existing.is_annotated:
            reasons.append("annotation message changed")
        elif desired.annotation:
            reasons.append("adding annotation")
        elif existing.is_annotated:
            reasons.append("removing annotation")

    return reasons


def plan_tag_operation(
    desired: DesiredTag,
    existing: ExistingTagState | None,
    when_exists: WhenExists,
) -> TagOperation:
    """Plan the operation for one tag.

    Raises:
        TagAlreadyExists: If the tag exists and when_exists is 'fail'
    """
    if existing is None:
        return CreateTagOperation(
            name=desired.name,
            ref=desired.ref,
            sha=desired.sha,
            annotation=desired.annotation,
        )

    if when_exists == "fail":
        raise TagAlreadyExists(desired.name)

    if when_exists == "skip":
        return SkipTagOperation(
            name=desired.name,
            existing_is_annotated=existing.is_annotated,
            reason="policy_skip",
            sha=desired.sha,
        )

    reasons = update_reasons(desired, existing)
    if not reasons:
        return SkipTagOperation(
            name=desired.name,
            existing_is_annotated=existing.is_annotated,
            reason="already_matches",
            sha=desired.sha,
        )

    return UpdateTagOperation(
        name=desired.name,
        ref=desired.ref,
        sha=desired.sha,
        annotation=desired.annotation,
        existing_sha=existing.commit_sha,
        existing_is_annotated=existing.is_annotated,
        reasons=tuple(reasons),
    )


def plan_tag_operations(
    desired_tags: Iterable[DesiredTag],
    existing_by_name: Mapping[str, ExistingTagState | None],
    when_exists: WhenExists,
) -> list[TagOperation]:
    """Plan every tag, in input order.

    Raises:
        TagAlreadyExists: For the first existing tag (in input order) under 'fail'
    """
    return [
        plan_tag_operation(desired, existing_by_name.get(desired.name), when_exists)
        for desired in desired_tags
    ]
