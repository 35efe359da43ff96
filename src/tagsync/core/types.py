"""Type definitions for tag reconciliation."""

from dataclasses import dataclass, field
from typing import Literal

WhenExists = Literal["update", "skip", "fail"]

WHEN_EXISTS_MODES: tuple[WhenExists, ...] = ("update", "skip", "fail")

TagResult = Literal["created", "updated", "skipped"]

SkipReason = Literal["policy_skip", "already_matches"]


@dataclass(frozen=True)
class TagSpec:
    """One parsed `name[:ref[:annotation]]` entry.

    ref and annotation are None when the entry omits them (or leaves them empty).
    """

    name: str
    ref: str | None
    annotation: str | None


@dataclass(frozen=True)
class TagTarget:
    """Effective ref and annotation for a tag name after defaults are applied."""

    ref: str
    annotation: str  # "" means lightweight


@dataclass(frozen=True)
class DesiredTag:
    """A tag as it should exist on the remote after this run."""

    name: str
    ref: str
    sha: str  # commit the ref resolved to
    annotation: str  # "" means lightweight


@dataclass(frozen=True)
class ExistingTagState:
    """Remote state of a tag, with annotated tags dereferenced to their commit."""

    commit_sha: str
    is_annotated: bool
    annotation_message: str | None = None


@dataclass(frozen=True)
class CreateTagOperation:
    """Tag does not exist yet."""

    name: str
    ref: str
    sha: str
    annotation: str
    kind: Literal["create"] = field(default="create", init=False)


@dataclass(frozen=True)
class UpdateTagOperation:
    """Tag exists but points at another commit or carries a different annotation."""

    name: str
    ref: str
    sha: str
    annotation: str
    existing_sha: str
    existing_is_annotated: bool
    reasons: tuple[str, ...]
    kind: Literal["update"] = field(default="update", init=False)


@dataclass(frozen=True)
class SkipTagOperation:
    """Tag exists and is left alone."""

    name: str
    existing_is_annotated: bool
    reason: SkipReason
    sha: str  # desired commit, used for reporting
    kind: Literal["skip"] = field(default="skip", init=False)


TagOperation = CreateTagOperation | UpdateTagOperation | SkipTagOperation


@dataclass(frozen=True)
class ReconcileReport:
    """Outcome of a reconciliation run.

    In dry-run mode all lists are empty since nothing was changed.
    """

    created: list[str]
    updated: list[str]
    skipped: list[str]
    dry_run: bool

    @property
    def changed(self) -> list[str]:
        """Tags that were created or updated, in that order."""
        return [*self.created, *self.updated]
