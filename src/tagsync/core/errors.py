"""Errors that abort a reconciliation run.

Every error here is a whole-run abort: tag sets are treated as one unit of
intent, so there is no per-tag recovery. A provider "not found" while
inspecting a tag is not an error and never surfaces as one of these.
"""


class TagSyncError(Exception):
    """Base class for all run-aborting errors."""


class InvalidVersion(TagSyncError):
    """The derive-from version is empty or not a semantic version."""

    def __init__(self, message: str, version: str) -> None:
        self.version = version
        super().__init__(message)


class InvalidTemplate(TagSyncError):
    """The derive template is not a well-formed Handlebars template."""

    def __init__(self, template: str, problem: str) -> None:
        self.template = template
        self.problem = problem
        super().__init__(f"Invalid template: {problem}")


class InvalidTagSpec(TagSyncError):
    """A tag entry has an empty name but a ref or annotation."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"Invalid tag: '{raw}'")


class MissingRef(TagSyncError):
    """A tag has neither a per-tag ref nor a default ref."""

    def __init__(self, tag_name: str) -> None:
        self.tag_name = tag_name
        super().__init__(
            f"Missing ref for tag '{tag_name}': provide a default ref or specify a per-tag ref"
        )


class DuplicateTagConflict(TagSyncError):
    """The same tag name was bound to two different refs."""

    def __init__(self, tag_name: str, first_ref: str, second_ref: str) -> None:
        self.tag_name = tag_name
        self.first_ref = first_ref
        self.second_ref = second_ref
        super().__init__(
            f"Duplicate tag '{tag_name}' with different refs: '{first_ref}' and '{second_ref}'"
        )


class RefResolutionFailed(TagSyncError):
    """The provider could not resolve a ref to a commit."""

    def __init__(self, ref: str, cause: Exception) -> None:
        self.ref = ref
        self.cause = cause
        super().__init__(f"Failed to resolve ref '{ref}' to a SHA: {cause}")


class TagInspectionFailed(TagSyncError):
    """The provider failed (other than "not found") while reading a tag."""

    def __init__(self, tag_name: str, cause: Exception) -> None:
        self.tag_name = tag_name
        self.cause = cause
        super().__init__(f"Failed to check if tag '{tag_name}' exists: {cause}")


class TagAlreadyExists(TagSyncError):
    """A desired tag already exists and the exists-policy is 'fail'."""

    def __init__(self, tag_name: str) -> None:
        self.tag_name = tag_name
        super().__init__(f"Tag '{tag_name}' already exists.")


class UnknownOperationKind(TagSyncError):
    """The executor was handed something that is not a planned tag operation."""

    def __init__(self, operation: object) -> None:
        self.operation = operation
        super().__init__(f"Unknown tag operation: {operation!r}")
