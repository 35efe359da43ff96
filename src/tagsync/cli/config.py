"""Configuration for `tagsync sync`: TOML file values merged with CLI options."""

import re
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tagsync.core.derive import DEFAULT_DERIVE_TEMPLATE
from tagsync.core.resolve import DEFAULT_MAX_WORKERS
from tagsync.core.specs import split_list_input
from tagsync.core.types import WHEN_EXISTS_MODES, WhenExists
from tagsync.gateway.github.types import GitHubRepoLocation

DEFAULT_CONFIG_FILENAME = "tagsync.toml"

_REPOSITORY_RE = re.compile(r"^([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)$")


class ConfigError(Exception):
    """Invalid or incomplete configuration, detected before any API call."""


@dataclass(frozen=True)
class FileConfig:
    """In-memory representation of the [tagsync] table of tagsync.toml.

    Example tagsync.toml:
      [tagsync]
      repository = "octo/widgets"
      tags = ["latest:release", "stable:release:Stable release"]
      ref = "main"
      when_exists = "update"
      derive_from = "v1.2.3"
      derive_template = "{{prefix}}{{major}},{{prefix}}{{major}}.{{minor}}"

    Every field is None when the file does not set it.
    """

    tags: list[str] | None
    ref: str | None
    annotation: str | None
    when_exists: str | None
    derive_from: str | None
    derive_template: str | None
    repository: str | None
    dry_run: bool | None
    max_workers: int | None


@dataclass(frozen=True)
class SyncConfig:
    """Validated settings for one run."""

    tags: list[str]
    ref: str | None
    annotation: str
    when_exists: WhenExists
    derive_from: str | None
    derive_template: str
    location: GitHubRepoLocation | None
    dry_run: bool
    max_workers: int


EMPTY_FILE_CONFIG = FileConfig(
    tags=None,
    ref=None,
    annotation=None,
    when_exists=None,
    derive_from=None,
    derive_template=None,
    repository=None,
    dry_run=None,
    max_workers=None,
)


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    return str(value)


def _tag_entries(value: Any) -> list[str]:
    if isinstance(value, str):
        return split_list_input(value)
    if isinstance(value, list):
        entries: list[str] = []
        for item in value:
            entries.extend(split_list_input(str(item)))
        return entries
    msg = f"'tags' must be a string or a list of strings, got {type(value).__name__}"
    raise ConfigError(msg)


def load_config(path: Path) -> FileConfig:
    """Load the [tagsync] table from a TOML file.

    Args:
        path: Config file path; a missing file yields an empty config

    Raises:
        ConfigError: If the file is not valid TOML or has wrongly typed values
    """
    if not path.exists():
        return EMPTY_FILE_CONFIG

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    table = data.get("tagsync", {})
    if not isinstance(table, dict):
        raise ConfigError(f"[tagsync] in {path} must be a table")

    tags = table.get("tags")
    dry_run = table.get("dry_run")
    if dry_run is not None and not isinstance(dry_run, bool):
        raise ConfigError(f"'dry_run' in {path} must be true or false")
    max_workers = table.get("max_workers")
    if max_workers is not None and not isinstance(max_workers, int):
        raise ConfigError(f"'max_workers' in {path} must be an integer")

    return FileConfig(
        tags=_tag_entries(tags) if tags is not None else None,
        ref=_optional_str(table, "ref"),
        annotation=_optional_str(table, "annotation"),
        when_exists=_optional_str(table, "when_exists"),
        derive_from=_optional_str(table, "derive_from"),
        derive_template=_optional_str(table, "derive_template"),
        repository=_optional_str(table, "repository"),
        dry_run=dry_run,
        max_workers=max_workers,
    )


def validate_when_exists(value: str) -> WhenExists:
    """Check an exists-policy value.

    Raises:
        ConfigError: If value is not one of update, skip, fail
    """
    for mode in WHEN_EXISTS_MODES:
        if value == mode:
            return mode
    valid = ", ".join(f"'{m}'" for m in WHEN_EXISTS_MODES)
    raise ConfigError(f"Invalid value for 'when_exists': '{value}'. Valid values are {valid}.")


def parse_repository(value: str) -> GitHubRepoLocation:
    """Parse "owner/name" into a repository location.

    Raises:
        ConfigError: If value is not of the form owner/name
    """
    match = _REPOSITORY_RE.match(value.strip())
    if match is None:
        raise ConfigError(f"Invalid repository '{value}': expected 'owner/name'")
    return GitHubRepoLocation(owner=match.group(1), repo=match.group(2))


def merge_config(
    file_config: FileConfig,
    *,
    tags: list[str],
    ref: str | None,
    annotation: str | None,
    when_exists: str | None,
    derive_from: str | None,
    derive_template: str | None,
    repository: str | None,
    dry_run: bool,
    max_workers: int | None,
) -> SyncConfig:
    """Merge CLI values over file values and validate the result.

    Merge rules:
    - Scalars: CLI value wins when given, else the file value, else the default
    - tags: CLI entries replace file entries when any are given
    - dry_run: enabled if either source enables it

    Raises:
        ConfigError: Invalid policy, repository or worker count, or neither
            tags nor derive_from provided
    """
    merged_tags = tags if tags else (file_config.tags or [])
    merged_derive_from = derive_from or file_config.derive_from
    if not any(merged_tags) and not merged_derive_from:
        raise ConfigError("No tags given: provide --tags or --derive-from")

    merged_repository = repository or file_config.repository
    location = parse_repository(merged_repository) if merged_repository else None

    merged_workers = max_workers if max_workers is not None else file_config.max_workers
    if merged_workers is None:
        merged_workers = DEFAULT_MAX_WORKERS
    if merged_workers < 1:
        raise ConfigError(f"max_workers must be at least 1, got {merged_workers}")

    merged_template = derive_template or file_config.derive_template or DEFAULT_DERIVE_TEMPLATE
    merged_annotation = annotation if annotation is not None else file_config.annotation

    return SyncConfig(
        tags=merged_tags,
        ref=ref or file_config.ref,
        annotation=merged_annotation or "",
        when_exists=validate_when_exists(when_exists or file_config.when_exists or "update"),
        derive_from=merged_derive_from,
        derive_template=merged_template,
        location=location,
        dry_run=dry_run or bool(file_config.dry_run),
        max_workers=merged_workers,
    )
