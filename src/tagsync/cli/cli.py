import json
import logging
from pathlib import Path

import click

from tagsync.cli.config import (
    DEFAULT_CONFIG_FILENAME,
    EMPTY_FILE_CONFIG,
    ConfigError,
    FileConfig,
    SyncConfig,
    load_config,
    merge_config,
)
from tagsync.cli.outputs import report_to_dict, write_report_outputs
from tagsync.core.context import TagSyncContext, create_context
from tagsync.core.derive import DEFAULT_DERIVE_TEMPLATE, derive_tags
from tagsync.core.errors import TagSyncError
from tagsync.core.reconcile import ReconcileRequest, reconcile_tags
from tagsync.core.specs import split_list_input
from tagsync.core.types import WHEN_EXISTS_MODES
from tagsync.log import configure_logging

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

logger = logging.getLogger(__name__)


def _load_file_config(config_path: Path | None) -> FileConfig:
    if config_path is not None:
        return load_config(config_path)
    default_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if default_path.exists():
        logger.debug("Using config file %s", default_path)
        return load_config(default_path)
    return EMPTY_FILE_CONFIG


def _resolve_context(
    ctx: click.Context, config: SyncConfig, token: str | None, verbose: bool
) -> TagSyncContext:
    # Tests inject a context with a fake gateway
    if isinstance(ctx.obj, TagSyncContext):
        return ctx.obj
    if config.location is None:
        raise ConfigError("No repository given: pass --repository or set GITHUB_REPOSITORY")
    return create_context(config.location, token=token, verbose=verbose)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tagsync")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(debug: bool) -> None:
    """Reconcile declared Git tags against a GitHub repository."""
    configure_logging(debug=debug)


@cli.command("sync")
@click.option(
    "--tags",
    "tag_inputs",
    multiple=True,
    help="Tag entries NAME[:REF[:ANNOTATION]], comma or newline separated. Repeatable.",
)
@click.option("--ref", default=None, help="Default ref for entries without one.")
@click.option("--annotation", default=None, help="Default annotation message.")
@click.option(
    "--when-exists",
    type=click.Choice(WHEN_EXISTS_MODES),
    default=None,
    help="What to do when a tag already exists (default: update).",
)
@click.option("--derive-from", default=None, help="Semantic version to derive tags from.")
@click.option("--derive-template", default=None, help="Handlebars template for derived tags.")
@click.option("--dry-run", is_flag=True, help="Log planned changes without making them.")
@click.option("--verbose", "-v", is_flag=True, help="Print each GitHub API mutation.")
@click.option(
    "--repository",
    envvar="GITHUB_REPOSITORY",
    default=None,
    help="Target repository as OWNER/NAME.",
)
@click.option(
    "--token",
    envvar=["GH_TOKEN", "GITHUB_TOKEN"],
    default=None,
    help="GitHub token (defaults to gh's own authentication).",
)
@click.option("--max-workers", type=int, default=None, help="Concurrent API lookups.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help=f"TOML config file (default: ./{DEFAULT_CONFIG_FILENAME} if present).",
)
@click.pass_context
def sync_cmd(
    ctx: click.Context,
    tag_inputs: tuple[str, ...],
    ref: str | None,
    annotation: str | None,
    when_exists: str | None,
    derive_from: str | None,
    derive_template: str | None,
    dry_run: bool,
    verbose: bool,
    repository: str | None,
    token: str | None,
    max_workers: int | None,
    config_path: Path | None,
) -> None:
    """Create, update or skip tags so the repository matches the request.

    Prints a JSON report of created, updated and skipped tags. When
    GITHUB_OUTPUT is set, the same lists are written as step outputs.
    """
    try:
        tags: list[str] = []
        for tag_input in tag_inputs:
            tags.extend(split_list_input(tag_input))

        config = merge_config(
            _load_file_config(config_path),
            tags=tags,
            ref=ref,
            annotation=annotation,
            when_exists=when_exists,
            derive_from=derive_from,
            derive_template=derive_template,
            repository=repository,
            dry_run=dry_run,
            max_workers=max_workers,
        )
        tag_sync_ctx = _resolve_context(ctx, config, token, verbose)

        request = ReconcileRequest(
            tags=config.tags,
            derive_from=config.derive_from,
            derive_template=config.derive_template,
            default_ref=config.ref,
            default_annotation=config.annotation,
            when_exists=config.when_exists,
            dry_run=config.dry_run,
            max_workers=config.max_workers,
        )
        report = reconcile_tags(tag_sync_ctx, request)
    except (TagSyncError, ConfigError, RuntimeError) as e:
        raise click.ClickException(str(e)) from e

    write_report_outputs(report)
    click.echo(json.dumps(report_to_dict(report)))


@cli.command("derive")
@click.argument("version")
@click.option(
    "--template",
    default=DEFAULT_DERIVE_TEMPLATE,
    show_default=True,
    help="Handlebars template producing a comma or newline separated list.",
)
def derive_cmd(version: str, template: str) -> None:
    """Print the tags derived from VERSION, one per line."""
    try:
        tags = derive_tags(version, template)
    except TagSyncError as e:
        raise click.ClickException(str(e)) from e

    for tag in tags:
        click.echo(tag)


def main() -> None:
    """CLI entry point used by the `tagsync` console script."""
    cli()
