"""Derive tag entries from a semantic version and a Handlebars template.

Example:
    >>> derive_tags("v1.2.3", "{{prefix}}{{major}},{{prefix}}{{major}}.{{minor}}")
    ['v1', 'v1.2']
    >>> derive_tags("v1.2.3-beta.1", "{{prefix}}{{major}}{{#if prerelease}}-{{prerelease}}{{/if}}")
    ['v1-beta.1']
"""

import re
from dataclasses import asdict, dataclass

import semver
from pybars import Compiler, PybarsError

from tagsync.core.errors import InvalidTemplate, InvalidVersion
from tagsync.core.specs import split_list_input

DEFAULT_DERIVE_TEMPLATE = "{{prefix}}{{major}},{{prefix}}{{major}}.{{minor}}"

_REFS_TAGS_PREFIX = "refs/tags/"

# Comments may contain "}}"; every other mustache ends at the first one
_MUSTACHE_RE = re.compile(r"\{\{(?P<body>!--.*?--\}\}|.*?\}\})", re.DOTALL)

_compiler = Compiler()


@dataclass(frozen=True)
class SemverContext:
    """Semantic version components available to templates."""

    prefix: str  # "v" or "V" when the input had one, else ""
    major: int
    minor: int
    patch: int
    prerelease: str  # e.g. "beta.1", "" when absent
    build: str  # e.g. "build.123", "" when absent
    version: str  # major.minor.patch[-prerelease], without prefix or build


def parse_semver(text: str) -> SemverContext:
    """Parse a version string such as "v1.2.3-rc.1+build.5".

    A leading "refs/tags/" is dropped so a pushed tag ref can be passed as-is.
    One leading "v" or "V" is kept as the prefix.

    Raises:
        InvalidVersion: If the string is empty or not a semantic version
    """
    trimmed = text.strip().removeprefix(_REFS_TAGS_PREFIX)
    if not trimmed:
        raise InvalidVersion("Invalid semver: empty string", text)

    prefix = trimmed[0] if trimmed[0] in ("v", "V") else ""
    version_str = trimmed[len(prefix) :]

    try:
        parsed = semver.Version.parse(version_str)
    except ValueError as e:
        raise InvalidVersion(f"Invalid semver: '{text}'", text) from e

    prerelease = parsed.prerelease or ""
    version = f"{parsed.major}.{parsed.minor}.{parsed.patch}"
    if prerelease:
        version = f"{version}-{prerelease}"

    return SemverContext(
        prefix=prefix,
        major=parsed.major,
        minor=parsed.minor,
        patch=parsed.patch,
        prerelease=prerelease,
        build=parsed.build or "",
        version=version,
    )


def _check_template_structure(template: str) -> None:
    """Reject templates the pybars grammar would only parse partially.

    pybars stops at the first construct it cannot parse and renders the
    prefix it did read, so unclosed mustaches and unbalanced blocks are
    caught here.
    """
    open_blocks: list[str] = []
    consumed = 0
    for match in _MUSTACHE_RE.finditer(template):
        if "{{" in template[consumed : match.start()]:
            raise InvalidTemplate(template, "unclosed '{{'")
        consumed = match.end()

        body = match.group("body").strip("{}~ \t\r\n")
        if body.startswith("!"):
            continue
        if "{{" in body:
            raise InvalidTemplate(template, "unclosed '{{'")
        if body in ("else", "^"):
            if not open_blocks:
                raise InvalidTemplate(template, f"'{{{{{body}}}}}' outside of a block")
        elif body[:1] in ("#", "^"):
            name = body[1:].split(maxsplit=1)[0] if body[1:].strip() else ""
            if not name:
                raise InvalidTemplate(template, f"block without a name: '{match.group(0)}'")
            open_blocks.append(name)
        elif body.startswith("/"):
            name = body[1:].strip()
            if not open_blocks:
                raise InvalidTemplate(template, f"'{{{{/{name}}}}}' does not close any block")
            expected = open_blocks.pop()
            if name != expected:
                raise InvalidTemplate(
                    template, f"'{{{{#{expected}}}}}' closed by '{{{{/{name}}}}}'"
                )

    if "{{" in template[consumed:]:
        raise InvalidTemplate(template, "unclosed '{{'")
    if open_blocks:
        raise InvalidTemplate(template, f"unclosed block '{{{{#{open_blocks[-1]}}}}}'")


def render_template(template: str, ctx: SemverContext) -> str:
    """Render a Handlebars template against a version.

    Numbers are passed as strings so that a zero component still counts as
    present in {{#if}} / {{#unless}} blocks.

    Raises:
        InvalidTemplate: If the template is malformed or fails to render
    """
    _check_template_structure(template)
    values = asdict(ctx)
    for key in ("major", "minor", "patch"):
        values[key] = str(values[key])
    try:
        compiled = _compiler.compile(template)
        return str(compiled(values))
    except PybarsError as e:
        raise InvalidTemplate(template, str(e)) from e


def derive_tags(version: str, template: str) -> list[str]:
    """Render the template for a version and split the result into tag entries.

    Entries that are empty or consist only of the version prefix are dropped.

    Raises:
        InvalidVersion: If version is not a semantic version
        InvalidTemplate: If the template is malformed
    """
    ctx = parse_semver(version)
    rendered = render_template(template, ctx)
    return [tag for tag in split_list_input(rendered) if tag and tag != ctx.prefix]
