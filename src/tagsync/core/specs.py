"""Parsing of `name[:ref[:annotation]]` tag specifications."""

import csv
import io
from collections.abc import Iterable
from dataclasses import dataclass

from tagsync.core.errors import DuplicateTagConflict, InvalidTagSpec, MissingRef
from tagsync.core.types import TagSpec, TagTarget


def split_list_input(text: str) -> list[str]:
    """Split comma- and newline-delimited input into trimmed entries.

    Follows CSV quoting, so a quoted field may contain commas. Blank fields
    and blank lines come back as empty strings or are absent; callers drop
    them.
    """
    entries: list[str] = []
    for row in csv.reader(io.StringIO(text), skipinitialspace=True):
        entries.extend(field.strip() for field in row)
    return entries


def parse_tag_spec(raw: str) -> TagSpec | None:
    """Parse a single entry.

    Only the first two colons separate fields; the annotation is the rest of
    the entry verbatim and may contain colons. Empty ref or annotation
    segments count as omitted.

    Returns:
        The parsed spec, or None for an entirely empty entry

    Raises:
        InvalidTagSpec: If the name is empty but a ref or annotation is given
    """
    parts = raw.split(":", 2)
    name = parts[0].strip()
    ref = parts[1].strip() if len(parts) > 1 else ""
    annotation = parts[2] if len(parts) > 2 else ""

    if not name:
        if ref or annotation:
            raise InvalidTagSpec(raw)
        return None

    return TagSpec(name=name, ref=ref or None, annotation=annotation or None)


@dataclass(frozen=True)
class ParsedTagSpecs:
    """Result of parsing a list of tag entries.

    targets preserves first-seen order of tag names; refs lists each distinct
    ref once, in first-seen order.
    """

    targets: dict[str, TagTarget]
    refs: list[str]


def parse_tag_specs(
    entries: Iterable[str],
    *,
    default_ref: str | None,
    default_annotation: str,
) -> ParsedTagSpecs:
    """Merge tag entries into one target per tag name.

    A name may repeat as long as it resolves to the same ref every time. The
    annotation is not conflict-checked: the last occurrence wins.

    Raises:
        InvalidTagSpec: Empty name with a ref or annotation
        MissingRef: Neither a per-tag nor a default ref
        DuplicateTagConflict: Same name bound to two different refs
    """
    targets: dict[str, TagTarget] = {}
    refs: dict[str, None] = {}

    for raw in entries:
        spec = parse_tag_spec(raw)
        if spec is None:
            continue

        ref = spec.ref or default_ref
        if not ref:
            raise MissingRef(spec.name)

        annotation = spec.annotation if spec.annotation is not None else default_annotation

        previous = targets.get(spec.name)
        if previous is not None and previous.ref != ref:
            raise DuplicateTagConflict(spec.name, previous.ref, ref)

        targets[spec.name] = TagTarget(ref=ref, annotation=annotation)
        refs[ref] = None

    return ParsedTagSpecs(targets=targets, refs=list(refs))
