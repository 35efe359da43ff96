"""Step outputs for GitHub Actions and the JSON run report."""

import json
import os
from dataclasses import asdict

from tagsync.core.types import ReconcileReport


def report_to_dict(report: ReconcileReport) -> dict[str, object]:
    """JSON-serializable form of a run report, with the combined tags list."""
    data = asdict(report)
    data["tags"] = [*report.created, *report.updated]
    return data


def write_github_output(key: str, value: str) -> bool:
    """Write a key=value pair to GITHUB_OUTPUT file.

    Args:
        key: Output variable name
        value: Output value

    Returns:
        True if written successfully, False if GITHUB_OUTPUT not set
    """
    github_output = os.environ.get("GITHUB_OUTPUT")
    if github_output is None:
        return False

    with open(github_output, "a", encoding="utf-8") as f:
        f.write(f"{key}={value}\n")
    return True


def write_report_outputs(report: ReconcileReport) -> bool:
    """Write created, updated, skipped and tags as JSON arrays.

    Returns:
        True if GITHUB_OUTPUT was set and written
    """
    data = report_to_dict(report)
    written = False
    for key in ("created", "updated", "skipped", "tags"):
        written = write_github_output(key, json.dumps(data[key])) or written
    return written
