"""User-facing output that stays off stdout.

stdout is reserved for the machine-readable report, so everything meant
for a human goes to stderr.
"""

import click


def user_output(message: str = "") -> None:
    """Echo a line to stderr."""
    click.echo(message, err=True)
