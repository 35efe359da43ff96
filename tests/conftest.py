import logging
from collections.abc import Iterator

import pytest

from tagsync import log


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Drop the handler CLI invocations install on the root logger.

    The handler is bound to the CliRunner's stderr, which is closed once the
    invocation returns.
    """
    root = logging.getLogger()
    level = root.level
    yield
    if log._installed_handler is not None:
        root.removeHandler(log._installed_handler)
        log._installed_handler = None
    root.setLevel(level)
