from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def restore_package_log_level() -> Iterator[None]:
    """Undo log level changes made by the debug-mode setting."""
    package_logger = logging.getLogger("strikefx")
    level = package_logger.level
    yield
    package_logger.setLevel(level)
