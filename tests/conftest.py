"""
Pytest configuration and shared fixtures for buildj tests.
"""

import logging
import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.directories import (
    fake_home,
    launcher_config,
    jdk_cache,
    maven_cache,
)
from tests.fixtures.registry import maven_archive

from buildj.core.platform import clear_platform_cache


@pytest.fixture(autouse=True)
def reset_platform_cache():
    """Platform detection is cached per process; start every test clean."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def debug_logging(caplog):
    """Capture buildj log records at DEBUG level."""
    caplog.set_level(logging.DEBUG, logger="buildj")
    return caplog


@pytest.fixture
def restore_logging():
    """Undo logging.basicConfig(force=True) performed by the CLI."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
