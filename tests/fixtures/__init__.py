"""Test fixtures for buildj tests.

This package provides reusable pytest fixtures for testing buildj components.
Fixtures are organized by type:

- directories: Isolated home, launcher config and populated toolchain caches
- registry: Registry payloads and real tool archives

Import fixtures in your tests using:
    from tests.fixtures.directories import launcher_config
    from tests.fixtures.registry import maven_archive
"""

__all__ = [
    "directories",
    "registry",
]
