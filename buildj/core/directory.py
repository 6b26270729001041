"""
Directory layout for buildj.

All toolchains live under a user-scoped namespace::

    ~/.jssp/
        jdks/                 : JDK archives and their unpacked jdk-* dirs
        builder/              : <builder>-<version>/ installation dirs
        buildj.yaml           : optional launcher settings

    ~/.standard_config.json   : auth token record shared with other tools
"""

import logging
from pathlib import Path
from typing import Optional

from buildj.core.exceptions import CacheIOError

logger = logging.getLogger(__name__)

APP_NAMESPACE = ".jssp"
JDKS_CATEGORY = "jdks"
BUILDER_CATEGORY = "builder"
SETTINGS_FILE = "buildj.yaml"
STANDARD_CONFIG_JSON = ".standard_config.json"


def get_user_home() -> Path:
    """
    Get the current user's home directory.

    Raises:
        CacheIOError: If the home directory cannot be determined
    """
    try:
        return Path.home()
    except RuntimeError as e:
        raise CacheIOError(f"Home dir not found: {e}") from e


def get_app_dir(home: Optional[Path] = None) -> Path:
    """
    Get the buildj namespace directory (~/.jssp).

    Example:
        >>> get_app_dir(Path('/home/user'))
        PosixPath('/home/user/.jssp')
    """
    return (home or get_user_home()) / APP_NAMESPACE


def get_category_dir(category: str, base_dir: Optional[Path] = None) -> Path:
    """
    Get the cache directory for a tool category ('jdks' or 'builder').

    Args:
        category: Cache category
        base_dir: Cache base (default: ~/.jssp)
    """
    return (base_dir or get_app_dir()) / category


def ensure_cache_structure(base_dir: Optional[Path] = None) -> Path:
    """
    Create the jdks/ and builder/ directories if they don't exist.

    Returns:
        The cache base directory

    Raises:
        CacheIOError: If a directory cannot be created
    """
    base_dir = base_dir or get_app_dir()
    for category in (BUILDER_CATEGORY, JDKS_CATEGORY):
        path = base_dir / category
        logger.debug(f"Init home dir: {path}")
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheIOError(f"Init dir {path} failed: {e}") from e
    return base_dir
