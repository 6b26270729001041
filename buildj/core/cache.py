"""
Local toolchain cache.

Installations are stored under a category base directory, one directory per
(tool, version)::

    <base>/<name>-<version>/<archive>
    <base>/<name>-<version>/<first-subdir>/bin/...

The existence of ``<name>-<version>/`` is the cache-hit criterion; contents
are not re-verified. Entries are never evicted.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from buildj.core.exceptions import CacheIOError
from buildj.core.filesystem import safe_rmtree

logger = logging.getLogger(__name__)

MACOS_BUNDLE_HOME = Path("Contents") / "Home"


def first_subdirectory(path: Union[str, Path]) -> Optional[Path]:
    """
    Get the first directory directly under path.

    Entries are ordered lexicographically by name so the result does not
    depend on filesystem listing order. Files are skipped.

    Returns:
        The first subdirectory, or None if path is missing, unreadable, or
        has no subdirectories

    Example:
        >>> first_subdirectory(Path('~/.jssp/builder/maven-3.5.2'))
        PosixPath('~/.jssp/builder/maven-3.5.2/apache-maven-3.5.2')
    """
    path = Path(path)
    try:
        entries = sorted(path.iterdir(), key=lambda p: p.name)
    except OSError:
        return None

    for entry in entries:
        if entry.is_dir():
            return entry
    return None


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists (idempotent).

    Raises:
        CacheIOError: If the directory cannot be created
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CacheIOError(f"Init dir {path} failed: {e}") from e
    return path


def jdk_dir_matches(dir_name: str, version: str) -> bool:
    """
    Check whether a JDK directory name matches a requested version.

    The version must be a prefix of what follows a leading ``jdk-`` or
    ``jdk`` marker; it is never matched elsewhere in the name.

    Example:
        >>> jdk_dir_matches("jdk-11.0.2", "11")
        True
        >>> jdk_dir_matches("jdk1.8.0_202", "1.8")
        True
        >>> jdk_dir_matches("jdk-2.11.0", "11")
        False
    """
    if dir_name.startswith("jdk-") and dir_name[4:].startswith(version):
        return True
    if dir_name.startswith("jdk") and dir_name[3:].startswith(version):
        return True
    return False


class LocalCache:
    """
    A category of the toolchain cache (JDKs or builders).

    Example:
        >>> cache = LocalCache(Path.home() / ".jssp" / "builder")
        >>> cache.exists("maven", "3.5.2")
        False
    """

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def path_for(self, name: str, version: str) -> Path:
        """Deterministic installation directory for name/version."""
        return self.base_dir / f"{name}-{version}"

    def exists(self, name: str, version: str) -> bool:
        return self.path_for(name, version).exists()

    def first_subdirectory(self, path: Union[str, Path]) -> Optional[Path]:
        return first_subdirectory(path)

    def ensure_directory(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Create path (default: the cache base directory)."""
        return ensure_directory(path if path is not None else self.base_dir)

    def find_jdk_home(self, version: str) -> Optional[Path]:
        """
        Find an unpacked JDK whose directory name matches version.

        Candidates are scanned in lexicographic order; the first match wins.
        For macOS bundle layouts the ``Contents/Home`` subdirectory is
        returned.

        Returns:
            JDK home directory, or None
        """
        try:
            entries = sorted(self.base_dir.iterdir(), key=lambda p: p.name)
        except OSError:
            return None

        for entry in entries:
            if not entry.is_dir() or not jdk_dir_matches(entry.name, version):
                continue
            bundle_home = entry / MACOS_BUNDLE_HOME
            if bundle_home.exists():
                return bundle_home
            return entry
        return None

    def discard(self, path: Union[str, Path]):
        """
        Remove a partially installed directory under the cache base.

        Raises:
            CacheIOError: If removal fails or path is outside the cache
        """
        try:
            safe_rmtree(path, require_prefix=self.base_dir)
        except ValueError as e:
            raise CacheIOError(str(e)) from e
        logger.debug(f"Removed partial installation: {path}")
