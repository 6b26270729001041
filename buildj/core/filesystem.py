"""
File system utilities for buildj.

This module provides the file operations the resolver composes:
- Archive extraction delegated to the unzip/tar utilities
- Safe file operations (atomic writes, prefix-guarded deletion)
"""

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from buildj.core.exceptions import (
    CacheIOError,
    ExtractionError,
    UnsupportedArchiveType,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Example:
        >>> is_relative_to(Path('/a/b/c'), Path('/a'))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def extract_command(archive_path: Union[str, Path]) -> List[str]:
    """
    Build the extraction command for an archive.

    Raises:
        UnsupportedArchiveType: If the archive is neither .zip nor .tar.gz

    Example:
        >>> extract_command('apache-maven-3.5.2-bin.tar.gz')
        ['tar', '-xzf', 'apache-maven-3.5.2-bin.tar.gz']
    """
    file_name = Path(archive_path).name
    if file_name.endswith(".zip"):
        return ["unzip", "-q", "-o", file_name]
    if file_name.endswith(".tar.gz"):
        return ["tar", "-xzf", file_name]
    raise UnsupportedArchiveType(file_name)


def extract_archive(archive_path: Union[str, Path], destination: Union[str, Path]):
    """
    Extract an archive into destination and wait for completion.

    The archive is unpacked by the platform unzip/tar utility running with
    destination as its working directory.

    Args:
        archive_path: Archive file (.zip or .tar.gz)
        destination: Directory to extract into (created if missing)

    Raises:
        UnsupportedArchiveType: If the archive type is not supported
        ExtractionError: If the utility is missing or exits non-zero
    """
    archive_path = Path(archive_path).resolve()
    destination = Path(destination)
    cmd = extract_command(archive_path)
    cmd[-1] = str(archive_path)

    if not archive_path.exists():
        raise ExtractionError(f"Archive not found: {archive_path}")

    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CacheIOError(f"Init dir {destination} failed: {e}") from e

    logger.debug(f"Running extract cmd: {' '.join(cmd)} (cwd: {destination})")
    try:
        result = subprocess.run(cmd, cwd=destination, capture_output=True, text=True)
    except OSError as e:
        raise ExtractionError(
            f"Cannot run {cmd[0]} to extract {archive_path}: {e}"
        ) from e

    if result.returncode != 0:
        raise ExtractionError(
            f"Extract file: {archive_path.name} failed, "
            f"{cmd[0]} exited with {result.returncode}: {result.stderr.strip()}"
        )


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    If the write fails, the original file (if any) remains unchanged.

    Example:
        >>> atomic_write('config.json', '{"key": "value"}')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Remove a directory tree, refusing paths outside require_prefix.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        CacheIOError: If deletion fails

    Example:
        >>> safe_rmtree('~/.jssp/builder/maven-3.5.2', require_prefix='~/.jssp')
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix) or path == require_prefix:
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise CacheIOError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise CacheIOError(f"Failed to remove directory '{path}': {e}") from e
