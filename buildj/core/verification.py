"""
Integrity verification for downloaded tool packages.

Packages published by the tool registry carry an integrity tag of the form
``<algorithm>:hex-<digest>`` where algorithm is one of md5, sha1, sha256 or
sha512. Files are hashed incrementally so memory use does not depend on the
archive size.
"""

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from buildj.core.exceptions import UnsupportedAlgorithm
from buildj.core.progress import ProgressCallback

logger = logging.getLogger(__name__)

BUFFER_SIZE = 8192

SUPPORTED_ALGORITHMS = {
    "md5": hashlib.md5,
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
    "sha512": hashlib.sha512,
}


@dataclass(frozen=True)
class IntegrityTag:
    """Parsed ``<algorithm>:hex-<digest>`` integrity string."""

    algorithm: str
    digest: str

    def __str__(self) -> str:
        return f"{self.algorithm}:hex-{self.digest}"


def parse_integrity(integrity: str) -> IntegrityTag:
    """
    Parse an integrity tag.

    The tag is split at the first ``-``; the part before it must be
    ``<algorithm>:hex`` with a supported algorithm.

    Raises:
        UnsupportedAlgorithm: If the separator is missing or the algorithm
            token is not recognized

    Example:
        >>> parse_integrity("sha256:hex-ab12")
        IntegrityTag(algorithm='sha256', digest='ab12')
    """
    index = integrity.find("-")
    if index < 0:
        raise UnsupportedAlgorithm(integrity)

    prefix = integrity[:index]
    digest = integrity[index + 1 :]
    algorithm, sep, encoding = prefix.partition(":")
    if not sep or encoding != "hex" or algorithm not in SUPPORTED_ALGORITHMS:
        raise UnsupportedAlgorithm(integrity)

    return IntegrityTag(algorithm=algorithm, digest=digest)


def compute_digest(
    algorithm: str,
    file_path: Union[str, Path],
    progress_callback: Optional[ProgressCallback] = None,
) -> str:
    """
    Compute the hex digest of a file.

    Args:
        algorithm: One of md5, sha1, sha256, sha512
        file_path: File to hash
        progress_callback: Optional callback(label, bytes_read, total_bytes);
            total_bytes is None when the file size cannot be determined

    Returns:
        Lowercase hex digest

    Raises:
        UnsupportedAlgorithm: If algorithm is not supported
        FileNotFoundError: If file doesn't exist
    """
    factory = SUPPORTED_ALGORITHMS.get(algorithm)
    if factory is None:
        raise UnsupportedAlgorithm(algorithm)

    file_path = Path(file_path)
    hasher = factory()
    label = f"Calc {algorithm.upper()}"

    try:
        total: Optional[int] = file_path.stat().st_size
    except OSError:
        total = None

    bytes_read = 0
    with open(file_path, "rb") as f:
        while chunk := f.read(BUFFER_SIZE):
            hasher.update(chunk)
            bytes_read += len(chunk)
            if progress_callback:
                progress_callback(label, bytes_read, total)

    return hasher.hexdigest()


def verify(
    integrity: str,
    file_path: Union[str, Path],
    progress_callback: Optional[ProgressCallback] = None,
) -> bool:
    """
    Check a file against an integrity tag.

    The comparison is an exact, case-sensitive match of hex strings. A
    mismatch is returned as False; deciding whether that is fatal is left to
    the caller.

    Raises:
        UnsupportedAlgorithm: If the tag's algorithm is not supported (no
            digest is computed in that case)

    Example:
        >>> if not verify("sha256:hex-9f86d0...", Path("maven.tar.gz")):
        ...     print("corrupted download")
    """
    tag = parse_integrity(integrity)
    actual = compute_digest(tag.algorithm, file_path, progress_callback)

    if actual != tag.digest:
        logger.error(
            f"Verify integrity failed, expected: {tag.digest}, actual: {actual}"
        )
        return False

    logger.debug(f"{tag.algorithm} digest verified for {file_path}")
    return True
