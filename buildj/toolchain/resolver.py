"""
Toolchain resolution and acquisition.

This module orchestrates the resolution of a (tool, version) pair into an
installation on disk, coordinating the local cache, the registry client, the
digest verifier and archive extraction.

Resolution states::

    CHECK_LOCAL -> DONE                                   (cache hit)
    CHECK_LOCAL -> QUERY_REGISTRY -> DOWNLOAD -> VERIFY -> EXTRACT -> DONE
                   any step from QUERY_REGISTRY on       -> FAILED
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Set

from buildj.core.cache import LocalCache
from buildj.core.config import LauncherConfig
from buildj.core.directory import get_category_dir
from buildj.core.download import RegistryClient, RegistryRecord
from buildj.core.exceptions import (
    BuildjError,
    CacheIOError,
    ToolNotFound,
    VerificationError,
    VersionMismatch,
)
from buildj.core.filesystem import extract_archive
from buildj.core.platform import is_macos_or_linux
from buildj.core.progress import ProgressCallback
from buildj.core.verification import verify
from buildj.toolchain.kinds import ToolKind

logger = logging.getLogger(__name__)


class ResolutionState(Enum):
    """Where a resolution request currently is (or ended)."""

    CHECK_LOCAL = "check_local"
    QUERY_REGISTRY = "query_registry"
    DOWNLOAD = "download"
    VERIFY = "verify"
    EXTRACT = "extract"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ToolIdentity:
    """Requested toolchain."""

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}:{self.version}"


@dataclass(frozen=True)
class InstallationDescriptor:
    """
    A resolved installation.

    The descriptor is reconstructed from the cache directory on every
    resolution; it has no lifecycle beyond the directory on disk.
    """

    kind: ToolKind
    home_path: Path
    binary_path: Optional[Path] = None

    @property
    def binary(self) -> Path:
        """Executable to run (default: <home>/bin/<executable>)."""
        if self.binary_path is not None:
            return self.binary_path
        return self.home_path / "bin" / self.kind.executable

    @property
    def home_variables(self):
        return self.kind.home_variables


class ToolchainResolver:
    """
    Resolves toolchains, fetching them from the registry on cache miss.

    Example:
        >>> config = LauncherConfig.from_environment()
        >>> resolver = ToolchainResolver(config)
        >>> maven = resolver.resolve("maven", "3.5.2", strict_version_match=True)
        >>> print(maven.binary)
        /home/user/.jssp/builder/maven-3.5.2/apache-maven-3.5.2/bin/mvn
    """

    def __init__(
        self,
        config: Optional[LauncherConfig] = None,
        client: Optional[RegistryClient] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Initialize resolver.

        Args:
            config: Launcher configuration (default: built-in defaults)
            client: Registry client (default: one built from config)
            progress_callback: Optional callback(label, done, total) used for
                download and digest progress
        """
        self.config = config or LauncherConfig()
        self.client = client or RegistryClient(self.config)
        self.progress_callback = progress_callback
        self.last_state: Optional[ResolutionState] = None

    def cache_for(self, kind: ToolKind) -> LocalCache:
        """Cache holding installations of kind."""
        return LocalCache(get_category_dir(kind.category, self.config.cache_dir))

    # ------------------------------------------------------------------
    # Local lookup
    # ------------------------------------------------------------------

    def find_local(
        self, identity: ToolIdentity, kind: ToolKind
    ) -> Optional[InstallationDescriptor]:
        """
        Look up an installation in the local cache only.

        Builders are looked up by their deterministic ``<name>-<version>``
        directory; JDKs by version prefix over the unpacked ``jdk*``
        directories.
        """
        cache = self.cache_for(kind)

        if not kind.dir_with_name:
            home = cache.find_jdk_home(identity.version)
            return InstallationDescriptor(kind, home) if home else None

        if not cache.exists(identity.name, identity.version):
            return None

        install_dir = cache.path_for(identity.name, identity.version)
        home = cache.first_subdirectory(install_dir)
        if home is None:
            logger.error(f"Cannot find builder home in: {install_dir}")
            return None
        return InstallationDescriptor(kind, home)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(
        self, name: str, version: str, strict_version_match: bool = True
    ) -> InstallationDescriptor:
        """
        Resolve a toolchain, acquiring it from the registry on cache miss.

        Args:
            name: Tool name ('maven', 'gradle') or cloud JDK package name
                ('jdk-linux', 'openjdk-linux', 'openjdk-osx')
            version: Requested version string
            strict_version_match: Require the registry's canonical version to
                equal version exactly

        Returns:
            InstallationDescriptor

        Raises:
            ToolNotFound: If no installation can be found or acquired
            RegistryError: If the registry query or download fails
            VersionMismatch: If strict matching fails
            VerificationError: If the package fails integrity verification
            ExtractionError: If the archive cannot be extracted
            CacheIOError: If cache directories cannot be created
        """
        try:
            kind = ToolKind.for_package(name)
        except ValueError as e:
            raise ToolNotFound(name, version, str(e)) from e

        identity = ToolIdentity(name, version)
        self.last_state = ResolutionState.CHECK_LOCAL

        descriptor = self.find_local(identity, kind)
        if descriptor is not None:
            logger.debug(f"Cache hit for {identity}: {descriptor.home_path}")
            self.last_state = ResolutionState.DONE
            return descriptor

        if not is_macos_or_linux():
            self.last_state = ResolutionState.FAILED
            raise ToolNotFound(
                name, version, "cloud packages are only available on macOS/Linux"
            )

        try:
            target_dir = self._acquire(identity, kind, strict_version_match)
        except BuildjError:
            self.last_state = ResolutionState.FAILED
            raise

        descriptor = self._installed(identity, kind, target_dir)
        if descriptor is None:
            self.last_state = ResolutionState.FAILED
            raise ToolNotFound(name, version, "nothing usable was extracted")

        self.last_state = ResolutionState.DONE
        return descriptor

    def _installed(
        self, identity: ToolIdentity, kind: ToolKind, target_dir: Path
    ) -> Optional[InstallationDescriptor]:
        """Re-derive the descriptor from what extraction produced."""
        cache = self.cache_for(kind)
        if kind.dir_with_name:
            home = cache.first_subdirectory(target_dir)
        else:
            home = cache.find_jdk_home(identity.version)
        return InstallationDescriptor(kind, home) if home else None

    def _acquire(self, identity: ToolIdentity, kind: ToolKind, strict: bool) -> Path:
        """
        Query, download, verify and extract a package into the cache.

        Returns:
            Directory the archive was extracted into
        """
        cache = self.cache_for(kind)

        self.last_state = ResolutionState.QUERY_REGISTRY
        record = self.client.query_tool(
            identity.name, identity.version, auth_token=self.config.auth_token
        )

        if strict and record.canonical_version != identity.version:
            raise VersionMismatch(
                identity.name, identity.version, record.canonical_version
            )

        if kind.dir_with_name:
            target_dir = cache.path_for(identity.name, identity.version)
        else:
            target_dir = cache.base_dir
        created = not target_dir.exists()
        cache.ensure_directory(target_dir)
        existing = self._entries(target_dir)

        archive_path = target_dir / Path(record.name).name
        try:
            self._download_verify_extract(record, archive_path, target_dir)
        except BuildjError:
            if kind.dir_with_name:
                if created:
                    self._discard(cache, target_dir)
            else:
                archive_path.unlink(missing_ok=True)
                for entry in self._entries(target_dir) - existing:
                    if entry.is_dir():
                        self._discard(cache, entry)
            raise
        return target_dir

    def _download_verify_extract(
        self, record: RegistryRecord, archive_path: Path, target_dir: Path
    ):
        self.last_state = ResolutionState.DOWNLOAD
        logger.info(f"Start download: {record.url} -> {archive_path}")
        self.client.download(
            record.url, archive_path, progress_callback=self.progress_callback
        )

        self.last_state = ResolutionState.VERIFY
        logger.info(f"Start verify integrity: {archive_path} ...")
        if not verify(record.integrity, archive_path, self.progress_callback):
            archive_path.unlink(missing_ok=True)
            raise VerificationError(
                f"Integrity verification failed for {archive_path.name}"
            )
        logger.info("Verify integrity success.")

        self.last_state = ResolutionState.EXTRACT
        logger.info(f"Start extract file: {archive_path}")
        extract_archive(archive_path, target_dir)

    @staticmethod
    def _entries(directory: Path) -> Set[Path]:
        return set(directory.iterdir())

    def _discard(self, cache: LocalCache, target_dir: Path):
        try:
            cache.discard(target_dir)
        except CacheIOError as e:
            logger.warning(f"Failed to remove partial installation: {e}")
