"""
Core functionality for buildj.

This package contains the foundational modules the toolchain resolver and the
command-line front end depend on.
"""

from .cache import LocalCache

from .config import (
    AuthTokenStore,
    LauncherConfig,
    RegistryEndpoints,
    load_settings,
)

from .directory import (
    ensure_cache_structure,
    get_app_dir,
    get_category_dir,
)

from .download import (
    RegistryClient,
    RegistryRecord,
)

from .exceptions import (
    BuildjError,
    CacheIOError,
    ConfigError,
    ExtractionError,
    RegistryError,
    ToolNotFound,
    UnsupportedAlgorithm,
    UnsupportedArchiveType,
    VerificationError,
    VersionMismatch,
)

from .platform import (
    clear_platform_cache,
    cloud_jdk_names,
    detect_os,
    is_macos_or_linux,
)

from .verification import (
    IntegrityTag,
    compute_digest,
    parse_integrity,
    verify,
)

__all__ = [
    # Cache
    "LocalCache",
    # Config
    "AuthTokenStore",
    "LauncherConfig",
    "RegistryEndpoints",
    "load_settings",
    # Directory
    "ensure_cache_structure",
    "get_app_dir",
    "get_category_dir",
    # Download
    "RegistryClient",
    "RegistryRecord",
    # Exceptions
    "BuildjError",
    "CacheIOError",
    "ConfigError",
    "ExtractionError",
    "RegistryError",
    "ToolNotFound",
    "UnsupportedAlgorithm",
    "UnsupportedArchiveType",
    "VerificationError",
    "VersionMismatch",
    # Platform
    "clear_platform_cache",
    "cloud_jdk_names",
    "detect_os",
    "is_macos_or_linux",
    # Verification
    "IntegrityTag",
    "compute_digest",
    "parse_integrity",
    "verify",
]
