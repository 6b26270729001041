"""
Centralized exception hierarchy for buildj.

Every failure raised by the resolution engine derives from BuildjError so
callers can decide between aborting the build and falling back to another
strategy.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class BuildjError(Exception):
    """Base exception for all buildj errors."""

    pass


class ConfigError(BuildjError):
    """Raised when a configuration file or project manifest is unusable."""

    pass


# ============================================================================
# Registry Exceptions
# ============================================================================


class RegistryError(BuildjError):
    """Network, HTTP, or payload failure while talking to the tool registry."""

    pass


# ============================================================================
# Verification Exceptions
# ============================================================================


class VerificationError(BuildjError):
    """Raised when a downloaded package fails integrity verification."""

    pass


class UnsupportedAlgorithm(VerificationError):
    """Integrity tag names an algorithm outside md5/sha1/sha256/sha512."""

    def __init__(self, integrity: str):
        self.integrity = integrity
        super().__init__(f"Not supported integrity: {integrity}")


# ============================================================================
# Resolution Exceptions
# ============================================================================


class VersionMismatch(BuildjError):
    """Registry returned a different version than the one pinned."""

    def __init__(self, name: str, requested: str, actual: str):
        self.name = name
        self.requested = requested
        self.actual = actual
        super().__init__(
            f"Required version not match, {name}: {requested} vs {actual}"
        )


class ToolNotFound(BuildjError):
    """Raised when every resolution strategy is exhausted."""

    def __init__(self, name: str, version: str, reason: str = ""):
        self.name = name
        self.version = version
        msg = f"Tool not found: {name}, version: {version}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ============================================================================
# Cache / Filesystem Exceptions
# ============================================================================


class ExtractionError(BuildjError):
    """Archive extraction failed."""

    pass


class UnsupportedArchiveType(ExtractionError):
    """Archive suffix is neither .zip nor .tar.gz."""

    def __init__(self, file_name: str):
        self.file_name = file_name
        super().__init__(f"Unknown file type: {file_name}")


class CacheIOError(BuildjError):
    """Cache directory could not be created, read, or cleaned."""

    pass
