"""
JDK location.

A JDK version is located by trying, in order:

1. The macOS ``/usr/libexec/java_home`` utility
2. Unpacked JDKs in the local cache (version prefix match)
3. Cloud JDK packages from the registry, one package name after another

Cloud failures are not fatal: the next package name is tried, and if none
succeeds the JDK is reported as not found.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from buildj.core.exceptions import BuildjError
from buildj.core.platform import cloud_jdk_names, is_macos, is_macos_or_linux
from buildj.toolchain.kinds import ToolKind
from buildj.toolchain.resolver import ToolchainResolver, ToolIdentity

logger = logging.getLogger(__name__)

MACOS_LIBEXEC_JAVAHOME = "/usr/libexec/java_home"


def probe_macos_java_home(version: str) -> Optional[Path]:
    """
    Ask the macOS java_home utility for an installed JDK.

    Returns:
        JDK home, or None when not on macOS or no JVM matches
    """
    if not is_macos():
        return None

    try:
        result = subprocess.run(
            [MACOS_LIBEXEC_JAVAHOME, "-version", version],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.debug(f"Cannot run {MACOS_LIBEXEC_JAVAHOME}: {e}")
        return None

    # e.g. 'Unable to find any JVMs matching version "1.6".'
    if "Unable to find any JVMs" in result.stderr:
        return None

    java_home = result.stdout.strip()
    return Path(java_home) if java_home else None


class JdkLocator:
    """
    Finds or fetches JDK installations.

    Example:
        >>> locator = JdkLocator(ToolchainResolver(config))
        >>> locator.get_java_home("1.8")
        PosixPath('/home/user/.jssp/jdks/jdk1.8.0_202')
    """

    def __init__(self, resolver: ToolchainResolver):
        self.resolver = resolver

    def find_local(self, version: str) -> Optional[Path]:
        """JDK already unpacked in the local cache."""
        descriptor = self.resolver.find_local(ToolIdentity("jdk", version), ToolKind.JDK)
        return descriptor.home_path if descriptor else None

    def fetch_cloud(self, version: str) -> Optional[Path]:
        """
        Try every cloud JDK package for this platform.

        Mismatches between requested and registry versions are tolerated.
        """
        if not is_macos_or_linux():
            return None

        for package_name in cloud_jdk_names():
            try:
                descriptor = self.resolver.resolve(
                    package_name, version, strict_version_match=False
                )
                return descriptor.home_path
            except BuildjError as e:
                logger.debug(f"Cloud JDK {package_name}:{version} unavailable: {e}")

        logger.error(f"Get java failed, version: {version}")
        return None

    def get_java_home(self, version: str) -> Optional[Path]:
        """
        Locate a JDK for version.

        Returns:
            JDK home directory, or None if every strategy failed
        """
        return (
            probe_macos_java_home(version)
            or self.find_local(version)
            or self.fetch_cloud(version)
        )
