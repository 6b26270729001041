"""
Platform detection for buildj.

Only the operating system matters here: it decides whether cloud packages
can be installed at all and which JDK package names the registry offers.
"""

import functools
import platform
from typing import List

OPENJDK_MACOS = "openjdk-osx"
JDK_LINUX = "jdk-linux"
OPENJDK_LINUX = "openjdk-linux"


@functools.lru_cache(maxsize=1)
def detect_os() -> str:
    """
    Detect the current operating system.

    Returns:
        'macos', 'linux', 'windows', or the lowercased platform.system() value

    Example:
        >>> detect_os()
        'linux'
    """
    system = platform.system().lower()
    if system == "darwin":
        return "macos"
    return system


def is_macos() -> bool:
    return detect_os() == "macos"


def is_linux() -> bool:
    return detect_os() == "linux"


def is_macos_or_linux() -> bool:
    """Cloud packages are only published for macOS and Linux."""
    return detect_os() in ("macos", "linux")


def cloud_jdk_names(os_name: str = "") -> List[str]:
    """
    Registry package names to try, in order, when fetching a JDK.

    Args:
        os_name: Operating system (default: detected)

    Example:
        >>> cloud_jdk_names("linux")
        ['jdk-linux', 'openjdk-linux']
    """
    os_name = os_name or detect_os()
    if os_name == "macos":
        return [OPENJDK_MACOS]
    if os_name == "linux":
        return [JDK_LINUX, OPENJDK_LINUX]
    return []


def clear_platform_cache():
    """Clear cached detection (used by tests)."""
    detect_os.cache_clear()
