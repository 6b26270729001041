"""
Builder (Maven/Gradle) resolution.

Builders are pinned exactly: the registry must report the requested version
or resolution fails.
"""

import logging

from buildj.core.exceptions import ToolNotFound
from buildj.toolchain.kinds import ToolKind
from buildj.toolchain.resolver import InstallationDescriptor, ToolchainResolver

logger = logging.getLogger(__name__)


def resolve_builder(
    resolver: ToolchainResolver, builder: str, version: str
) -> InstallationDescriptor:
    """
    Resolve a builder installation.

    Args:
        resolver: Toolchain resolver
        builder: 'maven' or 'gradle'
        version: Exact version, e.g. '3.5.2'

    Raises:
        ToolNotFound: If the builder is unknown or cannot be found/acquired
        BuildjError: Any acquisition error (registry, verification, ...)
    """
    try:
        ToolKind.builder(builder)
    except ValueError as e:
        raise ToolNotFound(builder, version, str(e)) from e

    descriptor = resolver.resolve(builder, version, strict_version_match=True)
    logger.debug(f"Builder {builder}:{version} home: {descriptor.home_path}")
    return descriptor


def split_builder_spec(spec: str):
    """
    Split a builder spec such as 'maven3.5.2' into ('maven', '3.5.2').

    Raises:
        ValueError: If the spec doesn't start with a known builder name

    Example:
        >>> split_builder_spec("gradle4.10")
        ('gradle', '4.10')
    """
    for kind in (ToolKind.MAVEN, ToolKind.GRADLE):
        if spec.startswith(kind.tool_name):
            return kind.tool_name, spec[len(kind.tool_name) :]
    raise ValueError(f"Unknown builder: {spec}")
