"""
Toolchain resolution for buildj.

Turns a (tool, version) pair into an installation on disk and composes the
child-process environment for it.
"""

from .builder import resolve_builder, split_builder_spec
from .environment import EnvOverride, build_environment, compose
from .jdk import JdkLocator
from .kinds import ToolKind
from .resolver import (
    InstallationDescriptor,
    ResolutionState,
    ToolchainResolver,
    ToolIdentity,
)

__all__ = [
    "EnvOverride",
    "InstallationDescriptor",
    "JdkLocator",
    "ResolutionState",
    "ToolIdentity",
    "ToolKind",
    "ToolchainResolver",
    "build_environment",
    "compose",
    "resolve_builder",
    "split_builder_spec",
]
