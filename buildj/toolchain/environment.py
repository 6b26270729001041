"""
Child process environment composition.

Overrides are applied in order on top of a base environment:
- PATH overrides are prepended so the resolved toolchain wins over system
  installations
- Every other override replaces the existing value; later overrides win
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from buildj.toolchain.kinds import ToolKind
from buildj.toolchain.resolver import InstallationDescriptor

PATH_VARIABLE = "PATH"


@dataclass(frozen=True)
class EnvOverride:
    """A single environment contribution."""

    key: str
    value: str
    prepend_path: bool = False

    @classmethod
    def path_prefix(cls, directory: Union[str, Path]) -> "EnvOverride":
        return cls(PATH_VARIABLE, str(directory), prepend_path=True)


def compose(
    base_env: Mapping[str, str], overrides: Iterable[EnvOverride]
) -> Dict[str, str]:
    """
    Apply overrides to a copy of base_env.

    Args:
        base_env: Starting environment (not modified)
        overrides: Ordered overrides

    Returns:
        New environment mapping

    Example:
        >>> env = compose({"PATH": "/usr/bin"}, [EnvOverride.path_prefix("/x/bin")])
        >>> env["PATH"]
        '/x/bin:/usr/bin'
    """
    env = dict(base_env)
    for override in overrides:
        if override.prepend_path:
            existing = env.get(override.key)
            if existing:
                env[override.key] = f"{override.value}{os.pathsep}{existing}"
            else:
                env[override.key] = override.value
        else:
            env[override.key] = override.value
    return env


def java_overrides(java_home: Union[str, Path]) -> List[EnvOverride]:
    """PATH prefix and JAVA_HOME for a JDK installation."""
    java_home = Path(java_home)
    overrides = [EnvOverride.path_prefix(java_home / "bin")]
    overrides.extend(
        EnvOverride(name, str(java_home)) for name in ToolKind.JDK.home_variables
    )
    return overrides


def home_overrides(descriptor: InstallationDescriptor) -> List[EnvOverride]:
    """Every home-variable alias of the descriptor's kind, set to its home."""
    return [
        EnvOverride(name, str(descriptor.home_path))
        for name in descriptor.home_variables
    ]


def plain_overrides(pairs: Sequence[Tuple[str, str]]) -> List[EnvOverride]:
    """Plain key/value overrides (e.g. build.json 'envs')."""
    return [EnvOverride(key, value) for key, value in pairs]


def build_environment(
    java_home: Optional[Union[str, Path]] = None,
    builder: Optional[InstallationDescriptor] = None,
    extra: Sequence[Tuple[str, str]] = (),
    base_env: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Compose the full environment for running a toolchain.

    Args:
        java_home: Resolved JDK home, if any
        builder: Resolved builder installation, if any
        extra: Additional plain values, applied last
        base_env: Starting environment (default: os.environ)
    """
    overrides: List[EnvOverride] = []
    if java_home is not None:
        overrides.extend(java_overrides(java_home))
    if builder is not None:
        overrides.extend(home_overrides(builder))
    overrides.extend(plain_overrides(extra))
    return compose(os.environ if base_env is None else base_env, overrides)
