"""
xRun command implementation.

Runs a command vector declared in build.json#xRuns::

    buildj ...fmt src/
"""

import logging
from typing import List

from buildj.cli.utils import run_command
from buildj.core.config import LauncherConfig
from buildj.core.exceptions import ConfigError
from buildj.project.manifest import read_manifest
from buildj.toolchain.environment import build_environment

logger = logging.getLogger(__name__)

PREFIX = "..."


def run(args: List[str], config: LauncherConfig) -> int:
    """
    Run an xRun entry with extra arguments appended.

    Raises:
        ConfigError: If the manifest or the xRuns entry is missing
    """
    name = args[0][len(PREFIX) :]
    manifest = read_manifest(config)
    command = manifest.x_run(name)
    if command is None:
        raise ConfigError(f"Cannot find build.json#xRuns#{name}")

    cmd = command + args[1:]
    return run_command(cmd, build_environment(extra=manifest.envs))
