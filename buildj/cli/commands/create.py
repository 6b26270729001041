"""
Create command implementation.

Writes a build.json pinning a JDK and a builder::

    buildj :::create --java1.8 --maven3.5.2
"""

import logging
from pathlib import Path
from typing import List

from buildj.core.config import LauncherConfig
from buildj.core.download import RegistryClient
from buildj.project.manifest import create_build_json, parse_create_args

logger = logging.getLogger(__name__)


def run(args: List[str], config: LauncherConfig) -> int:
    """
    Run the create command.

    Raises:
        ConfigError: If arguments are incomplete or build.json exists
    """
    java_version, builder, builder_version = parse_create_args(args[1:])
    logger.debug(f"Create build.json: java {java_version}, {builder} {builder_version}")
    create_build_json(
        Path.cwd(), java_version, builder, builder_version, RegistryClient(config)
    )
    return 0
