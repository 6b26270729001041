"""
Java command implementation.

Runs ``java`` from an assigned JDK version::

    buildj :::java1.8 -version
"""

import logging
from typing import List

from buildj.cli.utils import ConsoleProgress, make_resolver, run_command
from buildj.core.config import LauncherConfig
from buildj.core.exceptions import ConfigError, ToolNotFound
from buildj.toolchain.environment import build_environment
from buildj.toolchain.jdk import JdkLocator

logger = logging.getLogger(__name__)

PREFIX = ":::java"


def run(args: List[str], config: LauncherConfig) -> int:
    """
    Run the java command.

    Raises:
        ConfigError: If no version is given
        ToolNotFound: If the JDK cannot be located
    """
    version = args[0][len(PREFIX) :]
    if not version:
        raise ConfigError("Java version is not assigned!")

    progress = ConsoleProgress()
    locator = JdkLocator(make_resolver(config, progress))
    java_home = locator.get_java_home(version)
    progress.end()
    if java_home is None:
        raise ToolNotFound("java", version, "assigned java version not found")

    logger.info(f"Find java home: {java_home}")
    env = build_environment(java_home=java_home)
    return run_command([str(java_home / "bin" / "java")] + args[1:], env)
