"""
Builder command implementation.

Runs an assigned Maven or Gradle version, optionally with a JDK::

    buildj :::maven3.5.2 --java1.8 clean install
    buildj :::gradle4.10 build
"""

import logging
from typing import List

from buildj.cli.utils import ConsoleProgress, log_environment, make_resolver, run_command
from buildj.core.config import LauncherConfig
from buildj.core.exceptions import ConfigError, ToolNotFound
from buildj.toolchain.builder import resolve_builder
from buildj.toolchain.environment import build_environment
from buildj.toolchain.jdk import JdkLocator

logger = logging.getLogger(__name__)

JAVA_OPTION = "--java"


def run(args: List[str], config: LauncherConfig, builder: str) -> int:
    """
    Run a builder command.

    Args:
        args: Arguments after the program name; args[0] is ':::<builder><version>'
        config: Launcher configuration
        builder: 'maven' or 'gradle'

    Raises:
        ConfigError: If a version is missing
        ToolNotFound: If the JDK or builder cannot be located
    """
    version = args[0][len(":::" + builder) :]
    if not version:
        raise ConfigError("Builder version is not assigned!")

    rest = args[1:]
    java_version = None
    if rest and rest[0].startswith(JAVA_OPTION):
        java_version = rest[0][len(JAVA_OPTION) :]
        rest = rest[1:]
        if not java_version:
            raise ConfigError("Java version is not assigned!")

    progress = ConsoleProgress()
    resolver = make_resolver(config, progress)

    java_home = None
    if java_version:
        java_home = JdkLocator(resolver).get_java_home(java_version)
        progress.end()
        if java_home is None:
            raise ToolNotFound("java", java_version, "assigned java version not found")
        logger.info(f"JAVA_HOME    = {java_home}")

    descriptor = resolve_builder(resolver, builder, version)
    progress.end()
    logger.info(f"BUILDER_HOME = {descriptor.home_path}")

    env = build_environment(java_home=java_home, builder=descriptor)
    log_environment(env)
    return run_command([str(descriptor.binary)] + rest, env)
