"""
Build command implementation.

Runs the project's pinned builder with the pinned JDK. This is what a plain
``buildj [ARGS...]`` does.
"""

import logging
from typing import List

from buildj.cli.utils import ConsoleProgress, log_environment, make_resolver, run_command
from buildj.core.config import LauncherConfig
from buildj.core.directory import ensure_cache_structure
from buildj.core.exceptions import ToolNotFound
from buildj.project.manifest import final_args, read_manifest
from buildj.toolchain.builder import resolve_builder
from buildj.toolchain.environment import build_environment
from buildj.toolchain.jdk import JdkLocator

logger = logging.getLogger(__name__)


def run(args: List[str], config: LauncherConfig) -> int:
    """
    Run the build.

    Args:
        args: Arguments after the program name
        config: Launcher configuration

    Returns:
        Builder exit code

    Raises:
        ConfigError: If the manifest is missing or incomplete
        BuildjError: If the JDK or builder cannot be resolved
    """
    ensure_cache_structure(config.cache_dir)

    manifest = read_manifest(config)
    java_version, builder_name, builder_version = manifest.require_toolchain()
    logger.debug(f"Java version: {java_version}")
    logger.debug(f"Builder name: {builder_name}")
    logger.debug(f"Builder version: {builder_version}")

    progress = ConsoleProgress()
    resolver = make_resolver(config, progress)

    java_home = JdkLocator(resolver).get_java_home(java_version)
    progress.end()
    if java_home is None:
        raise ToolNotFound("java", java_version, "assigned java version not found")

    descriptor = resolve_builder(resolver, builder_name, builder_version)
    progress.end()

    logger.info(f"JAVA_HOME    = {java_home}")
    logger.info(f"BUILDER_HOME = {descriptor.home_path}")

    env = build_environment(
        java_home=java_home, builder=descriptor, extra=manifest.envs
    )
    builder_args = final_args(args, manifest)
    logger.debug(f"Final arguments: {builder_args}")
    log_environment(env)

    return run_command([str(descriptor.binary)] + builder_args, env)
