"""
Project manifest (build.json) handling.

A project pins its toolchain in a build.json file::

    {
        "java": "1.8",
        "builder": {"name": "maven", "version": "3.5.2"},
        "envs": [["MAVEN_OPTS", "-Xmx1g"]],
        "xArgs": {"ci": ["clean", "install", "-DskipTests"]},
        "xRuns": {"fmt": ["google-java-format", "-i"]},
        "repo": {"dependencies": ["me.hatter:commons:3.0"]}
    }

The BUILDJ_JAVA/BUILDJ_BUILDER environment variables, when set, replace the
file entirely.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from buildj.core.config import LauncherConfig
from buildj.core.download import RegistryClient
from buildj.core.exceptions import ConfigError, RegistryError
from buildj.core.filesystem import atomic_write
from buildj.toolchain.builder import split_builder_spec

logger = logging.getLogger(__name__)

BUILD_JSON = "build.json"
MAX_PARENT_LEVELS = 100
COMMONS_GROUP_ID = "me.hatter"
COMMONS_ARTIFACT_ID = "commons"


@dataclass
class BuildManifest:
    """Parsed build.json."""

    data: Dict[str, Any] = field(default_factory=dict)
    path: Optional[Path] = None
    """None when the manifest comes from environment variables"""

    @property
    def java_version(self) -> Optional[str]:
        java = self.data.get("java")
        return str(java) if java is not None else None

    @property
    def builder_name(self) -> Optional[str]:
        builder = self.data.get("builder")
        if isinstance(builder, dict) and builder.get("name") is not None:
            return str(builder["name"])
        return None

    @property
    def builder_version(self) -> Optional[str]:
        builder = self.data.get("builder")
        if isinstance(builder, dict) and builder.get("version") is not None:
            return str(builder["version"])
        return None

    @property
    def envs(self) -> List[Tuple[str, str]]:
        """
        'envs' entries as (key, value) pairs.

        Entries that are not a pair of strings are skipped.
        """
        pairs = []
        for entry in self.data.get("envs") or []:
            if (
                isinstance(entry, list)
                and len(entry) >= 2
                and isinstance(entry[0], str)
                and isinstance(entry[1], str)
            ):
                pairs.append((entry[0], entry[1]))
            else:
                logger.debug(f"Skip env entry: {entry!r}")
        return pairs

    def x_args(self, name: str) -> Optional[List[str]]:
        """
        Expansion of '::name', or None if not defined.

        Raises:
            ConfigError: If the entry is not a list
        """
        x_args = self.data.get("xArgs")
        if not isinstance(x_args, dict) or x_args.get(name) is None:
            return None
        entry = _list_entry("xArgs", name, x_args[name])
        return [str(a) for a in entry if a is not None]

    def x_run(self, name: str) -> Optional[List[str]]:
        """
        Command vector of '...name', or None if not defined.

        Raises:
            ConfigError: If the entry is not a list
        """
        x_runs = self.data.get("xRuns")
        if not isinstance(x_runs, dict) or not x_runs.get(name):
            return None
        return [str(a) for a in _list_entry("xRuns", name, x_runs[name])]

    def require_toolchain(self) -> Tuple[str, str, str]:
        """
        Get (java_version, builder_name, builder_version).

        Raises:
            ConfigError: If any of them is missing
        """
        if self.java_version is None:
            raise ConfigError("Java version is not assigned!")
        if self.builder_name is None or self.builder_version is None:
            raise ConfigError("Builder name or version is not assigned!")
        return self.java_version, self.builder_name, self.builder_version


def _list_entry(section: str, name: str, value: Any) -> List[Any]:
    if not isinstance(value, list):
        raise ConfigError(
            f"{BUILD_JSON} {section}#{name} must be a list, got {type(value).__name__}"
        )
    return value


def manifest_from_config(config: LauncherConfig) -> Optional[BuildManifest]:
    """
    Build a manifest from BUILDJ_JAVA/BUILDJ_BUILDER overrides.

    Returns:
        Manifest, or None when neither variable is set
    """
    if not config.java_version and not config.builder:
        return None

    data: Dict[str, Any] = {}
    if config.java_version:
        data["java"] = config.java_version
    if config.builder:
        try:
            name, version = split_builder_spec(config.builder)
            data["builder"] = {"name": name, "version": version}
        except ValueError:
            logger.warning(f"Unknown builder: {config.builder}")

    logger.debug(f"Use env configed build.json: {json.dumps(data)}")
    logger.info("Find build.json @ENV")
    return BuildManifest(data=data)


def find_build_json(start: Optional[Path] = None) -> Optional[Path]:
    """
    Find build.json in start or its nearest parent.

    At most MAX_PARENT_LEVELS directories are examined.
    """
    current = (start or Path.cwd()).resolve()
    candidate = current / BUILD_JSON
    if candidate.exists():
        return candidate

    for _ in range(MAX_PARENT_LEVELS):
        if current.parent == current:
            return None
        current = current.parent
        candidate = current / BUILD_JSON
        if candidate.exists():
            logger.warning(
                f"Cannot find {BUILD_JSON} in current dir, find: {candidate}"
            )
            return candidate

    logger.error(f"Find {BUILD_JSON} loop more than {MAX_PARENT_LEVELS} loop!")
    return None


def load_manifest(path: Path) -> BuildManifest:
    """
    Load build.json.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Read {BUILD_JSON} failed: {e}") from e
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Parse JSON failed: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return BuildManifest(data=data, path=path)


def read_manifest(config: LauncherConfig, cwd: Optional[Path] = None) -> BuildManifest:
    """
    Get the manifest for this invocation (environment first, then build.json).

    Raises:
        ConfigError: If no manifest can be found or loaded
    """
    manifest = manifest_from_config(config)
    if manifest is not None:
        return manifest

    path = find_build_json(cwd)
    if path is None:
        raise ConfigError(f"Cannot find {BUILD_JSON}")
    logger.info(f"Find {BUILD_JSON} @ {path}")
    return load_manifest(path)


def final_args(args: List[str], manifest: BuildManifest) -> List[str]:
    """
    Compute builder arguments, expanding a leading '::name' through xArgs.

    Args:
        args: Command-line arguments after the program name
        manifest: Project manifest

    Raises:
        ConfigError: If '::name' is unknown and is the only argument

    Example:
        >>> final_args(["::ci", "-X"], manifest)
        ['clean', 'install', '-DskipTests', '-X']
    """
    if not args:
        return []

    first, rest = args[0], list(args[1:])
    if not first.startswith("::"):
        return [first] + rest

    expansion = manifest.x_args(first[2:])
    if expansion is not None:
        return expansion + rest

    logger.warning(f"xArgs argument not found: {first[2:]}")
    if not rest:
        raise ConfigError("Only one xArgs argument, exit.")
    return [first] + rest


def parse_create_args(args: List[str]) -> Tuple[str, str, str]:
    """
    Parse ':::create' arguments.

    Returns:
        (java_version, builder_name, builder_version)

    Raises:
        ConfigError: If any of them is missing

    Example:
        >>> parse_create_args(["--java1.8", "--maven3.5.2"])
        ('1.8', 'maven', '3.5.2')
    """
    java_version = builder = builder_version = ""
    for arg in args:
        if arg.startswith("--java") and len(arg) > 6:
            java_version = arg[6:]
        elif arg.startswith("--maven") and len(arg) > 7:
            builder, builder_version = "maven", arg[7:]
        elif arg.startswith("--gradle") and len(arg) > 8:
            builder, builder_version = "gradle", arg[8:]

    if not java_version or not builder or not builder_version:
        raise ConfigError(
            "Args java version, builder or builder version is not assigned or format error."
        )
    return java_version, builder, builder_version


def create_build_json(
    directory: Path,
    java_version: str,
    builder: str,
    builder_version: str,
    client: Optional[RegistryClient] = None,
) -> Path:
    """
    Write a new build.json.

    The latest me.hatter:commons version is added as a dependency when the
    registry can be reached; failure to look it up is only logged.

    Raises:
        ConfigError: If build.json already exists or cannot be written
    """
    path = directory / BUILD_JSON
    if path.exists():
        raise ConfigError(f"File exists: {BUILD_JSON}")

    data: Dict[str, Any] = {
        "java": java_version,
        "builder": {"name": builder, "version": builder_version},
    }

    if client is not None:
        try:
            version = client.query_archive_version(COMMONS_GROUP_ID, COMMONS_ARTIFACT_ID)
            data["repo"] = {
                "dependencies": [f"{COMMONS_GROUP_ID}:{COMMONS_ARTIFACT_ID}:{version}"]
            }
        except RegistryError as e:
            logger.error(
                f"Get {COMMONS_GROUP_ID}:{COMMONS_ARTIFACT_ID} version failed: {e}"
            )

    try:
        atomic_write(path, json.dumps(data, indent=4))
    except OSError as e:
        raise ConfigError(
            f"Write file failed: {BUILD_JSON}, error message: {e}"
        ) from e

    logger.info(f"Write file success: {BUILD_JSON}")
    return path
