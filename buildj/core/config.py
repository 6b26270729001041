"""
Launcher configuration.

Everything the engine needs to know about the environment it runs in is
collected once, at startup, into a LauncherConfig which is then passed to the
resolver and the registry client:

- Toggles from environment variables (BUILDJ_VERBOSE, BUILDJ_NOAUTH, ...)
- The registry auth token from ~/.standard_config.json
- Optional overrides from ~/.jssp/buildj.yaml
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from filelock import FileLock, Timeout as LockTimeout

from buildj.core.directory import (
    SETTINGS_FILE,
    STANDARD_CONFIG_JSON,
    get_app_dir,
    get_user_home,
)
from buildj.core.exceptions import ConfigError
from buildj.core.filesystem import atomic_write

logger = logging.getLogger(__name__)

ENV_VERBOSE = "BUILDJ_VERBOSE"
ENV_NOAUTH = "BUILDJ_NOAUTH"
ENV_NOBUILDIN = "BUILDJ_NOBUILDIN"
ENV_JAVA = "BUILDJ_JAVA"
ENV_BUILDER = "BUILDJ_BUILDER"

TOOL_PACKAGE_DETAIL_URL = "https://hatter.ink/tool/query_tool_by_name_version.json"
TOOL_PACKAGE_DETAIL_URL_WITHOUT_AUTH = (
    "https://hatter.ink/tool/query_tool_by_name_version_without_auth.json"
)
ARCHIVE_VERSION_URL = "https://hatter.ink/repo/archive_info_version.json"

DEFAULT_TIMEOUT = 30


def _env_flag(environ: Mapping[str, str], name: str) -> bool:
    value = environ.get(name, "").strip().lower()
    return value not in ("", "0", "false", "no", "off")


@dataclass
class RegistryEndpoints:
    """URLs of the tool registry service."""

    query_url: str = TOOL_PACKAGE_DETAIL_URL
    query_url_without_auth: str = TOOL_PACKAGE_DETAIL_URL_WITHOUT_AUTH
    archive_version_url: str = ARCHIVE_VERSION_URL


@dataclass
class LauncherConfig:
    """
    Explicit launcher configuration.

    Attributes:
        verbose: Enable debug logging
        no_auth: Never send the auth token (anonymous registry endpoint)
        no_builtin: Treat ':::'/'...' arguments as plain builder arguments
        java_version: JDK version override for build mode
        builder: Builder override for build mode, e.g. 'maven3.5.2'
        home_dir: User home directory
        cache_base: Root of the toolchain cache (default: ~/.jssp)
        auth_token: Registry auth token, if configured and not disabled
        endpoints: Registry endpoints
        timeout: HTTP connect/read timeout in seconds
    """

    verbose: bool = False
    no_auth: bool = False
    no_builtin: bool = False
    java_version: Optional[str] = None
    builder: Optional[str] = None
    home_dir: Path = field(default_factory=Path.home)
    cache_base: Optional[Path] = None
    auth_token: Optional[str] = None
    endpoints: RegistryEndpoints = field(default_factory=RegistryEndpoints)
    timeout: Optional[float] = DEFAULT_TIMEOUT

    @property
    def cache_dir(self) -> Path:
        """Root of the toolchain cache."""
        return self.cache_base or get_app_dir(self.home_dir)

    @property
    def standard_config_file(self) -> Path:
        return self.home_dir / STANDARD_CONFIG_JSON

    @property
    def settings_file(self) -> Path:
        return get_app_dir(self.home_dir) / SETTINGS_FILE

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        home_dir: Optional[Path] = None,
    ) -> "LauncherConfig":
        """
        Build the configuration from the process environment.

        Args:
            environ: Environment mapping (default: os.environ)
            home_dir: User home (default: detected)

        Raises:
            ConfigError: If the settings file exists but is invalid
        """
        environ = os.environ if environ is None else environ
        home_dir = home_dir or get_user_home()

        config = cls(
            verbose=_env_flag(environ, ENV_VERBOSE),
            no_auth=_env_flag(environ, ENV_NOAUTH),
            no_builtin=_env_flag(environ, ENV_NOBUILDIN),
            java_version=environ.get(ENV_JAVA) or None,
            builder=environ.get(ENV_BUILDER) or None,
            home_dir=home_dir,
        )
        config.apply_settings(load_settings(config.settings_file))

        if not config.no_auth:
            try:
                config.auth_token = AuthTokenStore(config.standard_config_file).get()
            except ConfigError as e:
                logger.debug(f"No registry auth token: {e}")

        return config

    def apply_settings(self, settings: Dict[str, Any]):
        """
        Apply overrides loaded from the YAML settings file.

        Example:
            >>> config.apply_settings({"registry": {"timeout": 60}})
        """
        registry = settings.get("registry") or {}
        cache = settings.get("cache") or {}
        if not isinstance(registry, dict) or not isinstance(cache, dict):
            raise ConfigError(
                "Settings sections 'registry' and 'cache' must be mappings"
            )

        if "query_url" in registry:
            self.endpoints.query_url = str(registry["query_url"])
        if "query_url_without_auth" in registry:
            self.endpoints.query_url_without_auth = str(
                registry["query_url_without_auth"]
            )
        if "archive_version_url" in registry:
            self.endpoints.archive_version_url = str(registry["archive_version_url"])
        if "timeout" in registry:
            timeout = registry["timeout"]
            try:
                self.timeout = float(timeout) if timeout is not None else None
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid registry timeout: {timeout!r}") from e
        if cache.get("base_dir"):
            self.cache_base = Path(str(cache["base_dir"])).expanduser()


def load_settings(settings_file: Path) -> Dict[str, Any]:
    """
    Load the optional YAML settings file.

    Returns:
        Settings dictionary (empty dict if the file doesn't exist)

    Raises:
        ConfigError: If YAML parsing fails or the document is not a mapping
    """
    if not settings_file.exists():
        logger.debug(f"Settings file not found (optional): {settings_file}")
        return {}

    logger.debug(f"Loading settings from {settings_file}")
    try:
        with open(settings_file, "r", encoding="utf-8") as f:
            settings = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {settings_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Read {settings_file} failed: {e}") from e

    settings = settings or {}
    if not isinstance(settings, dict):
        raise ConfigError(f"Settings file {settings_file} must contain a mapping")
    return settings


class AuthTokenStore:
    """
    Read/write accessor for the registry auth token.

    The token lives in a JSON dotfile shared with other tools::

        {"build.js": {"auth_token": "<secret>"}}

    Example:
        >>> store = AuthTokenStore(Path.home() / ".standard_config.json")
        >>> store.set("secret")
        >>> store.get()
        'secret'
    """

    SECTION = "build.js"
    KEY = "auth_token"

    def __init__(self, config_file: Path, lock_timeout: float = 10):
        self.config_file = Path(config_file)
        self.lock_file = self.config_file.with_name(self.config_file.name + ".lock")
        self.lock_timeout = lock_timeout

    def _read(self) -> Dict[str, Any]:
        try:
            content = self.config_file.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Read config {self.config_file} failed: {e}") from e
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Parse config {self.config_file} failed: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config is not a JSON object: {self.config_file}")
        return data

    def get(self) -> str:
        """
        Get the stored token.

        Raises:
            ConfigError: If the file is missing, malformed, or has no token
        """
        section = self._read().get(self.SECTION)
        token = section.get(self.KEY) if isinstance(section, dict) else None
        if token is None:
            raise ConfigError(
                f"Standard json#{self.SECTION}#{self.KEY} is null."
            )
        return str(token)

    def set(self, secret: str):
        """
        Store a token, preserving any other content of the file.

        Raises:
            ConfigError: If the path is not a regular file, the existing
                content is malformed, or the write fails
        """
        try:
            with FileLock(str(self.lock_file), timeout=self.lock_timeout):
                if self.config_file.exists():
                    if not self.config_file.is_file():
                        raise ConfigError(
                            f"Config is not a file: {self.config_file}"
                        )
                    data = self._read()
                else:
                    data = {}

                section = data.get(self.SECTION)
                if not isinstance(section, dict):
                    section = {}
                section[self.KEY] = secret
                data[self.SECTION] = section

                try:
                    atomic_write(self.config_file, json.dumps(data, indent=4))
                except OSError as e:
                    raise ConfigError(
                        f"Write config failed: {self.config_file}, error message: {e}"
                    ) from e
        except LockTimeout as e:
            raise ConfigError(f"Config {self.config_file} is locked: {e}") from e

        logger.debug(f"Auth token written to {self.config_file}")
