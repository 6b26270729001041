"""
Config command implementation.

Reads or writes the registry auth token::

    buildj :::config get
    buildj :::config set <secret>
"""

import logging
from typing import List

from buildj.cli.utils import print_error, print_warning
from buildj.core.config import AuthTokenStore, LauncherConfig
from buildj.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def run(args: List[str], config: LauncherConfig) -> int:
    """
    Run the config command.

    Returns:
        Exit code (0 for success)
    """
    if len(args) < 2:
        print_error("No arguments, get or set.")
        return 1

    store = AuthTokenStore(config.standard_config_file)
    action = args[1]

    if action == "get":
        try:
            secret = store.get()
        except ConfigError as e:
            logger.debug(f"Read auth token failed: {e}")
            print_warning("No config found.")
            return 1
        print(f"Config secret: {secret}")
        return 0

    if action == "set":
        if len(args) < 3:
            print_error("Need secret for set, :::config set <secret>")
            return 1
        try:
            store.set(args[2])
        except ConfigError as e:
            print_error(f"Config secret failed: {e}")
            return 1
        logger.info("Config secret success.")
        return 0

    print_error(f"Unknown argument: {action}")
    return 1
