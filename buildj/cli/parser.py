"""
buildj command-line front end.

Arguments are not parsed with argparse: everything after the program name is
passed through to the builder, except when the first argument names a
built-in command (``:::<command>`` or ``...<xrun>``).
"""

import importlib
import logging
import sys
from typing import List, Optional

try:
    from importlib.metadata import version

    __version__ = version("buildj")
except Exception:
    __version__ = "0.1.0"

from buildj.cli.utils import print_error
from buildj.core.config import LauncherConfig
from buildj.core.exceptions import BuildjError

logger = logging.getLogger(__name__)

BUILTIN_PREFIX = ":::"
XRUN_PREFIX = "..."

USAGE = """buildj :::                                               - print this message
buildj :::help                                           - print this message
buildj :::version                                        - print version
buildj :::config get|set <secret>                        - get/set registry auth token
buildj :::create --java<version> --maven<version>        - create a maven project build.json
buildj :::create --java<version> --gradle<version>       - create a gradle project build.json
buildj :::java<version> [-version]                       - run java with assigned version
buildj :::maven<version> [--java<version>] [ARGS]        - run maven with assigned version
buildj :::gradle<version> [--java<version>] [ARGS]       - run gradle with assigned version
buildj ...<xRun> [ARGS]                                  - run build.json#xRuns#<xRun>
buildj [::xArgs] [ARGS]                                  - run the builder of build.json

Environment variables:
  BUILDJ_VERBOSE=1       - print debug messages
  BUILDJ_NOAUTH=1        - query the registry anonymously
  BUILDJ_NOBUILDIN=1     - pass ':::' and '...' arguments to the builder
  BUILDJ_JAVA=1.8        - use this java version instead of build.json
  BUILDJ_BUILDER=maven3.5.2 - use this builder instead of build.json"""


class CLI:
    """buildj command-line interface."""

    command_map = {
        "create": "buildj.cli.commands.create",
        "config": "buildj.cli.commands.config",
    }

    prefix_map = {
        "java": "buildj.cli.commands.java",
        "maven": "buildj.cli.commands.builder",
        "gradle": "buildj.cli.commands.builder",
    }

    def __init__(self, config: Optional[LauncherConfig] = None):
        """
        Initialize CLI.

        Args:
            config: Launcher configuration (default: read from the environment
                when run() is called)
        """
        self.config = config

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments after the program name (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        args = list(sys.argv[1:] if args is None else args)

        if self.config is None:
            try:
                self.config = LauncherConfig.from_environment()
            except BuildjError as e:
                self._configure_logging(False)
                print_error(str(e))
                return 1
        config = self.config
        self._configure_logging(config.verbose)

        try:
            if self.is_builtin(args):
                return self._dispatch_builtin(args)
            from buildj.cli.commands import build

            return build.run(args, config)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except BuildjError as e:
            print_error(str(e))
            if config.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def is_builtin(self, args: List[str]) -> bool:
        """Whether the first argument names a built-in command."""
        if not args or self.config.no_builtin:
            return False
        return args[0].startswith(BUILTIN_PREFIX) or args[0].startswith(XRUN_PREFIX)

    def _configure_logging(self, verbose: bool):
        """
        Configure logging.

        Args:
            verbose: Enable debug output
        """
        if verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(level=level, format=format_str, force=True)

    def _dispatch_builtin(self, args: List[str]) -> int:
        """
        Dispatch to the built-in command named by args[0].

        Returns:
            Exit code from command handler
        """
        first = args[0]
        if first.startswith(XRUN_PREFIX):
            from buildj.cli.commands import xrun

            return xrun.run(args, self.config)

        command = first[len(BUILTIN_PREFIX) :]
        if command in ("", "help"):
            print_usage()
            return 0
        if command == "version":
            print(f"buildj {__version__}")
            return 0

        module_name = self.command_map.get(command)
        if module_name:
            return importlib.import_module(module_name).run(args, self.config)

        for prefix, module_name in self.prefix_map.items():
            if command.startswith(prefix):
                module = importlib.import_module(module_name)
                if module_name.endswith(".builder"):
                    return module.run(args, self.config, prefix)
                return module.run(args, self.config)

        print_error(f"Unknown args: {' '.join(args)}")
        return 1


def print_usage():
    """Print usage text to stdout."""
    print(f"buildj {__version__}")
    print()
    print(USAGE)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
