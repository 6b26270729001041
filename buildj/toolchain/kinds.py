"""
Tool kinds known to the launcher.

Each kind carries the per-variant details that would otherwise be scattered
as string comparisons: cache category, home environment variables, the
executable under ``<home>/bin`` and whether downloads land in a per-tool
``<name>-<version>`` directory.
"""

from enum import Enum
from typing import Tuple

from buildj.core.directory import BUILDER_CATEGORY, JDKS_CATEGORY
from buildj.core.platform import JDK_LINUX, OPENJDK_LINUX, OPENJDK_MACOS


class ToolKind(Enum):
    """Closed set of tool kinds."""

    JDK = ("jdk", JDKS_CATEGORY, ("JAVA_HOME",), "java", False)
    MAVEN = ("maven", BUILDER_CATEGORY, ("M2_HOME", "MAVEN_HOME"), "mvn", True)
    GRADLE = ("gradle", BUILDER_CATEGORY, ("GRADLE_HOME",), "gradle", True)

    def __init__(
        self,
        tool_name: str,
        category: str,
        home_variables: Tuple[str, ...],
        executable: str,
        dir_with_name: bool,
    ):
        self.tool_name = tool_name
        self.category = category
        self.home_variables = home_variables
        self.executable = executable
        self.dir_with_name = dir_with_name

    @classmethod
    def builder(cls, name: str) -> "ToolKind":
        """
        Look up a builder kind by name.

        Raises:
            ValueError: If name is not 'maven' or 'gradle'

        Example:
            >>> ToolKind.builder("maven")
            <ToolKind.MAVEN: ...>
        """
        for kind in (cls.MAVEN, cls.GRADLE):
            if kind.tool_name == name:
                return kind
        raise ValueError(f"Unknown builder: {name}")

    @classmethod
    def for_package(cls, name: str) -> "ToolKind":
        """
        Map a registry package name to its kind.

        Cloud JDK packages ('jdk-linux', 'openjdk-linux', 'openjdk-osx') are
        JDKs; everything else must be a builder name.

        Raises:
            ValueError: If name is unknown
        """
        if name in (JDK_LINUX, OPENJDK_LINUX, OPENJDK_MACOS):
            return cls.JDK
        return cls.builder(name)
