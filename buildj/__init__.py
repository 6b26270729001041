"""
buildj - Java toolchain launcher.

Resolves the JDK and the Maven/Gradle version a project pins in its
build.json, fetches and verifies them from the tool registry when they are
not cached under ~/.jssp, and runs the build with the matching environment.
"""

__version__ = "0.1.0"
