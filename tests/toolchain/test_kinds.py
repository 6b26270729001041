"""
Unit tests for tool kinds.
"""

import pytest

from buildj.toolchain.kinds import ToolKind


class TestToolKind:
    def test_home_variables(self):
        assert ToolKind.JDK.home_variables == ("JAVA_HOME",)
        assert ToolKind.MAVEN.home_variables == ("M2_HOME", "MAVEN_HOME")
        assert ToolKind.GRADLE.home_variables == ("GRADLE_HOME",)

    def test_executables(self):
        assert ToolKind.MAVEN.executable == "mvn"
        assert ToolKind.GRADLE.executable == "gradle"
        assert ToolKind.JDK.executable == "java"

    def test_categories(self):
        assert ToolKind.JDK.category == "jdks"
        assert ToolKind.MAVEN.category == "builder"
        assert not ToolKind.JDK.dir_with_name

    def test_builder_lookup(self):
        assert ToolKind.builder("gradle") is ToolKind.GRADLE

    def test_unknown_builder(self):
        with pytest.raises(ValueError, match="Unknown builder: ant"):
            ToolKind.builder("ant")

    @pytest.mark.parametrize("name", ["jdk-linux", "openjdk-linux", "openjdk-osx"])
    def test_cloud_jdk_packages(self, name):
        assert ToolKind.for_package(name) is ToolKind.JDK

    def test_jdk_is_not_a_builder(self):
        with pytest.raises(ValueError):
            ToolKind.builder("jdk")
