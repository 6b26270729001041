"""Reusable directory structure fixtures for testing.

This module provides pytest fixtures that create an isolated user home and
toolchain cache layouts matching what the launcher expects under ~/.jssp.
"""

import pytest
from pathlib import Path

from buildj.core.config import LauncherConfig


@pytest.fixture
def fake_home(tmp_path) -> Path:
    """
    Create an empty user home directory.

    Returns:
        Path to the fake home (contains nothing, not even .jssp)
    """
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def launcher_config(fake_home) -> LauncherConfig:
    """
    Launcher configuration rooted at the fake home.

    Example:
        def test_cache(launcher_config):
            assert launcher_config.cache_dir.name == ".jssp"
    """
    return LauncherConfig(home_dir=fake_home)


@pytest.fixture
def jdk_cache(launcher_config) -> Path:
    """
    Create a jdks/ cache with a few unpacked JDKs.

    Layout:
        jdks/jdk-11.0.2/bin/java
        jdks/jdk1.8.0_202/bin/java
        jdks/jdk-17.0.1.jdk/Contents/Home/bin/java   (macOS bundle)
        jdks/openjdk-11.0.2_linux-x64_bin.tar.gz      (archive, a file)

    Returns:
        Path to the jdks/ directory
    """
    jdks = launcher_config.cache_dir / "jdks"
    for home in (
        jdks / "jdk-11.0.2",
        jdks / "jdk1.8.0_202",
        jdks / "jdk-17.0.1.jdk" / "Contents" / "Home",
    ):
        (home / "bin").mkdir(parents=True)
        (home / "bin" / "java").write_text("#!/bin/sh\n")
    (jdks / "openjdk-11.0.2_linux-x64_bin.tar.gz").write_bytes(b"archive")
    return jdks


@pytest.fixture
def maven_cache(launcher_config) -> Path:
    """
    Create a builder/ cache holding maven 3.5.2.

    Returns:
        Path to the maven home (builder/maven-3.5.2/apache-maven-3.5.2)
    """
    install_dir = launcher_config.cache_dir / "builder" / "maven-3.5.2"
    home = install_dir / "apache-maven-3.5.2"
    (home / "bin").mkdir(parents=True)
    (home / "bin" / "mvn").write_text("#!/bin/sh\n")
    (install_dir / "apache-maven-3.5.2-bin.tar.gz").write_bytes(b"archive")
    return home
