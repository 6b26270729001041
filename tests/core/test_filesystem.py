"""
Unit tests for filesystem utilities.

Tests archive extraction via the unzip/tar utilities and safe file
operations.
"""

import shutil
import subprocess
import pytest
from unittest.mock import patch

from buildj.core.exceptions import (
    CacheIOError,
    ExtractionError,
    UnsupportedArchiveType,
)
from buildj.core.filesystem import (
    atomic_write,
    extract_archive,
    extract_command,
    is_relative_to,
    safe_rmtree,
)


class TestExtractCommand:
    def test_zip(self):
        assert extract_command("gradle-4.10-bin.zip") == [
            "unzip",
            "-q",
            "-o",
            "gradle-4.10-bin.zip",
        ]

    def test_tar_gz(self, tmp_path):
        assert extract_command(tmp_path / "jdk.tar.gz") == ["tar", "-xzf", "jdk.tar.gz"]

    @pytest.mark.parametrize("name", ["jdk.tgz", "jdk.tar.xz", "jdk.dmg", "jdk"])
    def test_unsupported(self, name):
        with pytest.raises(UnsupportedArchiveType) as exc_info:
            extract_command(name)
        assert exc_info.value.file_name == name


class TestExtractArchive:
    def test_runs_tool_in_destination(self, tmp_path):
        archive = tmp_path / "apache-maven-3.5.2-bin.tar.gz"
        archive.write_bytes(b"")
        destination = tmp_path / "maven-3.5.2"

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = subprocess.CompletedProcess([], 0, "", "")
            extract_archive(archive, destination)

        cmd = mock_run.call_args[0][0]
        assert cmd == ["tar", "-xzf", str(archive.resolve())]
        assert mock_run.call_args[1]["cwd"] == destination
        assert destination.is_dir()

    def test_non_zero_exit(self, tmp_path):
        archive = tmp_path / "gradle-4.10-bin.zip"
        archive.write_bytes(b"")

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = subprocess.CompletedProcess(
                [], 9, "", "End-of-central-directory signature not found"
            )
            with pytest.raises(ExtractionError, match="exited with 9"):
                extract_archive(archive, tmp_path / "out")

    def test_tool_missing(self, tmp_path):
        archive = tmp_path / "gradle-4.10-bin.zip"
        archive.write_bytes(b"")

        with patch("subprocess.run", side_effect=FileNotFoundError("unzip")):
            with pytest.raises(ExtractionError, match="Cannot run unzip"):
                extract_archive(archive, tmp_path / "out")

    def test_unsupported_type_runs_nothing(self, tmp_path):
        archive = tmp_path / "jdk.7z"
        archive.write_bytes(b"")

        with patch("subprocess.run") as mock_run:
            with pytest.raises(UnsupportedArchiveType):
                extract_archive(archive, tmp_path / "out")
        mock_run.assert_not_called()

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ExtractionError, match="not found"):
            extract_archive(tmp_path / "missing.tar.gz", tmp_path / "out")

    @pytest.mark.skipif(shutil.which("tar") is None, reason="tar not installed")
    def test_real_tar(self, maven_archive, tmp_path):
        destination = tmp_path / "maven-3.5.2"

        extract_archive(maven_archive, destination)

        assert (destination / "apache-maven-3.5.2" / "bin" / "mvn").is_file()


class TestAtomicWrite:
    def test_write_text(self, tmp_path):
        target = tmp_path / "nested" / "config.json"
        atomic_write(target, '{"key": "value"}')
        assert target.read_text() == '{"key": "value"}'

    def test_replace_existing(self, tmp_path):
        target = tmp_path / "config.json"
        target.write_text("old")
        atomic_write(target, b"new")
        assert target.read_bytes() == b"new"
        assert list(tmp_path.iterdir()) == [target]


class TestSafeRmtree:
    def test_remove(self, tmp_path):
        victim = tmp_path / "builder" / "maven-3.5.2"
        victim.mkdir(parents=True)
        safe_rmtree(victim, require_prefix=tmp_path / "builder")
        assert not victim.exists()

    def test_refuses_outside_prefix(self, tmp_path):
        victim = tmp_path / "other"
        victim.mkdir()
        with pytest.raises(ValueError):
            safe_rmtree(victim, require_prefix=tmp_path / "builder")
        assert victim.exists()

    def test_refuses_prefix_itself(self, tmp_path):
        with pytest.raises(ValueError):
            safe_rmtree(tmp_path, require_prefix=tmp_path)

    def test_missing_is_noop(self, tmp_path):
        safe_rmtree(tmp_path / "missing")

    def test_file_rejected(self, tmp_path):
        file = tmp_path / "file"
        file.write_text("")
        with pytest.raises(CacheIOError):
            safe_rmtree(file)


def test_is_relative_to(tmp_path):
    assert is_relative_to(tmp_path / "a" / "b", tmp_path)
    assert not is_relative_to(tmp_path, tmp_path / "a")
