"""Tests for CLI utility functions."""

import io
import subprocess
from unittest.mock import patch

from buildj.cli.utils import (
    ConsoleProgress,
    log_environment,
    make_resolver,
    print_error,
    print_warning,
    run_command,
)
from buildj.toolchain.resolver import ToolchainResolver


class TestPrinting:
    def test_print_error(self, capsys):
        print_error("Cannot find build.json", "looked in /project")
        err = capsys.readouterr().err
        assert "ERROR: Cannot find build.json" in err
        assert "  looked in /project" in err

    def test_print_warning(self, capsys):
        print_warning("No config found.")
        assert capsys.readouterr().err == "WARNING: No config found.\n"


class TestConsoleProgress:
    def test_completion_ends_line(self):
        stream = io.StringIO()
        progress = ConsoleProgress(stream, interval=0)

        progress("Download", 512, 1024)
        progress("Download", 1024, 1024)

        assert stream.getvalue() == (
            "\rDownload: 512 B/1.0 KiB (50.0%)"
            "\rDownload: 1.0 KiB/1.0 KiB (100.0%)\n"
        )

    def test_label_change_starts_new_line(self):
        stream = io.StringIO()
        progress = ConsoleProgress(stream, interval=0)

        progress("Download", 10, None)
        progress("Calc SHA256", 10, 20)

        assert stream.getvalue().startswith("\rDownload: 10 B\n\rCalc SHA256")

    def test_throttled(self):
        stream = io.StringIO()
        progress = ConsoleProgress(stream, interval=3600)

        progress("Download", 1, None)
        progress("Download", 2, None)
        progress.end()

        assert stream.getvalue() == "\rDownload: 1 B\n"

    def test_end_without_output(self):
        stream = io.StringIO()
        ConsoleProgress(stream).end()
        assert stream.getvalue() == ""


class TestRunCommand:
    def test_exit_code(self):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = subprocess.CompletedProcess([], 42)
            assert run_command(["mvn", "-v"], {"PATH": "/bin"}) == 42

        assert mock_run.call_args[0][0] == ["mvn", "-v"]
        assert mock_run.call_args[1]["env"] == {"PATH": "/bin"}

    def test_missing_executable(self, capsys):
        with patch("subprocess.run", side_effect=FileNotFoundError("mvn")):
            assert run_command(["mvn"], {}) == 127
        assert "Run command mvn failed" in capsys.readouterr().err


def test_make_resolver(launcher_config):
    resolver = make_resolver(launcher_config)
    assert isinstance(resolver, ToolchainResolver)
    assert isinstance(resolver.progress_callback, ConsoleProgress)


def test_log_environment(debug_logging):
    log_environment({"JAVA_HOME": "/jdk"})
    assert "-----BEGIN ENVIRONMENT VARIABLES-----" in debug_logging.text
    assert "JAVA_HOME=/jdk" in debug_logging.text
