import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from qt5_tools.errors import CommandError
from qt5_tools.runner import capture_command, format_command, run_command


class TestFormatCommand:
    def test_format_command(self):
        assert format_command(["git", "reset", "--hard"]) == "git reset --hard"

    def test_paths(self):
        assert format_command([Path("/qt5/configure"), "-nokia-developer"]) == "/qt5/configure -nokia-developer"


class TestRunCommand:
    @patch("subprocess.run")
    def test_success(self, mock_run, capsys):
        mock_run.return_value = MagicMock(returncode=0)

        run_command(["git", "pull"], Path("/qt5"))

        mock_run.assert_called_once_with(["git", "pull"], cwd=Path("/qt5"), check=True)
        assert "$ git pull" in capsys.readouterr().out

    @patch("subprocess.run")
    def test_failure_uses_description(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(1, ["git", "pull"])

        with pytest.raises(CommandError) as exc_info:
            run_command(["git", "pull"], Path("/qt5"), failure="Pull failed")

        assert str(exc_info.value) == "Pull failed (exit status 1)"
        assert exc_info.value.returncode == 1
        assert exc_info.value.command == ["git", "pull"]

    @patch("subprocess.run")
    def test_failure_default_message(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(2, ["make", "-s"])

        with pytest.raises(CommandError) as exc_info:
            run_command(["make", "-s"], Path("/qt5"))

        assert "Command failed: make -s" in str(exc_info.value)

    @patch("subprocess.run")
    def test_command_not_found(self, mock_run):
        mock_run.side_effect = FileNotFoundError(2, "No such file", "jom")

        with pytest.raises(CommandError) as exc_info:
            run_command(["jom"], Path("/qt5"))

        assert "Command not found: jom" in str(exc_info.value)

    @patch("subprocess.run")
    def test_other_os_error(self, mock_run):
        mock_run.side_effect = NotADirectoryError(20, "Not a directory")

        with pytest.raises(CommandError):
            run_command(["git", "pull"], Path("/qt5/qtbase"))

    @patch("subprocess.run")
    def test_dry_run(self, mock_run, capsys):
        run_command(["git", "clean", "-dxf"], Path("/qt5"), dry_run=True)

        mock_run.assert_not_called()
        assert "Would run (in /qt5): git clean -dxf" in capsys.readouterr().out


class TestCaptureCommand:
    @patch("subprocess.run")
    def test_returns_stdout(self, mock_run, capsys):
        mock_run.return_value = MagicMock(stdout=b"* master\n")

        assert capture_command(["git", "branch"], Path("/qt5/qtbase")) == "* master\n"
        assert capsys.readouterr().out == ""

    @patch("subprocess.run")
    def test_keeps_carriage_returns(self, mock_run):
        mock_run.return_value = MagicMock(stdout=b"+line\r\n")

        assert capture_command(["git", "diff"], Path("/qt5/qtbase")) == "+line\r\n"

    @patch("subprocess.run")
    def test_undecodable_bytes_round_trip(self, mock_run):
        mock_run.return_value = MagicMock(stdout=b"+caf\xe9\n")

        output = capture_command(["git", "diff"], Path("/qt5/qtbase"))

        assert output.encode("utf-8", errors="surrogateescape") == b"+caf\xe9\n"

    @patch("subprocess.run")
    def test_failure_reports_stderr(self, mock_run, capsys):
        mock_run.side_effect = subprocess.CalledProcessError(
            128, ["git", "diff"], stderr=b"fatal: not a git repository"
        )

        with pytest.raises(CommandError) as exc_info:
            capture_command(["git", "diff"], Path("/tmp"))

        assert exc_info.value.returncode == 128
        assert "fatal: not a git repository" in capsys.readouterr().err

    @patch("subprocess.run")
    def test_command_not_found(self, mock_run):
        mock_run.side_effect = FileNotFoundError(2, "No such file", "git")

        with pytest.raises(CommandError):
            capture_command(["git", "branch"], Path("/qt5"))
