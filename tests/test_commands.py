"""Tests for the subprocess helpers."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from vmstack.utils.commands import command_succeeds, run_command


class TestRunCommand:
    @patch("vmstack.utils.commands.subprocess.run")
    def test_failure_carries_stderr(self, mock_run: MagicMock) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            ["git", "pull"], 1, stdout="", stderr="fatal: not a git repository\n"
        )
        with pytest.raises(RuntimeError, match="git pull: fatal: not a git repository"):
            run_command(["git", "pull"])

    @patch("vmstack.utils.commands.subprocess.run")
    def test_input_and_capture(self, mock_run: MagicMock) -> None:
        mock_run.return_value = subprocess.CompletedProcess([], 0, stdout="ok", stderr="")
        result = run_command(["crontab", "-"], input_text="* * * * * true\n")
        assert result.stdout == "ok"
        kwargs = mock_run.call_args.kwargs
        assert kwargs["input"] == "* * * * * true\n"
        assert kwargs["capture_output"] is True


class TestCommandSucceeds:
    @patch("vmstack.utils.commands.subprocess.run", side_effect=FileNotFoundError)
    def test_missing_binary(self, mock_run: MagicMock) -> None:
        assert command_succeeds(["docker", "compose", "version"]) is False

    @patch("vmstack.utils.commands.subprocess.run")
    def test_exit_status(self, mock_run: MagicMock) -> None:
        mock_run.return_value = subprocess.CompletedProcess([], 0)
        assert command_succeeds(["true"]) is True
        mock_run.return_value = subprocess.CompletedProcess([], 2)
        assert command_succeeds(["false"]) is False
