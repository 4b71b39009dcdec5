"""Tests for CommandRunner class.

subprocess.run is patched: these tests verify how the runner builds the
call and maps its outcome onto CommandResult, not git itself.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from gitclient.exceptions import WorkingDirectoryError
from gitclient.runners.command import CommandRunner
from gitclient.runners.models import CommandResult


def completed(
    returncode: int = 0, stdout: str = "", stderr: str = ""
) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(
        args=["git"], returncode=returncode, stdout=stdout, stderr=stderr
    )


class TestCommandRunner:
    """Tests for CommandRunner.run()."""

    def test_run_simple_command(self) -> None:
        """A successful command yields a successful CommandResult."""
        with patch("subprocess.run", return_value=completed(stdout="main\n")):
            result = CommandRunner().run(["git", "branch", "--show-current"])

        assert isinstance(result, CommandResult)
        assert result.returncode == 0
        assert result.stdout == "main\n"
        assert result.stderr == ""
        assert result.success is True
        assert result.timed_out is False
        assert result.duration_ms >= 0

    def test_non_zero_exit_is_reported_not_raised(self) -> None:
        with patch(
            "subprocess.run",
            return_value=completed(returncode=128, stderr="fatal: not a git repository"),
        ):
            result = CommandRunner().run(["git", "status"])

        assert result.success is False
        assert result.returncode == 128
        assert result.stderr == "fatal: not a git repository"

    def test_call_arguments(self, tmp_path: Path) -> None:
        """Output is captured as text and a non-zero exit is not checked."""
        with patch("subprocess.run", return_value=completed()) as mock_run:
            CommandRunner(cwd=tmp_path).run(["git", "status"])

        args, kwargs = mock_run.call_args
        assert args[0] == ["git", "status"]
        assert kwargs["cwd"] == tmp_path
        assert kwargs["capture_output"] is True
        assert kwargs["text"] is True
        assert kwargs["check"] is False
        assert kwargs["timeout"] is None

    def test_cwd_override(self, tmp_path: Path) -> None:
        other = tmp_path / "other"
        other.mkdir()
        with patch("subprocess.run", return_value=completed()) as mock_run:
            CommandRunner(cwd=tmp_path).run(["git", "status"], cwd=other)

        assert mock_run.call_args.kwargs["cwd"] == other

    def test_working_directory_validation(self) -> None:
        """WorkingDirectoryError is raised for a missing directory."""
        runner = CommandRunner(cwd=Path("/nonexistent/path/xyz"))

        with pytest.raises(WorkingDirectoryError) as exc_info:
            runner.run(["git", "status"])

        assert "/nonexistent/path/xyz" in str(exc_info.value.path)

    def test_environment_merge(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Runner and per-call variables are merged over the parent env."""
        monkeypatch.setenv("PARENT_VAR", "parent")
        runner = CommandRunner(env={"RUNNER_VAR": "runner", "SHARED": "runner"})

        with patch("subprocess.run", return_value=completed()) as mock_run:
            runner.run(["git", "status"], env={"SHARED": "call"})

        env = mock_run.call_args.kwargs["env"]
        assert env["PARENT_VAR"] == "parent"
        assert env["RUNNER_VAR"] == "runner"
        assert env["SHARED"] == "call"

    def test_no_timeout_by_default(self) -> None:
        assert CommandRunner().timeout is None

    def test_timeout(self) -> None:
        """A timed out command reports returncode -1 and timed_out."""
        error = subprocess.TimeoutExpired(
            cmd=["git", "fetch"], timeout=0.1, output=b"partial", stderr=None
        )
        with patch("subprocess.run", side_effect=error) as mock_run:
            result = CommandRunner(timeout=0.1).run(["git", "fetch"])

        assert mock_run.call_args.kwargs["timeout"] == 0.1
        assert result.timed_out is True
        assert result.returncode == -1
        assert result.success is False
        assert result.stdout == "partial"

    def test_non_positive_timeout_means_none(self) -> None:
        with patch("subprocess.run", return_value=completed()) as mock_run:
            CommandRunner(timeout=30).run(["git", "status"], timeout=0)

        assert mock_run.call_args.kwargs["timeout"] is None

    def test_command_not_found(self) -> None:
        with patch("subprocess.run", side_effect=FileNotFoundError()):
            result = CommandRunner().run(["no-such-git", "status"])

        assert result.returncode == 127
        assert "no-such-git" in result.stderr

    def test_permission_denied(self) -> None:
        with patch("subprocess.run", side_effect=PermissionError()):
            result = CommandRunner().run(["/usr/local/git", "status"])

        assert result.returncode == 126
        assert "Permission denied" in result.stderr

    def test_none_output_becomes_empty_string(self) -> None:
        process = MagicMock(returncode=0, stdout=None, stderr=None)
        with patch("subprocess.run", return_value=process):
            result = CommandRunner().run(["git", "status"])

        assert result.stdout == ""
        assert result.stderr == ""
