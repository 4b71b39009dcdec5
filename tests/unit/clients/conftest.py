"""Shared fixtures for git client tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from gitclient.clients.command_line import CommandLineGitClient
from gitclient.runners.command import CommandRunner
from gitclient.runners.models import CommandResult


def make_result(
    *,
    returncode: int = 0,
    stdout: str = "",
    stderr: str = "",
    duration_ms: int = 50,
    timed_out: bool = False,
) -> CommandResult:
    """Create a CommandResult with convenient defaults."""
    return CommandResult(
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
        duration_ms=duration_ms,
        timed_out=timed_out,
    )


def commands(mock_runner: MagicMock) -> list[list[str]]:
    """Return every command line passed to the mocked runner."""
    return [call.args[0] for call in mock_runner.run.call_args_list]


@pytest.fixture
def mock_runner() -> MagicMock:
    """Create a mock CommandRunner that returns success by default."""
    runner = MagicMock(spec=CommandRunner)
    runner.run.return_value = make_result()
    return runner


@pytest.fixture
def cli_client(mock_runner: MagicMock, temp_dir: Path) -> CommandLineGitClient:
    """Create a CommandLineGitClient with a mocked runner."""
    return CommandLineGitClient(git_executable="git", cwd=temp_dir, runner=mock_runner)
