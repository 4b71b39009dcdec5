from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from gitclient.exceptions.base import GitClientError


class RunnerError(GitClientError):
    """Base exception for process runner failures.

    Attributes:
        message: Human-readable error message.
    """

    pass


class WorkingDirectoryError(RunnerError):
    """Working directory does not exist or is not accessible.

    Attributes:
        message: Human-readable error message.
        path: The path that was not found.
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        """Initialize the WorkingDirectoryError.

        Args:
            message: Human-readable error message.
            path: The path that was not found.
        """
        self.path = path
        super().__init__(message)


class CommandFailedError(RunnerError):
    """A command that must succeed exited with a non-zero code.

    Attributes:
        message: Human-readable error message.
        command: The command line that failed.
        returncode: Exit code reported by the process.
        stderr: Error detail (stderr, or stdout when stderr was blank).
    """

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] | None = None,
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        self.command = list(command) if command is not None else None
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)
