"""Data models for the subprocess runner.

CommandResult is a frozen dataclass with slots: one per invocation, never
persisted.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["CommandResult"]


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of executing a single command.

    Attributes:
        returncode: Exit code from the command (0 = success).
        stdout: Standard output captured from the command.
        stderr: Standard error captured from the command.
        duration_ms: Execution time in milliseconds.
        timed_out: True if the command exceeded its timeout limit.
    """

    returncode: int
    stdout: str
    stderr: str
    duration_ms: int = 0
    timed_out: bool = False

    @property
    def success(self) -> bool:
        """True if command completed successfully (returncode 0, no timeout)."""
        return self.returncode == 0 and not self.timed_out

    @property
    def error_detail(self) -> str:
        """Error text for failure messages.

        Not every git command writes its errors to stderr, so stdout is
        used when stderr is blank.
        """
        stderr = self.stderr.strip()
        if stderr:
            return stderr
        return self.stdout.strip()
