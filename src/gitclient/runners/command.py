"""Command runner for synchronous subprocess execution.

This module provides the CommandRunner class used by the command-line git
client. Each call spawns one process, waits for it to exit, and captures
both output streams in full.
"""

from __future__ import annotations

import os
import subprocess
import time
from pathlib import Path
from typing import TYPE_CHECKING

from gitclient.constants import COMMAND_NOT_FOUND_EXIT_CODE, PERMISSION_DENIED_EXIT_CODE
from gitclient.exceptions import WorkingDirectoryError
from gitclient.logging import get_logger
from gitclient.runners.models import CommandResult

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["CommandRunner"]

logger = get_logger(__name__)


class CommandRunner:
    """Execute commands with working directory and environment control.

    Provides blocking command execution with:
    - Working directory validation
    - Environment variable inheritance and override
    - Optional timeout (none by default: a hung process blocks the caller)
    - Duration measurement

    Attributes:
        cwd: Working directory for command execution.
        timeout: Default timeout in seconds (None for no timeout).
        env: Additional environment variables to merge with parent env.

    Example:
        ```python
        runner = CommandRunner(cwd=Path("/project"))
        result = runner.run(["git", "status", "--porcelain"])
        if result.success:
            print(result.stdout)
        ```
    """

    def __init__(
        self,
        cwd: Path | None = None,
        timeout: float | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        """Initialize the CommandRunner.

        Args:
            cwd: Working directory for commands. If None, uses current directory.
            timeout: Default timeout in seconds. Use None for no timeout.
            env: Additional environment variables to merge with os.environ.
        """
        self._cwd = cwd
        self._timeout = timeout
        self._extra_env = env or {}

    @property
    def cwd(self) -> Path | None:
        """Working directory for command execution."""
        return self._cwd

    @property
    def timeout(self) -> float | None:
        """Default timeout in seconds."""
        return self._timeout

    def _validate_cwd(self, cwd: Path | None) -> None:
        """Validate working directory exists.

        Raises:
            WorkingDirectoryError: If directory does not exist.
        """
        if cwd is not None and not cwd.is_dir():
            raise WorkingDirectoryError(
                f"Working directory does not exist: {cwd}",
                path=cwd,
            )

    def _build_env(self, extra_env: dict[str, str] | None = None) -> dict[str, str]:
        """Build environment by merging parent env with overrides."""
        env = os.environ.copy()
        env.update(self._extra_env)
        if extra_env:
            env.update(extra_env)
        return env

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        """Execute a command and return the result.

        A non-zero exit code is reported in the result, never raised; the
        caller decides whether the command had to succeed.

        Args:
            command: Command and arguments as a sequence (no shell expansion).
            cwd: Override working directory for this command.
            timeout: Override timeout. Use 0 or negative for no timeout.
            env: Additional environment variables for this command.

        Returns:
            CommandResult with returncode, stdout, stderr, duration_ms, timed_out.

        Raises:
            WorkingDirectoryError: If working directory does not exist.
        """
        effective_cwd = cwd if cwd is not None else self._cwd
        self._validate_cwd(effective_cwd)

        effective_timeout = timeout if timeout is not None else self._timeout
        if effective_timeout is not None and effective_timeout <= 0:
            effective_timeout = None

        logger.debug("command_started", command=list(command), cwd=str(effective_cwd))

        start_time = time.monotonic()
        timed_out = False

        try:
            completed = subprocess.run(
                list(command),
                cwd=effective_cwd,
                env=self._build_env(env),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=effective_timeout,
                check=False,
            )
            returncode = completed.returncode
            stdout_str = completed.stdout or ""
            stderr_str = completed.stderr or ""
        except subprocess.TimeoutExpired as e:
            # subprocess.run kills the child before re-raising
            timed_out = True
            returncode = -1
            stdout_str = _decode_partial(e.stdout)
            stderr_str = _decode_partial(e.stderr)
        except FileNotFoundError:
            returncode = COMMAND_NOT_FOUND_EXIT_CODE
            stdout_str = ""
            stderr_str = f"Command not found: {command[0]}"
        except PermissionError:
            returncode = PERMISSION_DENIED_EXIT_CODE
            stdout_str = ""
            stderr_str = f"Permission denied: {command[0]}"

        duration_ms = int((time.monotonic() - start_time) * 1000)

        result = CommandResult(
            returncode=returncode,
            stdout=stdout_str,
            stderr=stderr_str,
            duration_ms=duration_ms,
            timed_out=timed_out,
        )
        logger.debug(
            "command_finished",
            command=list(command),
            returncode=returncode,
            duration_ms=duration_ms,
            timed_out=timed_out,
        )
        return result


def _decode_partial(data: bytes | str | None) -> str:
    """Decode output captured before a timeout."""
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
