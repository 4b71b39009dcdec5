"""Subprocess execution for the command-line git client.

For library-backed git operations, use gitclient.clients.LibraryGitClient.
"""

from __future__ import annotations

from gitclient.runners.command import CommandRunner
from gitclient.runners.models import CommandResult
from gitclient.runners.output import first_output_line, split_output_lines

__all__ = [
    "CommandResult",
    "CommandRunner",
    "first_output_line",
    "split_output_lines",
]
