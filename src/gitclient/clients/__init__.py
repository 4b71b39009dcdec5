"""Git client implementations.

Provides a :class:`GitClient` protocol that both
:class:`~gitclient.clients.command_line.CommandLineGitClient` and
:class:`~gitclient.clients.library.LibraryGitClient` satisfy, plus a factory
function :func:`create_git_client` for selecting a backend by name.
"""

from __future__ import annotations

from gitclient.clients.command_line import CommandLineGitClient
from gitclient.clients.factory import create_git_client
from gitclient.clients.library import LibraryGitClient
from gitclient.clients.protocol import GitClient

__all__ = [
    "CommandLineGitClient",
    "GitClient",
    "LibraryGitClient",
    "create_git_client",
]
