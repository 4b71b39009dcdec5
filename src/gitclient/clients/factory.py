"""Git client factory.

Returns the :class:`~gitclient.clients.protocol.GitClient` implementation
for a backend name, configured from :class:`~gitclient.config.GitClientConfig`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitclient.config import load_config

if TYPE_CHECKING:
    from gitclient.clients.protocol import GitClient
    from gitclient.config import GitClientConfig

#: Accepted spellings of each backend
CLI_BACKENDS = ("cli", "command_line")
LIBRARY_BACKENDS = ("library",)


def create_git_client(
    backend: str | None = None,
    config: GitClientConfig | None = None,
) -> GitClient:
    """Create a GitClient.

    Args:
        backend: ``"cli"`` (alias ``"command_line"``) or ``"library"``.
            Defaults to ``config.backend``.
        config: Settings to construct the client from. Loaded with
            :func:`~gitclient.config.load_config` when omitted.

    Returns:
        A :class:`GitClient` implementation. No repository is loaded yet.

    Raises:
        ValueError: If *backend* is unknown.
    """
    settings = config if config is not None else load_config()
    name = (backend or settings.backend).lower()

    if name in CLI_BACKENDS:
        from gitclient.clients.command_line import CommandLineGitClient

        return CommandLineGitClient(
            git_executable=settings.git_executable,
            cwd=settings.working_dir,
            default_remote=settings.default_remote,
        )

    if name in LIBRARY_BACKENDS:
        from gitclient.clients.library import LibraryGitClient

        return LibraryGitClient(
            settings.working_dir,
            default_remote=settings.default_remote,
        )

    msg = f"Unknown git backend: {backend!r}"
    raise ValueError(msg)
