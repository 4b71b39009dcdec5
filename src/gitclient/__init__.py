"""gitclient: one git client contract, two backends.

``CommandLineGitClient`` drives the external ``git`` executable,
``LibraryGitClient`` drives GitPython. Both satisfy the ``GitClient``
protocol; ``create_git_client`` picks one by name or configuration.
"""

from __future__ import annotations

from gitclient.clients import (
    CommandLineGitClient,
    GitClient,
    LibraryGitClient,
    create_git_client,
)
from gitclient.config import GitClientConfig, load_config
from gitclient.exceptions import (
    CommandFailedError,
    GitClientError,
    InvalidConfigKeyError,
    MergeError,
    RepositoryClosedError,
    RepositoryExistsError,
    RepositoryNotFoundError,
    RepositoryNotLoadedError,
    UnsupportedOperationError,
)
from gitclient.models import ClientCapabilities, GitCommit, GitUser

__version__ = "0.1.0"

__all__ = [
    "ClientCapabilities",
    "CommandFailedError",
    "CommandLineGitClient",
    "GitClient",
    "GitClientConfig",
    "GitClientError",
    "GitCommit",
    "GitUser",
    "InvalidConfigKeyError",
    "LibraryGitClient",
    "MergeError",
    "RepositoryClosedError",
    "RepositoryExistsError",
    "RepositoryNotFoundError",
    "RepositoryNotLoadedError",
    "UnsupportedOperationError",
    "__version__",
    "create_git_client",
    "load_config",
]
