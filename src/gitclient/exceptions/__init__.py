"""gitclient exception hierarchy.

Every exception derives from GitClientError, the single failure kind of
the git client contract. Backend specific exceptions are translated into
these types and chained as ``__cause__``.

All exceptions can be imported from this package:
    from gitclient.exceptions import GitClientError, MergeError
"""

from __future__ import annotations

from gitclient.exceptions.base import GitClientError
from gitclient.exceptions.config import ConfigError
from gitclient.exceptions.git import (
    InvalidConfigKeyError,
    MergeError,
    RepositoryClosedError,
    RepositoryExistsError,
    RepositoryNotFoundError,
    RepositoryNotLoadedError,
    UnsupportedOperationError,
)
from gitclient.exceptions.runner import (
    CommandFailedError,
    RunnerError,
    WorkingDirectoryError,
)

__all__ = [
    "CommandFailedError",
    "ConfigError",
    "GitClientError",
    "InvalidConfigKeyError",
    "MergeError",
    "RepositoryClosedError",
    "RepositoryExistsError",
    "RepositoryNotFoundError",
    "RepositoryNotLoadedError",
    "RunnerError",
    "UnsupportedOperationError",
    "WorkingDirectoryError",
]
