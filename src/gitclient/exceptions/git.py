from __future__ import annotations

from pathlib import Path

from gitclient.constants import MERGE_RESOLUTION_HINTS
from gitclient.exceptions.base import GitClientError


class RepositoryExistsError(GitClientError):
    """Exception raised when creating a repository where one already exists.

    Attributes:
        message: Human-readable error message.
        path: Directory that already holds a repository.
    """

    def __init__(
        self,
        message: str = "A repository already exists in this directory",
        path: Path | str | None = None,
    ) -> None:
        """Initialize the RepositoryExistsError.

        Args:
            message: Human-readable error message.
            path: Directory that already holds a repository.
        """
        self.path = path
        super().__init__(message)


class RepositoryNotFoundError(GitClientError):
    """Exception raised when no repository is found from a directory upward.

    Attributes:
        message: Human-readable error message.
        path: Directory where the search started.
    """

    def __init__(
        self,
        message: str = "No git repository found in the specified directory",
        path: Path | str | None = None,
    ) -> None:
        """Initialize the RepositoryNotFoundError.

        Args:
            message: Human-readable error message.
            path: Directory where the search started.
        """
        self.path = path
        super().__init__(message)


class RepositoryNotLoadedError(GitClientError):
    """Exception raised when an operation needs a repository that was never loaded."""

    def __init__(
        self,
        message: str = "No repository loaded. Call load_repo() or create_repo() first",
    ) -> None:
        super().__init__(message)


class RepositoryClosedError(GitClientError):
    """Exception raised when a closed client is used again."""

    def __init__(self, message: str = "The git client has been closed") -> None:
        super().__init__(message)


class InvalidConfigKeyError(GitClientError):
    """Exception raised for config keys with the wrong number of segments.

    Attributes:
        message: Human-readable error message.
        key: The rejected key.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        """Initialize the InvalidConfigKeyError.

        Args:
            message: Human-readable error message.
            key: The rejected key.
        """
        self.key = key
        super().__init__(message)


class MergeError(GitClientError):
    """Exception raised when a merge or rebase cannot complete cleanly.

    The failure carries one of two manual recovery paths: resolving the
    conflicts, or resetting the merge to get back to a clean state.

    Attributes:
        message: Human-readable error message.
        branch: Branch that was being merged.
        resolution: ``"resolve_conflicts"`` or ``"reset_merge"``.
    """

    def __init__(
        self,
        message: str,
        branch: str | None = None,
        resolution: str | None = None,
    ) -> None:
        """Initialize the MergeError.

        Args:
            message: Human-readable error message.
            branch: Branch that was being merged.
            resolution: Recovery path key from MERGE_RESOLUTION_HINTS.
        """
        self.branch = branch
        self.resolution = resolution
        super().__init__(message)

    @property
    def hint(self) -> str | None:
        """Recovery hint for the resolution, if any."""
        if self.resolution is None:
            return None
        return MERGE_RESOLUTION_HINTS.get(self.resolution)


class UnsupportedOperationError(GitClientError):
    """Exception raised when a backend cannot perform the requested operation.

    Attributes:
        message: Human-readable error message.
        operation: Name of the unsupported operation.
        backend: Backend that rejected it.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        backend: str | None = None,
    ) -> None:
        self.operation = operation
        self.backend = backend
        super().__init__(message)
