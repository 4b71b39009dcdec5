"""GitClient protocol definition.

This protocol is the capability contract shared by both backends:
:class:`~gitclient.clients.command_line.CommandLineGitClient` (external
``git`` executable) and :class:`~gitclient.clients.library.LibraryGitClient`
(GitPython). Both satisfy it via structural typing, with no shared base
class or state.

Every method raises :class:`~gitclient.exceptions.GitClientError` (or a
subclass) on failure. Queries that find nothing return ``None`` or an empty
list instead of raising.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from gitclient.models import ClientCapabilities, GitCommit, GitUser


@runtime_checkable
class GitClient(Protocol):
    """Uniform git operations, independent of the backend."""

    @property
    def capabilities(self) -> ClientCapabilities:
        """Operations whose support differs between backends."""
        ...

    # -----------------------------------------------------------------
    # Repository lifecycle
    # -----------------------------------------------------------------

    def repo_exists(self) -> bool:
        """Return True if a repository is discoverable from the working directory upward."""
        ...

    def create_repo(self, path: Path | str | None = None) -> None:
        """Create a repository at *path* (default: working directory) and load it.

        Raises:
            RepositoryExistsError: If the directory already is a repository.
        """
        ...

    def load_repo(self, path: Path | str | None = None) -> None:
        """Load the repository found from *path* (default: working directory) upward.

        Raises:
            RepositoryNotFoundError: If no repository is found.
        """
        ...

    def repo_loaded(self) -> bool:
        """Return True once a repository was loaded or created."""
        ...

    def close(self) -> None:
        """Release backend resources. Idempotent."""
        ...

    def is_closed(self) -> bool:
        """Return True if the client has been closed."""
        ...

    def get_git_directory(self) -> Path:
        """Return the repository metadata directory (``.git``)."""
        ...

    # -----------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------

    def set_config(self, key: str, value: str) -> None:
        """Store *value* under a 3-part key (``section.subsection.name``)."""
        ...

    def get_config(self, key: str) -> str | None:
        """Return the value of a 2- or 3-part key, or None if unset."""
        ...

    def get_remote_url(self, remote_name: str | None = None) -> str | None:
        """Return the URL of *remote_name* (default ``origin``)."""
        ...

    def get_configured_user(self) -> GitUser | None:
        """Return the identity from ``user.name``/``user.email``, if any."""
        ...

    def remote_repo_add(self, remote_name: str, url: str) -> None:
        """Add a remote."""
        ...

    def remote_repo_update_url(self, remote_name: str, url: str) -> None:
        """Change the URL of an existing remote."""
        ...

    # -----------------------------------------------------------------
    # Branch and tag discovery
    # -----------------------------------------------------------------

    def find_branches(self, branch_prefix: str) -> list[str]:
        """Return local branches starting with *branch_prefix*."""
        ...

    def find_first_branch(self, branch_prefix: str) -> str | None:
        """Return the first local branch starting with *branch_prefix*."""
        ...

    def find_branch(self, branch_name: str) -> str | None:
        """Return *branch_name* if a local branch has exactly that name."""
        ...

    def branch_exists(self, branch_name: str) -> bool:
        """Return True if a local branch has exactly that name."""
        ...

    def remote_branch_exists(self, branch_name: str) -> bool:
        """Return True if a remote-tracking branch has exactly that name."""
        ...

    def find_tags(self, tag_prefix: str) -> list[str]:
        """Return tags starting with *tag_prefix*."""
        ...

    def find_first_tag(self, tag_prefix: str) -> str | None:
        """Return the first tag starting with *tag_prefix*."""
        ...

    def find_tag(self, tag_name: str) -> str | None:
        """Return *tag_name* if a tag has exactly that name."""
        ...

    def tag_exists(self, tag_name: str) -> bool:
        """Return True if a tag has exactly that name."""
        ...

    # -----------------------------------------------------------------
    # Working tree and history
    # -----------------------------------------------------------------

    def checkout(self, branch_name: str) -> None:
        """Switch the working tree to *branch_name*."""
        ...

    def create_and_checkout(
        self, new_branch_name: str, from_branch_name: str | None = None
    ) -> None:
        """Create *new_branch_name* from *from_branch_name* (or HEAD) and switch to it."""
        ...

    def stage_files(self, filenames: list[str]) -> None:
        """Add *filenames* to the next commit."""
        ...

    def get_staged_files(self) -> list[str]:
        """Return paths staged relative to HEAD."""
        ...

    def commit(self, message: str) -> None:
        """Stage all tracked modifications and commit them."""
        ...

    def merge(
        self,
        branch_name: str,
        rebase: bool = False,
        noff: bool = False,
        squash: bool = False,
        message: str | None = None,
    ) -> None:
        """Merge (or rebase onto) *branch_name*.

        Raises:
            MergeError: If the merge cannot complete cleanly.
            UnsupportedOperationError: If the backend cannot perform the
                requested kind of merge.
        """
        ...

    def merge_noff(self, branch_name: str) -> None:
        """Merge *branch_name* forcing a merge commit."""
        ...

    def tag(self, tag_name: str, message: str) -> None:
        """Create an annotated tag at HEAD."""
        ...

    def branch_delete(self, branch_name: str, force: bool = False) -> None:
        """Delete a local branch; unmerged branches need *force*."""
        ...

    def has_uncommitted_changes(self, allow_untracked: bool = False) -> bool:
        """Return True if the working tree differs from HEAD."""
        ...

    def get_current_branch_name(self) -> str:
        """Return the active branch (commit hash when HEAD is detached)."""
        ...

    def get_last_commit(self, branch_name: str) -> GitCommit | None:
        """Return the tip commit of a branch or revision, or None."""
        ...

    # -----------------------------------------------------------------
    # Remote operations
    # -----------------------------------------------------------------

    def fetch(self) -> None:
        """Fetch from the default remote."""
        ...

    def pull(self, branch_name: str) -> None:
        """Update *branch_name* from the default remote."""
        ...

    def push(self, branch_name: str) -> None:
        """Check out *branch_name* and push it to the default remote."""
        ...

    def push_tag(self, tag_name: str) -> None:
        """Push *tag_name* to the default remote."""
        ...
