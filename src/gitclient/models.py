"""Value objects returned by the git clients.

All models are frozen dataclasses with slots: they are produced by a single
query and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

__all__ = [
    "ClientCapabilities",
    "GitCommit",
    "GitUser",
]


@dataclass(frozen=True, slots=True)
class GitUser:
    """A git identity.

    Either field may be missing; ``str()`` combines whichever are present.

    Attributes:
        name: Display name.
        email: Email address.

    Example:
        >>> str(GitUser("Jane", "jane@example.com"))
        'Jane <jane@example.com>'
        >>> str(GitUser(None, "jane@example.com"))
        'jane@example.com'
    """

    name: str | None = None
    email: str | None = None

    def __str__(self) -> str:
        if self.name and self.email:
            return f"{self.name} <{self.email}>"
        if self.name:
            return self.name
        if self.email:
            return self.email
        return ""


@dataclass(frozen=True, slots=True)
class GitCommit:
    """Single commit metadata.

    Attributes:
        hash: Full 40-character SHA.
        user: Committer identity.
        message: Summary line of the commit message.
        date: Commit time as a timezone aware datetime.
    """

    hash: str
    user: GitUser
    message: str
    date: datetime

    @property
    def short_hash(self) -> str:
        """Abbreviated SHA (7 chars)."""
        return self.hash[:7]


@dataclass(frozen=True, slots=True)
class ClientCapabilities:
    """Operations whose support differs between backends.

    Attributes:
        fast_forward_merge: ``merge()`` without ``noff``, ``squash`` or ``rebase``.
        rebase: ``merge(rebase=True)``.
        untracked_detection: ``has_uncommitted_changes`` honors
            ``allow_untracked``.
        closeable: The client holds resources released by ``close()``.
    """

    fast_forward_merge: bool
    rebase: bool
    untracked_detection: bool
    closeable: bool
