"""GitPython-based git client.

Operates on a :class:`git.Repo` handle obtained by :meth:`LibraryGitClient.load_repo`
or :meth:`LibraryGitClient.create_repo`. Reference discovery, configuration
and status inspection go through GitPython's object model; history-rewriting
operations (merge, rebase, push, pull) go through ``repo.git``.

The client is stateful: operations before ``load_repo()`` raise
:class:`RepositoryNotLoadedError`, operations after ``close()`` raise
:class:`RepositoryClosedError`. Closing is terminal.

Example:
    ```python
    client = LibraryGitClient("/path/to/repo")
    client.load_repo()
    try:
        last = client.get_last_commit("main")
    finally:
        client.close()
    ```
"""

from __future__ import annotations

import configparser
import os
from pathlib import Path
from typing import TYPE_CHECKING

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from git.exc import BadName, BadObject
from git.refs.remote import RemoteReference

from gitclient.constants import (
    DEFAULT_REMOTE,
    MERGE_RESOLUTION_HINTS,
    R_REMOTES,
    R_TAGS,
    RESET_MERGE,
    RESOLVE_CONFLICTS,
)
from gitclient.exceptions import (
    GitClientError,
    MergeError,
    RepositoryClosedError,
    RepositoryExistsError,
    RepositoryNotFoundError,
    RepositoryNotLoadedError,
)
from gitclient.logging import get_logger
from gitclient.models import ClientCapabilities, GitCommit, GitUser
from gitclient.refs import parse_config_key, remote_branch_name, short_ref_name

if TYPE_CHECKING:
    from git import Commit, Head, Remote
    from git.config import GitConfigParser

__all__ = ["LibraryGitClient"]

logger = get_logger(__name__)

_CAPABILITIES = ClientCapabilities(
    fast_forward_merge=True,
    rebase=True,
    untracked_detection=True,
    closeable=True,
)


def _convert_git_error(exc: Exception, operation: str) -> GitClientError:
    """Convert a GitPython exception into a GitClientError.

    Args:
        exc: GitPython (or I/O) exception.
        operation: Human readable description of the failed operation.

    Returns:
        GitClientError carrying git's own message where available.
    """
    if isinstance(exc, GitCommandError):
        detail = str(exc.stderr or exc.stdout or exc).strip()
    else:
        detail = str(exc)
    return GitClientError(f"Error while {operation}: {detail}")


def _convert_merge_error(exc: GitCommandError, branch_name: str) -> MergeError:
    """Classify a failed merge or rebase by its output."""
    output = f"{exc.stdout or ''}\n{exc.stderr or ''}".lower()
    resolution = RESOLVE_CONFLICTS if "conflict" in output else RESET_MERGE
    detail = str(exc.stderr or exc.stdout or exc).strip()
    return MergeError(
        f"Error while merging. {MERGE_RESOLUTION_HINTS[resolution]}: {detail}",
        branch=branch_name,
        resolution=resolution,
    )


def _commit_subject(message: str) -> str:
    """Return the first paragraph of *message* joined into one line, like ``%s``."""
    lines: list[str] = []
    for line in message.splitlines():
        if line.strip():
            lines.append(line.strip())
        elif lines:
            break
    return " ".join(lines)


def _is_repo_root(path: Path) -> bool:
    """Return True if *path* itself holds a repository (no parent search)."""
    if not path.is_dir():
        return False
    try:
        with Repo(path):
            return True
    except (InvalidGitRepositoryError, NoSuchPathError):
        return False


def _config_section(section: str, subsection: str | None) -> str:
    """Return the config-file section header for a key."""
    if subsection is None:
        return section
    return f'{section} "{subsection}"'


def _matches_section(header: str, section: str, subsection: str | None) -> bool:
    """Compare a section header the way git does.

    Section names are case-insensitive, subsection names are not.
    """
    name, _, rest = header.partition(" ")
    if name.lower() != section.lower():
        return False
    found = rest.strip().strip('"') if rest else None
    return found == subsection


def _read_config_value(
    reader: GitConfigParser, section: str, subsection: str | None, name: str
) -> str | None:
    """Return the last value stored for a key, or None."""
    value: str | None = None
    for header in reader.sections():
        if not _matches_section(header, section, subsection):
            continue
        for option in reader.options(header):
            if option.lower() == name.lower():
                value = reader.get(header, option)
    return value


class LibraryGitClient:
    """Git client backed by GitPython.

    Satisfies :class:`~gitclient.clients.protocol.GitClient` via structural
    typing.

    Args:
        path: Working directory. Defaults to the current directory at
            construction time.
        default_remote: Remote used by fetch, pull and push.
    """

    def __init__(
        self,
        path: Path | str | None = None,
        default_remote: str = DEFAULT_REMOTE,
    ) -> None:
        self._cwd = Path.cwd() if path is None else Path(path)
        self._default_remote = default_remote
        self._repo: Repo | None = None
        self._closed = False

    @property
    def cwd(self) -> Path:
        """Working directory the repository is discovered from."""
        return self._cwd

    @property
    def capabilities(self) -> ClientCapabilities:
        return _CAPABILITIES

    @property
    def repo(self) -> Repo:
        """Underlying GitPython Repo instance.

        Raises:
            RepositoryClosedError: If the client has been closed.
            RepositoryNotLoadedError: If no repository was loaded yet.
        """
        if self._closed:
            raise RepositoryClosedError()
        if self._repo is None:
            raise RepositoryNotLoadedError()
        return self._repo

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise RepositoryClosedError()

    def _resolve(self, path: Path | str | None) -> Path:
        return self._cwd if path is None else self._cwd / Path(path)

    def _local_head(self, branch_name: str) -> Head | None:
        for head in self.repo.heads:
            if short_ref_name(head.path) == branch_name:
                return head
        return None

    def _remote(self) -> Remote:
        try:
            return self.repo.remote(self._default_remote)
        except ValueError as e:
            raise GitClientError(
                f"Remote '{self._default_remote}' is not configured"
            ) from e

    def _ref_names(self, namespace: str) -> list[str]:
        return [
            short_ref_name(ref.path)
            for ref in self.repo.refs
            if ref.path.startswith(namespace)
        ]

    # -------------------------------------------------------------------------
    # Repository lifecycle
    # -------------------------------------------------------------------------

    def repo_exists(self) -> bool:
        """Check whether a repository is discoverable from the working directory."""
        try:
            with Repo(self._cwd, search_parent_directories=True):
                return True
        except (InvalidGitRepositoryError, NoSuchPathError):
            return False

    def create_repo(self, path: Path | str | None = None) -> None:
        """Initialize a repository at *path* and load it.

        Raises:
            RepositoryExistsError: If *path* already is a repository.
        """
        self._ensure_open()
        target = self._resolve(path)
        if _is_repo_root(target):
            raise RepositoryExistsError(path=target)

        try:
            repo = Repo.init(target, mkdir=True)
        except (GitCommandError, OSError) as e:
            raise _convert_git_error(e, "creating the repository") from e

        if self._repo is not None:
            self._repo.close()
        self._repo = repo
        self._cwd = target
        logger.info("repository_created", path=str(target))

    def load_repo(self, path: Path | str | None = None) -> None:
        """Load the repository found from *path* upward.

        Raises:
            RepositoryNotFoundError: If no repository is found.
        """
        self._ensure_open()
        start = self._resolve(path)
        try:
            repo = Repo(start, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise RepositoryNotFoundError(path=start) from e

        if self._repo is not None:
            self._repo.close()
        self._repo = repo
        self._cwd = start
        logger.debug("repository_loaded", path=str(start), git_dir=repo.git_dir)

    def repo_loaded(self) -> bool:
        return self._repo is not None

    def close(self) -> None:
        """Release the repository handle. Idempotent; the client is unusable afterwards."""
        if self._repo is not None:
            self._repo.close()
            self._repo = None
        if not self._closed:
            self._closed = True
            logger.debug("repository_closed", path=str(self._cwd))

    def is_closed(self) -> bool:
        return self._closed

    def get_git_directory(self) -> Path:
        return Path(self.repo.git_dir)

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def set_config(self, key: str, value: str) -> None:
        """Store *value* under a 3-part *key* in the repository config."""
        section, subsection, name = parse_config_key(key, (3,))
        if value is None:
            raise GitClientError("The config attribute value cannot be None")

        try:
            with self.repo.config_writer() as writer:
                writer.set_value(_config_section(section, subsection), name, value)
        except (OSError, configparser.Error) as e:
            raise _convert_git_error(e, f"setting config for '{key}'") from e

    def get_config(self, key: str) -> str | None:
        """Return the effective value of a 2- or 3-part *key*, or None if unset."""
        section, subsection, name = parse_config_key(key, (2, 3))
        try:
            reader = self.repo.config_reader()
            return _read_config_value(reader, section, subsection, name)
        except (OSError, configparser.Error) as e:
            raise _convert_git_error(e, f"retrieving config for '{key}'") from e

    def get_remote_url(self, remote_name: str | None = None) -> str | None:
        name = remote_name or DEFAULT_REMOTE
        return self.get_config(f"remote.{name}.url")

    def get_configured_user(self) -> GitUser | None:
        name = self.get_config("user.name")
        email = self.get_config("user.email")
        if name is None and email is None:
            return None
        return GitUser(name=name, email=email)

    def remote_repo_add(self, remote_name: str, url: str) -> None:
        try:
            self.repo.create_remote(remote_name, url)
        except GitCommandError as e:
            raise _convert_git_error(e, f"adding remote '{remote_name}'") from e
        logger.info("remote_added", remote=remote_name, url=url)

    def remote_repo_update_url(self, remote_name: str, url: str) -> None:
        try:
            self.repo.remote(remote_name).set_url(url)
        except (ValueError, GitCommandError) as e:
            raise _convert_git_error(
                e, f"updating the URL for remote '{remote_name}'"
            ) from e
        logger.info("remote_url_updated", remote=remote_name, url=url)

    # -------------------------------------------------------------------------
    # Branch and tag discovery
    # -------------------------------------------------------------------------

    def find_branches(self, branch_prefix: str) -> list[str]:
        if not branch_prefix:
            return []
        names = [short_ref_name(head.path) for head in self.repo.heads]
        return [name for name in names if name.startswith(branch_prefix)]

    def find_first_branch(self, branch_prefix: str) -> str | None:
        branches = self.find_branches(branch_prefix)
        return branches[0] if branches else None

    def find_branch(self, branch_name: str) -> str | None:
        head = self._local_head(branch_name) if branch_name else None
        return branch_name if head is not None else None

    def branch_exists(self, branch_name: str) -> bool:
        return self.find_branch(branch_name) is not None

    def remote_branch_exists(self, branch_name: str) -> bool:
        if not branch_name:
            return False
        return any(
            remote_branch_name(ref.path) == branch_name
            for ref in self.repo.refs
            if ref.path.startswith(R_REMOTES)
        )

    def find_tags(self, tag_prefix: str) -> list[str]:
        if not tag_prefix:
            return []
        return [name for name in self._ref_names(R_TAGS) if name.startswith(tag_prefix)]

    def find_first_tag(self, tag_prefix: str) -> str | None:
        tags = self.find_tags(tag_prefix)
        return tags[0] if tags else None

    def find_tag(self, tag_name: str) -> str | None:
        if not tag_name:
            return None
        return tag_name if tag_name in self._ref_names(R_TAGS) else None

    def tag_exists(self, tag_name: str) -> bool:
        return self.find_tag(tag_name) is not None

    # -------------------------------------------------------------------------
    # Working tree and history
    # -------------------------------------------------------------------------

    def checkout(self, branch_name: str) -> None:
        head = self._local_head(branch_name)
        if head is None:
            raise GitClientError(f"Branch '{branch_name}' does not exist")
        try:
            head.checkout()
        except GitCommandError as e:
            raise _convert_git_error(e, f"checking out branch '{branch_name}'") from e
        logger.info("branch_checked_out", branch=branch_name)

    def create_and_checkout(
        self, new_branch_name: str, from_branch_name: str | None = None
    ) -> None:
        if self._local_head(new_branch_name) is not None:
            raise GitClientError(f"Branch '{new_branch_name}' already exists")

        start_point: Commit | str = "HEAD"
        if from_branch_name:
            start = self._local_head(from_branch_name)
            if start is None:
                raise GitClientError(f"Branch '{from_branch_name}' does not exist")
            start_point = start.commit

        try:
            head = self.repo.create_head(new_branch_name, start_point)
        except (GitCommandError, OSError, ValueError) as e:
            raise _convert_git_error(e, f"creating branch '{new_branch_name}'") from e
        try:
            head.checkout()
        except GitCommandError as e:
            self.repo.delete_head(head, force=True)
            raise _convert_git_error(
                e, f"checking out new branch '{new_branch_name}'"
            ) from e
        logger.info(
            "branch_created", branch=new_branch_name, start_point=from_branch_name
        )

    def stage_files(self, filenames: list[str]) -> None:
        """Stage *filenames*, given relative to the working directory."""
        if not filenames:
            return
        root = self.repo.working_tree_dir
        if root is None:
            raise GitClientError("Cannot stage files in a bare repository")
        paths = [os.path.relpath(self._cwd / name, root) for name in filenames]
        try:
            self.repo.index.add(paths)
        except (GitCommandError, OSError, ValueError) as e:
            raise _convert_git_error(e, "adding files to commit list") from e
        logger.debug("files_staged", count=len(paths))

    def get_staged_files(self) -> list[str]:
        repo = self.repo
        if not repo.head.is_valid():
            # Unborn branch: everything in the index is new
            return sorted({str(path) for path, _stage in repo.index.entries})
        return sorted(
            {
                diff.a_path or diff.b_path
                for diff in repo.index.diff(repo.head.commit)
                if diff.a_path or diff.b_path
            }
        )

    def commit(self, message: str) -> None:
        """Stage modifications of tracked files and commit them.

        Raises:
            GitClientError: If there is nothing to commit.
        """
        repo = self.repo
        try:
            repo.git.add("-u")
            if not self.get_staged_files():
                raise GitClientError("Error while committing: nothing to commit")
            commit = repo.index.commit(message)
        except GitCommandError as e:
            raise _convert_git_error(e, "committing") from e
        logger.info("commit_created", sha=commit.hexsha[:7], message=message[:80])

    def merge(
        self,
        branch_name: str,
        rebase: bool = False,
        noff: bool = False,
        squash: bool = False,
        message: str | None = None,
    ) -> None:
        """Merge *branch_name* into the current branch, or rebase onto it.

        Without *rebase* or *noff* the merge fast-forwards when possible.

        Raises:
            GitClientError: If *branch_name* is not a local branch.
            MergeError: If the merge or rebase cannot complete.
        """
        if self._local_head(branch_name) is None:
            raise GitClientError(f"The branch to merge ({branch_name}) doesn't exist")

        try:
            if rebase:
                self.repo.git.rebase(branch_name)
            else:
                args: list[str] = []
                if squash:
                    args.append("--squash")
                else:
                    if noff:
                        args.append("--no-ff")
                    args.extend(["-m", message] if message else ["--no-edit"])
                args.append(branch_name)
                self.repo.git.merge(*args)
        except GitCommandError as e:
            raise _convert_merge_error(e, branch_name) from e
        logger.info(
            "branch_merged",
            branch=branch_name,
            rebase=rebase,
            noff=noff,
            squash=squash,
        )

    def merge_noff(self, branch_name: str) -> None:
        self.merge(branch_name, False, True, False, None)

    def tag(self, tag_name: str, message: str) -> None:
        try:
            self.repo.create_tag(tag_name, message=message)
        except GitCommandError as e:
            raise _convert_git_error(e, "tagging") from e
        logger.info("tag_created", tag=tag_name)

    def branch_delete(self, branch_name: str, force: bool = False) -> None:
        try:
            self.repo.delete_head(branch_name, force=force)
        except GitCommandError as e:
            raise _convert_git_error(e, f"deleting branch '{branch_name}'") from e
        logger.info("branch_deleted", branch=branch_name, force=force)

    def has_uncommitted_changes(self, allow_untracked: bool = False) -> bool:
        """Return True if tracked content differs from HEAD.

        Untracked files count as changes unless *allow_untracked* is True;
        ignored files never count.
        """
        repo = self.repo
        try:
            staged = self.get_staged_files()
            unstaged = [diff.a_path for diff in repo.index.diff(None)]
            untracked = [] if allow_untracked else repo.untracked_files
        except (GitCommandError, ValueError) as e:
            raise _convert_git_error(e, "checking for uncommitted changes") from e

        logger.debug(
            "working_tree_verified",
            staged=len(staged),
            unstaged=len(unstaged),
            untracked=len(untracked),
            allow_untracked=allow_untracked,
        )
        return bool(staged or unstaged or untracked)

    def get_current_branch_name(self) -> str:
        """Return the active branch, or the commit hash on a detached HEAD."""
        repo = self.repo
        if repo.head.is_detached:
            return repo.head.commit.hexsha
        return repo.active_branch.name

    def get_last_commit(self, branch_name: str) -> GitCommit | None:
        """Return the tip commit of *branch_name*.

        The name is resolved as a local branch first, then as any revision
        (hash, tag, remote branch). Returns None when neither resolves.
        """
        head = self._local_head(branch_name) if branch_name else None
        if head is not None:
            commit = head.commit
        else:
            logger.debug("branch_ref_not_found", ref=branch_name)
            try:
                commit = self.repo.commit(branch_name)
            except (BadName, BadObject, ValueError) as e:
                logger.info("commit_not_found", ref=branch_name, reason=str(e))
                return None

        message = commit.message
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        return GitCommit(
            hash=commit.hexsha,
            user=GitUser(
                name=commit.committer.name or None,
                email=commit.committer.email or None,
            ),
            message=_commit_subject(message),
            date=commit.committed_datetime,
        )

    # -------------------------------------------------------------------------
    # Remote operations
    # -------------------------------------------------------------------------

    def fetch(self) -> None:
        remote = self._remote()
        try:
            remote.fetch()
        except GitCommandError as e:
            raise _convert_git_error(e, "fetching from remote") from e
        logger.info("fetch_completed", remote=remote.name)

    def pull(self, branch_name: str) -> None:
        """Pull *branch_name*.

        An existing local branch is checked out and pulled. Otherwise the
        branch is fetched and a local branch tracking it is created.
        """
        remote = self._remote()
        if self._local_head(branch_name) is not None:
            self.checkout(branch_name)
            try:
                self.repo.git.pull(remote.name, branch_name)
            except GitCommandError as e:
                raise _convert_git_error(e, "pulling") from e
        else:
            try:
                remote.fetch(branch_name)
                remote_ref = RemoteReference(
                    self.repo, f"{R_REMOTES}{remote.name}/{branch_name}"
                )
                if not remote_ref.is_valid():
                    raise GitClientError(
                        f"Error while pulling: {remote.name}/{branch_name} not found"
                    )
                head = self.repo.create_head(branch_name, remote_ref)
                head.set_tracking_branch(remote_ref)
                head.checkout()
            except (GitCommandError, OSError, ValueError) as e:
                raise _convert_git_error(e, "pulling") from e
        logger.info("pull_completed", remote=remote.name, branch=branch_name)

    def push(self, branch_name: str) -> None:
        remote = self._remote()
        self.checkout(branch_name)
        try:
            self.repo.git.push(remote.name, branch_name)
        except GitCommandError as e:
            raise _convert_git_error(e, f"pushing branch: {branch_name}") from e
        logger.info("push_completed", remote=remote.name, branch=branch_name)

    def push_tag(self, tag_name: str) -> None:
        remote = self._remote()
        try:
            self.repo.git.push(remote.name, f"{R_TAGS}{tag_name}")
        except GitCommandError as e:
            raise _convert_git_error(e, f"pushing tag: {tag_name}") from e
        logger.info("tag_pushed", remote=remote.name, tag=tag_name)
