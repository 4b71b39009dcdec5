"""Git client backed by the external ``git`` executable.

Wraps ``git`` commands using :class:`~gitclient.runners.command.CommandRunner`
and normalizes exit codes and captured output into the
:class:`~gitclient.clients.protocol.GitClient` contract.

Commands come in two flavours:

- strict: a non-zero exit code raises :class:`CommandFailedError`, using
  stderr (or stdout when stderr is blank) as the error detail;
- tolerant: the exit code is inspected by the caller (config writes and
  probes such as ``rev-parse --verify``).
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from gitclient.config import resolve_git_executable
from gitclient.constants import (
    COMMAND_NOT_FOUND_EXIT_CODE,
    DEFAULT_REMOTE,
    MERGE_RESOLUTION_HINTS,
    PERMISSION_DENIED_EXIT_CODE,
    R_HEADS,
    R_REMOTES,
    R_TAGS,
    RESET_MERGE,
    RESOLVE_CONFLICTS,
)
from gitclient.exceptions import (
    CommandFailedError,
    GitClientError,
    MergeError,
    RepositoryExistsError,
    RepositoryNotFoundError,
    UnsupportedOperationError,
)
from gitclient.logging import get_logger
from gitclient.models import ClientCapabilities, GitCommit, GitUser
from gitclient.refs import parse_config_key, remote_branch_name, short_ref_name
from gitclient.runners.command import CommandRunner
from gitclient.runners.output import first_output_line, split_output_lines

if TYPE_CHECKING:
    from gitclient.runners.models import CommandResult

__all__ = ["CommandLineGitClient"]

logger = get_logger(__name__)

#: ASCII unit separator between fields of ``git log`` output
_LOG_SEPARATOR = "\x1f"

#: Committer hash, name, email, timestamp and subject of one commit
_LOG_FORMAT = "--format=" + "%x1f".join(["%H", "%cn", "%ce", "%ct", "%s"])

_CAPABILITIES = ClientCapabilities(
    fast_forward_merge=False,
    rebase=True,
    untracked_detection=True,
    closeable=False,
)


class CommandLineGitClient:
    """Git client that shells out to the ``git`` executable.

    Satisfies :class:`~gitclient.clients.protocol.GitClient` via structural
    typing. Holds no persistent resource: ``close()`` is a no-op and
    ``is_closed()`` is always False.

    Args:
        git_executable: Executable name or path; blank for the platform
            default. Resolved once, here.
        cwd: Directory the commands run in. Defaults to the current
            directory at construction time.
        runner: Optional pre-configured CommandRunner (for testing).
        default_remote: Remote used by fetch, pull and push.

    Example:
        ```python
        client = CommandLineGitClient()
        client.load_repo()
        if not client.has_uncommitted_changes():
            client.create_and_checkout("release/1.2", "develop")
        ```
    """

    def __init__(
        self,
        git_executable: str | None = None,
        cwd: Path | str | None = None,
        runner: CommandRunner | None = None,
        default_remote: str = DEFAULT_REMOTE,
    ) -> None:
        self._git_executable = resolve_git_executable(git_executable)
        self._cwd = Path(cwd) if cwd is not None else Path.cwd()
        self._runner = runner or CommandRunner(cwd=self._cwd)
        self._default_remote = default_remote
        self._loaded = False

    @property
    def git_executable(self) -> str:
        """Resolved git executable."""
        return self._git_executable

    @property
    def cwd(self) -> Path:
        """Working directory for git commands."""
        return self._cwd

    @property
    def capabilities(self) -> ClientCapabilities:
        """Fast-forward merges are not available on this backend."""
        return _CAPABILITIES

    # =====================================================================
    # Internal helpers
    # =====================================================================

    def _run_git_tolerant(self, *args: str, cwd: Path | None = None) -> CommandResult:
        """Run a git command without failing on a non-zero exit code."""
        cmd = [self._git_executable, *args]
        return self._runner.run(cmd, cwd=cwd if cwd is not None else self._cwd)

    def _run_git(
        self,
        *args: str,
        cwd: Path | None = None,
        error_msg: str = "git command failed",
    ) -> CommandResult:
        """Run a git command that must succeed.

        Raises:
            CommandFailedError: If the command exits with a non-zero code.
        """
        result = self._run_git_tolerant(*args, cwd=cwd)
        if not result.success:
            detail = result.error_detail
            raise CommandFailedError(
                f"{error_msg}: {detail}" if detail else error_msg,
                command=[self._git_executable, *args],
                returncode=result.returncode,
                stderr=detail,
            )
        return result

    def _run_git_stdout(self, *args: str, error_msg: str = "git command failed") -> str:
        """Run a strict git command and return its stdout."""
        return self._run_git(*args, error_msg=error_msg).stdout

    def _check_executable(self, result: CommandResult) -> None:
        """Raise if the git executable itself could not be started."""
        if result.returncode in (COMMAND_NOT_FOUND_EXIT_CODE, PERMISSION_DENIED_EXIT_CODE):
            raise CommandFailedError(
                f"Unable to run {self._git_executable}: {result.error_detail}",
                command=[self._git_executable],
                returncode=result.returncode,
                stderr=result.error_detail,
            )

    def _list_refs(self, namespace: str) -> list[str]:
        """Return full ref names under *namespace*, in git's order."""
        stdout = self._run_git_stdout(
            "for-each-ref",
            "--format=%(refname)",
            namespace.rstrip("/"),
            error_msg=f"Error while listing {namespace}",
        )
        return split_output_lines(stdout)

    def _resolve_commit(self, revision: str) -> str | None:
        """Resolve *revision* to a commit hash, or None."""
        result = self._run_git_tolerant(
            "rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}"
        )
        self._check_executable(result)
        if not result.success:
            return None
        return first_output_line(result.stdout)

    # =====================================================================
    # Repository lifecycle
    # =====================================================================

    def repo_exists(self) -> bool:
        """Check whether a repository is discoverable from the working directory."""
        if not self._cwd.is_dir():
            return False
        result = self._run_git_tolerant("rev-parse", "--git-dir")
        self._check_executable(result)
        return result.success

    def _is_repo_root(self, path: Path) -> bool:
        """Return True if *path* is the top level of a working tree."""
        if not path.is_dir():
            return False
        result = self._run_git_tolerant("rev-parse", "--show-toplevel", cwd=path)
        self._check_executable(result)
        toplevel = first_output_line(result.stdout) if result.success else None
        return toplevel is not None and Path(toplevel).resolve() == path.resolve()

    def create_repo(self, path: Path | str | None = None) -> None:
        """Initialize a repository at *path* (default: working directory).

        Raises:
            RepositoryExistsError: If *path* already is a repository.
        """
        target = self._cwd if path is None else self._cwd / Path(path)
        if self._is_repo_root(target):
            raise RepositoryExistsError(path=target)

        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise GitClientError(f"Error while creating the repository: {e}") from e
        self._run_git(
            "init",
            str(target),
            cwd=target,
            error_msg="Error while creating the repository",
        )
        self._cwd = target
        self._loaded = True
        logger.info("repository_created", path=str(target))

    def load_repo(self, path: Path | str | None = None) -> None:
        """Attach to the repository found from *path* upward.

        Raises:
            RepositoryNotFoundError: If no repository is found.
        """
        start = self._cwd if path is None else self._cwd / Path(path)
        if not start.is_dir():
            raise RepositoryNotFoundError(path=start)

        result = self._run_git_tolerant("rev-parse", "--git-dir", cwd=start)
        self._check_executable(result)
        if not result.success:
            raise RepositoryNotFoundError(path=start)

        self._cwd = start
        self._loaded = True
        logger.debug("repository_loaded", path=str(start))

    def repo_loaded(self) -> bool:
        """Return True once load_repo() or create_repo() succeeded."""
        return self._loaded

    def close(self) -> None:
        """Nothing to release for the command-line backend."""

    def is_closed(self) -> bool:
        """Always False: there is no resource to close."""
        return False

    def get_git_directory(self) -> Path:
        """Return the absolute path of the repository metadata directory."""
        stdout = self._run_git_stdout(
            "rev-parse",
            "--absolute-git-dir",
            error_msg="Error while locating the git directory",
        )
        git_dir = first_output_line(stdout)
        if git_dir is None:
            raise GitClientError("git did not report a git directory")
        return Path(git_dir)

    # =====================================================================
    # Configuration
    # =====================================================================

    def set_config(self, key: str, value: str) -> None:
        """Store *value* under *key*, ignoring git's exit code (best effort).

        Raises:
            InvalidConfigKeyError: If *key* does not have exactly 3 parts.
        """
        parse_config_key(key, (3,))
        if value is None:
            raise GitClientError("The config attribute value cannot be None")

        result = self._run_git_tolerant("config", key, value)
        self._check_executable(result)
        if not result.success:
            logger.warning(
                "config_set_ignored_failure",
                key=key,
                returncode=result.returncode,
                detail=result.error_detail,
            )

    def get_config(self, key: str) -> str | None:
        """Return the value of *key*, or None if it is unset.

        Raises:
            InvalidConfigKeyError: If *key* does not have 2 or 3 parts.
        """
        parse_config_key(key, (2, 3))

        result = self._run_git_tolerant("config", "--get", key)
        self._check_executable(result)
        if result.returncode == 1:
            return None
        if not result.success:
            raise CommandFailedError(
                f"Error while retrieving config for '{key}': {result.error_detail}",
                command=[self._git_executable, "config", "--get", key],
                returncode=result.returncode,
                stderr=result.error_detail,
            )
        value = result.stdout
        return value[:-1] if value.endswith("\n") else value

    def get_remote_url(self, remote_name: str | None = None) -> str | None:
        """Return the URL configured for *remote_name* (default ``origin``)."""
        name = remote_name or DEFAULT_REMOTE
        return self.get_config(f"remote.{name}.url")

    def get_configured_user(self) -> GitUser | None:
        """Return the configured identity, or None if neither field is set."""
        name = self.get_config("user.name")
        email = self.get_config("user.email")
        if name is None and email is None:
            return None
        return GitUser(name=name, email=email)

    def remote_repo_add(self, remote_name: str, url: str) -> None:
        """Add a remote."""
        self._run_git(
            "remote",
            "add",
            remote_name,
            url,
            error_msg=f"Error while adding remote '{remote_name}'",
        )
        logger.info("remote_added", remote=remote_name, url=url)

    def remote_repo_update_url(self, remote_name: str, url: str) -> None:
        """Change the URL of a remote."""
        self._run_git(
            "remote",
            "set-url",
            remote_name,
            url,
            error_msg=f"Error while updating the URL for remote '{remote_name}'",
        )
        logger.info("remote_url_updated", remote=remote_name, url=url)

    # =====================================================================
    # Branch and tag discovery
    # =====================================================================

    def find_branches(self, branch_prefix: str) -> list[str]:
        """Return local branch names starting with *branch_prefix*.

        An empty prefix matches nothing.
        """
        if not branch_prefix:
            return []
        names = [short_ref_name(ref) for ref in self._list_refs(R_HEADS)]
        return [name for name in names if name.startswith(branch_prefix)]

    def find_first_branch(self, branch_prefix: str) -> str | None:
        branches = self.find_branches(branch_prefix)
        return branches[0] if branches else None

    def find_branch(self, branch_name: str) -> str | None:
        for branch in self.find_branches(branch_name):
            if branch == branch_name:
                return branch
        return None

    def branch_exists(self, branch_name: str) -> bool:
        return self.find_branch(branch_name) is not None

    def remote_branch_exists(self, branch_name: str) -> bool:
        """Check remote-tracking branches of every remote for *branch_name*."""
        if not branch_name:
            return False
        for ref in self._list_refs(R_REMOTES):
            if remote_branch_name(ref) == branch_name:
                return True
        return False

    def find_tags(self, tag_prefix: str) -> list[str]:
        """Return tag names starting with *tag_prefix*.

        An empty prefix matches nothing.
        """
        if not tag_prefix:
            return []
        names = [short_ref_name(ref) for ref in self._list_refs(R_TAGS)]
        return [name for name in names if name.startswith(tag_prefix)]

    def find_first_tag(self, tag_prefix: str) -> str | None:
        tags = self.find_tags(tag_prefix)
        return tags[0] if tags else None

    def find_tag(self, tag_name: str) -> str | None:
        for tag in self.find_tags(tag_name):
            if tag == tag_name:
                return tag
        return None

    def tag_exists(self, tag_name: str) -> bool:
        return self.find_tag(tag_name) is not None

    # =====================================================================
    # Working tree and history
    # =====================================================================

    def checkout(self, branch_name: str) -> None:
        self._run_git(
            "checkout",
            branch_name,
            error_msg=f"Error while checking out branch '{branch_name}'",
        )
        logger.info("branch_checked_out", branch=branch_name)

    def create_and_checkout(
        self, new_branch_name: str, from_branch_name: str | None = None
    ) -> None:
        """Equivalent to ``git checkout -b new [from]``."""
        args = ["checkout", "-b", new_branch_name]
        if from_branch_name:
            args.append(from_branch_name)
        self._run_git(
            *args,
            error_msg=f"Error while creating branch '{new_branch_name}'",
        )
        logger.info(
            "branch_created", branch=new_branch_name, start_point=from_branch_name
        )

    def stage_files(self, filenames: list[str]) -> None:
        if not filenames:
            return
        self._run_git(
            "add",
            "--",
            *filenames,
            error_msg="Error while adding files to commit list",
        )
        logger.debug("files_staged", count=len(filenames))

    def get_staged_files(self) -> list[str]:
        stdout = self._run_git_stdout(
            "-c",
            "core.quotePath=false",
            "diff",
            "--cached",
            "--name-only",
            error_msg="Error while retrieving staged files",
        )
        return split_output_lines(stdout)

    def commit(self, message: str) -> None:
        self._run_git("commit", "-a", "-m", message, error_msg="Error while committing")
        logger.info("commit_created", message=message[:80])

    def merge(
        self,
        branch_name: str,
        rebase: bool = False,
        noff: bool = False,
        squash: bool = False,
        message: str | None = None,
    ) -> None:
        """Merge *branch_name* into the current branch, or rebase onto it.

        Raises:
            UnsupportedOperationError: For fast-forward merges
                (``rebase``, ``noff`` and ``squash`` all False).
            GitClientError: If *branch_name* is not a local branch.
            MergeError: If the merge or rebase cannot complete.
        """
        if not (rebase or noff or squash):
            raise UnsupportedOperationError(
                "Fast-forward merges are not supported by the command-line "
                "backend; pass noff=True, squash=True or use the library backend",
                operation="merge",
                backend="cli",
            )
        if not self.branch_exists(branch_name):
            raise GitClientError(f"The branch to merge ({branch_name}) doesn't exist")

        if rebase:
            args = ["rebase", branch_name]
        else:
            args = ["merge"]
            if squash:
                args.append("--squash")
            else:
                args.append("--no-ff")
                args.extend(["-m", message] if message else ["--no-edit"])
            args.append(branch_name)

        result = self._run_git_tolerant(*args)
        self._check_executable(result)
        if not result.success:
            output = f"{result.stdout}\n{result.stderr}".lower()
            resolution = RESOLVE_CONFLICTS if "conflict" in output else RESET_MERGE
            raise MergeError(
                f"Error while merging. {MERGE_RESOLUTION_HINTS[resolution]}: "
                f"{result.error_detail}",
                branch=branch_name,
                resolution=resolution,
            )
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
        self._run_git(
            "tag", "-a", tag_name, "-m", message, error_msg="Error while tagging"
        )
        logger.info("tag_created", tag=tag_name)

    def branch_delete(self, branch_name: str, force: bool = False) -> None:
        self._run_git(
            "branch",
            "-D" if force else "-d",
            branch_name,
            error_msg=f"Error while deleting branch '{branch_name}'",
        )
        logger.info("branch_deleted", branch=branch_name, force=force)

    def has_uncommitted_changes(self, allow_untracked: bool = False) -> bool:
        """Return True if tracked content differs from HEAD.

        Untracked files count as changes unless *allow_untracked* is True;
        ignored files never count.
        """
        stdout = self._run_git_stdout(
            "status",
            "--porcelain",
            "--ignore-submodules",
            "--untracked-files=no" if allow_untracked else "--untracked-files=all",
            error_msg="Error while checking for uncommitted changes",
        )
        entries = split_output_lines(stdout)
        untracked = [entry for entry in entries if entry.startswith("??")]
        changed = len(entries) - len(untracked)
        logger.debug(
            "working_tree_verified",
            changed=changed,
            untracked=len(untracked),
            allow_untracked=allow_untracked,
        )
        return bool(entries)

    def get_current_branch_name(self) -> str:
        result = self._run_git_tolerant("symbolic-ref", "--short", "-q", "HEAD")
        self._check_executable(result)
        branch = first_output_line(result.stdout) if result.success else None
        if branch:
            return branch

        # Detached HEAD
        sha = first_output_line(
            self._run_git_stdout(
                "rev-parse", "HEAD", error_msg="Error while retrieving the current branch"
            )
        )
        if sha is None:
            raise GitClientError("Error while retrieving the current branch")
        return sha

    def get_last_commit(self, branch_name: str) -> GitCommit | None:
        """Return the tip commit of *branch_name*.

        The name is resolved as a local branch first, then as any revision
        (hash, tag, remote branch). Returns None when neither resolves.
        """
        sha = self._resolve_commit(f"{R_HEADS}{branch_name}")
        if sha is None:
            logger.debug("branch_ref_not_found", ref=branch_name)
            sha = self._resolve_commit(branch_name)
        if sha is None:
            logger.info("commit_not_found", ref=branch_name)
            return None

        stdout = self._run_git_stdout(
            "log",
            "-1",
            _LOG_FORMAT,
            sha,
            error_msg="Error while retrieving the last commit",
        )
        fields = stdout.rstrip("\n").split(_LOG_SEPARATOR)
        if len(fields) != 5:
            raise GitClientError(f"Unexpected git log output for {branch_name}: {stdout!r}")

        commit_hash, name, email, timestamp, subject = fields
        return GitCommit(
            hash=commit_hash,
            user=GitUser(name=name or None, email=email or None),
            message=subject,
            date=datetime.fromtimestamp(int(timestamp), tz=timezone.utc),
        )

    # =====================================================================
    # Remote operations
    # =====================================================================

    def fetch(self) -> None:
        self._run_git(
            "fetch",
            self._default_remote,
            error_msg="Error while fetching from remote",
        )
        logger.info("fetch_completed", remote=self._default_remote)

    def pull(self, branch_name: str) -> None:
        """Pull *branch_name*.

        An existing local branch is checked out and pulled. Otherwise the
        branch is fetched and a local branch tracking it is created.
        """
        remote = self._default_remote
        if self.branch_exists(branch_name):
            self.checkout(branch_name)
            self._run_git("pull", remote, branch_name, error_msg="Error while pulling")
        else:
            self._run_git(
                "fetch", remote, branch_name, error_msg="Error while pulling"
            )
            self._run_git(
                "checkout",
                "-b",
                branch_name,
                "--track",
                f"{remote}/{branch_name}",
                error_msg="Error while pulling",
            )
        logger.info("pull_completed", remote=remote, branch=branch_name)

    def push(self, branch_name: str) -> None:
        self.checkout(branch_name)
        self._run_git(
            "push",
            self._default_remote,
            branch_name,
            error_msg=f"Error while pushing branch: {branch_name}",
        )
        logger.info("push_completed", remote=self._default_remote, branch=branch_name)

    def push_tag(self, tag_name: str) -> None:
        self._run_git(
            "push",
            self._default_remote,
            f"{R_TAGS}{tag_name}",
            error_msg=f"Error while pushing tag: {tag_name}",
        )
        logger.info("tag_pushed", remote=self._default_remote, tag=tag_name)
