"""Tests for the gitclient exception hierarchy."""

from __future__ import annotations

from pathlib import Path

import pytest

from gitclient.exceptions import (
    CommandFailedError,
    ConfigError,
    GitClientError,
    InvalidConfigKeyError,
    MergeError,
    RepositoryClosedError,
    RepositoryExistsError,
    RepositoryNotFoundError,
    RepositoryNotLoadedError,
    RunnerError,
    UnsupportedOperationError,
    WorkingDirectoryError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc",
        [
            CommandFailedError("failed"),
            ConfigError("bad config"),
            InvalidConfigKeyError("bad key"),
            MergeError("conflict"),
            RepositoryClosedError(),
            RepositoryExistsError(),
            RepositoryNotFoundError(),
            RepositoryNotLoadedError(),
            UnsupportedOperationError("nope"),
            WorkingDirectoryError("missing"),
        ],
    )
    def test_every_error_is_a_git_client_error(self, exc: GitClientError) -> None:
        assert isinstance(exc, GitClientError)
        assert exc.message == str(exc)

    def test_runner_errors(self) -> None:
        assert issubclass(CommandFailedError, RunnerError)
        assert issubclass(WorkingDirectoryError, RunnerError)


class TestGitClientError:
    def test_cause_is_preserved(self) -> None:
        cause = OSError("disk full")
        with pytest.raises(GitClientError) as exc_info:
            try:
                raise cause
            except OSError as e:
                raise GitClientError("Error while committing") from e

        assert exc_info.value.__cause__ is cause


class TestRepositoryErrors:
    def test_exists_default_message_and_path(self) -> None:
        error = RepositoryExistsError(path=Path("/srv/repo"))
        assert error.path == Path("/srv/repo")
        assert "already exists" in error.message

    def test_not_found_default_message(self) -> None:
        error = RepositoryNotFoundError(path="/tmp/x")
        assert error.path == "/tmp/x"
        assert "No git repository found" in error.message


class TestMergeError:
    def test_resolve_conflicts_hint(self) -> None:
        error = MergeError("merge failed", branch="develop", resolution="resolve_conflicts")
        assert error.branch == "develop"
        assert error.hint == "please resolve your merge conflicts"

    def test_reset_merge_hint(self) -> None:
        error = MergeError("merge failed", resolution="reset_merge")
        assert "git reset --merge" in error.hint

    def test_no_resolution(self) -> None:
        assert MergeError("merge failed").hint is None


class TestCommandFailedError:
    def test_attributes(self) -> None:
        error = CommandFailedError(
            "Error while tagging: fatal: tag 'v1' already exists",
            command=("git", "tag", "-a", "v1"),
            returncode=128,
            stderr="fatal: tag 'v1' already exists",
        )
        assert error.command == ["git", "tag", "-a", "v1"]
        assert error.returncode == 128
        assert error.stderr == "fatal: tag 'v1' already exists"


class TestUnsupportedOperationError:
    def test_attributes(self) -> None:
        error = UnsupportedOperationError("no ff", operation="merge", backend="cli")
        assert error.operation == "merge"
        assert error.backend == "cli"


class TestConfigError:
    def test_attributes(self) -> None:
        error = ConfigError("Invalid configuration", field="backend", value="svn")
        assert error.field == "backend"
        assert error.value == "svn"
