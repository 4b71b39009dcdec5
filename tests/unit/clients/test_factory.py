"""Tests for create_git_client."""

from __future__ import annotations

from pathlib import Path

import pytest

from gitclient.clients import (
    CommandLineGitClient,
    GitClient,
    LibraryGitClient,
    create_git_client,
)
from gitclient.config import GitClientConfig


@pytest.fixture
def config(temp_dir: Path, clean_env: None) -> GitClientConfig:
    return GitClientConfig(
        backend="library",
        working_dir=temp_dir,
        git_executable="/opt/git/bin/git",
        default_remote="upstream",
    )


class TestCreateGitClient:
    @pytest.mark.parametrize("backend", ["cli", "command_line", "CLI"])
    def test_cli(self, config: GitClientConfig, temp_dir: Path, backend: str) -> None:
        client = create_git_client(backend, config)

        assert isinstance(client, CommandLineGitClient)
        assert client.git_executable == "/opt/git/bin/git"
        assert client.cwd == temp_dir

    def test_library(self, config: GitClientConfig, temp_dir: Path) -> None:
        client = create_git_client("library", config)

        assert isinstance(client, LibraryGitClient)
        assert client.cwd == temp_dir
        assert client.repo_loaded() is False

    def test_defaults_to_configured_backend(self, config: GitClientConfig) -> None:
        assert isinstance(create_git_client(config=config), LibraryGitClient)

        cli_config = config.model_copy(update={"backend": "cli"})
        assert isinstance(create_git_client(config=cli_config), CommandLineGitClient)

    def test_loads_config_when_omitted(
        self, temp_dir: Path, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(temp_dir)
        monkeypatch.setenv("GITCLIENT_BACKEND", "cli")

        assert isinstance(create_git_client(), CommandLineGitClient)

    def test_unknown_backend(self, config: GitClientConfig) -> None:
        with pytest.raises(ValueError, match="Unknown git backend"):
            create_git_client("svn", config)

    @pytest.mark.parametrize("backend", ["cli", "library"])
    def test_result_satisfies_protocol(
        self, config: GitClientConfig, backend: str
    ) -> None:
        assert isinstance(create_git_client(backend, config), GitClient)
