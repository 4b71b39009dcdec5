"""Fixtures running every backend against real temporary repositories."""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from git import Repo

from gitclient.clients import GitClient, create_git_client
from gitclient.config import GitClientConfig

BACKENDS = ["cli", "library"]

ClientFactory = Callable[[Path], GitClient]


def configure_identity(repo: Repo) -> None:
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
        writer.set_value("commit", "gpgsign", "false")
        writer.set_value("tag", "gpgsign", "false")


def commit_file(repo: Repo, name: str, content: str, message: str) -> str:
    path = Path(repo.working_tree_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.index.add([name])
    return repo.index.commit(message).hexsha


@pytest.fixture(params=BACKENDS)
def backend(request: pytest.FixtureRequest) -> str:
    return request.param


@pytest.fixture
def make_client(backend: str, clean_env: None) -> Generator[ClientFactory, None, None]:
    """Build clients for the current backend, closing them afterwards."""
    created: list[GitClient] = []

    def factory(path: Path) -> GitClient:
        client = create_git_client(
            backend, GitClientConfig(backend=backend, working_dir=path)
        )
        created.append(client)
        return client

    yield factory
    for client in created:
        client.close()


@pytest.fixture
def local_repo(tmp_path: Path) -> Generator[Repo, None, None]:
    """Repository with one commit and an ``origin`` bare remote holding it."""
    remote_path = tmp_path / "remote.git"
    Repo.init(remote_path, bare=True).close()

    repo = Repo.init(tmp_path / "local")
    configure_identity(repo)
    commit_file(repo, "README.md", "# Test Repo\n", "Initial commit")
    repo.create_remote("origin", str(remote_path))
    repo.git.push("origin", repo.active_branch.name)
    repo.remotes.origin.fetch()

    yield repo
    repo.close()


@pytest.fixture
def client(local_repo: Repo, make_client: ClientFactory) -> GitClient:
    """Client of the current backend, loaded on ``local_repo``."""
    git_client = make_client(Path(local_repo.working_tree_dir))
    git_client.load_repo()
    return git_client


@pytest.fixture
def other_clone(local_repo: Repo, tmp_path: Path) -> Generator[Repo, None, None]:
    """Second clone of the remote, used to publish changes independently."""
    remote_url = local_repo.remotes.origin.url
    clone = Repo.clone_from(remote_url, tmp_path / "other")
    configure_identity(clone)
    yield clone
    clone.close()
