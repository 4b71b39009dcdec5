"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest

from gitclient.logging import bind_context, clear_context, configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_context() -> Iterator[None]:
    clear_context()
    yield
    clear_context()


class TestConfigureLogging:
    def test_level_override(self) -> None:
        configure_logging(level=logging.DEBUG)
        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITCLIENT_LOG_LEVEL", "error")
        configure_logging()
        assert logging.getLogger().level == logging.ERROR

    def test_single_handler(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(force_json=True, level=logging.INFO)
        bind_context(repository="/srv/repo")

        get_logger("gitclient.test").info("branch_created", branch="feature/x")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "branch_created"
        assert event["branch"] == "feature/x"
        assert event["repository"] == "/srv/repo"
        assert event["level"] == "info"


class TestGetLogger:
    def test_returns_structlog_logger(self) -> None:
        log = get_logger(__name__)
        bound = log.bind(branch="main")
        assert hasattr(bound, "info")
