"""Tests for ref-name and config-key helpers."""

from __future__ import annotations

import pytest

from gitclient.exceptions import InvalidConfigKeyError
from gitclient.refs import parse_config_key, remote_branch_name, short_ref_name


class TestShortRefName:
    @pytest.mark.parametrize(
        ("refname", "expected"),
        [
            ("refs/heads/main", "main"),
            ("refs/heads/feature/x", "feature/x"),
            ("refs/tags/v1.0", "v1.0"),
            ("refs/remotes/origin/main", "refs/remotes/origin/main"),
            ("main", "main"),
        ],
    )
    def test_short_ref_name(self, refname: str, expected: str) -> None:
        assert short_ref_name(refname) == expected


class TestRemoteBranchName:
    def test_branch(self) -> None:
        assert remote_branch_name("refs/remotes/origin/main") == "main"

    def test_nested_branch(self) -> None:
        assert remote_branch_name("refs/remotes/upstream/feature/x") == "feature/x"

    def test_symbolic_head(self) -> None:
        assert remote_branch_name("refs/remotes/origin/HEAD") is None

    def test_local_branch(self) -> None:
        assert remote_branch_name("refs/heads/main") is None

    def test_remote_without_branch(self) -> None:
        assert remote_branch_name("refs/remotes/origin") is None


class TestParseConfigKey:
    def test_three_parts(self) -> None:
        assert parse_config_key("remote.origin.url") == ("remote", "origin", "url")

    def test_two_parts_when_allowed(self) -> None:
        assert parse_config_key("user.name", (2, 3)) == ("user", None, "name")

    def test_two_parts_rejected_by_default(self) -> None:
        with pytest.raises(InvalidConfigKeyError) as exc_info:
            parse_config_key("user.name")
        assert exc_info.value.key == "user.name"
        assert "3" in exc_info.value.message

    @pytest.mark.parametrize("key", ["user", "a.b.c.d", "a..b", ""])
    def test_invalid_keys(self, key: str) -> None:
        with pytest.raises(InvalidConfigKeyError):
            parse_config_key(key, (2, 3))

    def test_none_key(self) -> None:
        with pytest.raises(InvalidConfigKeyError):
            parse_config_key(None)
