"""Helpers for ref names and config keys shared by both backends."""

from __future__ import annotations

from gitclient.constants import R_HEADS, R_REMOTES, R_TAGS
from gitclient.exceptions import InvalidConfigKeyError

__all__ = [
    "parse_config_key",
    "remote_branch_name",
    "short_ref_name",
]


def short_ref_name(refname: str) -> str:
    """Strip the ``refs/heads/`` or ``refs/tags/`` namespace from a ref.

    Args:
        refname: Full ref name, e.g. ``refs/heads/feature/x``.

    Returns:
        The short name (``feature/x``). Names outside those namespaces are
        returned unchanged.
    """
    for prefix in (R_HEADS, R_TAGS):
        if refname.startswith(prefix):
            return refname[len(prefix) :]
    return refname


def remote_branch_name(refname: str) -> str | None:
    """Extract the branch part of a remote-tracking ref.

    ``refs/remotes/origin/feature/x`` yields ``feature/x``. Symbolic
    ``HEAD`` refs and refs outside ``refs/remotes/`` yield None.
    """
    if not refname.startswith(R_REMOTES):
        return None
    _remote, sep, branch = refname[len(R_REMOTES) :].partition("/")
    if not sep or not branch or branch == "HEAD":
        return None
    return branch


def parse_config_key(
    key: str | None,
    allowed_parts: tuple[int, ...] = (3,),
) -> tuple[str, str | None, str]:
    """Split a dotted config key into (section, subsection, name).

    Args:
        key: Key such as ``remote.origin.url`` or ``user.name``.
        allowed_parts: Segment counts accepted for this call.

    Returns:
        Tuple of section, subsection (None for 2-part keys) and name.

    Raises:
        InvalidConfigKeyError: If the key is empty or has a segment count
            outside ``allowed_parts``.
    """
    if not key:
        raise InvalidConfigKeyError("The config attribute name cannot be empty", key=key)

    parts = key.split(".")
    if len(parts) not in allowed_parts or not all(parts):
        expected = " or ".join(str(n) for n in allowed_parts)
        raise InvalidConfigKeyError(
            f"The config attribute name must contain {expected} parts "
            f"(specified: {key})",
            key=key,
        )

    if len(parts) == 2:
        return parts[0], None, parts[1]
    return parts[0], parts[1], parts[2]
