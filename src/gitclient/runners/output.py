"""Normalization of captured command output."""

from __future__ import annotations

__all__ = ["first_output_line", "split_output_lines"]

_QUOTE_CHARS = "\"'"


def split_output_lines(output: str | None) -> list[str]:
    """Split command output into trimmed, non-empty entries.

    Quote characters wrapping a line are removed: depending on the platform
    and shell, ``git for-each-ref --format="..."`` output can come back
    wrapped in quotes.

    Args:
        output: Raw captured stdout.

    Returns:
        One entry per non-blank line, in output order.

    Example:
        >>> split_output_lines('"main"\\n"develop"\\n\\n')
        ['main', 'develop']
    """
    if not output:
        return []
    lines: list[str] = []
    for raw in output.splitlines():
        line = raw.strip().strip(_QUOTE_CHARS).strip()
        if line:
            lines.append(line)
    return lines


def first_output_line(output: str | None) -> str | None:
    """Return the first normalized line of output, or None if there is none."""
    lines = split_output_lines(output)
    return lines[0] if lines else None
