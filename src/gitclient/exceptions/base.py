from __future__ import annotations


class GitClientError(Exception):
    """Base exception class for all gitclient errors.

    Every failure raised by a git client backend is a GitClientError (or a
    subclass), so callers can handle "VCS operation failed" with a single
    except clause regardless of the backend in use. When a backend exception
    caused the failure it is chained with ``raise ... from``, so it is
    available as ``__cause__``.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            client.merge_noff("release/1.2")
        except GitClientError as e:
            logger.error("merge_failed", error=e.message)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the GitClientError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
