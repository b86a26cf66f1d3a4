"""Exceptions raised by the tapbump pipeline."""

from __future__ import annotations

from pathlib import Path


class TapbumpError(Exception):
    """Base class for all pipeline failures.

    ``stage`` is filled in by the pipeline with the stage that was running
    when the error was raised.
    """

    exit_code = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.stage: str | None = None


class UsageError(TapbumpError):
    """Missing or invalid command-line input or configuration."""


class DownloadError(TapbumpError):
    """The release archive could not be downloaded, or came back empty."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(f"{message} (url: {url})")
        self.url = url


class ArtifactReadError(TapbumpError):
    """The downloaded archive could not be read back for hashing."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message} (path: {path})")
        self.path = path


class InvariantViolation(TapbumpError):  # noqa: N818
    """Internal data is malformed, which points at a bug rather than user error."""


class WriteError(TapbumpError):
    """The formula file or its directories could not be written."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message} (path: {path})")
        self.path = path
