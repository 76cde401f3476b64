"""Exceptions raised while packaging an application."""

from __future__ import annotations

from typing import List, Optional


class PackagingError(Exception):
    """Base class for every fatal packaging failure."""


class ConfigError(PackagingError):
    """The archiver configuration is missing or invalid."""


class TraversalFailure(PackagingError):
    """A path could not be read while measuring a directory tree."""


class ArchiveIOFailure(PackagingError):
    """The zip archive could not be opened, written or finalized."""


class SizeLimitExceeded(PackagingError):
    def __init__(self, size_mb: int, limit_mb: int = 250):
        self.size_mb = size_mb
        self.limit_mb = limit_mb
        super().__init__(
            f"Application is greater than {limit_mb}MB. "
            f"Your application is {size_mb}MB."
        )


class ExternalToolFailure(PackagingError):
    """The external zip command exited unsuccessfully."""

    def __init__(
        self,
        command: List[str],
        returncode: Optional[int],
        output: str = "",
        reason: Optional[str] = None,
    ):
        self.command = command
        self.returncode = returncode
        self.output = output

        message = reason or f"'{' '.join(command)}' exited with status {returncode}"
        if output.strip():
            message = f"{message}\n{output.strip()}"
        super().__init__(message)
