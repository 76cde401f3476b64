"""Archive backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from ..files import FileEntry

ARCHIVE_NAME = "app.zip"


@dataclass(frozen=True)
class ArchiveTarget:
    """Where the archive goes and which backend writes it."""

    path: Path
    backend: str


class ArchiveBackend(ABC):
    """Writes the application archive to a destination path."""

    name: str = ""

    @abstractmethod
    def write(
        self, app_path: Path, destination: Path, entries: Iterable[FileEntry]
    ) -> None:
        """Produces the archive at `destination`, overwriting any existing file."""
