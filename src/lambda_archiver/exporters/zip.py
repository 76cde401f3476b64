"""Entry-by-entry ZIP writer with explicit Unix metadata."""

from __future__ import annotations

import os
import shutil
import zipfile
from pathlib import Path
from typing import Iterable, Optional

from ..errors import ArchiveIOFailure
from ..files import FileEntry
from ..permissions import PermissionPolicy
from .base import ArchiveBackend

# Value of ZipInfo.create_system that tells extractors the attributes are Unix modes.
UNIX_SYSTEM = 3

DETERMINISTIC_DATE_TIME = (1980, 1, 1, 0, 0, 0)

COPY_CHUNK_SIZE = 1024 * 1024


def is_empty_directory(path: Path) -> bool:
    with os.scandir(path) as it:
        return next(it, None) is None


class ZipFileBackend(ArchiveBackend):
    """
    Builds the archive with `zipfile`, one entry at a time.

    Files are stored with the mode chosen by the permission policy. Directories
    only get an entry of their own when they are empty; otherwise they exist
    implicitly through the paths of their files.
    """

    name = "zipfile"

    def __init__(
        self,
        permissions: Optional[PermissionPolicy] = None,
        deterministic: bool = False,
    ):
        self.permissions = permissions or PermissionPolicy()
        self.deterministic = deterministic

    def write(
        self, app_path: Path, destination: Path, entries: Iterable[FileEntry]
    ) -> None:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(
                destination, "w", zipfile.ZIP_DEFLATED, strict_timestamps=False
            ) as zf:
                for entry in entries:
                    if entry.is_dir:
                        self.add_empty_directory(zf, entry)
                    else:
                        self.add_file(zf, entry)
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            self._discard(destination)
            raise ArchiveIOFailure(f"Unable to write archive {destination}: {e}") from e
        except ArchiveIOFailure:
            self._discard(destination)
            raise

    def add_empty_directory(self, zf: zipfile.ZipFile, entry: FileEntry) -> None:
        if not is_empty_directory(entry.real_path):
            return

        zinfo = zipfile.ZipInfo(
            entry.relative_path.rstrip("/") + "/",
            date_time=self._date_time(entry.real_path),
        )
        zinfo.create_system = UNIX_SYSTEM
        zinfo.external_attr = self.permissions.external_attr(entry)
        zf.writestr(zinfo, b"")

    def add_file(self, zf: zipfile.ZipFile, entry: FileEntry) -> None:
        zinfo = zipfile.ZipInfo.from_file(
            entry.real_path, entry.relative_path, strict_timestamps=False
        )
        if self.deterministic:
            zinfo.date_time = DETERMINISTIC_DATE_TIME
        zinfo.create_system = UNIX_SYSTEM
        zinfo.external_attr = self.permissions.external_attr(entry)
        zinfo.compress_type = zipfile.ZIP_DEFLATED

        with open(entry.real_path, "rb") as src, zf.open(zinfo, "w") as dest:
            shutil.copyfileobj(src, dest, COPY_CHUNK_SIZE)

    def _date_time(self, path: Path):
        if self.deterministic:
            return DETERMINISTIC_DATE_TIME
        return zipfile.ZipInfo.from_file(path, strict_timestamps=False).date_time

    @staticmethod
    def _discard(destination: Path) -> None:
        if destination.exists():
            destination.unlink()
