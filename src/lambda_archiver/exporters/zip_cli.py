"""Archive backend that delegates to the platform `zip` utility."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Iterable, List, Optional

from ..errors import ArchiveIOFailure, ExternalToolFailure
from ..files import FileEntry
from .base import ArchiveBackend
from .zip import is_empty_directory


class ZipCliBackend(ArchiveBackend):
    """
    Runs `zip <destination> -@` from the application root, feeding it the
    entry list on stdin.

    Files and empty directories are archived exactly as the zipfile writer
    would lay them out; non-empty directories only appear through their
    files. Modes come from the filesystem as the tool reads them, so the
    configured permission overrides do not apply on this backend.
    """

    name = "zip-cli"

    def __init__(self, executable: str = "zip", timeout: Optional[float] = None):
        self.executable = executable
        self.timeout = timeout

    def command(self, destination: Path) -> list:
        # The tool runs from the application root, so a relative destination
        # would land inside the tree being archived.
        return [self.executable, str(Path(destination).resolve()), "-@"]

    def names(self, entries: Iterable[FileEntry]) -> List[str]:
        names = []
        for entry in entries:
            if entry.is_dir:
                if not is_empty_directory(entry.real_path):
                    continue
                names.append(entry.relative_path.rstrip("/"))
            else:
                names.append(entry.relative_path)
        return names

    def write(
        self, app_path: Path, destination: Path, entries: Iterable[FileEntry]
    ) -> None:
        app_path = Path(app_path)
        if not app_path.is_dir():
            raise ArchiveIOFailure(f"Application directory not found: {app_path}")

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        # zip appends to an existing archive instead of replacing it.
        if destination.exists():
            destination.unlink()

        cmd = self.command(destination)
        listing = "".join(f"{name}\n" for name in self.names(entries))
        try:
            result = subprocess.run(
                cmd,
                cwd=str(app_path),
                input=listing,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ExternalToolFailure(
                cmd, None, reason=f"Unable to run '{self.executable}': {e}"
            ) from e
        except subprocess.TimeoutExpired as e:
            self._discard(destination)
            raise ExternalToolFailure(
                cmd,
                None,
                _decode(e.output) + _decode(e.stderr),
                reason=f"'{' '.join(cmd)}' timed out after {self.timeout} seconds",
            ) from e

        if result.returncode != 0:
            self._discard(destination)
            raise ExternalToolFailure(
                cmd, result.returncode, (result.stdout or "") + (result.stderr or "")
            )

    @staticmethod
    def _discard(destination: Path) -> None:
        if destination.exists():
            destination.unlink()


def _decode(output) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output
