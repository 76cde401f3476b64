"""File entries consumed by the archive builder and a default enumerator."""

from __future__ import annotations

import fnmatch
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence, Union


def to_archive_path(path: Union[str, os.PathLike]) -> str:
    """Normalizes a relative path to the forward-slash form zip entries use."""
    return str(path).replace("\\", "/")


@dataclass(frozen=True)
class FileEntry:
    """
    A single file or directory destined for the archive.

    `relative_path` is always `/` separated, whatever the host separator is.
    """

    real_path: Path
    relative_path: str
    is_dir: bool = False
    size: int = 0

    @property
    def name(self) -> str:
        return self.relative_path.rstrip("/").rsplit("/", 1)[-1]

    @classmethod
    def from_path(cls, root: Path, path: Path) -> FileEntry:
        is_dir = path.is_dir()
        return cls(
            real_path=path,
            relative_path=to_archive_path(path.relative_to(root)),
            is_dir=is_dir,
            size=0 if is_dir else path.stat().st_size,
        )


def is_excluded(relative_path: str, patterns: Sequence[str]) -> bool:
    """Matches a relative path, and each of its parent prefixes, against glob patterns."""
    parts = relative_path.split("/")
    candidates = ["/".join(parts[: i + 1]) for i in range(len(parts))]
    return any(
        fnmatch.fnmatch(candidate, pattern)
        for candidate in candidates
        for pattern in patterns
    )


def collect_entries(
    root: Union[str, Path], exclude: Sequence[str] = ()
) -> Iterator[FileEntry]:
    """
    Walks `root` and yields an entry for every directory and file in it.

    Directories come before their contents and siblings are sorted, so the
    resulting archive has a stable entry order between runs.
    """
    root = Path(root)

    # os.walk is not guaranteed to be sorted, so we sort explicitly.
    for current, dirs, files in os.walk(root):
        current_path = Path(current)
        dirs.sort()
        files.sort()

        kept_dirs = []
        for name in dirs:
            entry = FileEntry.from_path(root, current_path / name)
            if is_excluded(entry.relative_path, exclude):
                continue
            kept_dirs.append(name)
            yield entry
        # Pruning in place stops os.walk from descending into excluded trees.
        dirs[:] = kept_dirs

        for name in files:
            entry = FileEntry.from_path(root, current_path / name)
            if not is_excluded(entry.relative_path, exclude):
                yield entry
