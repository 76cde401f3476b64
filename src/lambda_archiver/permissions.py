"""Unix modes embedded in archive entries."""

from __future__ import annotations

import os
from typing import Dict, Mapping, Optional

from .errors import ArchiveIOFailure
from .files import FileEntry

# '-r-xr-xr-x' (0o100555). Checkouts do not reliably keep the execute bit on
# the bundled runtime binary, so it is forced.
READ_EXECUTE_MODE = 33133

RUNTIME_BINARY = "php"


class PermissionPolicy:
    """
    Decides the mode stored in the upper 16 bits of an entry's external attributes.

    Directories and the runtime binary always get READ_EXECUTE_MODE. Everything
    else keeps the mode reported by the filesystem, unless `overrides` names it
    by relative path or by file name.
    """

    def __init__(self, overrides: Optional[Mapping[str, int]] = None):
        self.overrides: Dict[str, int] = dict(overrides or {})

    def mode_for(self, entry: FileEntry) -> int:
        relative_path = entry.relative_path.rstrip("/")
        if relative_path in self.overrides:
            return self.overrides[relative_path]

        if entry.is_dir or entry.name == RUNTIME_BINARY:
            return READ_EXECUTE_MODE

        if entry.name in self.overrides:
            return self.overrides[entry.name]

        try:
            return os.stat(entry.real_path).st_mode
        except OSError as e:
            raise ArchiveIOFailure(
                f"Unable to read permissions of {entry.real_path}: {e}"
            ) from e

    def external_attr(self, entry: FileEntry) -> int:
        return (self.mode_for(entry) & 0xFFFF) << 16
