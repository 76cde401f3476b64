"""The compression step: turns a built application tree into app.zip."""

from __future__ import annotations

import platform
from pathlib import Path
from typing import Iterable, Optional, Union

from .config import ArchiveSettings
from .errors import SizeLimitExceeded
from .exporters.base import ARCHIVE_NAME, ArchiveBackend, ArchiveTarget
from .exporters.zip import ZipFileBackend
from .exporters.zip_cli import ZipCliBackend
from .files import FileEntry
from .permissions import PermissionPolicy
from .reporter import Reporter
from .sizing import directory_size, ensure_within_size_limit, format_megabytes

# Host whose builds shell out to the native zip utility.
ZIP_CLI_HOST = "Darwin"


def current_host() -> str:
    return platform.system()


def select_backend(
    host_os: str,
    permissions: Optional[PermissionPolicy] = None,
    settings: Optional[ArchiveSettings] = None,
) -> ArchiveBackend:
    settings = settings or ArchiveSettings()
    if host_os == ZIP_CLI_HOST:
        return ZipCliBackend(timeout=settings.tool_timeout)
    return ZipFileBackend(permissions=permissions, deterministic=settings.deterministic)


class ArchiveBuilder:
    """
    Orchestrates the compression step for a single build.

    The size limit applies to the uncompressed tree, which is what the
    deployment target constrains, so it is measured before compressing and
    enforced once the archive has been written.
    """

    def __init__(
        self,
        reporter: Optional[Reporter] = None,
        host_os: Optional[str] = None,
        permissions: Optional[PermissionPolicy] = None,
        settings: Optional[ArchiveSettings] = None,
    ):
        self.reporter = reporter or Reporter()
        self.host_os = host_os or current_host()
        self.permissions = permissions or PermissionPolicy()
        self.settings = settings or ArchiveSettings()

    def backend(self) -> ArchiveBackend:
        return select_backend(self.host_os, self.permissions, self.settings)

    def target(self, build_path: Union[str, Path], backend: ArchiveBackend) -> ArchiveTarget:
        return ArchiveTarget(path=Path(build_path) / ARCHIVE_NAME, backend=backend.name)

    def build(
        self,
        app_path: Union[str, Path],
        build_path: Union[str, Path],
        entries: Iterable[FileEntry],
        uses_container_image: bool = False,
    ) -> Optional[Path]:
        """
        Writes app.zip into `build_path` and returns its path.

        Returns None without touching the filesystem when the environment
        deploys a container image.
        """
        if uses_container_image:
            return None

        app_path = Path(app_path)
        size_in_bytes = directory_size(app_path)

        self.reporter.step(
            f"Compressing Application ({format_megabytes(size_in_bytes)}MB)"
        )

        backend = self.backend()
        target = self.target(build_path, backend)
        backend.write(app_path, target.path, entries)

        try:
            ensure_within_size_limit(size_in_bytes)
        except SizeLimitExceeded:
            self.reporter.line()
            raise

        return target.path
