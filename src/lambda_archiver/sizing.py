"""Directory size measurement and the deployable size ceiling."""

from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Union

from .errors import SizeLimitExceeded, TraversalFailure

BYTES_PER_MEGABYTE = 1048576

# Uncompressed package limit of the deployment target.
SIZE_LIMIT_MB = 250


def directory_size(path: Union[str, Path]) -> int:
    """Returns the total size in bytes of every regular file below `path`."""
    size = 0
    try:
        with os.scandir(path) as it:
            for entry in it:
                if entry.is_file():
                    size += entry.stat().st_size
                elif entry.is_dir():
                    size += directory_size(entry.path)
    except OSError as e:
        raise TraversalFailure(f"Unable to measure {path}: {e}") from e
    return size


def to_megabytes(size_in_bytes: int) -> float:
    return round(size_in_bytes / BYTES_PER_MEGABYTE, 2)


def format_megabytes(size_in_bytes: int) -> str:
    """Formats a byte count as megabytes with up to two decimals, e.g. '10' or '12.5'."""
    return f"{to_megabytes(size_in_bytes):.2f}".rstrip("0").rstrip(".")


def size_in_whole_megabytes(size_in_bytes: int) -> int:
    return math.ceil(size_in_bytes / BYTES_PER_MEGABYTE)


def ensure_within_size_limit(size_in_bytes: int, limit_mb: int = SIZE_LIMIT_MB) -> int:
    """
    Raises SizeLimitExceeded when the rounded-up size is above `limit_mb`.

    Returns the size in whole megabytes otherwise.
    """
    size_mb = size_in_whole_megabytes(size_in_bytes)
    if size_mb > limit_mb:
        raise SizeLimitExceeded(size_mb, limit_mb)
    return size_mb
