"""Recursive discovery of source archives."""

from __future__ import annotations

import os
from pathlib import Path

from cbztools.archive.errors import DiscoveryError

DEFAULT_ARCHIVE_SUFFIX = ".cbz"


def _has_suffix(path: Path, suffix: str) -> bool:
    return path.name.lower().endswith(suffix.lower())


def find_cbz_files(input_dir: str | Path, *, suffix: str = DEFAULT_ARCHIVE_SUFFIX) -> list[Path]:
    """Return archive files under *input_dir* (recursive, case-insensitive suffix) in lexical path order."""

    root = Path(input_dir)
    if not root.exists():
        raise DiscoveryError(root, "Input directory does not exist")
    if not root.is_dir():
        raise DiscoveryError(root, "Input path is not a directory")
    if not os.access(root, os.R_OK | os.X_OK):
        raise DiscoveryError(root, "Input directory is not readable")

    try:
        return sorted(path for path in root.rglob("*") if path.is_file() and _has_suffix(path, suffix))
    except OSError as exc:
        raise DiscoveryError(root, f"Failed to scan input directory: {exc}") from exc
