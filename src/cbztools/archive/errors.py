"""Domain errors raised by discovery, descriptor parsing and merging."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class ArchiveError(Exception):
    """Base error for archive discovery and merge failures."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


class DiscoveryError(ArchiveError):
    """Input directory is missing, not a directory, or unreadable."""


class NothingToMergeError(ArchiveError):
    """Fewer than two source archives were supplied."""


class DescriptorError(ArchiveError):
    """A source descriptor entry is missing or cannot be parsed."""


class ArchiveIOError(ArchiveError):
    """Opening, reading or writing an archive failed."""
