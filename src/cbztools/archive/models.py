"""Data structures shared by the merge pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ComicInfo:
    """Descriptor record embedded in a comic archive."""

    title: str = ""
    series: str = ""
    page_count: int = 0


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Outcome of a successful merge."""

    output_path: Path
    page_count: int
    sources: tuple[Path, ...] = field(default_factory=tuple)
    comic_info: ComicInfo = field(default_factory=ComicInfo)

    def to_dict(self) -> dict[str, object]:
        return {
            "output_path": str(self.output_path),
            "page_count": self.page_count,
            "sources": [str(source) for source in self.sources],
            "title": self.comic_info.title,
            "series": self.comic_info.series,
        }
