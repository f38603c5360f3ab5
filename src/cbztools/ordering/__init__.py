"""Chapter extraction and chapter-aware ordering."""

from .chapters import ChapterIdentifier, MatchSource, chapter_text, extract_chapter
from .natural import chapter_less, chapter_sort_key, natural_less, sort_by_chapter

__all__ = [
    "ChapterIdentifier",
    "MatchSource",
    "chapter_less",
    "chapter_sort_key",
    "chapter_text",
    "extract_chapter",
    "natural_less",
    "sort_by_chapter",
]
