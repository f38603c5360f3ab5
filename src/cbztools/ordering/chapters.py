"""Chapter number extraction from filenames and embedded titles.

Matchers are tried in priority order: an explicit chapter marker first
("ch", "chap", "chapter"), then any run of three or more digits. The digit
minimum on the fallback keeps one- and two-digit volume numbers from being
read as chapters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re


class MatchSource(str, Enum):
    """Which matcher produced a chapter identifier."""

    PRIMARY = "primary"
    FALLBACK = "fallback"


# Marker + up to two non-digit separators: "Ch.0015", "chapter #12", "CH_3.5"
_PRIMARY_RE = re.compile(r"ch(?:apter|ap)?[^0-9]{0,2}([0-9]+(?:\.[0-9]+)*)", re.IGNORECASE)

# Bare number: "My Manga 001.5"
_FALLBACK_RE = re.compile(r"([0-9]{3,}(?:\.[0-9]+)*)")

_MATCHERS: tuple[tuple[MatchSource, re.Pattern[str]], ...] = (
    (MatchSource.PRIMARY, _PRIMARY_RE),
    (MatchSource.FALLBACK, _FALLBACK_RE),
)


@dataclass(frozen=True, slots=True)
class ChapterIdentifier:
    """Dotted chapter number such as ``15.5`` stored as integer segments."""

    parts: tuple[int, ...]
    source: MatchSource = MatchSource.PRIMARY

    def __post_init__(self) -> None:
        if not self.parts:
            raise ValueError("ChapterIdentifier requires at least one segment")
        if any(part < 0 for part in self.parts):
            raise ValueError("ChapterIdentifier segments must be non-negative")

    @property
    def text(self) -> str:
        """Canonical dotted form with leading zeros removed."""

        return ".".join(str(part) for part in self.parts)

    def __str__(self) -> str:
        return self.text


def _normalize_segment(segment: str) -> str:
    return segment.lstrip("0") or "0"


def _build_identifier(raw: str, source: MatchSource) -> ChapterIdentifier:
    segments = [_normalize_segment(segment) for segment in raw.split(".")]
    return ChapterIdentifier(parts=tuple(int(segment) for segment in segments), source=source)


def extract_chapter(text: str) -> ChapterIdentifier | None:
    """Return the chapter identifier found in *text*, or None.

    The primary marker pattern is searched across the whole string before the
    fallback is considered, so a bare three-digit number earlier in the text
    never shadows a later "Ch" marker.
    """

    for source, pattern in _MATCHERS:
        match = pattern.search(text)
        if match is not None:
            return _build_identifier(match.group(1), source)
    return None


def chapter_text(text: str) -> str:
    """Canonical chapter string for *text*, empty when nothing was found."""

    identifier = extract_chapter(text)
    return identifier.text if identifier is not None else ""
