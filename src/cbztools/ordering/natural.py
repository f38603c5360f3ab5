"""Chapter-aware natural ordering for archive paths."""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

from cbztools.ordering.chapters import ChapterIdentifier, extract_chapter

T = TypeVar("T")


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _digit_run_end(text: str, start: int) -> int:
    end = start
    while end < len(text) and _is_digit(text[end]):
        end += 1
    return end


def natural_less(left: str, right: str) -> bool:
    """Compare strings treating embedded digit runs as integers.

    Non-digit characters compare by code point. When every compared unit is
    equal, the side that ran out of characters first sorts first; if both ran
    out together, the shorter raw string wins ("a1" < "a01").
    """

    i = j = 0
    while i < len(left) and j < len(right):
        if _is_digit(left[i]) and _is_digit(right[j]):
            left_end = _digit_run_end(left, i)
            right_end = _digit_run_end(right, j)
            left_number = int(left[i:left_end])
            right_number = int(right[j:right_end])
            if left_number != right_number:
                return left_number < right_number
            i, j = left_end, right_end
            continue

        if left[i] != right[j]:
            return left[i] < right[j]
        i += 1
        j += 1

    left_exhausted = i >= len(left)
    right_exhausted = j >= len(right)
    if left_exhausted and right_exhausted:
        return len(left) < len(right)
    return left_exhausted


def _identifier_less(
    left: str,
    left_chapter: ChapterIdentifier | None,
    right: str,
    right_chapter: ChapterIdentifier | None,
) -> bool:
    if left_chapter is None and right_chapter is None:
        return natural_less(left, right)
    # Names without a chapter go to the end.
    if left_chapter is None:
        return False
    if right_chapter is None:
        return True
    # Tuple order already puts the shorter vector first on a shared prefix.
    return left_chapter.parts < right_chapter.parts


def chapter_less(left: str, right: str) -> bool:
    """Strict "sorts before" relation used to order source archives."""

    return _identifier_less(left, extract_chapter(left), right, extract_chapter(right))


class _ChapterSortKey:
    """Sort key that extracts the chapter once per item instead of per comparison."""

    __slots__ = ("value", "chapter")

    def __init__(self, value: str) -> None:
        self.value = value
        self.chapter = extract_chapter(value)

    def __lt__(self, other: "_ChapterSortKey") -> bool:
        return _identifier_less(self.value, self.chapter, other.value, other.chapter)

    def __repr__(self) -> str:
        return f"_ChapterSortKey({self.value!r})"


def chapter_sort_key(value: str) -> _ChapterSortKey:
    """Key for ``sorted``/``list.sort`` producing the ``chapter_less`` order."""

    return _ChapterSortKey(value)


def sort_by_chapter(items: Iterable[T], key: Callable[[T], str] = str) -> list[T]:
    """Stable chapter-aware sort; ties keep their incoming order."""

    return sorted(items, key=lambda item: chapter_sort_key(key(item)))
