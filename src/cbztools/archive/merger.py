"""Merge sequentially numbered comic archives into one archive.

Sources are ordered by chapter, the boundary descriptors supply the series
name and chapter range, and every recognized image is streamed into the
output under a gapless page index.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, Callable, Sequence
from zipfile import ZIP_DEFLATED, BadZipFile, ZipFile
import zlib

from cbztools.archive.comicinfo import read_comic_info, render_comic_info
from cbztools.archive.config import MergeSettings, entry_extension
from cbztools.archive.discovery import find_cbz_files
from cbztools.archive.errors import ArchiveIOError, NothingToMergeError
from cbztools.archive.events import MergeEvent, MergeListener, MergeStage, source_progress
from cbztools.archive.models import ComicInfo, MergeResult
from cbztools.archive.sanitize import sanitize_filename_ascii
from cbztools.ordering.chapters import chapter_text
from cbztools.ordering.natural import sort_by_chapter

LOGGER = logging.getLogger(__name__)

# Unsupported compression methods raise NotImplementedError, encrypted entries RuntimeError.
_ARCHIVE_ERRORS = (OSError, BadZipFile, zlib.error, NotImplementedError, RuntimeError)
_CHUNK_SIZE = 64 * 1024


def _common_root(paths: Sequence[Path]) -> str | None:
    if len(paths) < 2:
        return None
    try:
        root = os.path.commonpath([str(path) for path in paths])
    except ValueError:
        # Mixed absolute/relative paths or different drives.
        return None
    if not root or any(os.path.normpath(path) == root for path in paths):
        return None
    return root


def _stream_page(reader: IO[bytes], source: Path, output: ZipFile, output_path: Path, page_name: str) -> None:
    # Read failures name the source archive, write failures the output archive.
    try:
        writer = output.open(page_name, "w")
    except _ARCHIVE_ERRORS as exc:
        raise ArchiveIOError(output_path, f"Failed to add page {page_name}: {exc}") from exc

    with writer:
        while True:
            try:
                chunk = reader.read(_CHUNK_SIZE)
            except _ARCHIVE_ERRORS as exc:
                raise ArchiveIOError(source, f"Failed to read page from source archive: {exc}") from exc
            if not chunk:
                break
            try:
                writer.write(chunk)
            except _ARCHIVE_ERRORS as exc:
                raise ArchiveIOError(output_path, f"Failed to write page {page_name}: {exc}") from exc


def build_merged_title(first: ComicInfo, last: ComicInfo) -> str:
    """``"<series> Ch.<first>-<last>"`` using chapters found in the descriptor titles."""

    first_chapter = chapter_text(first.title)
    last_chapter = chapter_text(last.title)
    for info, chapter in ((first, first_chapter), (last, last_chapter)):
        if not chapter:
            LOGGER.warning("No chapter number found in descriptor title %r", info.title)
    return f"{first.series} Ch.{first_chapter}-{last_chapter}"


class ArchiveMerger:
    """Single-threaded merge of source archives into one output archive."""

    def __init__(
        self,
        settings: MergeSettings | None = None,
        *,
        sanitizer: Callable[[str], str] = sanitize_filename_ascii,
        listener: MergeListener | None = None,
    ) -> None:
        self._settings = settings or MergeSettings()
        self._sanitizer = sanitizer
        self._listener = listener

    @property
    def settings(self) -> MergeSettings:
        return self._settings

    def order_sources(self, source_paths: Sequence[str | Path]) -> list[Path]:
        """Sort sources by chapter; equal ranks keep their incoming order.

        Paths are ranked relative to their common directory so a chapter-like
        parent folder name shared by every source cannot flatten the order.
        """

        paths = [Path(path) for path in source_paths]
        root = _common_root(paths)
        if root is None:
            return sort_by_chapter(paths, key=str)
        return sort_by_chapter(paths, key=lambda path: os.path.relpath(path, root))

    def output_path_for(self, title: str, output_dir: str | Path) -> Path:
        return Path(output_dir) / f"{self._sanitizer(title)}{self._settings.archive_suffix}"

    def merge_directory(self, input_dir: str | Path, output_dir: str | Path) -> MergeResult:
        """Discover sources under *input_dir* and merge them into *output_dir*."""

        discovered = find_cbz_files(input_dir, suffix=self._settings.archive_suffix)
        self._emit(
            MergeStage.DISCOVERED,
            0.1,
            f"Found {len(discovered)} archive(s)",
            path=Path(input_dir),
            detail="\n".join(str(path) for path in discovered),
        )
        self._require_sources(discovered, Path(input_dir))
        return self.merge(discovered, output_dir)

    def merge(self, source_paths: Sequence[str | Path], output_dir: str | Path) -> MergeResult:
        """Merge *source_paths* into a new archive in *output_dir*."""

        self._require_sources(source_paths, Path(output_dir))

        ordered = self.order_sources(source_paths)
        self._emit(
            MergeStage.ORDERED,
            0.2,
            "The files will be concatenated in the following order:",
            detail="\n".join(str(path) for path in ordered),
        )

        first_info = self._read_boundary(ordered[0], "first")
        last_info = self._read_boundary(ordered[-1], "last")

        title = build_merged_title(first_info, last_info)
        output_path = self.output_path_for(title, output_dir)
        self._guard_overwrite(output_path, ordered)

        try:
            output = ZipFile(output_path, "w", compression=ZIP_DEFLATED)
        except _ARCHIVE_ERRORS as exc:
            raise ArchiveIOError(output_path, f"Failed to create output archive: {exc}") from exc
        self._emit(MergeStage.OUTPUT_CREATED, 0.4, "Created output archive", path=output_path)

        try:
            with output:
                page_count = self._copy_sources(output, output_path, ordered)
                info = ComicInfo(title=title, series=first_info.series, page_count=page_count)
                xml_text = render_comic_info(info)
                output.writestr(self._settings.descriptor_name, xml_text.encode("utf-8"))
                self._emit(
                    MergeStage.DESCRIPTOR_WRITTEN,
                    0.9,
                    f"Resulting XML written to {output_path}:",
                    path=output_path,
                    detail=xml_text,
                )
        except _ARCHIVE_ERRORS as exc:
            self._discard_partial(output_path)
            raise ArchiveIOError(output_path, f"Failed to write output archive: {exc}") from exc
        except Exception:
            self._discard_partial(output_path)
            raise

        result = MergeResult(output_path=output_path, page_count=page_count, sources=tuple(ordered), comic_info=info)
        self._emit(
            MergeStage.COMPLETED,
            1.0,
            f"Merged {len(ordered)} files into {output_path} with {page_count} pages",
            path=output_path,
        )
        return result

    def _require_sources(self, source_paths: Sequence[str | Path], location: Path) -> None:
        count = len(source_paths)
        if count >= 2:
            return
        kind = self._settings.archive_suffix.lstrip(".").upper()
        if count == 0:
            raise NothingToMergeError(location, f"No {kind} files found")
        raise NothingToMergeError(location, f"Only one {kind} file found - no concatenation needed")

    def _read_boundary(self, path: Path, which: str) -> ComicInfo:
        info = read_comic_info(path, marker=self._settings.descriptor_marker)
        self._emit(
            MergeStage.DESCRIPTOR_READ,
            0.3,
            f"XML read from {which} chapter:",
            path=path,
            detail=render_comic_info(info),
        )
        return info

    def _guard_overwrite(self, output_path: Path, sources: Sequence[Path]) -> None:
        target = output_path.resolve()
        if any(source.resolve() == target for source in sources):
            raise ArchiveIOError(output_path, "Output archive would overwrite one of the source archives")

    def _copy_sources(self, output: ZipFile, output_path: Path, sources: Sequence[Path]) -> int:
        next_index = 1
        for position, source in enumerate(sources):
            self._emit(
                MergeStage.SOURCE_STARTED,
                source_progress(position, len(sources)),
                f"Processing file {position + 1} of {len(sources)}: {source.name}",
                path=source,
            )
            next_index = self._copy_pages(output, output_path, source, next_index)
        return next_index - 1

    def _copy_pages(self, output: ZipFile, output_path: Path, source: Path, next_index: int) -> int:
        """Stream image entries of *source* in archive order; return the next free page index."""

        copied = skipped = 0
        try:
            archive = ZipFile(source, "r")
        except _ARCHIVE_ERRORS as exc:
            raise ArchiveIOError(source, f"Failed to open source archive: {exc}") from exc

        with archive:
            for entry in archive.infolist():
                if not self._settings.is_image(entry.filename):
                    skipped += 1
                    continue
                page_name = self._settings.page_name(next_index, entry_extension(entry.filename))
                try:
                    reader = archive.open(entry, "r")
                except _ARCHIVE_ERRORS as exc:
                    raise ArchiveIOError(source, f"Failed to read entry {entry.filename!r}: {exc}") from exc
                with reader:
                    _stream_page(reader, source, output, output_path, page_name)
                next_index += 1
                copied += 1

        LOGGER.debug("Copied %d page(s) from %s, skipped %d entr(ies)", copied, source, skipped)
        return next_index

    def _discard_partial(self, output_path: Path) -> None:
        if self._settings.keep_partial_output:
            LOGGER.warning("Keeping partial output after failure: %s", output_path)
            return
        try:
            output_path.unlink(missing_ok=True)
        except OSError as exc:
            LOGGER.warning("Failed to remove partial output %s: %s", output_path, exc)
            return
        LOGGER.warning("Removed partial output after failure: %s", output_path)

    def _emit(
        self,
        stage: MergeStage,
        progress: float,
        message: str,
        *,
        path: Path | None = None,
        detail: str | None = None,
    ) -> None:
        if self._listener is None:
            return
        self._listener(MergeEvent(stage=stage, progress=progress, message=message, path=path, detail=detail))


def merge_archives(
    source_paths: Sequence[str | Path],
    output_dir: str | Path,
    *,
    settings: MergeSettings | None = None,
    listener: MergeListener | None = None,
) -> MergeResult:
    """Convenience wrapper around :class:`ArchiveMerger`."""

    return ArchiveMerger(settings, listener=listener).merge(source_paths, output_dir)


__all__ = ["ArchiveMerger", "build_merged_title", "merge_archives"]
