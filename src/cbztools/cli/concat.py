"""CLI command that concatenates a directory of CBZ archives into one."""

from __future__ import annotations

import argparse
from dataclasses import replace
import logging
import sys
from typing import TextIO

from dotenv import load_dotenv

from cbztools.archive.config import MergeSettings
from cbztools.archive.errors import ArchiveError, DiscoveryError, NothingToMergeError
from cbztools.archive.events import MergeEvent, MergeStage
from cbztools.archive.merger import ArchiveMerger


load_dotenv()

LOGGER = logging.getLogger(__name__)


class ConsoleReporter:
    """Print merge events according to the silent/verbose/xml/order settings."""

    def __init__(self, settings: MergeSettings, stream: TextIO | None = None) -> None:
        self._settings = settings
        self._stream = stream

    def _print(self, *lines: str | None) -> None:
        stream = self._stream or sys.stdout
        for line in lines:
            if line is not None:
                print(line, file=stream)

    def print_if_not_silent(self, *lines: str | None) -> None:
        if self._settings.prints_normal:
            self._print(*lines)

    def print_if_verbose(self, *lines: str | None) -> None:
        if self._settings.prints_verbose:
            self._print(*lines)

    def __call__(self, event: MergeEvent) -> None:
        settings = self._settings
        if event.stage is MergeStage.DISCOVERED:
            if settings.show_order or settings.verbose:
                self.print_if_verbose("Original order:", event.detail)
        elif event.stage is MergeStage.ORDERED:
            if settings.show_order or settings.verbose:
                self.print_if_not_silent(event.message, event.detail)
        elif event.stage is MergeStage.DESCRIPTOR_READ:
            self.print_if_verbose(event.message, event.detail)
        elif event.stage is MergeStage.DESCRIPTOR_WRITTEN:
            if settings.show_xml or settings.verbose:
                self.print_if_not_silent(event.message, event.detail)
        elif event.stage is MergeStage.COMPLETED:
            self.print_if_not_silent(event.message)
        else:
            LOGGER.debug("%s (%.0f%%)", event.message, event.progress * 100)


def _log_level(settings: MergeSettings) -> int:
    if settings.verbose:
        return logging.DEBUG
    if settings.silent:
        return logging.WARNING
    return logging.INFO


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cbztools concat",
        description="Concatenate multiple CBZ files into a single archive",
    )
    parser.add_argument("input_dir", help="Directory searched recursively for CBZ files")
    parser.add_argument("output_dir", help="Directory the merged archive is written to")
    parser.add_argument("--xml", action="store_true", help="Print resulting XML (in the resulting cbz archive)")
    parser.add_argument("--order", action="store_true", help="Print the order of the input cbz files")
    parser.add_argument(
        "--silent",
        action="store_true",
        help="Produce no stdout output; errors are still reported; overrides other output flags",
    )
    parser.add_argument("--verbose", action="store_true", help="Verbose output, overrides --silent")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = MergeSettings.from_env()
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    settings = replace(
        settings,
        silent=settings.silent or args.silent,
        verbose=settings.verbose or args.verbose,
        show_xml=args.xml,
        show_order=args.order,
    )
    logging.basicConfig(level=_log_level(settings), format="%(asctime)s %(levelname)s %(message)s")

    merger = ArchiveMerger(settings, listener=ConsoleReporter(settings))
    try:
        merger.merge_directory(args.input_dir, args.output_dir)
    except DiscoveryError as exc:
        print(f"Error finding CBZ files: {exc}", file=sys.stderr)
        return 1
    except NothingToMergeError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    except ArchiveError as exc:
        print(f"Merge failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
