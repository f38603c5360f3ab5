"""Runtime configuration for the merge pipeline."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping

from cbztools.archive.comicinfo import DEFAULT_DESCRIPTOR_MARKER
from cbztools.archive.discovery import DEFAULT_ARCHIVE_SUFFIX

DEFAULT_IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif"})
DEFAULT_DESCRIPTOR_NAME = "ComicInfo.xml"
DEFAULT_PAGE_DIGITS = 5

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def entry_extension(name: str) -> str:
    """Extension of the last path element, starting at its final dot.

    Dot-only names such as ``.jpg`` keep their extension.
    """

    base = name.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def _parse_bool(*, name: str, raw_value: str) -> bool:
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off)")


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class MergeSettings:
    """Explicit merge configuration; replaces process-wide output toggles."""

    archive_suffix: str = DEFAULT_ARCHIVE_SUFFIX
    image_extensions: frozenset[str] = DEFAULT_IMAGE_EXTENSIONS
    descriptor_marker: str = DEFAULT_DESCRIPTOR_MARKER
    descriptor_name: str = DEFAULT_DESCRIPTOR_NAME
    page_digits: int = DEFAULT_PAGE_DIGITS
    keep_partial_output: bool = False
    silent: bool = False
    verbose: bool = False
    show_xml: bool = False
    show_order: bool = False

    @property
    def prints_normal(self) -> bool:
        """Normal output is shown unless silent; verbose overrides silent."""

        return not self.silent or self.verbose

    @property
    def prints_verbose(self) -> bool:
        return self.verbose

    def is_image(self, name: str) -> bool:
        return entry_extension(name).lower() in self.image_extensions

    def page_name(self, index: int, extension: str) -> str:
        return f"{index:0{self.page_digits}d}{extension.lower()}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MergeSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        suffix = source.get("CBZTOOLS_ARCHIVE_SUFFIX", DEFAULT_ARCHIVE_SUFFIX).strip()
        if not suffix:
            raise ValueError("CBZTOOLS_ARCHIVE_SUFFIX cannot be empty")
        if not suffix.startswith("."):
            suffix = f".{suffix}"

        page_digits = _parse_positive_int(
            name="CBZTOOLS_PAGE_DIGITS",
            raw_value=source.get("CBZTOOLS_PAGE_DIGITS", str(DEFAULT_PAGE_DIGITS)).strip(),
            minimum=1,
        )
        keep_partial_output = _parse_bool(
            name="CBZTOOLS_KEEP_PARTIAL_OUTPUT",
            raw_value=source.get("CBZTOOLS_KEEP_PARTIAL_OUTPUT", "false"),
        )
        silent = _parse_bool(name="CBZTOOLS_SILENT", raw_value=source.get("CBZTOOLS_SILENT", "false"))
        verbose = _parse_bool(name="CBZTOOLS_VERBOSE", raw_value=source.get("CBZTOOLS_VERBOSE", "false"))

        return cls(
            archive_suffix=suffix.lower(),
            page_digits=page_digits,
            keep_partial_output=keep_partial_output,
            silent=silent,
            verbose=verbose,
        )
