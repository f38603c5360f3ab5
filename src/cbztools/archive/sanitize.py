"""Filesystem-safe names for merged archives."""

from __future__ import annotations

import re

from unidecode import unidecode

PLACEHOLDER_NAME = "untitled"

# Reserved on Windows, plus ASCII control characters.
_ILLEGAL_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]+')
_TRIM_CHARS = "._ "


def sanitize_filename(name: str) -> str:
    """Replace spaces, dots and reserved characters with underscores and trim the edges."""

    name = name.replace(" ", "_").replace(".", "_")
    name = _ILLEGAL_RE.sub("_", name)
    name = name.strip(_TRIM_CHARS)
    return name or PLACEHOLDER_NAME


def sanitize_filename_ascii(name: str) -> str:
    """Transliterate to ASCII, then sanitize."""

    return sanitize_filename(unidecode(name))
