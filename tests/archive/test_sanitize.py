from __future__ import annotations

import pytest

from cbztools.archive.sanitize import PLACEHOLDER_NAME, sanitize_filename, sanitize_filename_ascii


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Foo Ch.1-3", "Foo_Ch_1-3"),
        ("My Code Can't Be That Bad! Ch.1-12", "My_Code_Can't_Be_That_Bad!_Ch_1-12"),
        ('What? A <Title>: "x"/y\\z|w*', "What__A__Title___x_y_z_w"),
        ("  ..Padded..  ", "Padded"),
        ("", PLACEHOLDER_NAME),
        ("...", PLACEHOLDER_NAME),
        ("???", PLACEHOLDER_NAME),
    ],
)
def test_sanitize_filename(raw: str, expected: str) -> None:
    assert sanitize_filename(raw) == expected


def test_placeholder_is_untitled() -> None:
    assert sanitize_filename_ascii("") == "untitled"


def test_ascii_variant_transliterates() -> None:
    assert sanitize_filename_ascii("Café Ch.1-2") == "Cafe_Ch_1-2"
    assert sanitize_filename_ascii("Ångström") == "Angstrom"
    assert sanitize_filename_ascii("漫画").isascii()


@pytest.mark.parametrize(
    "raw",
    ["", "Foo Ch.1-3", "  __x__  ", "漫画 Ch.5-9", "a\tb\nc", "Ω?<>|", "...", "Tom & Jerry Ch.001-002"],
)
def test_sanitize_is_idempotent(raw: str) -> None:
    once = sanitize_filename_ascii(raw)

    assert sanitize_filename_ascii(once) == once
    assert once.isascii()
    assert once
