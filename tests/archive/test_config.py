from __future__ import annotations

import pytest

from cbztools.archive.config import DEFAULT_IMAGE_EXTENSIONS, MergeSettings, entry_extension


def test_defaults_from_empty_environment() -> None:
    settings = MergeSettings.from_env({})

    assert settings == MergeSettings()
    assert settings.archive_suffix == ".cbz"
    assert settings.page_digits == 5
    assert settings.image_extensions == DEFAULT_IMAGE_EXTENSIONS
    assert settings.keep_partial_output is False


def test_environment_overrides() -> None:
    settings = MergeSettings.from_env(
        {
            "CBZTOOLS_ARCHIVE_SUFFIX": "ZIP",
            "CBZTOOLS_PAGE_DIGITS": "3",
            "CBZTOOLS_KEEP_PARTIAL_OUTPUT": "yes",
            "CBZTOOLS_SILENT": "1",
            "CBZTOOLS_VERBOSE": "off",
        }
    )

    assert settings.archive_suffix == ".zip"
    assert settings.page_digits == 3
    assert settings.keep_partial_output is True
    assert settings.silent is True
    assert settings.verbose is False


@pytest.mark.parametrize(
    ("environ", "name"),
    [
        ({"CBZTOOLS_PAGE_DIGITS": "0"}, "CBZTOOLS_PAGE_DIGITS"),
        ({"CBZTOOLS_PAGE_DIGITS": "five"}, "CBZTOOLS_PAGE_DIGITS"),
        ({"CBZTOOLS_SILENT": "maybe"}, "CBZTOOLS_SILENT"),
        ({"CBZTOOLS_ARCHIVE_SUFFIX": "  "}, "CBZTOOLS_ARCHIVE_SUFFIX"),
    ],
)
def test_invalid_values_fail_fast(environ: dict[str, str], name: str) -> None:
    with pytest.raises(ValueError, match=name):
        MergeSettings.from_env(environ)


@pytest.mark.parametrize(
    ("silent", "verbose", "normal", "detailed"),
    [
        (False, False, True, False),
        (True, False, False, False),
        (True, True, True, True),
        (False, True, True, True),
    ],
)
def test_verbose_overrides_silent(silent: bool, verbose: bool, normal: bool, detailed: bool) -> None:
    settings = MergeSettings(silent=silent, verbose=verbose)

    assert settings.prints_normal is normal
    assert settings.prints_verbose is detailed


def test_image_detection_and_page_names() -> None:
    settings = MergeSettings()

    assert settings.is_image("pages/001.JPG")
    assert settings.is_image("cover.jpeg")
    assert settings.is_image("a.png") and settings.is_image("b.gif")
    assert not settings.is_image("ComicInfo.xml")
    assert not settings.is_image("page.webp")
    assert not settings.is_image("jpg")
    assert settings.page_name(1, ".JPG") == "00001.jpg"
    assert settings.page_name(12345, ".png") == "12345.png"
    assert MergeSettings(page_digits=3).page_name(7, ".gif") == "007.gif"


@pytest.mark.parametrize(
    ("name", "extension"),
    [
        ("001.jpg", ".jpg"),
        (".jpg", ".jpg"),
        ("dir/.PNG", ".PNG"),
        ("archive.tar.gz", ".gz"),
        ("dir.v2/page", ""),
        ("page", ""),
    ],
)
def test_entry_extension_uses_last_path_element(name: str, extension: str) -> None:
    assert entry_extension(name) == extension


def test_dot_only_names_are_images() -> None:
    settings = MergeSettings()

    assert settings.is_image(".jpg")
    assert settings.is_image("pages/.png")
    assert not settings.is_image("pages.jpg/readme")
