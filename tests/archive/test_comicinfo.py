from __future__ import annotations

from pathlib import Path
from zipfile import ZipFile

import pytest

from cbztools.archive.comicinfo import parse_comic_info, read_comic_info, render_comic_info
from cbztools.archive.errors import ArchiveIOError, DescriptorError
from cbztools.archive.models import ComicInfo

_SOURCE = Path("series/Foo Ch.1.cbz")


def _descriptor(title: str, series: str, page_count: int) -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        "<ComicInfo>\n"
        f"  <Title>{title}</Title>\n"
        f"  <Series>{series}</Series>\n"
        f"  <Number>1</Number>\n"
        f"  <PageCount>{page_count}</PageCount>\n"
        "</ComicInfo>\n"
    ).encode("utf-8")


def test_parse_reads_title_series_and_page_count() -> None:
    info = parse_comic_info(_descriptor("Foo Ch.1", "Foo", 5), path=_SOURCE)

    assert info == ComicInfo(title="Foo Ch.1", series="Foo", page_count=5)


def test_parse_defaults_missing_fields() -> None:
    info = parse_comic_info(b"<ComicInfo><Series>Foo</Series></ComicInfo>", path=_SOURCE)

    assert info == ComicInfo(title="", series="Foo", page_count=0)


def test_parse_matches_namespaced_children_by_local_name() -> None:
    payload = (
        b'<ComicInfo xmlns="urn:example" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
        b"<Title>Foo Ch.3</Title><Series>Foo</Series><PageCount>4</PageCount></ComicInfo>"
    )

    info = parse_comic_info(payload, path=_SOURCE)

    assert info.title == "Foo Ch.3"
    assert info.page_count == 4


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        (b"<ComicInfo><Title>Foo", "not well-formed"),
        (b"<Book><Title>Foo</Title></Book>", "Expected <ComicInfo>"),
        (b"<ComicInfo><PageCount>twelve</PageCount></ComicInfo>", "PageCount is not an integer"),
    ],
)
def test_parse_rejects_invalid_descriptors(payload: bytes, message: str) -> None:
    with pytest.raises(DescriptorError, match=message) as excinfo:
        parse_comic_info(payload, path=_SOURCE)

    assert excinfo.value.path == _SOURCE
    assert str(_SOURCE) in str(excinfo.value)


def test_render_writes_standard_header_and_two_space_indent() -> None:
    rendered = render_comic_info(ComicInfo(title="Foo Ch.1-3", series="Foo", page_count=12))

    assert rendered == (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        "<ComicInfo>\n"
        "  <Title>Foo Ch.1-3</Title>\n"
        "  <Series>Foo</Series>\n"
        "  <PageCount>12</PageCount>\n"
        "</ComicInfo>"
    )


def test_render_escapes_markup_and_parses_back() -> None:
    info = ComicInfo(title="Tom & Jerry <Ch.5>", series="Tom & Jerry", page_count=3)

    rendered = render_comic_info(info)

    assert "&amp;" in rendered
    assert parse_comic_info(rendered.encode("utf-8"), path=_SOURCE) == info


def test_read_uses_first_descriptor_in_archive_order(tmp_path: Path) -> None:
    archive_path = tmp_path / "Foo 001.cbz"
    with ZipFile(archive_path, "w") as archive:
        archive.writestr("001.jpg", b"page")
        archive.writestr("ComicInfo.xml", _descriptor("Foo Ch.1", "Foo", 1))
        archive.writestr("extra/other.xml", _descriptor("Other Ch.9", "Other", 9))

    info = read_comic_info(archive_path)

    assert info.title == "Foo Ch.1"
    assert info.series == "Foo"


def test_read_without_descriptor_fails(tmp_path: Path) -> None:
    archive_path = tmp_path / "Foo 001.cbz"
    with ZipFile(archive_path, "w") as archive:
        archive.writestr("001.jpg", b"page")

    with pytest.raises(DescriptorError, match="No descriptor entry"):
        read_comic_info(archive_path)


def test_read_non_archive_is_io_error(tmp_path: Path) -> None:
    archive_path = tmp_path / "broken.cbz"
    archive_path.write_bytes(b"not a zip file")

    with pytest.raises(ArchiveIOError, match="Failed to read archive"):
        read_comic_info(archive_path)

    with pytest.raises(ArchiveIOError):
        read_comic_info(tmp_path / "missing.cbz")
