"""ComicInfo.xml descriptor parsing and rendering."""

from __future__ import annotations

from pathlib import Path
from zipfile import BadZipFile, ZipFile
import zlib

from lxml import etree

from cbztools.archive.errors import ArchiveIOError, DescriptorError
from cbztools.archive.models import ComicInfo

ROOT_TAG = "ComicInfo"
XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
DEFAULT_DESCRIPTOR_MARKER = ".xml"


def _parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False, huge_tree=False)


def _child_text(root: etree._Element, tag: str) -> str:
    # Match on local name so namespaced descriptors still resolve.
    for node in root:
        if isinstance(node.tag, str) and etree.QName(node).localname == tag:
            return (node.text or "").strip()
    return ""


def parse_comic_info(payload: bytes, *, path: Path) -> ComicInfo:
    """Parse a descriptor payload; *path* is only used for error reporting."""

    try:
        root = etree.fromstring(payload, parser=_parser())
    except etree.XMLSyntaxError as exc:
        raise DescriptorError(path, f"Descriptor is not well-formed XML: {exc}") from exc

    if etree.QName(root).localname != ROOT_TAG:
        raise DescriptorError(path, f"Expected <{ROOT_TAG}> root element, found <{etree.QName(root).localname}>")

    raw_count = _child_text(root, "PageCount")
    try:
        page_count = int(raw_count) if raw_count else 0
    except ValueError as exc:
        raise DescriptorError(path, f"PageCount is not an integer: {raw_count!r}") from exc

    return ComicInfo(
        title=_child_text(root, "Title"),
        series=_child_text(root, "Series"),
        page_count=page_count,
    )


def render_comic_info(info: ComicInfo) -> str:
    """Render a descriptor as indented XML with the standard header."""

    root = etree.Element(ROOT_TAG)
    etree.SubElement(root, "Title").text = info.title
    etree.SubElement(root, "Series").text = info.series
    etree.SubElement(root, "PageCount").text = str(info.page_count)
    etree.indent(root, space="  ")
    return XML_HEADER + etree.tostring(root, encoding="unicode")


def read_comic_info(path: str | Path, *, marker: str = DEFAULT_DESCRIPTOR_MARKER) -> ComicInfo:
    """Read the first descriptor entry (archive order) whose name contains *marker*."""

    source = Path(path)
    try:
        with ZipFile(source, "r") as archive:
            entry = next((info for info in archive.infolist() if marker in info.filename), None)
            if entry is None:
                raise DescriptorError(source, f"No descriptor entry matching {marker!r} found")
            payload = archive.read(entry)
    except (OSError, BadZipFile, zlib.error, NotImplementedError, RuntimeError) as exc:
        raise ArchiveIOError(source, f"Failed to read archive: {exc}") from exc

    return parse_comic_info(payload, path=source)
