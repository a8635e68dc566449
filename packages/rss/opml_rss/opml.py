"""
OPML import/export.

Handles OPML parsing into feeds with category paths, and generation of
OPML documents with nested category outlines.
"""

import io
from collections.abc import Sequence
from datetime import datetime
from xml.etree import ElementTree as ET

from opml_core.exceptions import CategoryNestingTooDeepError, MissingBodyError, OPMLParseError
from opml_core.schemas import Feed

from .dedupe import normalize_url

MAX_CATEGORY_DEPTH = 100


def _walk_outlines(
    node: ET.Element,
    categories: list[str],
    feeds: list[Feed],
    seen: set[str] | None,
) -> None:
    if len(categories) >= MAX_CATEGORY_DEPTH:
        raise CategoryNestingTooDeepError(MAX_CATEGORY_DEPTH)

    for outline in node.findall("outline"):
        outline_type = outline.get("type")
        xml_url = outline.get("xmlUrl")
        title = outline.get("text") or outline.get("title")
        if title is None:
            continue

        # Category: no type, no xmlUrl
        if outline_type is None and xml_url is None:
            _walk_outlines(outline, [*categories, title], feeds, seen)
            continue

        if xml_url is None or outline_type not in (None, "rss"):
            continue

        if seen is not None:
            normalized = normalize_url(xml_url)
            if normalized in seen:
                continue
            seen.add(normalized)
        feeds.append(
            Feed(
                title=title,
                xml_url=xml_url,
                html_url=outline.get("htmlUrl"),
                category=list(categories),
            )
        )


def parse_opml(content: str | bytes, *, skip_duplicates: bool = True) -> list[Feed]:
    """
    Parse OPML file.

    Category outlines (no ``type`` and no ``xmlUrl``) contribute their
    name to the category path of the feeds nested below them.

    Args:
        content: OPML XML content.
        skip_duplicates: Drop feeds whose normalized URL was already seen.

    Returns:
        Feeds in document order.

    Raises:
        OPMLParseError: If the XML is malformed.
        MissingBodyError: If there is no body element.
        CategoryNestingTooDeepError: If categories nest too deeply.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise OPMLParseError(f"Invalid OPML format: {e}") from e

    body = root.find(".//body")
    if body is None:
        raise MissingBodyError()

    feeds: list[Feed] = []
    _walk_outlines(body, [], feeds, set() if skip_duplicates else None)
    return feeds


def _add_feed_outline(parent: ET.Element, feed: Feed) -> None:
    outline = ET.SubElement(
        parent,
        "outline",
        type="rss",
        text=feed.title,
        title=feed.title,
        xmlUrl=feed.xml_url,
    )
    if feed.html_url:
        outline.set("htmlUrl", feed.html_url)


def generate_opml(feeds: Sequence[Feed], title: str = "Feed List") -> str:
    """
    Generate OPML file from feeds.

    Uncategorized feeds come first. Categorized feeds are written under
    nested category outlines; paths sharing a prefix share the outlines.

    Args:
        feeds: Feeds to export.
        title: OPML document title.

    Returns:
        OPML XML string.
    """
    opml = ET.Element("opml", version="2.0")

    head = ET.SubElement(opml, "head")
    title_elem = ET.SubElement(head, "title")
    title_elem.text = title

    date_created = ET.SubElement(head, "dateCreated")
    date_created.text = datetime.now().astimezone().strftime("%a, %d %b %Y %H:%M:%S %z")

    body = ET.SubElement(opml, "body")

    groups: dict[tuple[str, ...], list[Feed]] = {}
    for feed in feeds:
        groups.setdefault(tuple(feed.category), []).append(feed)

    for feed in groups.pop((), []):
        _add_feed_outline(body, feed)

    category_outlines: dict[tuple[str, ...], ET.Element] = {(): body}
    for path, grouped in groups.items():
        for depth in range(1, len(path) + 1):
            prefix = path[:depth]
            if prefix not in category_outlines:
                category_outlines[prefix] = ET.SubElement(
                    category_outlines[prefix[:-1]], "outline", text=prefix[-1]
                )
        for feed in grouped:
            _add_feed_outline(category_outlines[path], feed)

    if not len(body):
        # Keep an explicit <body></body> pair for empty lists
        body.text = "\n  "

    tree = ET.ElementTree(opml)
    ET.indent(tree, space="  ")

    output = io.BytesIO()
    tree.write(output, encoding="utf-8", xml_declaration=True)
    return output.getvalue().decode("utf-8")
