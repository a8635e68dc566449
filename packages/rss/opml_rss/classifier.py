"""
Feed document classifier.

Decides whether a fetched document is an RSS or Atom feed. Pure functions,
no I/O.
"""

from dataclasses import dataclass
from enum import Enum

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as ET

NOT_A_FEED_MESSAGE = "Document is not a valid RSS or Atom feed"

_RSS_TAGS = frozenset({"rss", "channel"})


class FeedKind(str, Enum):
    """Recognized feed formats."""

    RSS = "rss"
    ATOM = "atom"


@dataclass(frozen=True)
class NotAFeed:
    """Classification result for documents that are not feeds."""

    reason: str


def _local_name(tag: str) -> str:
    # ElementTree spells namespaced tags as "{uri}name"
    return tag.rsplit("}", 1)[-1]


def classify_document(document: str | bytes) -> FeedKind | NotAFeed:
    """
    Classify a response body as RSS, Atom, or neither.

    RSS is recognized by an ``rss`` or ``channel`` element among the root's
    direct children (covers ``<rss><channel>`` and RDF-style RSS 1.0).
    Atom is recognized by a root element named ``feed``. Namespaces are
    ignored when comparing names.

    Args:
        document: Full response body.

    Returns:
        FeedKind for recognized feeds, NotAFeed with a reason otherwise.
        Malformed XML yields NotAFeed carrying the parser message; entity
        declarations and external references are refused the same way.
    """
    try:
        root = ET.fromstring(document)
    except ET.ParseError as e:
        return NotAFeed(reason=f"XML parsing error: {e}")
    except DefusedXmlException as e:
        return NotAFeed(reason=f"Forbidden XML construct: {e}")

    if any(_local_name(child.tag) in _RSS_TAGS for child in root if isinstance(child.tag, str)):
        return FeedKind.RSS
    if _local_name(root.tag) == "feed":
        return FeedKind.ATOM
    return NotAFeed(reason=NOT_A_FEED_MESSAGE)
