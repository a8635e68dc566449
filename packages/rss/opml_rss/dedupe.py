"""
Feed URL normalization and duplicate detection.
"""

from collections.abc import Iterable

from opml_core.schemas import Feed


def normalize_url(url: str) -> str:
    """
    Normalize a feed URL for duplicate comparison.

    Lowercases, drops one trailing slash, and treats http and https as the
    same scheme. The result is only a comparison key; feeds keep the URL
    they were given.
    """
    normalized = url.strip().lower()
    if normalized.endswith("/"):
        normalized = normalized[:-1]
    if normalized.startswith("http://"):
        normalized = "https://" + normalized[len("http://") :]
    return normalized


def dedupe_feeds(feeds: Iterable[Feed]) -> tuple[list[Feed], list[Feed]]:
    """
    Split feeds into unique feeds and duplicates.

    The first occurrence of each normalized URL wins; order is preserved.

    Returns:
        Tuple of (unique feeds, duplicate feeds).
    """
    seen: set[str] = set()
    unique: list[Feed] = []
    duplicates: list[Feed] = []
    for feed in feeds:
        key = normalize_url(feed.xml_url)
        if key in seen:
            duplicates.append(feed)
            continue
        seen.add(key)
        unique.append(feed)
    return unique, duplicates
