"""
Feed list processing package.

Provides OPML import/export, duplicate detection, feed validation,
and Markdown reports.
"""

from .classifier import FeedKind, NotAFeed, classify_document
from .dedupe import dedupe_feeds, normalize_url
from .opml import generate_opml, parse_opml
from .report import (
    format_analysis_report,
    format_validation_report,
    summarize_feeds,
    validation_report_filename,
)
from .validator import create_client, fetch_and_classify, validate_feed, validate_feeds

__all__ = [
    "parse_opml",
    "generate_opml",
    "normalize_url",
    "dedupe_feeds",
    "classify_document",
    "FeedKind",
    "NotAFeed",
    "create_client",
    "fetch_and_classify",
    "validate_feed",
    "validate_feeds",
    "summarize_feeds",
    "format_analysis_report",
    "format_validation_report",
    "validation_report_filename",
]
