"""
Markdown reports.

Builds the OPML analysis report and the feed validation report.
"""

import html
from collections import Counter
from collections.abc import Sequence
from datetime import datetime
from urllib.parse import urlparse

from opml_core.schemas import Feed, FeedSummary, ValidationResult, ValidationStatus

from .dedupe import normalize_url

TOP_DOMAINS = 10

_STATUS_ORDER = (ValidationStatus.VALID, ValidationStatus.INVALID, ValidationStatus.ERROR)


def _escape(text: str) -> str:
    return html.escape(text, quote=False).replace('"', "&quot;")


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


def _timestamp(now: datetime | None) -> str:
    return (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")


def _domain(url: str) -> str | None:
    parsed = urlparse(url.strip())
    if not parsed.scheme:
        return None
    return parsed.hostname or "unknown"


def summarize_feeds(feeds: Sequence[Feed]) -> FeedSummary:
    """
    Collect duplicate, category, and domain statistics for a feed list.

    Args:
        feeds: Feeds as parsed from OPML (duplicates included).

    Returns:
        Summary of the list.
    """
    unique_urls: set[str] = set()
    duplicates: list[Feed] = []
    categories: set[str] = set()
    domains: Counter[str] = Counter()

    for feed in feeds:
        key = normalize_url(feed.xml_url)
        if key in unique_urls:
            duplicates.append(feed)
        else:
            unique_urls.add(key)

        domain = _domain(feed.xml_url)
        if domain is not None:
            domains[domain] += 1

        categories.update(feed.category)

    return FeedSummary(
        unique_urls=unique_urls,
        duplicates=duplicates,
        categories=categories,
        domain_counts=dict(domains),
    )


def format_analysis_report(
    feeds: Sequence[Feed],
    summary: FeedSummary,
    validation_results: Sequence[ValidationResult] | None = None,
    *,
    now: datetime | None = None,
) -> str:
    """
    Format the OPML analysis report as Markdown.

    Args:
        feeds: Feeds the summary was built from.
        summary: Output of summarize_feeds.
        validation_results: Optional results to append as a table.
        now: Generation time (defaults to the current local time).

    Returns:
        Markdown document.
    """
    lines = ["# OPML Analysis Report", ""]
    lines.append(f"Generated on: {_timestamp(now)}")
    lines.append("")

    lines.append("## Summary")
    lines.append("")
    lines.append(f"Total Feeds: {len(feeds)}")
    lines.append(f"Unique Feeds: {len(summary.unique_urls)}")
    lines.append(f"Categories Found: {len(summary.categories)}")
    lines.append(f"Unique Domains: {len(summary.domain_counts)}")
    lines.append("")

    if not summary.categories:
        lines.append("No categories found")
        lines.append("")
    else:
        category_counts: Counter[str] = Counter()
        for feed in feeds:
            category_counts.update(feed.category)
        lines.append("## Categories")
        lines.append("")
        lines.append("| Category | Feed Count |")
        lines.append("|----------|------------|")
        for category, count in category_counts.most_common():
            lines.append(f"| {_escape_cell(_escape(category))} | {count} |")
        lines.append("")

    lines.append("## Top Domains")
    lines.append("")
    lines.append("| Domain | Feed Count |")
    lines.append("|--------|------------|")
    for domain, count in Counter(summary.domain_counts).most_common(TOP_DOMAINS):
        lines.append(f"| {_escape(domain)} | {count} |")
    lines.append("")

    if not summary.duplicates:
        lines.append("No duplicate feeds found")
        lines.append("")
    else:
        lines.append("## Duplicate Feeds Found")
        lines.append("")
        for feed in summary.duplicates:
            lines.append(f"### {_escape(feed.title)}")
            lines.append("")
            lines.append(f"- URL: {_escape(feed.xml_url)}")
            if feed.category:
                lines.append(f"- Categories: {' > '.join(_escape(c) for c in feed.category)}")
            lines.append("")

    lines.append("## All Feeds")
    lines.append("")
    for feed in feeds:
        lines.append(f"- {_escape(feed.title)}")
    lines.append("")

    if validation_results is not None:
        lines.append("## Feed Validation Results")
        lines.append("")
        lines.append("| Feed | Status | Error |")
        lines.append("|------|--------|-------|")
        for result in validation_results:
            lines.append(
                f"| {_escape_cell(result.feed)} | {result.status.value} "
                f"| {_escape_cell(result.error)} |"
            )
        lines.append("")

    return "\n".join(lines) + "\n"


def format_validation_report(
    results: Sequence[ValidationResult],
    source: str,
    *,
    now: datetime | None = None,
) -> str:
    """
    Format feed validation results as Markdown.

    Results are grouped into one table per status (valid, invalid, error).

    Args:
        results: Validation results.
        source: Path of the OPML file the feeds came from.
        now: Generation time (defaults to the current local time).

    Returns:
        Markdown document.
    """
    counts = Counter(result.status for result in results)

    lines = ["# Feed Validation Report", ""]
    lines.append(f"Generated on: {_timestamp(now)}")
    lines.append("")
    lines.append(f"Source OPML: {source}")
    lines.append("")

    lines.append("## Summary")
    lines.append("")
    lines.append(f"- Total feeds checked: {len(results)}")
    for status in _STATUS_ORDER:
        if counts[status]:
            lines.append(f"- {status.value}: {counts[status]}")
    lines.append("")

    for status in _STATUS_ORDER:
        grouped = [result for result in results if result.status == status]
        if not grouped:
            continue
        lines.append(f"## {status.value.capitalize()} Feeds")
        lines.append("")
        lines.append("| Feed | URL | Error | Categories |")
        lines.append("|------|-----|-------|------------|")
        for result in grouped:
            path = " > ".join(result.categories)
            lines.append(
                f"| {_escape_cell(result.feed)} | {_escape_cell(result.url)} "
                f"| {_escape_cell(result.error)} | {_escape_cell(path)} |"
            )
        lines.append("")

    return "\n".join(lines) + "\n"


def validation_report_filename(now: datetime | None = None) -> str:
    """Return the timestamped file name used for validation reports."""
    return f"validation_report_{(now or datetime.now()).strftime('%Y%m%d_%H%M%S')}.md"
