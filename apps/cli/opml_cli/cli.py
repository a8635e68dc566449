"""
OPML Manager CLI entry point.

Subcommands analyze, deduplicate, validate, and report on OPML feed lists.
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from opml_core import get_logger, init_logging
from opml_core.config import validator_config
from opml_core.exceptions import OPMLError
from opml_core.schemas import Feed, ValidationResult
from opml_rss import (
    create_client,
    dedupe_feeds,
    format_analysis_report,
    format_validation_report,
    generate_opml,
    parse_opml,
    summarize_feeds,
    validate_feeds,
    validation_report_filename,
)

logger = get_logger(__name__)


def _read_feeds(path: Path, *, skip_duplicates: bool = True) -> list[Feed]:
    content = path.read_bytes()
    feeds = parse_opml(content, skip_duplicates=skip_duplicates)
    logger.debug("Parsed OPML", extra={"path": str(path), "feeds": len(feeds)})
    return feeds


async def _validate_all(
    feeds: Sequence[Feed], timeout: float, max_concurrency: int | None
) -> list[ValidationResult]:
    async with create_client(timeout) as client:
        return await validate_feeds(feeds, client, max_concurrency=max_concurrency)


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0: {value}")
    return number


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return number


def _add_timeout_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=validator_config.timeout,
        help=f"Per-request timeout in seconds for feed validation (default: {validator_config.timeout:g}).",
    )
    parser.add_argument(
        "--max-concurrency",
        type=_positive_int,
        default=validator_config.max_concurrency,
        help="Maximum number of feeds validated at once (default: unlimited).",
    )


def _handle_analyze(args: argparse.Namespace) -> int:
    feeds = _read_feeds(args.input_file, skip_duplicates=False)
    summary = summarize_feeds(feeds)

    print("\nOPML Analysis Report")
    print(f"Total Feeds: {len(feeds)}")
    print(f"Unique Feeds: {len(summary.unique_urls)}")
    print(f"Duplicates: {len(summary.duplicates)}")
    print(f"Total Categories: {len(summary.categories)}")

    if summary.duplicates:
        print("\nDuplicate Feeds:")
        for feed in summary.duplicates:
            print(f"  - {feed.title} ({feed.xml_url})")
            if feed.category:
                print(f"    Categories: {' > '.join(feed.category)}")
    return 0


def _handle_dedupe(args: argparse.Namespace) -> int:
    feeds = _read_feeds(args.input_file, skip_duplicates=False)
    unique, duplicates = dedupe_feeds(feeds)

    output_path: Path = args.output_file
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(generate_opml(unique), encoding="utf-8")

    print(f"Removed {len(duplicates)} duplicates")
    return 0


def _handle_validate(args: argparse.Namespace) -> int:
    feeds = _read_feeds(args.input_file)
    results = asyncio.run(_validate_all(feeds, args.timeout, args.max_concurrency))

    input_path: Path = args.input_file
    report_path = input_path.with_name(validation_report_filename())
    report_path.write_text(
        format_validation_report(results, str(input_path)), encoding="utf-8"
    )

    print(f"\nValidation report saved: {report_path}")
    return 0


def _handle_report(args: argparse.Namespace) -> int:
    feeds = _read_feeds(args.input_file, skip_duplicates=False)
    summary = summarize_feeds(feeds)

    results = None
    if args.validate_feeds:
        results = asyncio.run(_validate_all(feeds, args.timeout, args.max_concurrency))

    output_path: Path = args.output_file
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(format_analysis_report(feeds, summary, results), encoding="utf-8")

    print(f"Report generated: {output_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="opml-manager",
        description="Analyze, deduplicate, and validate OPML feed lists.",
    )
    parser.add_argument(
        "--log-level",
        default=validator_config.log_level,
        help=f"Logging level (default: {validator_config.log_level}).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze", help="Analyze OPML file for duplicates and potential issues"
    )
    analyze_parser.add_argument("input_file", type=Path, help="Input OPML file path")
    analyze_parser.set_defaults(func=_handle_analyze)

    dedupe_parser = subparsers.add_parser(
        "dedupe", help="Remove duplicate feeds while preserving categories"
    )
    dedupe_parser.add_argument("input_file", type=Path, help="Input OPML file path")
    dedupe_parser.add_argument("output_file", type=Path, help="Output OPML file path")
    dedupe_parser.set_defaults(func=_handle_dedupe)

    validate_parser = subparsers.add_parser("validate", help="Validate feeds and check for issues")
    validate_parser.add_argument("input_file", type=Path, help="Input OPML file path")
    _add_timeout_argument(validate_parser)
    validate_parser.set_defaults(func=_handle_validate)

    report_parser = subparsers.add_parser(
        "report", help="Generate a detailed report about the OPML file"
    )
    report_parser.add_argument("input_file", type=Path, help="Input OPML file path")
    report_parser.add_argument("output_file", type=Path, help="Output report file path")
    report_parser.add_argument(
        "--validate-feeds",
        action="store_true",
        help="Include feed validation in report",
    )
    _add_timeout_argument(report_parser)
    report_parser.set_defaults(func=_handle_report)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        init_logging(args.log_level)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        return args.func(args)
    except (OPMLError, OSError) as exc:
        logger.error("Command failed", extra={"command": args.command, "error": str(exc)})
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual execution
    raise SystemExit(main())
