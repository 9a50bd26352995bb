#!/usr/bin/env python3
"""
Metadata Extractor - Command line entry point

Fetches a page (or reads a local HTML file), extracts its metadata and
prints the result as JSON.
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import httpx
import structlog

from metaextractor.config import LogLevel, Settings, load_settings
from metaextractor.extractor.metadata import Extractor

# Set up structured logger
logger = structlog.get_logger()


def setup_logging(settings: Settings) -> None:
    """Set up structured logging based on configuration."""
    log_level = settings.log_level.value

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if settings.structured_logging
            else structlog.dev.ConsoleRenderer()
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Logs go to stderr so stdout stays clean JSON
    numeric_level = getattr(logging, log_level, logging.INFO)
    logging.basicConfig(stream=sys.stderr, format="%(message)s")
    logging.getLogger().setLevel(numeric_level)

    logger.debug("Logging initialized", level=log_level)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Extract preview metadata from a web page")
    parser.add_argument("url", help="Page URL (recorded in the output even with --html-file)")
    parser.add_argument("--html-file", type=Path, help="Read HTML from this file instead of fetching")
    parser.add_argument("--default-image", help="Image to use when the page has none")
    parser.add_argument("--timeout", type=float, help="Fetch timeout in seconds")
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        help="Log level",
    )
    parser.add_argument("--include-raw", action="store_true", help="Include the raw HTML in the output")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)

    settings = load_settings()
    overrides = {}
    if args.default_image is not None:
        overrides["default_image"] = args.default_image
    if args.timeout is not None:
        overrides["timeout_seconds"] = args.timeout
    if args.log_level is not None:
        overrides["log_level"] = LogLevel(args.log_level)
    if overrides:
        settings = Settings(**{**settings.model_dump(), **overrides})

    setup_logging(settings)

    with Extractor.from_settings(settings) as extractor:
        if args.html_file is not None:
            html = args.html_file.read_text(encoding="utf-8", errors="replace")
            metadata = extractor.extract_html(args.url, html)
        else:
            try:
                metadata = extractor.extract(args.url)
            except httpx.HTTPError as e:
                logger.error("Failed to fetch page", url=args.url, error=str(e))
                return 1

    exclude = None if args.include_raw else {"raw"}
    print(json.dumps(metadata.model_dump(exclude=exclude), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
