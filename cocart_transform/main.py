"""
Main Entry Point - Transform a CoCart Response

Reads a decoded response from a file, stdin or a live endpoint, runs the
timezone and currency passes over it and prints the result as JSON.
"""

import json
import logging
import sys
from typing import Any, List, Optional

import requests

from cocart_transform.coreutils.logging import setup_logging
from cocart_transform.orchestration.client import CoCartClient
from cocart_transform.transformation.transformers import create_response_transformer

logger = logging.getLogger(__name__)


def load_document(path: str) -> Any:
    """Load a JSON document from a file path, or stdin for '-'"""
    if path == "-":
        return json.load(sys.stdin)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def build_options(args) -> tuple[dict, dict]:
    """Currency and timezone option mappings from parsed arguments"""
    currency_options = {"enabled": args.currency}
    if args.no_preserve_original:
        currency_options["preserve_original"] = False

    timezone_options = {
        "enabled": args.timezone,
        "preserve_original": not args.no_preserve_original,
    }
    if args.store_timezone:
        timezone_options["store_timezone"] = args.store_timezone
    if args.target_timezone:
        timezone_options["target_timezone"] = args.target_timezone
    if args.date_field:
        timezone_options["date_fields"] = args.date_field

    return currency_options, timezone_options


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Format currency and convert dates in a CoCart API response"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="JSON file to transform ('-' for stdin)")
    source.add_argument("--endpoint", help="API endpoint to fetch, e.g. 'cart'")
    parser.add_argument("--site-url", help="WordPress site URL (for --endpoint)")
    parser.add_argument(
        "--currency", action="store_true", help="Enable currency formatting"
    )
    parser.add_argument(
        "--timezone", action="store_true", help="Enable timezone conversion"
    )
    parser.add_argument("--store-timezone", help="Timezone the API dates are in")
    parser.add_argument("--target-timezone", help="Timezone to convert dates to")
    parser.add_argument(
        "--date-field",
        action="append",
        help="Date field name to convert (repeatable; auto-detect if omitted)",
    )
    parser.add_argument(
        "--no-preserve-original",
        action="store_true",
        help="Do not keep _original_<field> copies of rewritten values",
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON output indent")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    currency_options, timezone_options = build_options(args)

    try:
        if args.file:
            document = load_document(args.file)
            transform = create_response_transformer(currency_options, timezone_options)
            result = transform(document, args.file)
        else:
            if not args.site_url:
                parser.error("--site-url is required with --endpoint")
            with CoCartClient(
                args.site_url,
                currency=currency_options,
                timezone_conversion=timezone_options,
            ) as client:
                result = client.get(args.endpoint)

    except (OSError, ValueError, requests.RequestException) as e:
        logger.error(f"❌ Could not load response: {e}")
        return 1

    print(json.dumps(result, indent=args.indent, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
