#!/usr/bin/env python3
"""
CLI script for scraping a listing page and indexing its listings.

This script fetches a real estate search results page, extracts every
listing on it and sends each one to the indexing service. With --dry-run
the extracted listings are only printed.

Usage:
    python run_scraping.py --url https://inmuebles.example/venta --owner-id user-1
    python run_scraping.py --url https://inmuebles.example/venta --dry-run

Author: Leonardo Pacciani-Mori
License: MIT
"""

import sys
from pathlib import Path

# Allow running without package installation
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent
_src_dir = _project_root / "src"
if _src_dir.exists() and str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

import argparse
import asyncio
import json


def parse_arguments() -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        argparse.Namespace: The parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Scrape a real estate listing page and index its listings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Scrape and index a page for a user and agent
    python run_scraping.py --url https://inmuebles.example/venta --owner-id user-1 --agent-id agent-7

    # Resolve relative links against a different base URL
    python run_scraping.py --url https://cache.example/page.html --base-url https://site.example/ --owner-id user-1

    # Only print the extracted listings
    python run_scraping.py --url https://inmuebles.example/venta --dry-run
        """
    )

    parser.add_argument(
        "--url",
        type=str,
        required=True,
        help="URL of the search results page to scrape"
    )
    parser.add_argument(
        "--owner-id",
        type=str,
        help="Identifier of the user the knowledge source belongs to"
    )
    parser.add_argument(
        "--agent-id",
        type=str,
        help="Identifier of the agent the knowledge source belongs to"
    )
    parser.add_argument(
        "--base-url",
        type=str,
        help="Base URL for resolving relative listing links (default: --url)"
    )

    # Extraction only mode
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the extracted listings without creating a source or indexing"
    )

    # Verbosity
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug output from the listing indexer"
    )

    return parser.parse_args()


async def run(args: argparse.Namespace) -> int:
    """
    Run the scrape (and indexing unless --dry-run) for the parsed arguments.

    Returns:
        int: Exit code (0 for success, 1 for a failed run).
    """
    from listing_indexer.config.logging_config import get_logger
    from listing_indexer.core.exceptions import ListingIndexerError
    from listing_indexer.indexing.dispatcher import (
        pending_dispatch_count,
        wait_for_pending_dispatches,
    )
    from listing_indexer.pipeline import error_payload, run_listing_indexing
    from listing_indexer.scraping.listing_scraper import scrape_listing_page

    logger = get_logger(__name__)

    if args.dry_run:
        try:
            records = await scrape_listing_page(args.url, base_url=args.base_url)
        except ListingIndexerError as e:
            print(json.dumps(error_payload(e), ensure_ascii=False))
            return 1

        for record in records:
            print(record.description)
            print()
        logger.info(f"Found {len(records)} listings (dry run, nothing indexed)")
        return 0

    try:
        indexing_run = await run_listing_indexing(
            args.url,
            owner_id=args.owner_id,
            agent_id=args.agent_id,
            base_url=args.base_url,
        )
    except ListingIndexerError as e:
        print(json.dumps(error_payload(e), ensure_ascii=False))
        return 1

    print(json.dumps(indexing_run.as_dict(), ensure_ascii=False))

    # The process would exit before background indexing finishes otherwise
    logger.info(f"Waiting for {pending_dispatch_count()} background indexing task(s)...")
    await wait_for_pending_dispatches()
    return 0


def main() -> int:
    """
    Main entry point for the scraping CLI.

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    args = parse_arguments()

    # Set up logging
    from listing_indexer.config.logging_config import setup_logging
    import logging

    # -v only raises verbosity for our own loggers
    if args.verbose:
        setup_logging(level=logging.INFO, package_level=logging.DEBUG)
    else:
        setup_logging(level=logging.INFO)

    from listing_indexer.config.logging_config import get_logger
    logger = get_logger(__name__)

    if not args.dry_run and not args.owner_id:
        logger.error("No owner specified. Use --owner-id or --dry-run")
        return 1

    try:
        return asyncio.run(run(args))

    except KeyboardInterrupt:
        logger.warning("Scraping interrupted by user")
        return 130

    except Exception as e:
        logger.error(f"Scraping failed with error: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
