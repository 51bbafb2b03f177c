"""
main.py

Main entry point for the Breed Scraper Suite.

This script orchestrates the scraping workflow per category (cats, dogs):
    - Reads the last listing page index from the category's pagination control.
    - Collects every breed detail-page URL from all listing pages.
    - Scrapes and normalizes each breed page with a bounded worker pool.
    - Exports the records to <stem>.json and <stem>.csv.

A second mode regenerates the CSV files from previously saved JSON without
touching the network (CSV layouts change more often than the data).

USAGE:
    python main.py                          # crawl cats and dogs
    python main.py crawl --categories dogs --pool-size 5
    python main.py csv --categories dogs    # rebuild data/dog-breeds.csv from JSON

EXIT STATUS:
    0 on success, 1 when a category failed or a file could not be written.

NOTES:
    - Logging is initialized as the very first step for robust diagnostics.
    - A failing category never stops the other one.
"""

import argparse
import sys

from categories import CATEGORIES, get_category
from breed_scraper.backend import DEFAULT_POOL_SIZE
from breed_scraper.crawler import crawl_category, regenerate_category_csv, save_category
from breed_scraper.errors import BreedScraperError, PaginationNotFound, SerializationIOError
from breed_scraper.fetch import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT, PageFetcher, enable_requests_cache
from breed_scraper.logging import get_logger, setup_logging

def build_parser():
    parser = argparse.ArgumentParser(description="Purina breed scraper: crawl breeds to JSON/CSV, or rebuild CSV from JSON")
    parser.add_argument("mode", nargs="?", choices=["crawl", "csv"], default="crawl", help="crawl (default) or csv (rebuild CSV from saved JSON)")
    parser.add_argument("--categories", nargs="+", choices=sorted(CATEGORIES), default=["cats", "dogs"], help="Categories to process (default: cats dogs)")
    parser.add_argument("--data-dir", type=str, default="data", help="Directory for JSON/CSV files (default: data)")
    parser.add_argument("--pool-size", type=int, default=DEFAULT_POOL_SIZE, help=f"Concurrent breed pages (default: {DEFAULT_POOL_SIZE})")
    parser.add_argument("--fail-fast", action="store_true", help="Abort a category on the first breed page failure")
    parser.add_argument("--dedupe-links", action="store_true", help="Skip breed links repeated across listing pages")
    parser.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT, help=f"Per-request timeout in seconds (default: {DEFAULT_TIMEOUT})")
    parser.add_argument("--retries", type=int, default=DEFAULT_MAX_RETRIES, help=f"Fetch attempts per page (default: {DEFAULT_MAX_RETRIES})")
    parser.add_argument("--throttle", type=float, default=0.0, help="Base delay after each fetch in seconds (default: 0)")
    parser.add_argument("--playwright", action="store_true", help="Render pages with headless Chromium (requires playwright)")
    parser.add_argument("--http-cache", action="store_true", help="Enable HTTP response caching (requires requests-cache)")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Console/file log level (default: INFO)")
    parser.add_argument("--no-log-file", action="store_true", help="Log to the console only (default: also <data-dir>/logs/<mode>_<timestamp>.log)")
    return parser

def run_crawl(args, logger) -> bool:
    if args.pool_size < 1:
        logger.error("--pool-size must be at least 1")
        return False
    if args.http_cache:
        enable_requests_cache(backend="sqlite", expire_after=3600)
    fetcher = PageFetcher(
        timeout=args.timeout,
        max_retries=max(args.retries, 1),
        throttle=args.throttle,
        use_playwright=args.playwright,
    )
    ok = True
    for key in args.categories:
        category = get_category(key)
        try:
            result = crawl_category(
                category,
                fetcher,
                pool_size=args.pool_size,
                fail_fast=args.fail_fast,
                dedupe_links=args.dedupe_links,
            )
        except PaginationNotFound as e:
            logger.error(f"[{key}] {e}; skipping category.")
            ok = False
            continue
        except BreedScraperError as e:
            logger.exception(f"[{key}] Crawl aborted: {e}")
            ok = False
            continue
        if not result.complete:
            logger.error(f"[{key}] Extraction stopped early ({result.error}); saving {len(result.records)} breeds collected so far.")
            ok = False
        elif result.failures:
            logger.warning(f"[{key}] {len(result.failures)} of {len(result.links)} breed pages failed.")
        try:
            save_category(result, args.data_dir)
        except SerializationIOError as e:
            logger.error(f"[{key}] {e}")
            ok = False
    return ok

def run_csv(args, logger) -> bool:
    ok = True
    for key in args.categories:
        try:
            regenerate_category_csv(get_category(key), args.data_dir)
        except SerializationIOError as e:
            logger.error(f"[{key}] {e}")
            ok = False
    return ok

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # 1. Initialize logging early to capture all diagnostics
    log_file = setup_logging(
        args.mode,
        level=args.log_level,
        data_dir=None if args.no_log_file else args.data_dir,
    )
    logger = get_logger("main")
    logger.info(f"=== Starting Breed Scraper Suite ({args.mode}: {', '.join(args.categories)}) ===")
    if log_file:
        logger.info(f"Logging to {log_file}")

    ok = run_crawl(args, logger) if args.mode == "crawl" else run_csv(args, logger)

    if ok:
        logger.info("=== Breed Scraper Suite completed successfully ===")
        return 0
    logger.error("=== Breed Scraper Suite finished with errors ===")
    return 1

if __name__ == "__main__":
    sys.exit(main())
