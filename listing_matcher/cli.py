"""Command-line driver: match a listings file against a products file.

Usage:
    listing-matcher products.txt listings.txt -o results.txt
"""
import argparse
import sys
import time
from typing import List, Optional

import structlog

from listing_matcher.config import configure_logging, matching_settings
from listing_matcher.errors import ListingMatcherError
from listing_matcher.ingestion import load_listings, load_products, read_json_lines, write_results
from listing_matcher.services.matching import STRATEGIES, create_matcher

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="listing-matcher",
        description="Group retailer listings under the catalog products they refer to",
    )
    parser.add_argument("products", help="Line-delimited JSON product catalog")
    parser.add_argument("listings", help="Line-delimited JSON retailer listings")
    parser.add_argument(
        "-o", "--output",
        default=matching_settings.output_path,
        help="Where to write grouped results (default: %(default)s)",
    )
    parser.add_argument(
        "--strategy",
        default="regex_catalog",
        choices=sorted(STRATEGIES),
        help="Matching strategy (default: %(default)s)",
    )
    parser.add_argument(
        "--tie-break",
        choices=["first", "longest"],
        default=None,
        help="Manufacturer/family tie-break rule (default: MATCH_TIE_BREAK or longest)",
    )
    parser.add_argument("--log-level", default=matching_settings.log_level)
    parser.add_argument("--json-logs", action="store_true", default=matching_settings.log_json)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json_logs=args.json_logs)

    try:
        catalog = load_products(read_json_lines(args.products))
        offers = load_listings(read_json_lines(args.listings))
        matcher = create_matcher(args.strategy, tie_break=args.tie_break)

        started = time.perf_counter()
        result = matcher.match(catalog.products, offers.listings, offers.duplicates)
        elapsed = time.perf_counter() - started

        write_results(args.output, result.groups)
    except ListingMatcherError as e:
        logger.error("matching_run_failed", error=e.message, **e.details)
        return 2

    for collision in result.collisions:
        logger.warning(
            "catalog_collision",
            product_id=collision.product_id,
            kept_product_id=collision.kept_product_id,
            **collision.details,
        )

    print()
    print("*************** SEARCH ENGINE ***************")
    print(f"Search Implementation      : {matcher.get_strategy_name()}")
    print(f"Description                : {matcher.get_strategy_description()}")
    print()
    print("************* INPUT STATISTICS **************")
    print(f"Total Product Definitions  : {catalog.total_records}")
    print(f"Total Invalid Definitions  : {catalog.invalid_count + result.invalid_product_count}")
    print(f"Total Listings             : {offers.total_records}")
    print(f"Invalid Listings           : {offers.invalid_count}")
    print(f"Catalog Collisions         : {len(result.collisions)}")
    print(f"Duplicate Listings         : {offers.duplicate_count}")
    print()
    print("***************** RESULTS *******************")
    print(f"Total Hits                 : {result.total_matches}")
    print(f"Total Misses               : {result.total_misses}")
    print(f"Products Matched           : {len(result.groups)}")
    print(f"Elapsed Process Time (s)   : {elapsed:.3f}")
    print()
    print(f"Save file name             : {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
