"""Line-delimited JSON input and output for matching runs."""
from listing_matcher.ingestion.loader import (
    CatalogLoad,
    ListingLoad,
    read_json_lines,
    parse_product,
    parse_listing,
    load_products,
    load_listings,
)
from listing_matcher.ingestion.writer import result_record, write_results

__all__ = [
    "CatalogLoad",
    "ListingLoad",
    "read_json_lines",
    "parse_product",
    "parse_listing",
    "load_products",
    "load_listings",
    "result_record",
    "write_results",
]
