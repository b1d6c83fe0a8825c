"""Writing grouped match results as line-delimited JSON."""
import json
from pathlib import Path
from typing import Mapping, Sequence, TextIO, Union

import structlog

from listing_matcher.models import Listing

logger = structlog.get_logger(__name__)


def result_record(product_id: str, listings: Sequence[Listing]) -> dict:
    """One output line: the product key and every listing matched to it."""
    return {
        "product_name": product_id,
        "listings": [listing.to_record() for listing in listings],
    }


def write_results(
    destination: Union[str, Path, TextIO],
    groups: Mapping[str, Sequence[Listing]],
) -> int:
    """Write one JSON object per product group.

    Args:
        destination: File path (created or truncated) or open text stream
        groups: product_id -> listings, written in mapping order

    Returns:
        Number of lines written
    """
    if isinstance(destination, (str, Path)):
        with open(destination, "w", encoding="utf-8") as stream:
            return write_results(stream, groups)

    written = 0
    for product_id, listings in groups.items():
        destination.write(json.dumps(result_record(product_id, listings), ensure_ascii=False))
        destination.write("\n")
        written += 1

    logger.info("results_written", products=written)
    return written
