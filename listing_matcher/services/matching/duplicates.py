"""Re-attaching exact-title duplicates to matched listings.

Ingestion keeps one representative per exact title and sets the others
aside; only the representative goes through matching. Once matching is
done, every sibling of a matched representative joins the same product
group, directly after the representative. Siblings of unmatched
representatives are left alone.
"""
from typing import Dict, List, Mapping, Sequence, Tuple

import structlog

from listing_matcher.models import Listing

logger = structlog.get_logger(__name__)


DuplicateTable = Mapping[str, Sequence[Listing]]


def merge_duplicate_listings(
    groups: Mapping[str, Sequence[Listing]],
    duplicates: DuplicateTable,
) -> Tuple[Dict[str, List[Listing]], int]:
    """Return new groups with duplicate siblings merged in, and how many were added."""
    merged: Dict[str, List[Listing]] = {}
    added = 0
    for product_id, listings in groups.items():
        group: List[Listing] = []
        for listing in listings:
            group.append(listing)
            siblings = duplicates.get(listing.title, ())
            group.extend(siblings)
            added += len(siblings)
        merged[product_id] = group

    logger.debug("duplicate_listings_merged", merged=added, duplicate_titles=len(duplicates))
    return merged, added
