"""Result and key types shared by the matching pipeline."""
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple

from listing_matcher.errors import CatalogCollisionError
from listing_matcher.models.catalog import Listing


POINTER_SEPARATOR = "@"


class ConditionedKey(NamedTuple):
    """Join key between catalog indices and the pattern table.

    All three parts are conditioned strings; ``family`` is empty when the
    product has none.
    """
    manufacturer: str
    family: str
    model: str

    @property
    def pointer(self) -> str:
        """Render as ``MANUFACTURER@FAMILY@MODEL``."""
        return POINTER_SEPARATOR.join(self)


@dataclass
class MatchResult:
    """Outcome of one matching run.

    Attributes:
        groups: product_id -> listings in discovery order, with duplicate
            title siblings placed right after the listing they copy
        unmatched: representative listings assigned to no product
        matched_count: listings matched directly by the matcher
        unmatched_count: representative listings left unmatched
        duplicate_match_count: siblings attached by the duplicate-title merge
        duplicate_listing_count: siblings set aside during ingestion
        invalid_product_count: catalog entries dropped as unreconcilable
        collisions: the collisions behind those dropped entries
    """
    groups: Dict[str, List[Listing]] = field(default_factory=dict)
    unmatched: List[Listing] = field(default_factory=list)
    matched_count: int = 0
    unmatched_count: int = 0
    duplicate_match_count: int = 0
    duplicate_listing_count: int = 0
    invalid_product_count: int = 0
    collisions: List[CatalogCollisionError] = field(default_factory=list)

    @property
    def total_matches(self) -> int:
        """Direct matches plus duplicates merged onto them."""
        return self.matched_count + self.duplicate_match_count

    @property
    def total_misses(self) -> int:
        """Unmatched listings plus the duplicates that were never attached."""
        return self.unmatched_count + self.duplicate_listing_count - self.duplicate_match_count

    def to_dict(self) -> dict:
        """Summarize counters for reporting."""
        return {
            "products_matched": len(self.groups),
            "matched": self.matched_count,
            "unmatched": self.unmatched_count,
            "duplicate_matches": self.duplicate_match_count,
            "duplicate_listings": self.duplicate_listing_count,
            "invalid_products": self.invalid_product_count,
            "catalog_collisions": len(self.collisions),
            "total_matches": self.total_matches,
            "total_misses": self.total_misses,
        }
