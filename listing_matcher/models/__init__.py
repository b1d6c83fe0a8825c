"""Data models for catalog records and matching results."""
from listing_matcher.models.catalog import Product, Listing
from listing_matcher.models.matching import ConditionedKey, MatchResult

__all__ = [
    "Product",
    "Listing",
    "ConditionedKey",
    "MatchResult",
]
