"""Listing to product matching services.

This package builds search indices and recognition patterns from the
product catalog and uses them to group retailer listings by product.

Key Components:
    - build_catalog_index: Catalog Index Builder
    - GenericModifierDiscoverer: Shared model prefix/suffix patterns
    - MatcherStrategy: Abstract base class for matching strategies
    - RegexCatalogMatcher: Default scoped regex implementation
    - merge_duplicate_listings: Duplicate-title merger
"""
from listing_matcher.services.matching.aliases import MANUFACTURER_ALIASES, build_alias_table
from listing_matcher.services.matching.catalog_index import (
    CatalogIndex,
    CatalogIndexBuilder,
    build_catalog_index,
)
from listing_matcher.services.matching.generic_modifiers import (
    GenericModifierDiscoverer,
    extend_pattern_table,
)
from listing_matcher.services.matching.duplicates import merge_duplicate_listings
from listing_matcher.services.matching.matcher import (
    MatcherStrategy,
    RegexCatalogMatcher,
    ListingMatch,
    MatchStatusEnum,
    STRATEGIES,
    create_matcher,
    find_needle,
    resolve_duplicate_match,
)

__all__ = [
    "MANUFACTURER_ALIASES",
    "build_alias_table",
    "CatalogIndex",
    "CatalogIndexBuilder",
    "build_catalog_index",
    "GenericModifierDiscoverer",
    "extend_pattern_table",
    "merge_duplicate_listings",
    "MatcherStrategy",
    "RegexCatalogMatcher",
    "ListingMatch",
    "MatchStatusEnum",
    "STRATEGIES",
    "create_matcher",
    "find_needle",
    "resolve_duplicate_match",
]
