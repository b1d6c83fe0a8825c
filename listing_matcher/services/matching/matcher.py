"""Listing to product matching using catalog-generated regular expressions.

This module implements the Strategy pattern for listing matching. The
single strategy, RegexCatalogMatcher, classifies each listing in two phases:

    1. Scope: find the manufacturer (directly, through an alias, or implied
       by a product family named in the title). Listings with no scope are
       never searched for a model.
    2. Model: test every model in scope against the title with the
       recognition patterns built from the catalog. Several hits are
       reduced to one by resolve_duplicate_match(), or the listing is
       discarded as ambiguous.

After all listings are classified, exact-title duplicates set aside during
ingestion are re-attached to the products their representative matched.

Key Components:
    - MatcherStrategy: Abstract base class for matching strategies
    - RegexCatalogMatcher: Catalog index + regex pattern implementation
    - ListingMatch: Per-listing classification outcome
    - create_matcher: Strategy factory
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import structlog

from listing_matcher.config import TieBreak, matching_settings
from listing_matcher.errors import ConfigurationError, InvariantViolationError
from listing_matcher.models import ConditionedKey, Listing, MatchResult, Product
from listing_matcher.services.conditioning import condition, condition_title, strip_digits
from listing_matcher.services.matching.aliases import build_alias_table
from listing_matcher.services.matching.catalog_index import (
    CatalogIndex,
    PatternTable,
    build_catalog_index,
)
from listing_matcher.services.matching.duplicates import DuplicateTable, merge_duplicate_listings
from listing_matcher.services.matching.generic_modifiers import extend_pattern_table

logger = structlog.get_logger(__name__)


class MatchStatusEnum(str, Enum):
    """How a single listing was classified."""
    MATCHED = "matched"
    NO_MANUFACTURER = "no_manufacturer"
    NO_MODEL = "no_model"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class ListingMatch:
    """Classification of one listing.

    Attributes:
        status: Outcome of the classification
        product_id: Matched product (only when status is MATCHED)
        manufacturer: Conditioned manufacturer the search was scoped to
        family: Conditioned family found in the title, if any
        model: Conditioned model that won
    """
    status: MatchStatusEnum
    product_id: Optional[str] = None
    manufacturer: Optional[str] = None
    family: Optional[str] = None
    model: Optional[str] = None


def find_needle(
    needles: Iterable[str],
    haystacks: Sequence[Optional[str]],
    tie_break: TieBreak = "first",
) -> Optional[str]:
    """Return a needle contained in any haystack.

    With ``tie_break="first"`` the first hit in iteration order wins; with
    ``"longest"`` the longest hit wins, earlier needles winning ties.
    """
    haystacks = [h for h in haystacks if h]
    best: Optional[str] = None
    for needle in needles:
        if not any(needle in haystack for haystack in haystacks):
            continue
        if tie_break == "first":
            return needle
        if best is None or len(needle) > len(best):
            best = needle
    return best


def resolve_duplicate_match(first_match: str, next_match: str) -> Optional[str]:
    """Choose between two models that both matched the same title.

    The containing model wins over the contained one ("A100" over "100").
    Otherwise a model that keeps letters once digits are removed wins over
    a purely numeric one. Anything else is ambiguous and returns None.

    Titles matching several unrelated models are mostly accessories
    sold for a list of models.
    """
    if next_match in first_match:
        return first_match
    if first_match in next_match:
        return next_match

    alpha_first = strip_digits(first_match)
    alpha_next = strip_digits(next_match)
    if alpha_first and not alpha_next:
        return first_match
    if alpha_next and not alpha_first:
        return next_match
    return None


class MatcherStrategy(ABC):
    """Abstract base class for listing matching strategies.

    All implementations must honor the contract:
        - every listing ends up in exactly one product group or in unmatched
        - duplicate siblings are only attached to matched representatives
        - the catalog and listings are not modified
    """

    @abstractmethod
    def match(
        self,
        products: Sequence[Product],
        listings: Iterable[Listing],
        duplicates: Optional[DuplicateTable] = None,
    ) -> MatchResult:
        """Group listings under the catalog products they refer to.

        Args:
            products: Validated catalog, unique product_id values
            listings: One representative listing per distinct title
            duplicates: title -> other listings with exactly that title

        Returns:
            MatchResult with groups, unmatched listings and counters
        """
        pass

    @abstractmethod
    def get_strategy_name(self) -> str:
        """Get the name of this matching strategy."""
        pass

    @abstractmethod
    def get_strategy_description(self) -> str:
        """Get a human-readable description of this matching strategy."""
        pass


class RegexCatalogMatcher(MatcherStrategy):
    """Scoped regex matcher built from the product catalog.

    Attributes:
        tie_break: Rule for several manufacturers/families in one listing
        aliases: Conditioned alias -> canonical manufacturer
        index: Catalog index from the last prepare() call
        patterns: Seed plus generic-modifier patterns per ConditionedKey
    """

    def __init__(
        self,
        tie_break: Optional[TieBreak] = None,
        extra_aliases: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the matcher.

        Args:
            tie_break: "first" or "longest" (default: from settings)
            extra_aliases: Aliases merged over the built-in table
                (default: from settings)
        """
        self.tie_break: TieBreak = tie_break or matching_settings.tie_break
        if extra_aliases is None:
            extra_aliases = matching_settings.extra_aliases
        self.aliases = build_alias_table(extra_aliases)
        self.index: Optional[CatalogIndex] = None
        self.patterns: Optional[PatternTable] = None
        self._compiled: Dict[ConditionedKey, Tuple[re.Pattern, ...]] = {}
        self._log = logger.bind(matcher="RegexCatalogMatcher")

    def get_strategy_name(self) -> str:
        """Get the name of this matching strategy."""
        return "regex_catalog"

    def get_strategy_description(self) -> str:
        """Get a human-readable description of this matching strategy."""
        return (
            "Scopes each listing to a catalog manufacturer or family, then looks for "
            "whole-word model patterns generated from the catalog, including "
            "separator variants of shared model prefixes and suffixes"
        )

    def prepare(self, products: Iterable[Product]) -> CatalogIndex:
        """Build the catalog index and pattern table for the given products."""
        self.index = build_catalog_index(products)
        self.patterns = extend_pattern_table(self.index)
        self._compiled = {}
        return self.index

    def match(
        self,
        products: Sequence[Product],
        listings: Iterable[Listing],
        duplicates: Optional[DuplicateTable] = None,
    ) -> MatchResult:
        """Classify every listing and merge duplicate titles afterwards."""
        duplicates = duplicates or {}
        index = self.prepare(products)

        result = MatchResult(
            invalid_product_count=index.invalid_product_count,
            collisions=list(index.collisions),
            duplicate_listing_count=sum(len(siblings) for siblings in duplicates.values()),
        )
        groups: Dict[str, List[Listing]] = {}

        for listing in listings:
            outcome = self.explain(listing)
            if outcome.status is MatchStatusEnum.MATCHED:
                groups.setdefault(outcome.product_id, []).append(listing)
                result.matched_count += 1
            else:
                result.unmatched.append(listing)
                result.unmatched_count += 1

        result.groups, result.duplicate_match_count = merge_duplicate_listings(groups, duplicates)

        self._log.info("matching_completed", **result.to_dict())
        return result

    def classify(self, listing: Listing) -> Optional[str]:
        """Return the product_id a listing matches, or None."""
        return self.explain(listing).product_id

    def explain(self, listing: Listing) -> ListingMatch:
        """Classify a listing and report how the decision was reached."""
        index = self._require_index()
        manufacturer_c = condition(listing.manufacturer)
        title = condition_title(listing.title)

        manufacturer = find_needle(index.manufacturers, (manufacturer_c, title), self.tie_break)
        if manufacturer is None:
            alias = find_needle(self.aliases, (manufacturer_c, title), self.tie_break)
            if alias is not None:
                manufacturer = self.aliases[alias]

        # a family implies its manufacturer
        family = find_needle(index.families, (title,), self.tie_break)
        if family is not None:
            try:
                manufacturer = index.manufacturer_by_family[family]
            except KeyError:
                raise InvariantViolationError(
                    f"Family '{family}' has no owning manufacturer",
                    details={"family": family},
                ) from None

        if manufacturer is None:
            self._log.debug("listing_unmatched", title=listing.title, reason="no_manufacturer")
            return ListingMatch(status=MatchStatusEnum.NO_MANUFACTURER)

        return self.resolve_model(title, manufacturer, family)

    def resolve_model(self, title: str, manufacturer: str, family: Optional[str] = None) -> ListingMatch:
        """Find the single model in scope whose patterns match the title.

        Args:
            title: Upper-cased listing title
            manufacturer: Conditioned manufacturer scope
            family: Conditioned family scope, narrower than manufacturer
        """
        index = self._require_index()
        if family is not None:
            models = index.models_by_family.get(family)
            if models is None:
                raise InvariantViolationError(
                    f"No model map for family '{family}'",
                    details={"family": family},
                )
        else:
            # an alias may name a manufacturer the catalog does not carry
            models = index.models_by_manufacturer.get(manufacturer, {})

        match: Optional[str] = None
        for model_c, product_id in models.items():
            if not self._title_matches(index.key_for(product_id), title):
                continue
            if match is None:
                match = model_c
                continue
            resolved = resolve_duplicate_match(match, model_c)
            if resolved is None:
                self._log.debug(
                    "ambiguous_model_match",
                    title=title,
                    manufacturer=manufacturer,
                    models=[match, model_c],
                )
                return ListingMatch(
                    status=MatchStatusEnum.AMBIGUOUS,
                    manufacturer=manufacturer,
                    family=family,
                )
            match = resolved

        if match is None:
            self._log.debug("listing_unmatched", title=title, manufacturer=manufacturer, reason="no_model")
            return ListingMatch(status=MatchStatusEnum.NO_MODEL, manufacturer=manufacturer, family=family)

        return ListingMatch(
            status=MatchStatusEnum.MATCHED,
            product_id=models[match],
            manufacturer=manufacturer,
            family=family,
            model=match,
        )

    def _title_matches(self, key: Optional[ConditionedKey], title: str) -> bool:
        # products dropped as collisions have no key
        if key is None:
            return False
        compiled = self._compiled.get(key)
        if compiled is None:
            try:
                compiled = tuple(re.compile(p) for p in sorted(self.patterns[key]))
            except KeyError:
                raise InvariantViolationError(
                    f"No recognition patterns for '{key.pointer}'",
                    details={"key": key.pointer},
                ) from None
            self._compiled[key] = compiled
        return any(pattern.fullmatch(title) for pattern in compiled)

    def _require_index(self) -> CatalogIndex:
        if self.index is None or self.patterns is None:
            raise InvariantViolationError("Matcher used before prepare() was called")
        return self.index


STRATEGIES = {
    "regex_catalog": RegexCatalogMatcher,
}


def create_matcher(
    strategy: str = "regex_catalog",
    **kwargs
) -> MatcherStrategy:
    """Factory function to create a matcher strategy.

    Args:
        strategy: Strategy name ("regex_catalog")
        **kwargs: Additional arguments passed to the matcher

    Returns:
        MatcherStrategy instance

    Raises:
        ConfigurationError: If unknown strategy name
    """
    if strategy not in STRATEGIES:
        raise ConfigurationError(
            f"Unknown matching strategy: {strategy}. Available: {list(STRATEGIES.keys())}"
        )

    return STRATEGIES[strategy](**kwargs)
