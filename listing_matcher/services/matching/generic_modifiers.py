"""Generic model modifier discovery.

Manufacturers often put a product-class or product-line token at the start or
end of their model numbers ("DSLR100", "DSLR200", "PowerShot-A10" ...).
Retailers write the same model with or without a separator between that
token and the rest, so a title may say "DSLR-100" or "DSLR 100" for a
catalog model "DSLR100".

A token becomes a generic modifier when at least two models of the same
manufacturer share it, either as the first/last separator-delimited token of
the catalog model string, or as the alphabetic head/tail of a model that has
no separator at all. Every model carrying a generic modifier gets two extra
patterns: modifier and remainder joined by a dash, and joined by whitespace.
"""
import re
from types import MappingProxyType
from typing import Dict, Iterable, List, Set, Tuple

import structlog

from listing_matcher.models import ConditionedKey, Product
from listing_matcher.services.conditioning import alpha_residue, condition
from listing_matcher.services.matching.catalog_index import (
    CatalogIndex,
    PatternTable,
    whole_word_pattern,
)

logger = structlog.get_logger(__name__)


MODEL_SEPARATORS = re.compile(r"[-_ ]")
_NON_DIGIT = re.compile(r"\D")

# Token counts for which the first and last tokens are modifier candidates
MIN_SPLIT_TOKENS = 2
MAX_SPLIT_TOKENS = 4

TokenBuckets = Dict[str, Set[ConditionedKey]]


def split_model(raw_model: str) -> List[str]:
    """Split a catalog model on space, dash and underscore.

    Trailing empty tokens are dropped ("A10-" splits to ["A10"]).
    """
    tokens = MODEL_SEPARATORS.split(raw_model)
    while tokens and not tokens[-1]:
        tokens.pop()
    return tokens


def modifier_patterns(modifier: str, remainder: str, prefix: bool) -> Set[str]:
    """Dash- and whitespace-joined patterns for modifier and remainder."""
    head, tail = (modifier, remainder) if prefix else (remainder, modifier)
    head, tail = re.escape(head), re.escape(tail)
    return {
        whole_word_pattern(head + "-" + tail),
        whole_word_pattern(head + r"\s+" + tail),
    }


class GenericModifierDiscoverer:
    """Finds shared model prefixes/suffixes and builds patterns for them."""

    def discover(self, index: CatalogIndex) -> Dict[ConditionedKey, Set[str]]:
        """Return the additional patterns per ConditionedKey."""
        additions: Dict[ConditionedKey, Set[str]] = {}
        for manufacturer, entries in index.keys_by_manufacturer().items():
            prefixes, suffixes = self.bucket_tokens(entries)
            added = 0
            for modifiers, is_prefix in ((prefixes, True), (suffixes, False)):
                for modifier, keys in self.generic_modifiers(modifiers).items():
                    for key in sorted(keys):
                        patterns = self._patterns_for(key, modifier, is_prefix)
                        if patterns:
                            additions.setdefault(key, set()).update(patterns)
                            added += len(patterns)
            if added:
                logger.debug(
                    "generic_modifier_patterns_added",
                    manufacturer=manufacturer,
                    prefixes=sorted(self.generic_modifiers(prefixes)),
                    suffixes=sorted(self.generic_modifiers(suffixes)),
                    patterns=added,
                )
        return additions

    def bucket_tokens(
        self, entries: Iterable[Tuple[ConditionedKey, Product]]
    ) -> Tuple[TokenBuckets, TokenBuckets]:
        """Bucket candidate prefix and suffix tokens for one manufacturer.

        Tokens are conditioned so that split tokens and alphabetic residues
        of unseparated models land in the same buckets.
        """
        prefixes: TokenBuckets = {}
        suffixes: TokenBuckets = {}
        unseparated: List[ConditionedKey] = []

        for key, product in entries:
            tokens = split_model(product.model)
            if len(tokens) == 1:
                unseparated.append(key)
            elif MIN_SPLIT_TOKENS <= len(tokens) <= MAX_SPLIT_TOKENS:
                self._add(prefixes, condition(tokens[0]), key)
                self._add(suffixes, condition(tokens[-1]), key)

        for key in unseparated:
            alpha = alpha_residue(key.model)
            if not alpha:
                continue
            begins = key.model.startswith(alpha)
            ends = key.model.endswith(alpha)
            if begins and not ends:
                self._add(prefixes, alpha, key)
            elif ends and not begins:
                self._add(suffixes, alpha, key)

        return prefixes, suffixes

    @staticmethod
    def generic_modifiers(buckets: TokenBuckets) -> Dict[str, Set[ConditionedKey]]:
        """Tokens shared by two or more models that are not purely numeric."""
        return {
            token: keys
            for token, keys in buckets.items()
            if len(keys) >= 2 and _NON_DIGIT.search(token)
        }

    @staticmethod
    def _add(buckets: TokenBuckets, token: str, key: ConditionedKey) -> None:
        if token:
            buckets.setdefault(token, set()).add(key)

    @staticmethod
    def _patterns_for(key: ConditionedKey, modifier: str, prefix: bool) -> Set[str]:
        model = key.model
        if prefix and model.startswith(modifier):
            remainder = model[len(modifier):]
        elif not prefix and model.endswith(modifier):
            remainder = model[:-len(modifier)]
        else:
            return set()
        if not remainder:
            return set()
        return modifier_patterns(modifier, remainder, prefix)


def extend_pattern_table(index: CatalogIndex) -> PatternTable:
    """Seed patterns merged with generic-modifier patterns, as a new table."""
    additions = GenericModifierDiscoverer().discover(index)
    return MappingProxyType({
        key: frozenset(patterns | additions.get(key, set()))
        for key, patterns in index.patterns.items()
    })
