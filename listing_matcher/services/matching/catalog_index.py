"""Catalog index building.

One pass over the validated catalog produces the lookup maps the matcher
scopes its search with, plus the seed recognition patterns for every
product:

    - model -> product_id, per manufacturer
    - model -> product_id, per family
    - family -> manufacturer
    - ConditionedKey -> whole-word regex patterns

Products whose (manufacturer, model) collides with an earlier product are
kept only when a family tells them apart; otherwise they are dropped and
reported on the index.
"""
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

import structlog

from listing_matcher.errors import CatalogCollisionError
from listing_matcher.models import ConditionedKey, Product
from listing_matcher.services.conditioning import condition

logger = structlog.get_logger(__name__)


PatternTable = Mapping[ConditionedKey, FrozenSet[str]]


def whole_word_pattern(body: str) -> str:
    """Wrap a regex body so it matches as a whole word anywhere in a title.

    ``body`` must already be a regex; escape literal text before passing it.
    """
    return r"(?s).*\b" + body + r"\b.*"


def seed_patterns(raw_model: str, model_c: str) -> Set[str]:
    """Patterns for the raw upper-cased model and for its conditioned form."""
    patterns = {whole_word_pattern(re.escape(model_c))}
    raw = raw_model.strip().upper()
    if raw:
        patterns.add(whole_word_pattern(re.escape(raw)))
    return patterns


def _freeze(mapping: Dict) -> Mapping:
    return MappingProxyType({
        k: _freeze(v) if isinstance(v, dict) else v
        for k, v in mapping.items()
    })


@dataclass(frozen=True)
class CatalogIndex:
    """Immutable lookup structures derived from the product catalog.

    Attributes:
        products: product_id -> Product, for every product that was indexed
        product_keys: product_id -> ConditionedKey, valid products only
        patterns: ConditionedKey -> seed recognition patterns
        models_by_manufacturer: manufacturer -> (model -> product_id)
        models_by_family: family -> (model -> product_id)
        manufacturer_by_family: family -> owning manufacturer
        collisions: unreconcilable collisions, one per dropped product
        invalid_product_ids: products dropped while indexing
    """
    products: Mapping[str, Product]
    product_keys: Mapping[str, ConditionedKey]
    patterns: PatternTable
    models_by_manufacturer: Mapping[str, Mapping[str, str]]
    models_by_family: Mapping[str, Mapping[str, str]]
    manufacturer_by_family: Mapping[str, str]
    collisions: Tuple[CatalogCollisionError, ...] = ()
    invalid_product_ids: Tuple[str, ...] = ()

    @property
    def manufacturers(self) -> List[str]:
        return list(self.models_by_manufacturer)

    @property
    def families(self) -> List[str]:
        return list(self.models_by_family)

    @property
    def invalid_product_count(self) -> int:
        return len(self.invalid_product_ids)

    def key_for(self, product_id: str) -> Optional[ConditionedKey]:
        return self.product_keys.get(product_id)

    def keys_by_manufacturer(self) -> Dict[str, List[Tuple[ConditionedKey, Product]]]:
        """Group every indexed product under its conditioned manufacturer."""
        grouped: Dict[str, List[Tuple[ConditionedKey, Product]]] = {}
        for product_id, key in self.product_keys.items():
            grouped.setdefault(key.manufacturer, []).append((key, self.products[product_id]))
        return grouped


@dataclass
class CatalogIndexBuilder:
    """Builds a CatalogIndex from validated products in one pass.

    A builder is single use: call build() once.
    """
    products: Dict[str, Product] = field(default_factory=dict)
    product_keys: Dict[str, ConditionedKey] = field(default_factory=dict)
    patterns: Dict[ConditionedKey, Set[str]] = field(default_factory=dict)
    pattern_owner: Dict[ConditionedKey, str] = field(default_factory=dict)
    models_by_manufacturer: Dict[str, Dict[str, str]] = field(default_factory=dict)
    models_by_family: Dict[str, Dict[str, str]] = field(default_factory=dict)
    manufacturer_by_family: Dict[str, str] = field(default_factory=dict)
    collisions: List[CatalogCollisionError] = field(default_factory=list)
    invalid_product_ids: List[str] = field(default_factory=list)
    # (product_id, product_id already holding the model) per manufacturer collision
    _duplicates: List[Tuple[str, str]] = field(default_factory=list)

    def build(self, products: Iterable[Product]) -> CatalogIndex:
        log = logger.bind(stage="catalog_index")

        for product in products:
            self._add_product(product, log)

        self._resolve_duplicates(log)

        log.info(
            "catalog_index_built",
            products=len(self.product_keys),
            manufacturers=len(self.models_by_manufacturer),
            families=len(self.models_by_family),
            invalid_products=len(self.invalid_product_ids),
        )

        return CatalogIndex(
            products=MappingProxyType(dict(self.products)),
            product_keys=MappingProxyType(dict(self.product_keys)),
            patterns=MappingProxyType({k: frozenset(v) for k, v in self.patterns.items()}),
            models_by_manufacturer=_freeze(self.models_by_manufacturer),
            models_by_family=_freeze(self.models_by_family),
            manufacturer_by_family=MappingProxyType(dict(self.manufacturer_by_family)),
            collisions=tuple(self.collisions),
            invalid_product_ids=tuple(self.invalid_product_ids),
        )

    def _add_product(self, product: Product, log) -> None:
        product_id = product.product_id
        if product_id in self.products:
            log.warning("duplicate_product_id", product_id=product_id)
            self.invalid_product_ids.append(product_id)
            return

        manufacturer_c = condition(product.manufacturer)
        model_c = condition(product.model)
        family_c = condition(product.family) or None

        if not manufacturer_c or not model_c:
            log.warning(
                "unconditionable_product",
                product_id=product_id,
                manufacturer=product.manufacturer,
                model=product.model,
            )
            self.invalid_product_ids.append(product_id)
            return

        self.products[product_id] = product
        key = ConditionedKey(manufacturer_c, family_c or "", model_c)

        if key in self.patterns:
            log.warning(
                "pattern_key_collision",
                product_id=product_id,
                key=key.pointer,
                kept_product_id=self.pattern_owner[key],
            )
        else:
            self.patterns[key] = seed_patterns(product.model, model_c)
            self.pattern_owner[key] = product_id
        self.product_keys[product_id] = key

        models = self.models_by_manufacturer.setdefault(manufacturer_c, {})
        if model_c in models:
            # either an error in the catalog or the same model in another family
            log.warning(
                "model_key_collision",
                product_id=product_id,
                manufacturer=manufacturer_c,
                model=model_c,
                kept_product_id=models[model_c],
            )
            self._duplicates.append((product_id, models[model_c]))
            return
        models[model_c] = product_id

        if family_c:
            self._add_to_family(family_c, manufacturer_c, model_c, product_id, log)

    def _add_to_family(self, family_c: str, manufacturer_c: str, model_c: str, product_id: str, log) -> None:
        family_models = self.models_by_family.setdefault(family_c, {})
        if model_c in family_models:
            # same family name and model under another manufacturer
            log.warning(
                "family_model_collision",
                product_id=product_id,
                family=family_c,
                model=model_c,
                kept_product_id=family_models[model_c],
            )
            return
        family_models[model_c] = product_id
        owner = self.manufacturer_by_family.setdefault(family_c, manufacturer_c)
        if owner != manufacturer_c:
            log.warning(
                "family_manufacturer_conflict",
                family=family_c,
                manufacturer=owner,
                ignored_manufacturer=manufacturer_c,
            )

    def _resolve_duplicates(self, log) -> None:
        """Move family-qualified collisions into their family; drop the rest."""
        for product_id, kept_product_id in self._duplicates:
            key = self.product_keys[product_id]
            family_models = self.models_by_family.get(key.family, {}) if key.family else {}

            if not key.family or key.model in family_models:
                collision = CatalogCollisionError(
                    product_id=product_id,
                    kept_product_id=kept_product_id,
                    manufacturer=key.manufacturer,
                    model=key.model,
                )
                log.error(
                    "unreconcilable_model_collision",
                    product_id=product_id,
                    kept_product_id=kept_product_id,
                    key=key.pointer,
                )
                self.collisions.append(collision)
                self._drop(product_id)
                continue

            self._add_to_family(key.family, key.manufacturer, key.model, product_id, log)

    def _drop(self, product_id: str) -> None:
        key = self.product_keys.pop(product_id)
        if self.pattern_owner.get(key) == product_id:
            del self.pattern_owner[key]
            del self.patterns[key]
        self.invalid_product_ids.append(product_id)


def build_catalog_index(products: Iterable[Product]) -> CatalogIndex:
    """Index a validated catalog for matching."""
    return CatalogIndexBuilder().build(products)
