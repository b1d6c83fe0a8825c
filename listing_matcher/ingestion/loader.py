"""Reading and validating line-delimited JSON catalog and listing files.

Products and listings arrive one JSON object per line. Records missing a
required field are logged and skipped rather than failing the run; a file
that is not valid JSON at all is fatal.

Listings with an exact title seen before are set aside as duplicates so
that each title is matched once; the duplicate table is handed to the
matcher, which re-attaches the siblings after matching.
"""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, TextIO, Union

import structlog
from pydantic import ValidationError

from listing_matcher.errors import InputFormatError, MalformedRecordError
from listing_matcher.models import Listing, Product

logger = structlog.get_logger(__name__)


Source = Union[str, Path, TextIO]


@dataclass
class CatalogLoad:
    """Validated products plus counts of what was rejected."""
    products: List[Product] = field(default_factory=list)
    total_records: int = 0
    invalid_count: int = 0


@dataclass
class ListingLoad:
    """Representative listings, the duplicate table, and counts.

    Attributes:
        listings: First listing seen for every distinct title
        duplicates: title -> later listings with exactly that title
        total_records: Records read, valid or not
        invalid_count: Records rejected as malformed
    """
    listings: List[Listing] = field(default_factory=list)
    duplicates: Dict[str, List[Listing]] = field(default_factory=dict)
    total_records: int = 0
    invalid_count: int = 0

    @property
    def duplicate_count(self) -> int:
        return sum(len(siblings) for siblings in self.duplicates.values())


def read_json_lines(source: Source) -> List[Dict[str, Any]]:
    """Read one JSON value per non-blank line.

    Args:
        source: File path or open text stream

    Returns:
        Parsed values in file order

    Raises:
        InputFormatError: If the file cannot be read or a line is not JSON
    """
    if isinstance(source, (str, Path)):
        try:
            with open(source, encoding="utf-8") as stream:
                return _parse_lines(stream, str(source))
        except OSError as e:
            raise InputFormatError(f"Cannot read {source}: {e}") from e
    return _parse_lines(source, getattr(source, "name", "<stream>"))


def _parse_lines(stream: TextIO, name: str) -> List[Dict[str, Any]]:
    records = []
    for line_number, line in enumerate(stream, start=1):
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise InputFormatError(
                f"{name} line {line_number}: invalid JSON: {e.msg}",
                details={"source": name, "line": line_number},
            ) from e
    return records


def parse_product(record: Any) -> Product:
    """Validate one product record.

    Raises:
        MalformedRecordError: If the record is not an object or misses a field
    """
    return _parse(Product, record)


def parse_listing(record: Any) -> Listing:
    """Validate one listing record.

    Raises:
        MalformedRecordError: If the record is not an object or misses a field
    """
    return _parse(Listing, record)


def _parse(model, record: Any):
    if not isinstance(record, dict):
        raise MalformedRecordError(f"Expected a JSON object, got {type(record).__name__}")
    try:
        return model.model_validate(record)
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise MalformedRecordError(
            f"Invalid {model.__name__.lower()} record: {', '.join(fields)}",
            details={"fields": fields},
        ) from e


def load_products(records: Iterable[Any]) -> CatalogLoad:
    """Validate catalog records, keeping the first product per product_id."""
    result = CatalogLoad()
    seen = set()

    for position, record in enumerate(records, start=1):
        result.total_records += 1
        try:
            product = parse_product(record)
        except MalformedRecordError as e:
            logger.warning("malformed_record", kind="product", position=position, error=e.message)
            result.invalid_count += 1
            continue

        if product.product_id in seen:
            logger.warning("duplicate_product_id", position=position, product_id=product.product_id)
            result.invalid_count += 1
            continue

        seen.add(product.product_id)
        result.products.append(product)

    logger.info(
        "products_loaded",
        total=result.total_records,
        valid=len(result.products),
        invalid=result.invalid_count,
    )
    return result


def load_listings(records: Iterable[Any]) -> ListingLoad:
    """Validate listing records and set exact-title duplicates aside."""
    result = ListingLoad()
    titles = set()

    for position, record in enumerate(records, start=1):
        result.total_records += 1
        try:
            listing = parse_listing(record)
        except MalformedRecordError as e:
            logger.warning("malformed_record", kind="listing", position=position, error=e.message)
            result.invalid_count += 1
            continue

        if listing.title in titles:
            result.duplicates.setdefault(listing.title, []).append(listing)
            continue

        titles.add(listing.title)
        result.listings.append(listing)

    logger.info(
        "listings_loaded",
        total=result.total_records,
        unique=len(result.listings),
        duplicates=result.duplicate_count,
        invalid=result.invalid_count,
    )
    return result
