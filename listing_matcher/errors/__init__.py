"""Error handling module."""
from listing_matcher.errors.exceptions import (
    ListingMatcherError,
    MalformedRecordError,
    InputFormatError,
    CatalogCollisionError,
    InvariantViolationError,
    ConfigurationError,
)

__all__ = [
    "ListingMatcherError",
    "MalformedRecordError",
    "InputFormatError",
    "CatalogCollisionError",
    "InvariantViolationError",
    "ConfigurationError",
]
