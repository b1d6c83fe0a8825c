"""Custom exception hierarchy for listing matching errors."""
from typing import Any, Dict, Optional


class ListingMatcherError(Exception):
    """Base exception for all listing matcher errors."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with message and optional structured details."""
        self.message = message
        self.details = details or {}
        super().__init__(message)


class MalformedRecordError(ListingMatcherError):
    """Raised when a product or listing record is missing a required field."""
    pass


class InputFormatError(ListingMatcherError):
    """Raised when an input file cannot be read as line-delimited JSON."""
    pass


class CatalogCollisionError(ListingMatcherError):
    """Two products share a conditioned (manufacturer, model) with no family.
    
    Not raised during index building; instances are collected on the
    catalog index so the dropped product can be reported.
    """
    
    def __init__(self, product_id: str, kept_product_id: str, manufacturer: str, model: str):
        self.product_id = product_id
        self.kept_product_id = kept_product_id
        super().__init__(
            f"Product '{product_id}' collides with '{kept_product_id}' "
            f"on {manufacturer}/{model} and has no family to disambiguate",
            details={"manufacturer": manufacturer, "model": model},
        )


class InvariantViolationError(ListingMatcherError):
    """Raised when an index built for matching is internally inconsistent."""
    pass


class ConfigurationError(ListingMatcherError):
    """Raised when matcher configuration is invalid."""
    pass
