"""Listing matcher - groups retailer listings under canonical catalog products."""

__version__ = "0.1.0"
