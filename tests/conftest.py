"""Pytest configuration and fixtures for test suite.

This is the root-level conftest.py that provides:
- Python path setup (so the package imports without installation)
- Environment defaults for settings
- Shared catalog and listing fixtures
"""
import os
import sys
from pathlib import Path
import pytest

# Add project root to Python path so we can import listing_matcher
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Settings are read on import, pin them before any test module loads
os.environ.setdefault("MATCH_TIE_BREAK", "longest")
os.environ.setdefault("MATCH_LOG_LEVEL", "INFO")

from listing_matcher.models import Listing, Product  # noqa: E402


@pytest.fixture
def product():
    """Factory for catalog products."""
    def _make(product_id, manufacturer, model, family=None, **extra):
        return Product(
            product_id=product_id,
            manufacturer=manufacturer,
            model=model,
            family=family,
            **extra,
        )
    return _make


@pytest.fixture
def listing():
    """Factory for retailer listings."""
    def _make(title, manufacturer="", price="99.99", currency="USD", **extra):
        return Listing(
            title=title,
            manufacturer=manufacturer or "Unknown Seller",
            price=price,
            currency=currency,
            **extra,
        )
    return _make


@pytest.fixture
def camera_catalog(product):
    """Small catalog spanning direct, family and alias matching."""
    return [
        product("Canon_EOS5D", "Canon", "EOS5D"),
        product("Canon_PowerShot_SD1000", "Canon", "SD1000", family="PowerShot"),
        product("Canon_PowerShot_A100", "Canon", "A100", family="PowerShot"),
        product("Nikon_Coolpix_S6100", "Nikon", "S6100", family="Coolpix"),
        product("Nikon_D90", "Nikon", "D90"),
        product("Fujifilm_FinePix_S1000", "Fujifilm", "FinePix S1000"),
        product("Sony_DSC-W310", "Sony", "DSC-W310"),
        product("Sony_DSC-W350", "Sony", "DSC-W350"),
    ]
