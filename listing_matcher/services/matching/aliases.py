"""Known alternate manufacturer spellings.

Keys and values are conditioned strings. An alias is only consulted when no
catalog manufacturer appears in a listing.
"""
from typing import Dict, Mapping, Optional

from listing_matcher.services.conditioning import condition


MANUFACTURER_ALIASES: Dict[str, str] = {
    # Hewlett Packard is sold as HP
    "HEWLETTPACKARD": "HP",
    # Konica and Minolta are used on their own
    "KONICA": "KONICAMINOLTA",
    "MINOLTA": "KONICAMINOLTA",
    "FUJI": "FUJIFILM",
}


def build_alias_table(extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Built-in aliases with ``extra`` pairs conditioned and merged on top."""
    table = dict(MANUFACTURER_ALIASES)
    for alias, canonical in (extra or {}).items():
        alias_c = condition(alias)
        canonical_c = condition(canonical)
        if alias_c and canonical_c:
            table[alias_c] = canonical_c
    return table
