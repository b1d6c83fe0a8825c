"""String conditioning for catalog and listing comparisons.

Manufacturer, family and model strings are reduced to uppercase letters,
digits and periods so that "Konica Minolta", "konica-minolta" and
"KONICA MINOLTA" all compare equal.

Listing titles are only upper-cased: whole-word model patterns rely on the
spaces and dashes between tokens, so those are kept.
"""
import re
from typing import Optional

_NON_KEY_CHARS = re.compile(r"[^A-Za-z0-9.]")
_DIGITS = re.compile(r"[0-9]")
_NON_ALPHA = re.compile(r"[^A-Za-z]")


def condition(value: Optional[str]) -> Optional[str]:
    """Uppercase and drop everything except ASCII letters, digits and '.'.

    ``None`` passes through unchanged. Idempotent.
    """
    if value is None:
        return None
    # upper() first: some characters expand (e.g. "ß" -> "SS")
    return _NON_KEY_CHARS.sub("", value.upper())


def condition_title(title: Optional[str]) -> Optional[str]:
    """Uppercase a listing title, keeping its separators."""
    if title is None:
        return None
    return title.upper()


def strip_digits(value: str) -> str:
    """Remove every decimal digit."""
    return _DIGITS.sub("", value)


def alpha_residue(value: str) -> str:
    """Keep only ASCII letters."""
    return _NON_ALPHA.sub("", value)
