"""Unit tests for string conditioning.

Tests cover:
    - condition(): case folding and character stripping
    - condition(): None passthrough and idempotence
    - condition_title(): separators are kept
    - strip_digits() / alpha_residue()
"""
import pytest

from listing_matcher.services.conditioning import (
    alpha_residue,
    condition,
    condition_title,
    strip_digits,
)


class TestCondition:
    """Tests for condition()."""
    
    @pytest.mark.parametrize("raw,expected", [
        ("Canon", "CANON"),
        ("Konica Minolta", "KONICAMINOLTA"),
        ("Hewlett-Packard", "HEWLETTPACKARD"),
        ("DSC-W310", "DSCW310"),
        ("EOS 5D Mark II", "EOS5DMARKII"),
        ("FinePix S1000fd", "FINEPIXS1000FD"),
        ("Cyber-shot 1.5", "CYBERSHOT1.5"),
        ("  ", ""),
        ("", ""),
        ("Ünïcode", "NCODE"),
    ])
    def test_condition_values(self, raw, expected):
        """Test uppercase plus letters/digits/period only."""
        assert condition(raw) == expected
    
    def test_condition_none(self):
        """Test None passes through."""
        assert condition(None) is None
    
    @pytest.mark.parametrize("raw", [
        "Canon EOS 5D",
        "dsc_w310 (silver)",
        "straße",
        "ﬁnepix",
        "1.5 / 2,0",
    ])
    def test_condition_idempotent(self, raw):
        """Test conditioning twice changes nothing."""
        once = condition(raw)
        assert condition(once) == once


class TestConditionTitle:
    """Tests for condition_title()."""
    
    def test_title_keeps_separators(self):
        """Test titles are upper-cased but keep spaces and dashes."""
        assert condition_title("Sony DSC-W310 12.1MP") == "SONY DSC-W310 12.1MP"
    
    def test_title_none(self):
        """Test None passes through."""
        assert condition_title(None) is None


class TestResidues:
    """Tests for digit and letter residues."""
    
    @pytest.mark.parametrize("value,expected", [
        ("A100", "A"),
        ("100", ""),
        ("S6100.5", "S."),
    ])
    def test_strip_digits(self, value, expected):
        """Test only digits are removed."""
        assert strip_digits(value) == expected
    
    @pytest.mark.parametrize("value,expected", [
        ("DSLR100", "DSLR"),
        ("100X", "X"),
        ("A1.5B", "AB"),
        ("2000", ""),
    ])
    def test_alpha_residue(self, value, expected):
        """Test only letters are kept."""
        assert alpha_residue(value) == expected
