"""Unit tests for environment-driven settings."""
import pytest
from pydantic import ValidationError

from listing_matcher.config import MatchingSettings
from listing_matcher.services.matching import RegexCatalogMatcher


class TestMatchingSettings:
    """Tests for MatchingSettings."""
    
    def test_defaults(self, monkeypatch):
        """Test defaults without environment overrides."""
        monkeypatch.delenv("MATCH_TIE_BREAK", raising=False)
        settings = MatchingSettings()
        
        assert settings.tie_break == "longest"
        assert settings.extra_aliases == {}
        assert settings.output_path == "results.txt"
    
    def test_environment_overrides(self, monkeypatch):
        """Test MATCH_ prefixed variables are read."""
        monkeypatch.setenv("MATCH_TIE_BREAK", "first")
        monkeypatch.setenv("MATCH_EXTRA_ALIASES", '{"Leica Camera": "Leica"}')
        
        settings = MatchingSettings()
        
        assert settings.tie_break == "first"
        assert settings.extra_aliases == {"Leica Camera": "Leica"}
    
    def test_invalid_tie_break(self, monkeypatch):
        """Test unknown tie-break rules are rejected."""
        monkeypatch.setenv("MATCH_TIE_BREAK", "random")
        
        with pytest.raises(ValidationError):
            MatchingSettings()
    
    def test_matcher_falls_back_to_settings(self, monkeypatch):
        """Test the matcher reads its defaults from the settings instance."""
        monkeypatch.setattr("listing_matcher.services.matching.matcher.matching_settings",
                            MatchingSettings(tie_break="first", extra_aliases={"Pentax Ricoh": "Pentax"}))
        
        matcher = RegexCatalogMatcher()
        
        assert matcher.tie_break == "first"
        assert matcher.aliases["PENTAXRICOH"] == "PENTAX"
