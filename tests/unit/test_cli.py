"""Unit tests for the command-line driver."""
import json

import pytest

from listing_matcher import cli


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep the CLI from reconfiguring logging for the rest of the session."""
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)


def _write_lines(path, records):
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n", encoding="utf-8")
    return str(path)


class TestMain:
    """Tests for cli.main()."""
    
    @pytest.fixture
    def inputs(self, tmp_path):
        products = _write_lines(tmp_path / "products.txt", [
            {"product_name": "Canon_EOS5D", "manufacturer": "Canon", "model": "EOS5D"},
            {"product_name": "Nikon_D90", "manufacturer": "Nikon", "model": "D90"},
            {"product_name": "Broken", "manufacturer": "Nikon"},
        ])
        listings = _write_lines(tmp_path / "listings.txt", [
            {"title": "Canon EOS5D body", "manufacturer": "Canon", "currency": "USD", "price": "999.00"},
            {"title": "Canon EOS5D body", "manufacturer": "Canon", "currency": "CAD", "price": "1099.00"},
            {"title": "Nikon D90 kit", "manufacturer": "Nikon", "currency": "USD", "price": "699.00"},
            {"title": "Lens cap 52mm", "manufacturer": "Generic", "currency": "USD", "price": "3.00"},
        ])
        return products, listings
    
    def test_run_writes_results_and_report(self, inputs, tmp_path, capsys):
        """Test a full run writes grouped results and prints statistics."""
        products, listings = inputs
        output = tmp_path / "out.txt"
        
        status = cli.main([products, listings, "-o", str(output), "--tie-break", "first"])
        
        assert status == 0
        lines = [json.loads(line) for line in output.read_text(encoding="utf-8").splitlines()]
        by_product = {line["product_name"]: line["listings"] for line in lines}
        assert [offer["currency"] for offer in by_product["Canon_EOS5D"]] == ["USD", "CAD"]
        assert len(by_product["Nikon_D90"]) == 1
        
        report = capsys.readouterr().out
        assert "regex_catalog" in report
        assert "Total Hits                 : 3" in report
        assert "Total Misses               : 1" in report
        assert "Total Invalid Definitions  : 1" in report
    
    def test_catalog_collisions_reported(self, tmp_path, capsys):
        """Test colliding catalog entries are counted in the report."""
        products = _write_lines(tmp_path / "products.txt", [
            {"product_name": "Canon_EOS5D", "manufacturer": "Canon", "model": "EOS5D"},
            {"product_name": "Canon_EOS_5D", "manufacturer": "Canon", "model": "EOS 5D"},
        ])
        listings = _write_lines(tmp_path / "listings.txt", [
            {"title": "Canon EOS5D body", "manufacturer": "Canon"},
        ])
        
        status = cli.main([products, listings, "-o", str(tmp_path / "out.txt")])
        
        assert status == 0
        report = capsys.readouterr().out
        assert "Catalog Collisions         : 1" in report
        assert "Total Invalid Definitions  : 1" in report
        assert "Total Hits                 : 1" in report
    
    def test_bad_input_exits_with_error(self, tmp_path):
        """Test unreadable input returns exit status 2."""
        products = tmp_path / "products.txt"
        products.write_text("{not json\n", encoding="utf-8")
        listings = _write_lines(tmp_path / "listings.txt", [])
        
        assert cli.main([str(products), listings, "-o", str(tmp_path / "out.txt")]) == 2
    
    def test_unknown_strategy_rejected(self, inputs):
        """Test argparse rejects unknown strategies."""
        products, listings = inputs
        
        with pytest.raises(SystemExit):
            cli.main([products, listings, "--strategy", "fuzzy"])
