"""Unit tests for the duplicate-title merge."""
from listing_matcher.services.matching import merge_duplicate_listings


class TestMergeDuplicateListings:
    """Tests for merge_duplicate_listings()."""
    
    def test_siblings_follow_their_representative(self, listing):
        """Test siblings are inserted right after the listing they copy."""
        a = listing("Nikon D90 kit", price="1")
        a_copy = listing("Nikon D90 kit", price="2")
        b = listing("Nikon D90 body", price="3")
        
        merged, added = merge_duplicate_listings({"P1": [a, b]}, {a.title: [a_copy]})
        
        assert [offer.price for offer in merged["P1"]] == ["1", "2", "3"]
        assert added == 1
    
    def test_count_equals_siblings_merged(self, listing):
        """Test the counter grows by exactly the number of siblings attached."""
        a = listing("Canon EOS5D", price="1")
        copies = [listing("Canon EOS5D", price=str(p)) for p in range(2, 5)]
        unrelated = {"Never matched": [listing("Never matched")]}
        
        merged, added = merge_duplicate_listings({"P1": [a]}, {a.title: copies, **unrelated})
        
        assert added == 3
        assert len(merged["P1"]) == 4
    
    def test_groups_not_mutated(self, listing):
        """Test the input groups are left untouched."""
        a = listing("Sony DSC-W310")
        groups = {"P1": [a]}
        
        merge_duplicate_listings(groups, {a.title: [listing("Sony DSC-W310", price="5")]})
        
        assert groups == {"P1": [a]}
    
    def test_no_duplicates(self, listing):
        """Test an empty table returns equal groups and zero merged."""
        a = listing("Sony DSC-W310")
        
        merged, added = merge_duplicate_listings({"P1": [a]}, {})
        
        assert merged == {"P1": [a]}
        assert added == 0
