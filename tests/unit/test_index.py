"""Unit tests for candidate indexes.

Tests cover:
    - CandidateIndex build / append / ordering
    - CatalogIndex category and brand buckets
    - Brand-scoped index selection
"""
import pytest

from catalog_resolution.models import CatalogEntry, CategoryId
from catalog_resolution.services.matching import CandidateIndex, CatalogIndex, IndexedCandidate


class TestCandidateIndex:
    """Tests for CandidateIndex."""
    
    def test_build_preserves_pool_order(self, catalog_entries):
        index = CandidateIndex.build(catalog_entries)
        
        assert [c.id for c in index] == [e.id for e in catalog_entries]
        assert len(index) == len(catalog_entries)
    
    def test_build_precomputes_features(self):
        index = CandidateIndex.build([{"id": "hd600", "name": "HD600", "brand": "Sennheiser"}])
        candidate = index.entries[0]
        
        assert isinstance(candidate, IndexedCandidate)
        assert candidate.normalized == "hd 600"
        assert candidate.display_name == "HD600"
        assert candidate.tokens == frozenset({"hd", "600"})
    
    def test_accepts_objects_with_attributes(self):
        """Any object exposing id and name can be indexed."""
        class Row:
            id = 42
            name = "Moondrop Aria"
        
        index = CandidateIndex.build([Row()])
        
        assert index.entries[0].id == "42"
        assert index.entries[0].brand is None
    
    def test_append_adds_at_end(self, catalog_entries):
        index = CandidateIndex.build(catalog_entries[:2])
        
        added = index.append(CatalogEntry(id="new", name="Sennheiser HD800"))
        
        assert index.entries[-1] is added
        assert len(index) == 3
    
    def test_empty_index_is_falsy(self):
        assert not CandidateIndex()
        assert len(CandidateIndex.build([])) == 0


class TestCatalogIndex:
    """Tests for CatalogIndex bucketing and selection."""
    
    @pytest.fixture
    def catalog(self, catalog_entries):
        return CatalogIndex.build(catalog_entries)
    
    def test_len_counts_every_entry(self, catalog, catalog_entries):
        assert len(catalog) == len(catalog_entries)
    
    def test_category_index(self, catalog):
        ids = [c.id for c in catalog.category_index(CategoryId.IEM)]
        
        assert ids == ["zenith", "blessing3", "aria", "fh7"]
    
    def test_brand_index_uses_canonical_brand(self, catalog):
        """Brand lookups ignore case and spacing."""
        ids = [c.id for c in catalog.brand_index(CategoryId.IEM, "  MOONDROP ")]
        
        assert ids == ["blessing3", "aria"]
    
    def test_brand_index_is_per_category(self, catalog):
        assert not catalog.brand_index(CategoryId.HEADPHONE, "Moondrop")
    
    def test_select_brand_scoped(self, catalog):
        index, brand_scoped = catalog.select(CategoryId.HEADPHONE, "Sennheiser")
        
        assert brand_scoped is True
        assert [c.id for c in index] == ["hd600", "hd650"]
    
    @pytest.mark.parametrize("brand", [None, "", "Hifiman"])
    def test_select_falls_back_to_category(self, catalog, brand):
        index, brand_scoped = catalog.select(CategoryId.IEM, brand)
        
        assert brand_scoped is False
        assert len(index) == 4
    
    def test_select_unknown_category_is_empty(self, catalog):
        index, brand_scoped = catalog.select(CategoryId.DAC, "FiiO")
        
        assert brand_scoped is False
        assert len(index) == 0
    
    def test_add_updates_both_indexes(self, catalog):
        entry = CatalogEntry(id="chu2", name="Moondrop Chu 2", brand="Moondrop", category=CategoryId.IEM)
        
        catalog.add(entry)
        
        assert catalog.brand_index(CategoryId.IEM, "Moondrop").entries[-1].id == "chu2"
        assert catalog.category_index(CategoryId.IEM).entries[-1].id == "chu2"
        assert len(catalog) == 7
    
    def test_add_without_brand(self, catalog):
        """Entries without a brand only join the category index."""
        catalog.add(CatalogEntry(id="x", name="Mystery IEM", category=CategoryId.IEM))
        
        assert len(catalog.category_index(CategoryId.IEM)) == 5
        assert len(catalog.brand_index(CategoryId.IEM, None)) == 0
