"""Candidate indexes over catalog pools.

An index precomputes name features for every catalog entry of a pool so
that repeated queries never normalize the same catalog name twice.
Indexes only grow: entries created mid-session are appended in place.

Appending is not synchronized. Share an index across threads only
while nothing appends to it.
"""
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import structlog

from catalog_resolution.models import CatalogEntry, CategoryId
from catalog_resolution.services.brands import BrandResolver, default_resolver
from catalog_resolution.services.matching.features import IndexedCandidate

logger = structlog.get_logger(__name__)


class CandidateIndex:
    """Ordered, append-only collection of IndexedCandidate entries.
    
    Iteration order is insertion order; the decision engine relies on it
    for first-seen tie-breaking.
    """
    
    def __init__(self, entries: Optional[Iterable[IndexedCandidate]] = None):
        self._entries: List[IndexedCandidate] = list(entries or [])
    
    @classmethod
    def build(cls, pool: Iterable[Any]) -> "CandidateIndex":
        """Index a pool of catalog entries in one pass.
        
        Args:
            pool: CatalogEntry objects, or mappings/objects with id, name
                and optional brand
                
        Returns:
            New CandidateIndex in pool order
        """
        index = cls(IndexedCandidate.from_entry(entry) for entry in pool)
        logger.debug("candidate_index_built", size=len(index))
        return index
    
    def append(self, entry: Any) -> IndexedCandidate:
        """Index one new entry and add it at the end."""
        candidate = IndexedCandidate.from_entry(entry)
        self._entries.append(candidate)
        return candidate
    
    @property
    def entries(self) -> Tuple[IndexedCandidate, ...]:
        return tuple(self._entries)
    
    def __iter__(self) -> Iterator[IndexedCandidate]:
        return iter(self._entries)
    
    def __len__(self) -> int:
        return len(self._entries)
    
    def __bool__(self) -> bool:
        return bool(self._entries)


class CatalogIndex:
    """Category-wide and brand-scoped indexes for a whole catalog.
    
    One CandidateIndex is kept per category, plus one per
    (category, canonical brand) pair. Entries without a category share
    the None bucket.
    
    Example:
        catalog = CatalogIndex.build(entries)
        index, brand_scoped = catalog.select(CategoryId.IEM, "Moondrop")
    """
    
    def __init__(self, resolver: Optional[BrandResolver] = None):
        self.resolver = resolver or default_resolver()
        self._by_category: Dict[Optional[CategoryId], CandidateIndex] = {}
        self._by_brand: Dict[Tuple[Optional[CategoryId], str], CandidateIndex] = {}
        self._log = logger.bind(component="CatalogIndex")
    
    @classmethod
    def build(
        cls,
        entries: Iterable[CatalogEntry],
        resolver: Optional[BrandResolver] = None,
    ) -> "CatalogIndex":
        catalog = cls(resolver)
        count = 0
        for entry in entries:
            catalog._insert(entry)
            count += 1
        catalog._log.info(
            "index_built",
            entries=count,
            categories=len(catalog._by_category),
            brand_indexes=len(catalog._by_brand),
        )
        return catalog
    
    def _insert(self, entry: CatalogEntry) -> IndexedCandidate:
        candidate = IndexedCandidate.from_entry(entry)
        self._by_category.setdefault(entry.category, CandidateIndex()).append(candidate)
        brand_key = self.resolver.canonicalize(entry.brand)
        if brand_key:
            key = (entry.category, brand_key)
            self._by_brand.setdefault(key, CandidateIndex()).append(candidate)
        return candidate
    
    def add(self, entry: CatalogEntry) -> IndexedCandidate:
        """Append a newly created catalog entry to its category and brand indexes."""
        candidate = self._insert(entry)
        self._log.debug(
            "index_entry_added",
            entry_id=entry.id,
            category=entry.category.value if entry.category else None,
        )
        return candidate
    
    def category_index(self, category: Optional[CategoryId]) -> CandidateIndex:
        return self._by_category.get(category, CandidateIndex())
    
    def brand_index(self, category: Optional[CategoryId], brand: Optional[str]) -> CandidateIndex:
        brand_key = self.resolver.canonicalize(brand)
        if not brand_key:
            return CandidateIndex()
        return self._by_brand.get((category, brand_key), CandidateIndex())
    
    def select(
        self,
        category: Optional[CategoryId],
        brand: Optional[str],
    ) -> Tuple[CandidateIndex, bool]:
        """Pick the index to search for a listing.
        
        Returns:
            (index, brand_scoped): the non-empty brand-scoped index when
            one exists, otherwise the category-wide index
        """
        scoped = self.brand_index(category, brand)
        if scoped:
            return scoped, True
        return self.category_index(category), False
    
    def __len__(self) -> int:
        return sum(len(index) for index in self._by_category.values())
