"""Precomputed comparison features for product names.

Bigram and token sets are derived once per name and reused for every
comparison the name takes part in.
"""
from dataclasses import dataclass
from typing import Any, FrozenSet, Mapping, Optional

from catalog_resolution.services.normalization import normalize, strip_brand


def bigrams(text: str) -> FrozenSet[str]:
    """Set of adjacent character pairs ("hd 6" -> {"hd", "d ", " 6"})."""
    return frozenset(text[i:i + 2] for i in range(len(text) - 1))


def tokens(text: str) -> FrozenSet[str]:
    """Set of whitespace-separated words."""
    return frozenset(text.split())


@dataclass(frozen=True)
class NameFeatures:
    """Normalized forms of one name plus their bigram and token sets."""
    normalized: str
    brand_stripped: str
    bigrams: FrozenSet[str]
    brand_stripped_bigrams: FrozenSet[str]
    tokens: FrozenSet[str]
    brand_stripped_tokens: FrozenSet[str]
    
    @classmethod
    def of(cls, name: Optional[str], brand: Optional[str] = None) -> "NameFeatures":
        normalized = normalize(name)
        stripped = strip_brand(normalized, brand)
        return cls(
            normalized=normalized,
            brand_stripped=stripped,
            bigrams=bigrams(normalized),
            brand_stripped_bigrams=bigrams(stripped),
            tokens=tokens(normalized),
            brand_stripped_tokens=tokens(stripped),
        )


@dataclass(frozen=True)
class IndexedCandidate(NameFeatures):
    """A catalog entry with its name features precomputed.
    
    Owned by the CandidateIndex that built it and never mutated.
    
    Attributes:
        id: Catalog identifier
        display_name: Name as shown in the catalog
        brand: Catalog brand (if known)
    """
    id: str = ""
    display_name: str = ""
    brand: Optional[str] = None
    
    @classmethod
    def build(cls, id: str, name: str, brand: Optional[str] = None) -> "IndexedCandidate":
        features = NameFeatures.of(name, brand)
        return cls(
            id=str(id),
            display_name=name,
            brand=brand,
            normalized=features.normalized,
            brand_stripped=features.brand_stripped,
            bigrams=features.bigrams,
            brand_stripped_bigrams=features.brand_stripped_bigrams,
            tokens=features.tokens,
            brand_stripped_tokens=features.brand_stripped_tokens,
        )
    
    @classmethod
    def from_entry(cls, entry: Any) -> "IndexedCandidate":
        """Index a mapping or object exposing id, name and optional brand."""
        if isinstance(entry, cls):
            return entry
        if isinstance(entry, Mapping):
            return cls.build(entry["id"], entry["name"], entry.get("brand"))
        return cls.build(entry.id, entry.name, getattr(entry, "brand", None))
