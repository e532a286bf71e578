"""Brand relationship resolver.

Classifies two brand strings as same / related / unknown / different
using an alias table (spelling variants) and a sub-brand parent table.
The resolver is a pure lookup: nothing is learned or inferred, and a
`related` answer is only ever produced by an explicit parent entry.

Key Components:
    - BrandTable: Immutable alias and parent tables
    - BrandResolver: Canonicalization and comparison over a BrandTable
    - load_brand_table(): JSON loader for externally supplied tables
    - compare_brands(): Module-level comparison using the default tables
"""
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

import structlog
from pydantic import BaseModel, ValidationError

from catalog_resolution.config import matching_settings
from catalog_resolution.errors import BrandTableError
from catalog_resolution.models import BrandRelation
from catalog_resolution.services.brands.tables import DEFAULT_ALIASES, DEFAULT_PARENTS
from catalog_resolution.services.normalization import compact

logger = structlog.get_logger(__name__)


def canonical_key(brand: Optional[str]) -> str:
    """Lowercase a brand and collapse internal whitespace."""
    if not brand:
        return ""
    return " ".join(brand.lower().split())


class BrandTableFile(BaseModel):
    """On-disk brand table format.
    
    Example:
        {"aliases": {"ziigat": "ziigaat"}, "parents": {"jadeaudio": "fiio"}}
    """
    
    aliases: Dict[str, str] = {}
    parents: Dict[str, str] = {}
    
    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "example": {
                "aliases": {"ziigat": "ziigaat"},
                "parents": {"jadeaudio": "fiio"},
            }
        },
    }


@dataclass(frozen=True)
class BrandTable:
    """Immutable brand alias and parent tables.
    
    Build instances with from_mappings(), which canonicalizes keys and
    rejects inconsistent tables.
    
    Attributes:
        aliases: alias -> canonical brand
        parents: canonical sub-brand -> canonical parent brand
    """
    aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    parents: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    
    @classmethod
    def from_mappings(
        cls,
        aliases: Optional[Mapping[str, str]] = None,
        parents: Optional[Mapping[str, str]] = None,
    ) -> "BrandTable":
        """Validate and freeze alias and parent tables.
        
        Raises:
            BrandTableError: If an alias resolves to another alias, or the
                parent table contains a cycle
        """
        alias_map = {
            canonical_key(alias): canonical_key(target)
            for alias, target in (aliases or {}).items()
            if canonical_key(alias) and canonical_key(target)
        }
        for alias, target in alias_map.items():
            if target in alias_map and alias_map[target] != target:
                raise BrandTableError(
                    f"Alias '{alias}' maps to '{target}', which is itself an alias"
                )

        def resolve(name: str) -> str:
            return alias_map.get(name, name)

        parent_map = {
            resolve(canonical_key(child)): resolve(canonical_key(parent))
            for child, parent in (parents or {}).items()
            if canonical_key(child) and canonical_key(parent)
        }
        for child in parent_map:
            seen = {child}
            current = parent_map[child]
            while current in parent_map and parent_map[current] != current:
                if current in seen:
                    raise BrandTableError(f"Parent cycle detected at brand '{child}'")
                seen.add(current)
                current = parent_map[current]

        return cls(
            aliases=MappingProxyType(alias_map),
            parents=MappingProxyType(parent_map),
        )


def load_brand_table(path: Union[str, Path]) -> BrandTable:
    """Load a brand table from a JSON file.
    
    Args:
        path: JSON document with optional "aliases" and "parents" objects
        
    Returns:
        Validated BrandTable
        
    Raises:
        BrandTableError: If the file is unreadable, malformed, or inconsistent
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise BrandTableError(f"Cannot read brand table {path}: {e}") from e

    try:
        document = BrandTableFile.model_validate_json(raw)
    except ValidationError as e:
        raise BrandTableError(f"Malformed brand table {path}: {e}") from e

    table = BrandTable.from_mappings(document.aliases, document.parents)
    logger.info(
        "brand_table_loaded",
        path=str(path),
        aliases=len(table.aliases),
        parents=len(table.parents),
    )
    return table


class BrandResolver:
    """Resolves brand strings and compares them.
    
    Canonicalization lowercases, collapses whitespace and applies the
    alias table. Spellings that differ only in spacing or punctuation
    ("AudioTechnica", "Audio-Technica") resolve through a compact-key
    index built from both aliases and canonical names.
    
    Attributes:
        table: Brand table this resolver was built from
    """
    
    def __init__(self, table: Optional[BrandTable] = None):
        self.table = table or BrandTable()
        self._compact_index: Dict[str, str] = {}
        for canonical in list(self.table.aliases.values()) + list(self.table.parents):
            self._compact_index.setdefault(compact(canonical), canonical)
        for alias, canonical in self.table.aliases.items():
            self._compact_index.setdefault(compact(alias), canonical)
    
    def canonicalize(self, brand: Optional[str]) -> str:
        """Return the canonical lowercase brand, "" when absent."""
        key = canonical_key(brand)
        if not key:
            return ""
        if key in self.table.aliases:
            return self.table.aliases[key]
        return self._compact_index.get(compact(key), key)
    
    def parent_of(self, brand: Optional[str]) -> str:
        """Return the parent brand, or the brand itself when it has none."""
        canonical = self.canonicalize(brand)
        return self.table.parents.get(canonical, canonical)
    
    def compare(self, a: Optional[str], b: Optional[str]) -> BrandRelation:
        """Compare two brands.
        
        Returns:
            UNKNOWN when either brand is absent, SAME for equal canonical
            forms or when one is a prefix of the other ("moondrop" /
            "moondrop audio", "moondrop" / "moondropaudio"),
            RELATED when both share a curated parent, DIFFERENT otherwise
        """
        left = self.canonicalize(a)
        right = self.canonicalize(b)
        if not left or not right:
            return BrandRelation.UNKNOWN

        if _same_brand(left, right):
            return BrandRelation.SAME

        if self.table.parents.get(left, left) == self.table.parents.get(right, right):
            return BrandRelation.RELATED

        return BrandRelation.DIFFERENT


def _same_brand(left: str, right: str) -> bool:
    if left == right or compact(left) == compact(right):
        return True
    return left.startswith(right) or right.startswith(left)


@lru_cache(maxsize=1)
def default_brand_table() -> BrandTable:
    """Built-in tables, or the file named by MATCH_BRAND_TABLE_PATH."""
    if matching_settings.brand_table_path is not None:
        return load_brand_table(matching_settings.brand_table_path)
    return BrandTable.from_mappings(DEFAULT_ALIASES, DEFAULT_PARENTS)


@lru_cache(maxsize=1)
def default_resolver() -> BrandResolver:
    return BrandResolver(default_brand_table())


def compare_brands(a: Optional[str], b: Optional[str]) -> BrandRelation:
    """Compare two brands using the default tables."""
    return default_resolver().compare(a, b)
