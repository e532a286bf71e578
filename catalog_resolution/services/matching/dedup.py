"""Duplicate grouping for existing catalog entries."""
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from catalog_resolution.models import CatalogEntry, CategoryId
from catalog_resolution.services.brands import BrandResolver, default_resolver
from catalog_resolution.services.normalization import normalize, strip_brand

logger = structlog.get_logger(__name__)

IdentityKey = Tuple[Optional[CategoryId], str, str]


def identity_key(entry: CatalogEntry, resolver: Optional[BrandResolver] = None) -> IdentityKey:
    """(category, canonical brand, normalized model name) of a catalog entry.
    
    A leading brand is removed from the name only when the entry has a
    brand, so "Moondrop Aria" and "Aria" from Moondrop share a key.
    """
    resolver = resolver or default_resolver()
    brand = resolver.canonicalize(entry.brand)
    name = normalize(entry.name)
    if brand:
        name = strip_brand(name, entry.brand)
    return entry.category, brand, name


def group_duplicates(
    entries: Iterable[CatalogEntry],
    resolver: Optional[BrandResolver] = None,
) -> List[List[CatalogEntry]]:
    """Group catalog entries that share an identity key.
    
    Picking the surviving row of each group is up to the caller.
    
    Returns:
        Groups with more than one member, in first-seen order; members
        keep their input order
    """
    resolver = resolver or default_resolver()
    groups: Dict[IdentityKey, List[CatalogEntry]] = {}
    for entry in entries:
        key = identity_key(entry, resolver)
        if not key[2]:
            continue
        groups.setdefault(key, []).append(entry)

    duplicates = [members for members in groups.values() if len(members) > 1]
    logger.info(
        "duplicates_grouped",
        groups=len(duplicates),
        entries=sum(len(members) for members in duplicates),
    )
    return duplicates
