"""Brand relationship resolution.

Key Components:
    - BrandResolver, BrandTable: alias/parent lookups
    - compare_brands(): default-table comparison
    - load_brand_table(): JSON table loader
"""
from catalog_resolution.services.brands.resolver import (
    BrandResolver,
    BrandTable,
    BrandTableFile,
    canonical_key,
    compare_brands,
    default_brand_table,
    default_resolver,
    load_brand_table,
)

__all__ = [
    "BrandResolver",
    "BrandTable",
    "BrandTableFile",
    "canonical_key",
    "compare_brands",
    "default_brand_table",
    "default_resolver",
    "load_brand_table",
]
