"""Name normalization for retailer product titles."""
from catalog_resolution.services.normalization.normalizer import (
    compact,
    normalize,
    strip_brand,
)

__all__ = ["compact", "normalize", "strip_brand"]
