"""Error handling module."""
from catalog_resolution.errors.exceptions import (
    CatalogResolutionError,
    RuleConfigurationError,
    BrandTableError,
)

__all__ = [
    "CatalogResolutionError",
    "RuleConfigurationError",
    "BrandTableError",
]
