"""Data models for catalog resolution.

Key Components:
    - CategoryId, RawListing, CatalogEntry: catalog inputs
    - BrandRelation, MatchOutcome, MatchResult, MatchDecision: matching outputs
    - RuleTier, ClassificationResult: classifier outputs
    - ProductAttributes: title-derived product attributes
"""
from catalog_resolution.models.attributes import (
    DriverType,
    HeadphoneDesign,
    HeadphoneType,
    IemType,
    MicConnection,
    MicPattern,
    MicType,
    ProductAttributes,
)
from catalog_resolution.models.catalog import (
    CABLE_CATEGORIES,
    CatalogEntry,
    CategoryId,
    RawListing,
)
from catalog_resolution.models.classification import ClassificationResult, RuleTier
from catalog_resolution.models.matching import (
    BrandRelation,
    MatchDecision,
    MatchOutcome,
    MatchResult,
)

__all__ = [
    "CABLE_CATEGORIES",
    "BrandRelation",
    "CatalogEntry",
    "CategoryId",
    "ClassificationResult",
    "DriverType",
    "HeadphoneDesign",
    "HeadphoneType",
    "IemType",
    "MatchDecision",
    "MatchOutcome",
    "MatchResult",
    "MicConnection",
    "MicPattern",
    "MicType",
    "ProductAttributes",
    "RawListing",
    "RuleTier",
]
