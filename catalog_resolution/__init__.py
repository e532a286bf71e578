"""Entity resolution and category classification for an audio-equipment catalog.

Key Components:
    - normalize(): Canonical comparable form of a retailer title
    - compare_brands(): same / related / unknown / different brand relation
    - score() / decide(): Similarity scoring and three-way match decisions
    - CandidateIndex / CatalogIndex: Precomputed candidate pools
    - classify(): Tiered category correction
"""
from catalog_resolution.models import (
    BrandRelation,
    CatalogEntry,
    CategoryId,
    MatchDecision,
    MatchOutcome,
    MatchResult,
    RawListing,
)
from catalog_resolution.services.brands import compare_brands
from catalog_resolution.services.classification import (
    CategoryClassifier,
    classify,
    detect_product_category,
    review,
)
from catalog_resolution.services.matching import (
    CandidateIndex,
    CatalogIndex,
    MatchDecisionEngine,
    MatchingSession,
    SimilarityScorer,
    decide,
    dice,
    outcome_for_score,
    score,
)
from catalog_resolution.services.normalization import normalize, strip_brand

__version__ = "0.1.0"

__all__ = [
    "BrandRelation",
    "CandidateIndex",
    "CatalogEntry",
    "CatalogIndex",
    "CategoryClassifier",
    "CategoryId",
    "MatchDecision",
    "MatchDecisionEngine",
    "MatchOutcome",
    "MatchResult",
    "MatchingSession",
    "RawListing",
    "SimilarityScorer",
    "classify",
    "compare_brands",
    "decide",
    "detect_product_category",
    "dice",
    "normalize",
    "outcome_for_score",
    "review",
    "score",
    "strip_brand",
]
