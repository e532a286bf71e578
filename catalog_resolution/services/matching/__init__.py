"""Listing-to-catalog matching.

Key Components:
    - SimilarityScorer: Bounded similarity score with brand penalty
    - CandidateIndex / CatalogIndex: Precomputed candidate pools
    - MatchDecisionEngine: auto_merge / pending_review / reject decisions
    - MatchingSession: Per-run screening, classification and matching
    - group_duplicates(): Duplicate grouping of catalog entries
"""
from catalog_resolution.services.matching.dedup import group_duplicates, identity_key
from catalog_resolution.services.matching.engine import (
    MatchDecisionEngine,
    decide,
    default_engine,
    outcome_for_score,
)
from catalog_resolution.services.matching.features import (
    IndexedCandidate,
    NameFeatures,
    bigrams,
    tokens,
)
from catalog_resolution.services.matching.index import CandidateIndex, CatalogIndex
from catalog_resolution.services.matching.session import (
    ListingOutcome,
    MatchingSession,
    SessionStats,
)
from catalog_resolution.services.matching.similarity import (
    GENERIC_AUDIO_TOKENS,
    ScoreBreakdown,
    SimilarityScorer,
    default_scorer,
    dice,
    score,
)

__all__ = [
    "GENERIC_AUDIO_TOKENS",
    "CandidateIndex",
    "CatalogIndex",
    "IndexedCandidate",
    "ListingOutcome",
    "MatchDecisionEngine",
    "MatchingSession",
    "NameFeatures",
    "ScoreBreakdown",
    "SessionStats",
    "SimilarityScorer",
    "bigrams",
    "decide",
    "default_engine",
    "default_scorer",
    "dice",
    "group_duplicates",
    "identity_key",
    "outcome_for_score",
    "score",
    "tokens",
]
