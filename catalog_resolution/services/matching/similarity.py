"""Similarity scoring between a query listing and an indexed candidate.

Four sub-scores are computed and the maximum is taken:
    1. Character-bigram Dice of the full normalized names
    2. Character-bigram Dice of the brand-stripped names
    3. Token Dice of the full normalized names
    4. Token Dice of the brand-stripped names

Bigram similarity alone overweights shared generic substrings, so high
bigram sub-scores are discounted when the names share no meaningful
whole word. Known-different brands are then penalized on the combined
score, which keeps near-identical model names from different brands
out of the auto-merge range.
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import AbstractSet, Any, Optional

from catalog_resolution.config import MatchingSettings, matching_settings
from catalog_resolution.models import BrandRelation
from catalog_resolution.services.brands import BrandResolver, default_resolver
from catalog_resolution.services.matching.features import IndexedCandidate, NameFeatures


# Hi-fi vocabulary shared by unrelated brands and products
GENERIC_AUDIO_TOKENS = frozenset({
    "audio",
    "sound",
    "sounds",
    "studio",
    "pro",
    "acoustic",
    "acoustics",
    "hifi",
    "music",
    "labs",
    "lab",
    "electronics",
    "wireless",
    "monitor",
    "monitors",
    "edition",
    "series",
    "plus",
    "new",
    "version",
    "classic",
    "reference",
    "digital",
})


def dice(a: AbstractSet[str], b: AbstractSet[str], identical: bool = False) -> float:
    """Dice coefficient 2|A∩B| / (|A|+|B|).
    
    Args:
        a: First set
        b: Second set
        identical: Whether the source strings were equal; decides the
            score when both sets are empty
    """
    if not a and not b:
        return 1.0 if identical else 0.0
    if not a or not b:
        return 0.0
    return 2 * len(a & b) / (len(a) + len(b))


@dataclass(frozen=True)
class ScoreBreakdown:
    """Intermediate values of one score computation.
    
    Attributes:
        full_bigram: Bigram Dice of full names, after weak-overlap penalty
        stripped_bigram: Bigram Dice of brand-stripped names, after penalty
        full_token: Token Dice of full names
        stripped_token: Token Dice of brand-stripped names
        textual: Maximum sub-score, before the brand penalty
        brand_relation: Relation between query and candidate brands
        final: Score after the brand penalty, clamped to [0, 1]
    """
    full_bigram: float
    stripped_bigram: float
    full_token: float
    stripped_token: float
    textual: float
    brand_relation: BrandRelation
    final: float


class SimilarityScorer:
    """Bounded similarity score between a query name and a candidate.
    
    Scores are always finite and within [0, 1]; empty or malformed
    input degrades to 0.0 instead of raising.
    
    Attributes:
        settings: Penalty factors and floors
        resolver: Brand resolver used for the brand-mismatch penalty
    """
    
    def __init__(
        self,
        settings: Optional[MatchingSettings] = None,
        resolver: Optional[BrandResolver] = None,
    ):
        self.settings = settings or matching_settings
        self.resolver = resolver or default_resolver()
    
    def weak_overlap_factor(
        self,
        query_tokens: AbstractSet[str],
        candidate_tokens: AbstractSet[str],
    ) -> float:
        """Multiplier for a high bigram sub-score given the shared words."""
        shared = query_tokens & candidate_tokens
        if not shared:
            return self.settings.no_token_overlap_penalty
        if shared <= GENERIC_AUDIO_TOKENS:
            return self.settings.generic_overlap_penalty
        if all(len(token) <= self.settings.short_token_max_length for token in shared):
            return self.settings.short_token_overlap_penalty
        return 1.0
    
    def _bigram_score(self, q_bigrams, c_bigrams, q_tokens, c_tokens, identical: bool) -> float:
        value = dice(q_bigrams, c_bigrams, identical)
        if value >= self.settings.weak_overlap_floor:
            value *= self.weak_overlap_factor(q_tokens, c_tokens)
        return value
    
    def breakdown(
        self,
        query: NameFeatures,
        query_brand: Optional[str],
        candidate: IndexedCandidate,
    ) -> ScoreBreakdown:
        """Score a query against a candidate, keeping every intermediate value."""
        relation = self.resolver.compare(query_brand, candidate.brand)

        if not query.normalized:
            return ScoreBreakdown(0.0, 0.0, 0.0, 0.0, 0.0, relation, 0.0)

        full_bigram = self._bigram_score(
            query.bigrams,
            candidate.bigrams,
            query.tokens,
            candidate.tokens,
            query.normalized == candidate.normalized,
        )
        stripped_bigram = self._bigram_score(
            query.brand_stripped_bigrams,
            candidate.brand_stripped_bigrams,
            query.brand_stripped_tokens,
            candidate.brand_stripped_tokens,
            query.brand_stripped == candidate.brand_stripped,
        )
        full_token = dice(query.tokens, candidate.tokens)
        stripped_token = dice(query.brand_stripped_tokens, candidate.brand_stripped_tokens)

        textual = max(full_bigram, stripped_bigram, full_token, stripped_token)

        final = textual
        if relation == BrandRelation.DIFFERENT:
            final *= self.settings.brand_mismatch_penalty

        return ScoreBreakdown(
            full_bigram=full_bigram,
            stripped_bigram=stripped_bigram,
            full_token=full_token,
            stripped_token=stripped_token,
            textual=textual,
            brand_relation=relation,
            final=min(1.0, max(0.0, final)),
        )
    
    def score_features(
        self,
        query: NameFeatures,
        query_brand: Optional[str],
        candidate: IndexedCandidate,
    ) -> float:
        return self.breakdown(query, query_brand, candidate).final
    
    def score(
        self,
        query_name: Optional[str],
        query_brand: Optional[str],
        candidate: Any,
    ) -> float:
        """Score a raw query name against a candidate.
        
        Args:
            query_name: Raw listing title
            query_brand: Listing brand (None skips the brand penalty)
            candidate: IndexedCandidate, or any mapping/object with id, name, brand
            
        Returns:
            Similarity score in [0, 1]
        """
        query = NameFeatures.of(query_name, query_brand)
        return self.score_features(query, query_brand, IndexedCandidate.from_entry(candidate))


@lru_cache(maxsize=1)
def default_scorer() -> SimilarityScorer:
    return SimilarityScorer()


def score(query_name: Optional[str], query_brand: Optional[str], candidate: Any) -> float:
    """Score a query against a candidate with the default configuration."""
    return default_scorer().score(query_name, query_brand, candidate)
