"""Match decision engine.

Runs the similarity scorer across a candidate index, keeps the single
best candidate and maps its score to auto_merge / pending_review /
reject.

Ties are broken by index order: the first candidate reaching the
maximum score wins. Review-queue ordering downstream depends on this,
so it must not be replaced by a different tie-break.
"""
from functools import lru_cache
from typing import Iterable, List, Optional, Tuple

import structlog
from rapidfuzz import process

from catalog_resolution.config import MatchingSettings, matching_settings
from catalog_resolution.models import MatchDecision, MatchOutcome, MatchResult
from catalog_resolution.services.matching.features import IndexedCandidate, NameFeatures
from catalog_resolution.services.matching.similarity import SimilarityScorer

logger = structlog.get_logger(__name__)


class MatchDecisionEngine:
    """Three-way match decisions over a candidate index.
    
    Thresholds (inclusive lower bounds):
        - score >= auto_merge_threshold (0.85): AUTO_MERGE
        - score >= review_threshold (0.65): PENDING_REVIEW
        - otherwise, or no candidates: REJECT
    
    Attributes:
        settings: Thresholds and candidate limits
        scorer: SimilarityScorer used for every comparison
    """
    
    def __init__(
        self,
        settings: Optional[MatchingSettings] = None,
        scorer: Optional[SimilarityScorer] = None,
    ):
        self.settings = settings or matching_settings
        self.scorer = scorer or SimilarityScorer(self.settings)
        self._log = logger.bind(component="MatchDecisionEngine")
    
    def outcome_for_score(
        self,
        score: float,
        auto_merge_threshold: Optional[float] = None,
        review_threshold: Optional[float] = None,
    ) -> MatchOutcome:
        """Map a score to exactly one outcome.
        
        Args:
            score: Similarity score in [0, 1]
            auto_merge_threshold: Override for the auto-merge bound
            review_threshold: Override for the review bound
        """
        auto_merge = (
            self.settings.auto_merge_threshold
            if auto_merge_threshold is None
            else auto_merge_threshold
        )
        review = self.settings.review_threshold if review_threshold is None else review_threshold
        if score >= auto_merge:
            return MatchOutcome.AUTO_MERGE
        if score >= review:
            return MatchOutcome.PENDING_REVIEW
        return MatchOutcome.REJECT
    
    def best_match(
        self,
        query_name: Optional[str],
        query_brand: Optional[str],
        index: Iterable[IndexedCandidate],
    ) -> Optional[MatchResult]:
        """Highest-scoring candidate, first seen on ties; None for an empty index."""
        query = NameFeatures.of(query_name, query_brand)
        best: Optional[IndexedCandidate] = None
        best_score = -1.0
        for candidate in index:
            value = self.scorer.score_features(query, query_brand, candidate)
            if value > best_score:
                best_score = value
                best = candidate
        if best is None:
            return None
        return MatchResult(
            candidate_id=best.id,
            candidate_name=best.display_name,
            score=best_score,
        )
    
    def _extract(
        self,
        query_name: Optional[str],
        query_brand: Optional[str],
        entries: List[IndexedCandidate],
        limit: Optional[int],
    ) -> List[Tuple[IndexedCandidate, float, int]]:
        # extract orders equal scores by index position
        query = NameFeatures.of(query_name, query_brand)

        def scorer(q, candidate, **kwargs):
            return self.scorer.score_features(q, query_brand, candidate)

        return process.extract(
            query,
            entries,
            scorer=scorer,
            processor=None,
            limit=limit,
        )
    
    def _review_candidates(self, ranked, limit: int) -> List[MatchResult]:
        return [
            MatchResult(
                candidate_id=candidate.id,
                candidate_name=candidate.display_name,
                score=value,
            )
            for candidate, value, _ in ranked[:limit]
            if value > 0
        ]
    
    def rank_candidates(
        self,
        query_name: Optional[str],
        query_brand: Optional[str],
        index: Iterable[IndexedCandidate],
        limit: Optional[int] = None,
    ) -> List[MatchResult]:
        """Top candidates for reviewers, best first, index order on ties.
        
        Candidates scoring zero share nothing with the query and are left out.
        """
        entries = list(index)
        if not entries:
            return []
        limit = limit or self.settings.max_candidates
        return self._review_candidates(
            self._extract(query_name, query_brand, entries, limit), limit
        )
    
    def decide(
        self,
        query_name: Optional[str],
        query_brand: Optional[str],
        index: Iterable[IndexedCandidate],
    ) -> MatchDecision:
        """Decide whether a listing merges into, is reviewed against, or is
        distinct from the entries of an index.
        
        Every entry is scored once. Review candidates are only attached to
        auto_merge and pending_review decisions.
        
        Args:
            query_name: Raw listing title
            query_brand: Listing brand (None skips the brand penalty)
            index: CandidateIndex (brand-scoped or category-wide)
            
        Returns:
            MatchDecision with the winning candidate and review candidates
        """
        entries = list(index)
        if not entries:
            self._log.debug(
                "match_decided",
                query=query_name,
                outcome=MatchOutcome.REJECT.value,
                candidates=0,
            )
            return MatchDecision(outcome=MatchOutcome.REJECT)

        ranked = self._extract(query_name, query_brand, entries, limit=None)
        best, best_score, _ = ranked[0]
        result = MatchResult(
            candidate_id=best.id,
            candidate_name=best.display_name,
            score=best_score,
        )
        outcome = self.outcome_for_score(best_score)
        candidates = []
        if outcome != MatchOutcome.REJECT:
            candidates = self._review_candidates(ranked, self.settings.max_candidates)

        self._log.debug(
            "match_decided",
            query=query_name,
            outcome=outcome.value,
            candidate_id=result.candidate_id,
            score=round(result.score, 4),
            candidates=len(entries),
        )
        return MatchDecision(outcome=outcome, result=result, candidates=candidates)


@lru_cache(maxsize=1)
def default_engine() -> MatchDecisionEngine:
    return MatchDecisionEngine()


def decide(
    query_name: Optional[str],
    query_brand: Optional[str],
    index: Iterable[IndexedCandidate],
) -> MatchDecision:
    """Decide a listing against an index with the default configuration."""
    return default_engine().decide(query_name, query_brand, index)


def outcome_for_score(score: float) -> MatchOutcome:
    """Map a score to an outcome with the default thresholds."""
    return default_engine().outcome_for_score(score)
