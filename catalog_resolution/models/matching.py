"""Pydantic models for the listing matching pipeline.

This module defines the data transfer objects returned by the
similarity scorer and the match decision engine.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class BrandRelation(str, Enum):
    """Relationship between two brand strings."""
    SAME = "same"
    RELATED = "related"
    UNKNOWN = "unknown"
    DIFFERENT = "different"


class MatchOutcome(str, Enum):
    """Decision for a listing after scoring it against the catalog.
    
    Outcomes:
        - auto_merge: treat the listing as the matched catalog entry
        - pending_review: create a human-reviewable link, do not mutate the catalog
        - reject: treat the listing as a new, distinct product
    """
    AUTO_MERGE = "auto_merge"
    PENDING_REVIEW = "pending_review"
    REJECT = "reject"


class MatchResult(BaseModel):
    """Best-scoring catalog entry for a query listing.
    
    Attributes:
        candidate_id: Identifier of the catalog entry
        candidate_name: Display name of the catalog entry
        score: Similarity score in [0, 1]
    """
    
    candidate_id: str
    candidate_name: str
    score: float = Field(..., ge=0, le=1, description="Similarity score 0-1")
    
    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "candidate_id": "hd600",
                "candidate_name": "Sennheiser HD600",
                "score": 1.0,
            }
        },
    }


class MatchDecision(BaseModel):
    """Outcome of matching a listing against a candidate index.
    
    Attributes:
        outcome: Three-way decision derived from the winning score
        result: Winning candidate (None when the index was empty)
        candidates: Highest-scoring candidates for reviewers, best first
    """
    
    outcome: MatchOutcome
    result: Optional[MatchResult] = None
    candidates: List[MatchResult] = Field(default_factory=list)
    
    model_config = {"frozen": True}
    
    @model_validator(mode="after")
    def validate_result_required(self) -> "MatchDecision":
        """Ensure a winning candidate is present for merge and review outcomes."""
        if self.outcome != MatchOutcome.REJECT and self.result is None:
            raise ValueError("result is required for auto_merge or pending_review outcome")
        return self
    
    @property
    def score(self) -> float:
        """Winning score, 0.0 when there was no candidate."""
        return self.result.score if self.result else 0.0
