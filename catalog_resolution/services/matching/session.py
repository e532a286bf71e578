"""In-memory matching session over a catalog.

A session mirrors one ingestion run: each listing is screened,
category-corrected, matched against the narrowest useful index and
counted. Persisting the outcomes stays with the caller, which feeds
newly created catalog entries back through register() so later
listings of the same run can match them.
"""
from dataclasses import asdict, dataclass
from typing import Optional

import structlog

from catalog_resolution.config import MatchingSettings, matching_settings
from catalog_resolution.models import (
    CatalogEntry,
    CategoryId,
    MatchDecision,
    MatchOutcome,
    RawListing,
)
from catalog_resolution.services.classification import (
    CategoryClassifier,
    clean_marketplace_title,
    default_classifier,
    is_marketplace_junk,
)
from catalog_resolution.services.matching.engine import MatchDecisionEngine
from catalog_resolution.services.matching.features import IndexedCandidate
from catalog_resolution.services.matching.index import CatalogIndex

logger = structlog.get_logger(__name__)


@dataclass
class SessionStats:
    """Running counters for a session."""
    merged: int = 0
    pending_review: int = 0
    rejected: int = 0
    skipped: int = 0
    reclassified: int = 0
    
    @property
    def processed(self) -> int:
        return self.merged + self.pending_review + self.rejected + self.skipped
    
    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ListingOutcome:
    """What a session did with one listing.
    
    Attributes:
        listing: Listing as received
        category: Category after correction
        decision: Match decision (None when skipped)
        brand_scoped: Whether the brand-scoped index was searched
        reclassified_from: Original category when the classifier moved it
        skip_reason: Why the listing was skipped (if it was)
        match_title: Title used for matching
    """
    listing: RawListing
    category: Optional[CategoryId] = None
    decision: Optional[MatchDecision] = None
    brand_scoped: bool = False
    reclassified_from: Optional[CategoryId] = None
    skip_reason: Optional[str] = None
    match_title: Optional[str] = None
    
    @property
    def skipped(self) -> bool:
        return self.skip_reason is not None


class MatchingSession:
    """Screens, classifies and matches listings against a CatalogIndex.
    
    Per listing, in order:
        1. Placeholder rows are skipped
        2. Marketplace junk is skipped and titles cleaned (marketplace sessions only)
        3. Non-microphones listed as microphones are skipped
        4. The category is corrected by the classifier
        5. The brand-scoped index is searched when available, else the
           category-wide index
        6. The decision engine decides; category-wide searches must clear
           the stricter fallback thresholds
    
    Attributes:
        catalog: CatalogIndex being matched against and appended to
        stats: Running SessionStats
    """
    
    def __init__(
        self,
        catalog: CatalogIndex,
        engine: Optional[MatchDecisionEngine] = None,
        classifier: Optional[CategoryClassifier] = None,
        settings: Optional[MatchingSettings] = None,
        marketplace: bool = False,
    ):
        self.catalog = catalog
        self.settings = settings or matching_settings
        self.engine = engine or MatchDecisionEngine(self.settings)
        self.classifier = classifier or default_classifier()
        self.marketplace = marketplace
        self.stats = SessionStats()
        self._log = logger.bind(component="MatchingSession")
    
    def _skip(self, listing: RawListing, reason: str) -> ListingOutcome:
        self.stats.skipped += 1
        self._log.debug("listing_skipped", name=listing.name, reason=reason)
        return ListingOutcome(listing=listing, category=listing.category, skip_reason=reason)
    
    def process(self, listing: RawListing) -> ListingOutcome:
        """Run one listing through the session pipeline."""
        title = listing.name
        if self.classifier.is_junk_product(title):
            return self._skip(listing, "placeholder_listing")

        match_title = title
        if self.marketplace:
            if is_marketplace_junk(title):
                return self._skip(listing, "marketplace_junk")
            match_title = clean_marketplace_title(title) or title

        category = listing.category
        if category == CategoryId.MICROPHONE and self.classifier.is_microphone_junk(title):
            return self._skip(listing, "not_a_microphone")

        reclassified_from = None
        detected = self.classifier.classify(title, listing.brand, category)
        if detected is not None:
            reclassified_from = category
            category = detected
            self.stats.reclassified += 1

        index, brand_scoped = self.catalog.select(category, listing.brand)
        decision = self.engine.decide(match_title, listing.brand, index)
        if not brand_scoped and decision.result is not None:
            outcome = self.engine.outcome_for_score(
                decision.result.score,
                auto_merge_threshold=self.settings.fallback_auto_merge_threshold,
                review_threshold=self.settings.fallback_review_threshold,
            )
            candidates = [] if outcome == MatchOutcome.REJECT else decision.candidates
            decision = decision.model_copy(update={"outcome": outcome, "candidates": candidates})

        if decision.outcome == MatchOutcome.AUTO_MERGE:
            self.stats.merged += 1
        elif decision.outcome == MatchOutcome.PENDING_REVIEW:
            self.stats.pending_review += 1
        else:
            self.stats.rejected += 1

        self._log.debug(
            "listing_processed",
            name=title,
            category=category.value if category else None,
            outcome=decision.outcome.value,
            score=round(decision.score, 4),
            brand_scoped=brand_scoped,
        )
        return ListingOutcome(
            listing=listing,
            category=category,
            decision=decision,
            brand_scoped=brand_scoped,
            reclassified_from=reclassified_from,
            match_title=match_title,
        )
    
    def register(self, entry: CatalogEntry) -> IndexedCandidate:
        """Make a catalog entry created during this session matchable."""
        return self.catalog.add(entry)
    
    def summary(self) -> SessionStats:
        """Log and return the running counters."""
        self._log.info("session_summary", **self.stats.to_dict())
        return self.stats
