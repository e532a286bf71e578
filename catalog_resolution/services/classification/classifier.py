"""Rule-based category classifier for audio listings.

Assigns or corrects a listing's category from its name and brand alone.
Which tiers run depends on the listing's current category:

    None / iem / headphone: override -> brand fact -> brand+model -> keyword
    cable / iem_cable / hp_cable: override -> model patterns and general
        cables -> IEM-cable brands -> connector indicators
    speaker: override -> speaker guards -> cable and accessory indicators
    dap: override -> player guards -> stationary-device indicators
    amp: override -> DAC indicators (anything with a DAC is a DAC)
    dac: override -> amp-only indicators unless a DAC indicator is present
    microphone: never reclassified, only screened for non-microphone junk

Every tier short-circuits: the first tier with an answer decides, and an
answer equal to the current category means "no reclassification".
"""
from functools import lru_cache
from typing import Dict, Optional, Pattern, Tuple

import structlog

from catalog_resolution.models import (
    CABLE_CATEGORIES,
    CategoryId,
    ClassificationResult,
    RuleTier,
)
from catalog_resolution.services.brands import canonical_key
from catalog_resolution.services.classification.rules import (
    ClassificationRules,
    default_rules,
    first_match,
)
from catalog_resolution.services.classification.tiers import (
    BrandFactTier,
    BrandModelTier,
    BrandSetTier,
    IndicatorTier,
    ListingText,
    OverrideTier,
    RuleTierStrategy,
    run_tiers,
)

logger = structlog.get_logger(__name__)

Pipeline = Tuple[RuleTierStrategy, ...]


class CategoryClassifier:
    """Tiered category classifier over an immutable rule set.
    
    Attributes:
        rules: Compiled ClassificationRules shared by reference
    
    Example:
        classifier = CategoryClassifier()
        classifier.classify("STAX SR-003MK2", "STAX")  # CategoryId.IEM
    """
    
    def __init__(self, rules: Optional[ClassificationRules] = None):
        self.rules = rules or default_rules()
        self._log = logger.bind(component="CategoryClassifier")

        override = OverrideTier(self.rules.overrides)
        self._structural: Pipeline = (
            BrandFactTier(self.rules.brand_facts),
            BrandModelTier(self.rules.brand_model_rules),
            IndicatorTier(RuleTier.KEYWORD, self.rules.keyword_indicators),
        )
        cable: Pipeline = (
            override,
            IndicatorTier(RuleTier.CABLE, self.rules.cable.model_indicators),
            BrandSetTier(RuleTier.CABLE, self.rules.cable.iem_cable_brands, CategoryId.IEM_CABLE),
            IndicatorTier(RuleTier.CABLE, self.rules.cable.connector_indicators),
        )

        self._pipelines: Dict[Optional[CategoryId], Pipeline] = {
            None: (override,) + self._structural,
            CategoryId.IEM: (override,) + self._structural,
            CategoryId.HEADPHONE: (override,) + self._structural,
            CategoryId.SPEAKER: (
                override,
                IndicatorTier(RuleTier.SPEAKER, self.rules.speaker_indicators),
            ),
            CategoryId.DAP: (
                override,
                IndicatorTier(RuleTier.DAP, self.rules.dap_indicators),
            ),
            CategoryId.AMP: (
                override,
                IndicatorTier(RuleTier.DAC_AMP, self.rules.amp_to_dac_indicators),
            ),
            CategoryId.DAC: (
                override,
                IndicatorTier(RuleTier.DAC_AMP, self.rules.dac_to_amp_indicators),
            ),
        }
        for category in CABLE_CATEGORIES:
            self._pipelines[category] = cable
        self._default_pipeline: Pipeline = (override,)
    
    # ========== Exclusion screens ==========
    
    def is_junk_product(self, title: Optional[str]) -> bool:
        """True for test and placeholder rows, whatever their category."""
        return first_match(self.rules.junk_patterns, (title or "").strip()) is not None
    
    def _microphone_junk_pattern(self, title: str) -> Optional[Pattern[str]]:
        mic = self.rules.microphone
        pattern = first_match(mic.unconditional_junk, title)
        if pattern is not None:
            return pattern
        if first_match(mic.guards, title) is not None:
            return None
        return first_match(mic.junk_indicators, title)
    
    def is_microphone_junk(self, title: Optional[str]) -> bool:
        """True when a microphone-category listing is not a microphone.
        
        Karaoke products are always junk. Otherwise a genuine-microphone
        phrase ("USB condenser microphone") suppresses every junk indicator.
        """
        return self._microphone_junk_pattern(title or "") is not None
    
    # ========== Classification ==========
    
    def review(
        self,
        name: Optional[str],
        brand: Optional[str] = None,
        current_category=None,
    ) -> ClassificationResult:
        """Full classification outcome for a listing.
        
        Args:
            name: Raw listing title
            brand: Declared brand (if any)
            current_category: CategoryId or its string value (if any)
            
        Returns:
            ClassificationResult; target_category is None when the current
            category stands
        """
        title = name or ""
        current = CategoryId.coerce(current_category)

        if self.is_junk_product(title):
            self._log.debug("listing_excluded", name=title, reason="placeholder_listing")
            return ClassificationResult(excluded=True, exclusion_reason="placeholder_listing")

        if current == CategoryId.MICROPHONE:
            pattern = self._microphone_junk_pattern(title)
            if pattern is None:
                return ClassificationResult()
            self._log.debug("listing_excluded", name=title, reason="not_a_microphone")
            return ClassificationResult(
                matched_pattern=pattern.pattern,
                excluded=True,
                exclusion_reason="not_a_microphone",
            )

        listing = ListingText(name=title, brand_key=canonical_key(brand), current=current)
        pipeline = self._pipelines.get(current, self._default_pipeline)
        match = run_tiers(pipeline, listing)
        if match is None:
            return ClassificationResult()
        if match.category is None or match.category == current:
            return ClassificationResult(tier=match.tier, matched_pattern=match.pattern)

        self._log.debug(
            "listing_reclassified",
            name=title,
            source=current.value if current else None,
            target=match.category.value,
            tier=match.tier.value,
        )
        return ClassificationResult(
            target_category=match.category,
            tier=match.tier,
            matched_pattern=match.pattern,
        )
    
    def classify(
        self,
        name: Optional[str],
        brand: Optional[str] = None,
        current_category=None,
    ) -> Optional[CategoryId]:
        """Category the listing should move to, or None to keep it."""
        return self.review(name, brand, current_category).target_category
    
    def detect_product_category(
        self,
        name: Optional[str],
        brand: Optional[str] = None,
    ) -> Optional[CategoryId]:
        """IEM vs headphone detection without a source category.
        
        Returns:
            CategoryId.IEM, CategoryId.HEADPHONE, or None when no tier answers
        """
        listing = ListingText(name=name or "", brand_key=canonical_key(brand))
        match = run_tiers(self._structural, listing)
        return match.category if match else None


@lru_cache(maxsize=1)
def default_classifier() -> CategoryClassifier:
    return CategoryClassifier()


def classify(name: Optional[str], brand: Optional[str] = None, current_category=None) -> Optional[CategoryId]:
    """Classify with the built-in rule set."""
    return default_classifier().classify(name, brand, current_category)


def review(name: Optional[str], brand: Optional[str] = None, current_category=None) -> ClassificationResult:
    return default_classifier().review(name, brand, current_category)


def detect_product_category(name: Optional[str], brand: Optional[str] = None) -> Optional[CategoryId]:
    return default_classifier().detect_product_category(name, brand)


def is_junk_product(title: Optional[str]) -> bool:
    return default_classifier().is_junk_product(title)


def is_microphone_junk(title: Optional[str]) -> bool:
    return default_classifier().is_microphone_junk(title)
