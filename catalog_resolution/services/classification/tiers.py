"""Generic rule-tier runner.

Each tier inspects a listing and either answers with a category or
defers to the next tier. The first tier that answers wins; answers are
never combined across tiers.

Key Components:
    - ListingText: Name, brand key and current category of a listing
    - TierMatch: Answer produced by a tier
    - RuleTierStrategy: Abstract base class for tiers
    - OverrideTier, BrandFactTier, BrandModelTier, IndicatorTier, BrandSetTier
    - run_tiers(): First-answer-wins evaluation
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, Mapping, Optional, Sequence

from catalog_resolution.models import CategoryId, RuleTier
from catalog_resolution.services.classification.rules import (
    BrandFact,
    BrandModelRule,
    KeywordIndicator,
    Override,
    first_match,
)


@dataclass(frozen=True)
class ListingText:
    """Classifier input.
    
    Attributes:
        name: Raw listing title
        brand_key: Lowercase, whitespace-collapsed brand ("" when absent)
        current: Category the listing currently has (if any)
    """
    name: str
    brand_key: str = ""
    current: Optional[CategoryId] = None


@dataclass(frozen=True)
class TierMatch:
    """Answer of a tier.
    
    A category equal to the listing's current category confirms it:
    evaluation stops and no reclassification happens.
    """
    category: Optional[CategoryId]
    tier: RuleTier
    pattern: Optional[str] = None


class RuleTierStrategy(ABC):
    """Abstract base class for a rule tier."""
    
    tier: RuleTier
    
    @abstractmethod
    def evaluate(self, listing: ListingText) -> Optional[TierMatch]:
        """Answer for a listing, or None to defer to the next tier."""
        pass


class OverrideTier(RuleTierStrategy):
    """Explicit (source category, pattern) -> target mappings."""
    
    tier = RuleTier.OVERRIDE
    
    def __init__(self, overrides: Sequence[Override]):
        self.overrides = tuple(overrides)
    
    def evaluate(self, listing: ListingText) -> Optional[TierMatch]:
        for rule in self.overrides:
            if rule.source_category == listing.current and rule.pattern.search(listing.name):
                return TierMatch(rule.target_category, self.tier, rule.pattern.pattern)
        return None


class BrandFactTier(RuleTierStrategy):
    """Single-category brands, with documented per-brand exceptions."""
    
    tier = RuleTier.BRAND_FACT
    
    def __init__(self, facts: Mapping[str, BrandFact]):
        self.facts = facts
    
    def evaluate(self, listing: ListingText) -> Optional[TierMatch]:
        fact = self.facts.get(listing.brand_key)
        if fact is None:
            return None
        for pattern, category in fact.exceptions:
            if pattern.search(listing.name):
                return TierMatch(category, self.tier, pattern.pattern)
        return TierMatch(fact.category, self.tier, f"brand:{fact.brand}")


class BrandModelTier(RuleTierStrategy):
    """Brand-specific model patterns; primary patterns are checked first."""
    
    tier = RuleTier.BRAND_MODEL
    
    def __init__(self, rules: Mapping[str, BrandModelRule]):
        self.rules = rules
    
    def evaluate(self, listing: ListingText) -> Optional[TierMatch]:
        rule = self.rules.get(listing.brand_key)
        if rule is None:
            return None
        pattern = first_match(rule.primary_patterns, listing.name)
        if pattern is not None:
            return TierMatch(rule.primary_category, self.tier, pattern.pattern)
        pattern = first_match(rule.secondary_patterns, listing.name)
        if pattern is not None:
            return TierMatch(rule.secondary_category, self.tier, pattern.pattern)
        return None


class IndicatorTier(RuleTierStrategy):
    """Ordered keyword indicators, each optionally suppressed by blockers.
    
    An indicator without a category is a guard: when it matches, the
    current category is confirmed.
    """
    
    def __init__(self, tier: RuleTier, indicators: Sequence[KeywordIndicator]):
        self.tier = tier
        self.indicators = tuple(indicators)
    
    def evaluate(self, listing: ListingText) -> Optional[TierMatch]:
        for entry in self.indicators:
            pattern = first_match(entry.patterns, listing.name)
            if pattern is None:
                continue
            if entry.blockers and first_match(entry.blockers, listing.name) is not None:
                continue
            category = entry.category if entry.category is not None else listing.current
            return TierMatch(category, self.tier, pattern.pattern)
        return None


class BrandSetTier(RuleTierStrategy):
    """Brands that only ever produce one category."""
    
    def __init__(self, tier: RuleTier, brands: FrozenSet[str], category: CategoryId):
        self.tier = tier
        self.brands = brands
        self.category = category
    
    def evaluate(self, listing: ListingText) -> Optional[TierMatch]:
        if listing.brand_key in self.brands:
            return TierMatch(self.category, self.tier, f"brand:{listing.brand_key}")
        return None


def run_tiers(tiers: Sequence[RuleTierStrategy], listing: ListingText) -> Optional[TierMatch]:
    """Evaluate tiers in order and return the first answer."""
    for tier in tiers:
        match = tier.evaluate(listing)
        if match is not None:
            return match
    return None
