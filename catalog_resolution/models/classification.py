"""Classification result types."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from catalog_resolution.models.catalog import CategoryId


class RuleTier(str, Enum):
    """Rule tier that produced a classification, in precedence order."""
    OVERRIDE = "override"
    BRAND_FACT = "brand_fact"
    BRAND_MODEL = "brand_model"
    KEYWORD = "keyword"
    CABLE = "cable"
    SPEAKER = "speaker"
    DAP = "dap"
    DAC_AMP = "dac_amp"
    NONE = "none"


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of reviewing a listing's category.
    
    Attributes:
        target_category: New category, None when no reclassification is warranted
        tier: Tier that decided the outcome
        matched_pattern: Source of the pattern that fired (if any)
        excluded: True when the listing should be dropped entirely
        exclusion_reason: Short machine-readable reason for the exclusion
    """
    target_category: Optional[CategoryId] = None
    tier: RuleTier = RuleTier.NONE
    matched_pattern: Optional[str] = None
    excluded: bool = False
    exclusion_reason: Optional[str] = None
    
    @property
    def reclassified(self) -> bool:
        return self.target_category is not None
