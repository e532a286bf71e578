"""Rule-based category classification and attribute extraction.

Key Components:
    - CategoryClassifier: Tiered category classifier (classify / review)
    - ClassificationRules: Immutable compiled rule tables
    - AttributeExtractor: Title and tag attribute extraction
    - is_marketplace_junk / clean_marketplace_title: Marketplace quality gate
"""
from catalog_resolution.services.classification.attributes import (
    ATTRIBUTE_REGISTRY,
    AttributeExtractor,
    AttributeStrategy,
    create_strategy,
    extract_driver_type,
    extract_tag_attributes,
)
from catalog_resolution.services.classification.classifier import (
    CategoryClassifier,
    classify,
    default_classifier,
    detect_product_category,
    is_junk_product,
    is_microphone_junk,
    review,
)
from catalog_resolution.services.classification.quality_gate import (
    clean_marketplace_title,
    is_marketplace_junk,
)
from catalog_resolution.services.classification.rules import (
    ClassificationRules,
    build_rules,
    default_rules,
)
from catalog_resolution.services.classification.tiers import ListingText, TierMatch, run_tiers

__all__ = [
    "ATTRIBUTE_REGISTRY",
    "AttributeExtractor",
    "AttributeStrategy",
    "CategoryClassifier",
    "ClassificationRules",
    "ListingText",
    "TierMatch",
    "build_rules",
    "classify",
    "clean_marketplace_title",
    "create_strategy",
    "default_classifier",
    "default_rules",
    "detect_product_category",
    "extract_driver_type",
    "extract_tag_attributes",
    "is_junk_product",
    "is_marketplace_junk",
    "is_microphone_junk",
    "review",
    "run_tiers",
]
