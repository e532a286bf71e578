"""Marketplace listing quality gate.

Marketplace titles are noisy: counterfeit and wholesale listings,
accessories caught by keyword searches, and marketing prefixes that
degrade fuzzy matching. This module drops the worst listings and
cleans the titles of the rest.

The cleaned title is only used for matching; callers keep the raw title.
"""
import re
from typing import Optional

import structlog

from catalog_resolution.services.classification.classifier import is_junk_product

logger = structlog.get_logger(__name__)


MARKETPLACE_JUNK_PATTERNS = [
    # Counterfeit / clone
    r"\bcopy\b",
    r"\breplica\b",
    r"\bclone\b",
    r"\bfake\b",
    r"\bimitation\b",
    r"\bOEM\b(?!\s+(?:driver|diaphragm))",
    # Accessories and non-product listings
    r"\bcase\s+only\b",
    r"\bsilicone\s+(?:cover|case|sleeve)\b",
    r"\bprotective\s+case\b",
    r"\bscreen\s+protector\b",
    r"\bsticker\b",
    r"\bwrist\s*(?:band|strap)\b",
    r"\bcleaning\s+kit\b",
    r"\bwall\s+(?:mount|charger)\b",
    r"\bphone\s+holder\b",
    r"\bcar\s+charger\b",
    r"\bpower\s+bank\b",
    r"\bselfie\s+stick\b",
    # Wholesale / bulk
    r"\bfactory\s+direct\b",
    r"\bwholesale\b",
    r"\blot\s+of\s+\d+\b",
    r"\b\d+\s*(?:pcs|pieces|pack|sets)\b",
    # Spam titles
    r"\b(?:20\d{2})\s+NEW\s+UPGRADED\b",
    r"\bbest\s+(?:price|deal|offer)\b",
    r"\bfree\s+gift\b",
    r"\bbuy\s+\d+\s+get\b",
    r"\bflash\s+sale\b",
    r"\bclearance\s+sale\b",
    # Non-audio products
    r"\bbluetooth\s+speaker\s+(?:light|lamp|clock)\b",
    r"\bkaraoke\b",
    r"\bhearing\s+aid\b",
    r"\bwalkie\s+talkie\b",
    r"\btranslator\b",
    r"\bsmart\s*watch\b",
    r"\bbone\s+conduction\s+(?:glasses|sunglasses)\b",
]

_JUNK_RE = [re.compile(p, re.IGNORECASE) for p in MARKETPLACE_JUNK_PATTERNS]

_YEAR_PREFIX_RE = re.compile(r"^\s*(?:20\d{2})\s+(?:NEW|NEWEST|LATEST|UPGRADED?)\s+", re.IGNORECASE)
_NOISE_RE = re.compile(
    r"\b(?:20\d{2}|NEW|NEWEST|LATEST|UPGRADED?|HOT\s+SALE|BEST\s+SELLING|TOP\s+QUALITY|"
    r"ORIGINAL|GENUINE|AUTHENTIC|OFFICIAL|HIGH\s+QUALITY|BRAND\s+NEW|IN\s+STOCK|"
    r"FAST\s+SHIPPING|FREE\s+SHIPPING|100%|SUPER|FASHION)\b",
    re.IGNORECASE,
)
_TRAILING_VARIANT_RE = re.compile(
    r"\s*[-/]\s*(?:with\s+mic|without\s+mic|type[\s-]?c|3\.5mm|usb[\s-]?c|bluetooth|wired|"
    r"wireless|black|white|silver|gold|red|blue|green|pink|purple|grey|gray)\s*$",
    re.IGNORECASE,
)
_PAREN_NOISE_RE = re.compile(
    r"\s*\((?:New|Upgraded|Latest|Official|Original|20\d{2})[^)]*\)\s*$",
    re.IGNORECASE,
)
# "HiFi" as a marketing word, but not inside names like HiFiGo or HiFiMAN
_HIFI_RE = re.compile(r"\bHi-?Fi\b(?!\s*(?:Audio|Go|Man|MAN))", re.IGNORECASE)
_SPACES_RE = re.compile(r"\s{2,}")


def is_marketplace_junk(title: Optional[str]) -> bool:
    """True when a marketplace listing should be skipped entirely.
    
    Placeholder rows are junk everywhere; marketplace listings are also
    junk when they are counterfeit, wholesale, accessory, spam or
    non-audio listings.
    """
    text = title or ""
    if is_junk_product(text):
        return True
    for pattern in _JUNK_RE:
        if pattern.search(text):
            logger.debug("marketplace_listing_rejected", title=text[:100], pattern=pattern.pattern)
            return True
    return False


def clean_marketplace_title(title: Optional[str]) -> str:
    """Strip marketplace marketing noise from a title before matching.
    
    Example:
        "2024 NEW UPGRADED KZ ZSN Pro X HiFi Earphones - Black"
        -> "KZ ZSN Pro X Earphones"
    """
    result = title or ""
    result = _YEAR_PREFIX_RE.sub("", result)
    result = _NOISE_RE.sub("", result)
    result = _TRAILING_VARIANT_RE.sub("", result)
    result = _PAREN_NOISE_RE.sub("", result)
    result = _HIFI_RE.sub("", result)
    return _SPACES_RE.sub(" ", result).strip()
