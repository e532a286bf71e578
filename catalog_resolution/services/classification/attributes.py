"""Attribute extraction strategies using regex pattern matching.

Infers structured attributes from listing titles, per category:
    - iem: iem_type (tws / active / passive) and driver_type
    - headphone: headphone_design (open / closed), headphone_type and driver_type
    - microphone: mic_connection, mic_type and mic_pattern

Retailer tags, when available, fill whatever the title leaves open.

Key Components:
    - AttributeStrategy: Abstract base class for per-category extractors
    - IemAttributeStrategy, HeadphoneAttributeStrategy, MicrophoneAttributeStrategy
    - ATTRIBUTE_REGISTRY: Strategies by category
    - AttributeExtractor: Facade combining title and tag extraction
    - extract_tag_attributes(): Retailer tag parser
"""
import re
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Type

import structlog

from catalog_resolution.models import (
    CategoryId,
    DriverType,
    HeadphoneDesign,
    HeadphoneType,
    IemType,
    MicConnection,
    MicPattern,
    MicType,
    ProductAttributes,
)

logger = structlog.get_logger(__name__)


# Driver technologies; the "DD", "BA" and "EST" abbreviations are only
# recognized in upper case
DRIVER_PATTERNS = [
    (DriverType.DYNAMIC, re.compile(r"\bdynamic\b", re.IGNORECASE)),
    (DriverType.DYNAMIC, re.compile(r"(?<![A-Za-z])DD\b")),
    (DriverType.BALANCED_ARMATURE, re.compile(r"\bbalanced[\s-]?armature\b", re.IGNORECASE)),
    (DriverType.BALANCED_ARMATURE, re.compile(r"(?<![A-Za-z])BA\b")),
    (DriverType.PLANAR, re.compile(r"\bplanar\b", re.IGNORECASE)),
    (DriverType.ELECTROSTATIC, re.compile(r"\belectrostatic\b", re.IGNORECASE)),
    (DriverType.ELECTROSTATIC, re.compile(r"(?<![A-Za-z])EST\b")),
    (DriverType.BONE_CONDUCTION, re.compile(r"\bbone[\s-]?conduction\b", re.IGNORECASE)),
    (DriverType.RIBBON, re.compile(r"\bribbon\b|\bAMT\b|\bair\s+motion\b", re.IGNORECASE)),
]

EXPLICIT_HYBRID_PATTERNS = [
    (DriverType.QUADBRID, re.compile(r"\bquad[\s-]?brid\b", re.IGNORECASE)),
    (DriverType.TRIBRID, re.compile(r"\btri[\s-]?brid\b", re.IGNORECASE)),
    (DriverType.HYBRID, re.compile(r"\bhybrid\b", re.IGNORECASE)),
]


def driver_type_for(technologies: Iterable[DriverType]) -> Optional[DriverType]:
    """Collapse distinct driver technologies into a driver type."""
    distinct = list(dict.fromkeys(technologies))
    if len(distinct) >= 4:
        return DriverType.QUADBRID
    if len(distinct) == 3:
        return DriverType.TRIBRID
    if len(distinct) == 2:
        return DriverType.HYBRID
    if len(distinct) == 1:
        return distinct[0]
    return None


def extract_driver_type(text: str) -> Optional[DriverType]:
    """Driver type from the technologies a title mentions."""
    found = [driver for driver, pattern in DRIVER_PATTERNS if pattern.search(text)]
    driver = driver_type_for(found)
    if driver is not None:
        return driver
    for driver, pattern in EXPLICIT_HYBRID_PATTERNS:
        if pattern.search(text):
            return driver
    return None


class AttributeStrategy(ABC):
    """Abstract base class for title attribute extraction.
    
    All implementations must honor the contract:
        - extract() only fills fields that belong to its category
        - Unrecognized titles yield None fields, never errors
    """
    
    @abstractmethod
    def extract(self, text: str) -> ProductAttributes:
        """Extract attributes from a listing title."""
        pass
    
    @abstractmethod
    def get_category(self) -> CategoryId:
        pass
    
    @property
    @abstractmethod
    def fields(self) -> List[str]:
        """ProductAttributes fields owned by this category."""
        pass


class IemAttributeStrategy(AttributeStrategy):
    """IEM connectivity and driver configuration.
    
    Extracts:
        - iem_type: "TWS", "true wireless" -> tws; "DSP", "active" -> active
        - driver_type: "1DD+4BA" -> hybrid, "planar" -> planar
    """
    
    TWS_PATTERNS = [
        r"\bTWS\b",
        r"\btrue[\s-]?wireless\b",
        r"\btruly[\s-]?wireless\b",
        r"\bwireless\s+earbuds?\b",
    ]
    
    ACTIVE_PATTERNS = [
        r"\bDSP\b",
        r"\bactive\b",
        r"\bbuilt[\s-]?in\s+DAC\b",
    ]
    
    def __init__(self):
        self._tws_re = [re.compile(p, re.IGNORECASE) for p in self.TWS_PATTERNS]
        self._active_re = [re.compile(p, re.IGNORECASE) for p in self.ACTIVE_PATTERNS]
    
    def get_category(self) -> CategoryId:
        return CategoryId.IEM
    
    @property
    def fields(self) -> List[str]:
        return ["iem_type", "driver_type"]
    
    def extract(self, text: str) -> ProductAttributes:
        iem_type = None
        if any(p.search(text) for p in self._tws_re):
            iem_type = IemType.TWS
        elif any(p.search(text) for p in self._active_re):
            iem_type = IemType.ACTIVE
        return ProductAttributes(iem_type=iem_type, driver_type=extract_driver_type(text))


class HeadphoneAttributeStrategy(AttributeStrategy):
    """Headphone cup design, powered electronics and driver type."""
    
    OPEN_RE = re.compile(r"\bopen[\s-]?(?:back|air)\b", re.IGNORECASE)
    CLOSED_RE = re.compile(r"\bclosed[\s-]?back\b", re.IGNORECASE)
    ACTIVE_RE = re.compile(
        r"\bwireless\b|\bbluetooth\b|\bANC\b|\bnoise[\s-]?cancell?ing\b",
        re.IGNORECASE,
    )
    
    def get_category(self) -> CategoryId:
        return CategoryId.HEADPHONE
    
    @property
    def fields(self) -> List[str]:
        return ["headphone_design", "headphone_type", "driver_type"]
    
    def extract(self, text: str) -> ProductAttributes:
        design = None
        if self.OPEN_RE.search(text):
            design = HeadphoneDesign.OPEN
        elif self.CLOSED_RE.search(text):
            design = HeadphoneDesign.CLOSED
        headphone_type = HeadphoneType.ACTIVE if self.ACTIVE_RE.search(text) else None
        return ProductAttributes(
            headphone_design=design,
            headphone_type=headphone_type,
            driver_type=extract_driver_type(text),
        )


class MicrophoneAttributeStrategy(AttributeStrategy):
    """Microphone connection, transducer and polar pattern."""
    
    USB_RE = re.compile(r"\bUSB\b", re.IGNORECASE)
    XLR_RE = re.compile(r"\bXLR\b", re.IGNORECASE)
    WIRELESS_RE = re.compile(r"\bwireless\b|\bbluetooth\b", re.IGNORECASE)
    MINI_JACK_RE = re.compile(r"\b3\.5\s*mm\b|\bTRRS\b", re.IGNORECASE)
    
    TYPE_PATTERNS = [
        (MicType.CONDENSER, re.compile(r"\bcondenser\b", re.IGNORECASE)),
        (MicType.DYNAMIC, re.compile(r"\bdynamic\b", re.IGNORECASE)),
        (MicType.RIBBON, re.compile(r"\bribbon\b", re.IGNORECASE)),
    ]
    
    MULTIPATTERN_RE = re.compile(
        r"\bmulti[\s-]?pattern\b|\bswitchable\s+(?:polar\s+)?patterns?\b",
        re.IGNORECASE,
    )
    
    # Order matters: "super-cardioid" must win over plain "cardioid"
    PATTERN_PATTERNS = [
        (MicPattern.SHOTGUN, re.compile(r"\bshotgun\b", re.IGNORECASE)),
        (MicPattern.HYPERCARDIOID, re.compile(r"\bhyper[\s-]?cardioid\b", re.IGNORECASE)),
        (MicPattern.SUPERCARDIOID, re.compile(r"\bsuper[\s-]?cardioid\b", re.IGNORECASE)),
        (MicPattern.OMNIDIRECTIONAL, re.compile(r"\bomni(?:[\s-]?directional)?\b", re.IGNORECASE)),
        (MicPattern.BIDIRECTIONAL, re.compile(r"\bbi[\s-]?directional\b|\bfigure[\s-]?(?:8|of[\s-]?eight)\b", re.IGNORECASE)),
        (MicPattern.CARDIOID, re.compile(r"(?<![\w-])cardioid\b", re.IGNORECASE)),
    ]
    
    def get_category(self) -> CategoryId:
        return CategoryId.MICROPHONE
    
    @property
    def fields(self) -> List[str]:
        return ["mic_connection", "mic_type", "mic_pattern"]
    
    def extract(self, text: str) -> ProductAttributes:
        return ProductAttributes(
            mic_connection=self._extract_connection(text),
            mic_type=self._extract_type(text),
            mic_pattern=self._extract_pattern(text),
        )
    
    def _extract_connection(self, text: str) -> Optional[MicConnection]:
        usb = bool(self.USB_RE.search(text))
        xlr = bool(self.XLR_RE.search(text))
        if usb and xlr:
            return MicConnection.USB_XLR
        if usb:
            return MicConnection.USB
        if xlr:
            return MicConnection.XLR
        if self.WIRELESS_RE.search(text):
            return MicConnection.WIRELESS
        if self.MINI_JACK_RE.search(text):
            return MicConnection.MINI_JACK
        return None
    
    def _extract_type(self, text: str) -> Optional[MicType]:
        for mic_type, pattern in self.TYPE_PATTERNS:
            if pattern.search(text):
                return mic_type
        return None
    
    def _extract_pattern(self, text: str) -> Optional[MicPattern]:
        if self.MULTIPATTERN_RE.search(text):
            return MicPattern.MULTIPATTERN
        found = [pattern for pattern, regex in self.PATTERN_PATTERNS if regex.search(text)]
        if len(found) > 1 and MicPattern.SHOTGUN not in found:
            return MicPattern.MULTIPATTERN
        return found[0] if found else None


ATTRIBUTE_REGISTRY: Dict[CategoryId, Type[AttributeStrategy]] = {
    CategoryId.IEM: IemAttributeStrategy,
    CategoryId.HEADPHONE: HeadphoneAttributeStrategy,
    CategoryId.MICROPHONE: MicrophoneAttributeStrategy,
}


def create_strategy(category: CategoryId) -> Optional[AttributeStrategy]:
    """Factory for the strategy of a category, None when it has no attributes."""
    strategy_cls = ATTRIBUTE_REGISTRY.get(category)
    return strategy_cls() if strategy_cls else None


# ========== Retailer tags ==========

POLAR_TAG_MAP = {
    "cardioid": MicPattern.CARDIOID,
    "supercardioid": MicPattern.SUPERCARDIOID,
    "hypercardioid": MicPattern.HYPERCARDIOID,
    "omnidirectional": MicPattern.OMNIDIRECTIONAL,
    "figure-8": MicPattern.BIDIRECTIONAL,
    "wide cardioid": MicPattern.CARDIOID,
    "open cardioid": MicPattern.CARDIOID,
    "line + gradient": MicPattern.SHOTGUN,
    "hemispherical": MicPattern.OMNIDIRECTIONAL,
    "m/s stereo": MicPattern.MULTIPATTERN,
    "x/y stereo": MicPattern.MULTIPATTERN,
}


def _polar_from_tag_value(value: str) -> Optional[MicPattern]:
    value = value.lower()
    if value in POLAR_TAG_MAP:
        return POLAR_TAG_MAP[value]
    if "shotgun" in value:
        return MicPattern.SHOTGUN
    if "omni" in value:
        return MicPattern.OMNIDIRECTIONAL
    if "figure" in value or "bidirectional" in value:
        return MicPattern.BIDIRECTIONAL
    if "cardioid" in value:
        return MicPattern.CARDIOID
    return None


def extract_tag_attributes(tags: Iterable[str]) -> ProductAttributes:
    """Parse retailer tags ("open-back", "tws", "polar_pattern_Cardioid", ...)
    into attributes. Fields without a matching tag stay None.
    """
    raw_tags = [t for t in tags if t]
    tag_set = {t.lower().strip() for t in raw_tags}
    data = {}

    if "open-back" in tag_set:
        data["headphone_design"] = HeadphoneDesign.OPEN
    elif "closed-back" in tag_set:
        data["headphone_design"] = HeadphoneDesign.CLOSED

    drivers = []
    if "dynamic" in tag_set:
        drivers.append(DriverType.DYNAMIC)
    if tag_set & {"balanced armature", "balanced-armature"}:
        drivers.append(DriverType.BALANCED_ARMATURE)
    if "electrostatic" in tag_set:
        drivers.append(DriverType.ELECTROSTATIC)
    if tag_set & {"planar-magnetic", "planar magnetic", "planar"}:
        drivers.append(DriverType.PLANAR)
    if tag_set & {"bone conduction", "bone-conduction"}:
        drivers.append(DriverType.BONE_CONDUCTION)
    if tag_set & {"ribbon", "amt", "air motion"}:
        drivers.append(DriverType.RIBBON)
    driver = driver_type_for(drivers)
    if driver is None:
        for explicit in (DriverType.QUADBRID, DriverType.TRIBRID, DriverType.HYBRID):
            if explicit.value in tag_set:
                driver = explicit
                break
    if driver is not None:
        data["driver_type"] = driver

    if tag_set & {"tws", "truly-wireless", "true-wireless", "truly wireless", "true wireless"}:
        data["iem_type"] = IemType.TWS
    elif "active" in tag_set:
        data["iem_type"] = IemType.ACTIVE

    if "usb" in tag_set and "xlr" in tag_set:
        data["mic_connection"] = MicConnection.USB_XLR
    elif "usb" in tag_set:
        data["mic_connection"] = MicConnection.USB
    elif "xlr" in tag_set:
        data["mic_connection"] = MicConnection.XLR
    elif tag_set & {"wireless", "bluetooth"}:
        data["mic_connection"] = MicConnection.WIRELESS
    elif "3.5mm" in tag_set:
        data["mic_connection"] = MicConnection.MINI_JACK

    if "condenser" in tag_set:
        data["mic_type"] = MicType.CONDENSER
    elif "dynamic" in tag_set:
        # "dynamic" already describes the driver in headphone context
        if "driver_type" not in data:
            data["mic_type"] = MicType.DYNAMIC
    elif "ribbon" in tag_set:
        data["mic_type"] = MicType.RIBBON

    polar = [
        _polar_from_tag_value(t.strip()[len("polar_pattern_"):])
        for t in raw_tags
        if t.lower().strip().startswith("polar_pattern_")
    ]
    polar = [p for p in polar if p is not None]
    if polar:
        if len(set(polar)) > 1 or MicPattern.MULTIPATTERN in polar:
            data["mic_pattern"] = MicPattern.MULTIPATTERN
        else:
            data["mic_pattern"] = polar[0]
    elif tag_set & {"multi-pattern", "multipattern"}:
        data["mic_pattern"] = MicPattern.MULTIPATTERN
    elif "shotgun" in tag_set:
        data["mic_pattern"] = MicPattern.SHOTGUN
    elif "hypercardioid" in tag_set:
        data["mic_pattern"] = MicPattern.HYPERCARDIOID
    elif "supercardioid" in tag_set:
        data["mic_pattern"] = MicPattern.SUPERCARDIOID
    elif tag_set & {"omnidirectional", "omni"}:
        data["mic_pattern"] = MicPattern.OMNIDIRECTIONAL
    elif tag_set & {"bidirectional", "figure-8", "figure 8"}:
        data["mic_pattern"] = MicPattern.BIDIRECTIONAL
    elif "cardioid" in tag_set:
        data["mic_pattern"] = MicPattern.CARDIOID

    return ProductAttributes(**data)


class AttributeExtractor:
    """Title-first attribute extraction with tag fallback.
    
    Example:
        extractor = AttributeExtractor()
        attrs = extractor.extract("Moondrop Blessing 3 2DD+4BA", CategoryId.IEM)
        # attrs.iem_type == IemType.PASSIVE, attrs.driver_type == DriverType.HYBRID
    """
    
    def __init__(self):
        self._strategies: Dict[CategoryId, AttributeStrategy] = {
            category: create_strategy(category) for category in ATTRIBUTE_REGISTRY
        }
        self._log = logger.bind(component="AttributeExtractor")
    
    def extract(
        self,
        name: Optional[str],
        category,
        tags: Optional[Iterable[str]] = None,
    ) -> ProductAttributes:
        """Extract the attributes of a listing's category.
        
        Args:
            name: Raw listing title
            category: CategoryId or its string value
            tags: Optional retailer tags used for fields the title leaves open
            
        Returns:
            ProductAttributes with only the category's fields populated;
            IEMs without a wireless or active marker default to passive
        """
        category = CategoryId.coerce(category)
        strategy = self._strategies.get(category)
        if strategy is None:
            return ProductAttributes()

        attributes = strategy.extract(name or "")
        if tags:
            attributes = attributes.merged_with(extract_tag_attributes(tags))

        data = {field: getattr(attributes, field) for field in strategy.fields}
        if category == CategoryId.IEM and data["iem_type"] is None:
            data["iem_type"] = IemType.PASSIVE
        if category == CategoryId.HEADPHONE and data["headphone_type"] is None:
            data["headphone_type"] = HeadphoneType.PASSIVE

        result = ProductAttributes(**data)
        self._log.debug(
            "attributes_extracted",
            name=(name or "")[:100],
            category=category.value,
            attributes=result.model_dump(exclude_none=True, mode="json"),
        )
        return result
