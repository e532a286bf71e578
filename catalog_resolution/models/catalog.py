"""Catalog and listing models shared by matching and classification.

These are transient data transfer objects: callers construct them per
invocation and the core never persists them.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class CategoryId(str, Enum):
    """Product categories of the audio catalog."""
    IEM = "iem"
    HEADPHONE = "headphone"
    DAC = "dac"
    AMP = "amp"
    DAP = "dap"
    SPEAKER = "speaker"
    CABLE = "cable"
    IEM_CABLE = "iem_cable"
    HP_CABLE = "hp_cable"
    IEM_TIPS = "iem_tips"
    IEM_FILTER = "iem_filter"
    HP_PADS = "hp_pads"
    HP_ACCESSORY = "hp_accessory"
    MICROPHONE = "microphone"
    MIC_ACCESSORY = "mic_accessory"

    @classmethod
    def coerce(cls, value) -> Optional["CategoryId"]:
        """Return the matching category, or None for absent/unknown values."""
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


CABLE_CATEGORIES = frozenset({CategoryId.CABLE, CategoryId.IEM_CABLE, CategoryId.HP_CABLE})


class RawListing(BaseModel):
    """A retailer listing as observed by an ingestion pipeline.
    
    Attributes:
        name: Raw retailer title
        brand: Declared or extracted brand (if any)
        category: Category assigned by the retailer collection (if any)
    """
    
    name: str
    brand: Optional[str] = None
    category: Optional[CategoryId] = None
    
    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "name": "Moondrop Blessing 3 In-Ear Monitor | HiFi Earphones",
                "brand": "Moondrop",
                "category": "iem",
            }
        },
    }


class CatalogEntry(BaseModel):
    """An existing catalog row that new listings may be matched against.
    
    Attributes:
        id: Catalog identifier (opaque to the core)
        name: Display name of the catalog entry
        brand: Catalog brand (if known)
        category: Catalog category (if known)
    """
    
    id: str = Field(..., min_length=1)
    name: str
    brand: Optional[str] = None
    category: Optional[CategoryId] = None
    
    model_config = {"frozen": True}
