"""Structured product attributes inferred from listing titles and tags."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class IemType(str, Enum):
    TWS = "tws"
    ACTIVE = "active"
    PASSIVE = "passive"


class DriverType(str, Enum):
    DYNAMIC = "dynamic"
    BALANCED_ARMATURE = "balanced_armature"
    PLANAR = "planar"
    ELECTROSTATIC = "electrostatic"
    BONE_CONDUCTION = "bone_conduction"
    RIBBON = "ribbon"
    HYBRID = "hybrid"
    TRIBRID = "tribrid"
    QUADBRID = "quadbrid"


class HeadphoneDesign(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class HeadphoneType(str, Enum):
    ACTIVE = "active"
    PASSIVE = "passive"


class MicConnection(str, Enum):
    USB = "usb"
    XLR = "xlr"
    USB_XLR = "usb_xlr"
    WIRELESS = "wireless"
    MINI_JACK = "3.5mm"


class MicType(str, Enum):
    DYNAMIC = "dynamic"
    CONDENSER = "condenser"
    RIBBON = "ribbon"


class MicPattern(str, Enum):
    CARDIOID = "cardioid"
    SUPERCARDIOID = "supercardioid"
    HYPERCARDIOID = "hypercardioid"
    OMNIDIRECTIONAL = "omnidirectional"
    BIDIRECTIONAL = "bidirectional"
    MULTIPATTERN = "multipattern"
    SHOTGUN = "shotgun"


class ProductAttributes(BaseModel):
    """Attributes extracted for a single listing.
    
    Only the fields relevant to the listing's category are populated;
    everything else stays None.
    """
    
    iem_type: Optional[IemType] = None
    driver_type: Optional[DriverType] = None
    headphone_design: Optional[HeadphoneDesign] = None
    headphone_type: Optional[HeadphoneType] = None
    mic_connection: Optional[MicConnection] = None
    mic_type: Optional[MicType] = None
    mic_pattern: Optional[MicPattern] = None
    
    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "iem_type": "passive",
                "driver_type": "hybrid",
            }
        },
    }
    
    def merged_with(self, fallback: "ProductAttributes") -> "ProductAttributes":
        """Fill fields missing here from `fallback`."""
        data = self.model_dump()
        for key, value in fallback.model_dump().items():
            if data.get(key) is None and value is not None:
                data[key] = value
        return ProductAttributes(**data)
