"""Unit tests for attribute extraction strategies.

Tests cover:
    - Driver configuration detection
    - IEM, headphone and microphone strategies
    - Retailer tag parsing and title-first merging
    - Strategy factory
"""
import pytest

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
from catalog_resolution.services.classification import (
    AttributeExtractor,
    create_strategy,
    extract_driver_type,
    extract_tag_attributes,
)
from catalog_resolution.services.classification.attributes import (
    HeadphoneAttributeStrategy,
    MicrophoneAttributeStrategy,
    driver_type_for,
)


@pytest.fixture
def extractor():
    return AttributeExtractor()


class TestDriverType:
    """Tests for driver technology detection."""
    
    @pytest.mark.parametrize("title,expected", [
        ("Letshuoer S12 Planar", DriverType.PLANAR),
        ("Moondrop Blessing 3 2DD+4BA", DriverType.HYBRID),
        ("Thieaudio Monarch 1DD+2BA+2EST", DriverType.TRIBRID),
        ("Generic Hybrid IEM", DriverType.HYBRID),
        ("Sennheiser IE 600 Dynamic", DriverType.DYNAMIC),
        ("Moondrop Aria", None),
    ])
    def test_extract_driver_type(self, title, expected):
        assert extract_driver_type(title) == expected
    
    def test_abbreviations_are_case_sensitive(self):
        """'ba' and 'dd' in ordinary words are not driver abbreviations."""
        assert extract_driver_type("Odd ba Edition") is None
    
    def test_driver_type_for(self):
        assert driver_type_for([]) is None
        assert driver_type_for([DriverType.DYNAMIC, DriverType.DYNAMIC]) == DriverType.DYNAMIC
        assert driver_type_for([
            DriverType.DYNAMIC,
            DriverType.BALANCED_ARMATURE,
            DriverType.ELECTROSTATIC,
            DriverType.PLANAR,
        ]) == DriverType.QUADBRID


class TestAttributeExtractor:
    """Tests for AttributeExtractor.extract."""
    
    def test_iem_defaults_to_passive(self, extractor):
        attrs = extractor.extract("Moondrop Blessing 3 2DD+4BA", CategoryId.IEM)
        
        assert attrs.iem_type == IemType.PASSIVE
        assert attrs.driver_type == DriverType.HYBRID
        assert attrs.headphone_design is None
    
    @pytest.mark.parametrize("title,expected", [
        ("Moondrop Space Travel TWS", IemType.TWS),
        ("Sony WF-1000XM5 True Wireless", IemType.TWS),
        ("Tanchjim Fission DSP", IemType.ACTIVE),
    ])
    def test_iem_type(self, extractor, title, expected):
        assert extractor.extract(title, "iem").iem_type == expected
    
    def test_headphone(self, extractor):
        attrs = extractor.extract("Hifiman Arya Open-Back Planar Headphones", "headphone")
        
        assert attrs.headphone_design == HeadphoneDesign.OPEN
        assert attrs.headphone_type == HeadphoneType.PASSIVE
        assert attrs.driver_type == DriverType.PLANAR
        assert attrs.iem_type is None
    
    def test_wireless_headphone_is_active(self, extractor):
        attrs = extractor.extract("Sony WH-1000XM5 Wireless Noise Cancelling", "headphone")
        
        assert attrs.headphone_type == HeadphoneType.ACTIVE
        assert attrs.headphone_design is None
    
    def test_microphone_fields_only(self, extractor):
        """Driver type is not a microphone attribute."""
        attrs = extractor.extract("Shure MV7+ USB XLR Dynamic Microphone", "microphone")
        
        assert attrs.mic_connection == MicConnection.USB_XLR
        assert attrs.mic_type == MicType.DYNAMIC
        assert attrs.driver_type is None
    
    @pytest.mark.parametrize("category", [CategoryId.DAC, "gadget", None])
    def test_category_without_attributes(self, extractor, category):
        assert extractor.extract("Topping DX3 Pro", category) == ProductAttributes()
    
    def test_tags_fill_missing_fields(self, extractor):
        attrs = extractor.extract("Generic Microphone", "microphone", tags=["polar_pattern_Cardioid", "USB"])
        
        assert attrs.mic_pattern == MicPattern.CARDIOID
        assert attrs.mic_connection == MicConnection.USB
    
    def test_title_wins_over_tags(self, extractor):
        attrs = extractor.extract("Hifiman Arya Open-Back", "headphone", tags=["closed-back"])
        
        assert attrs.headphone_design == HeadphoneDesign.OPEN
    
    def test_tags_set_iem_type(self, extractor):
        assert extractor.extract("Generic Earbuds", "iem", tags=["tws"]).iem_type == IemType.TWS


class TestMicrophoneStrategy:
    """Tests for MicrophoneAttributeStrategy."""
    
    @pytest.fixture
    def strategy(self):
        return MicrophoneAttributeStrategy()
    
    @pytest.mark.parametrize("title,expected", [
        ("Rode NT1 XLR Condenser Cardioid", MicPattern.CARDIOID),
        ("AKG C414 Multi-Pattern", MicPattern.MULTIPATTERN),
        ("Cardioid and Omni Capsules", MicPattern.MULTIPATTERN),
        ("Rode NTG5 Shotgun Supercardioid", MicPattern.SHOTGUN),
        ("Shure Beta 58A Super-Cardioid", MicPattern.SUPERCARDIOID),
        ("Lavalier Clip Mic", None),
    ])
    def test_polar_pattern(self, strategy, title, expected):
        assert strategy.extract(title).mic_pattern == expected
    
    @pytest.mark.parametrize("title,expected", [
        ("Rode Wireless GO II", MicConnection.WIRELESS),
        ("Boya Lavalier 3.5mm", MicConnection.MINI_JACK),
        ("Shure SM58", None),
    ])
    def test_connection(self, strategy, title, expected):
        assert strategy.extract(title).mic_connection == expected
    
    def test_condenser_checked_first(self, strategy):
        assert strategy.extract("Dynamic Range Condenser Mic").mic_type == MicType.CONDENSER


class TestHeadphoneStrategy:
    
    def test_closed_back(self):
        attrs = HeadphoneAttributeStrategy().extract("Fostex TH900 Closed-Back")
        
        assert attrs.headphone_design == HeadphoneDesign.CLOSED


class TestExtractTagAttributes:
    """Tests for retailer tag parsing."""
    
    def test_conflicting_polar_tags(self):
        attrs = extract_tag_attributes(["polar_pattern_Cardioid", "polar_pattern_Figure-8"])
        
        assert attrs.mic_pattern == MicPattern.MULTIPATTERN
    
    def test_driver_tags(self):
        attrs = extract_tag_attributes(["Balanced Armature", "Dynamic"])
        
        assert attrs.driver_type == DriverType.HYBRID
    
    def test_dynamic_tag_is_driver_not_mic_type(self):
        attrs = extract_tag_attributes(["dynamic"])
        
        assert attrs.driver_type == DriverType.DYNAMIC
        assert attrs.mic_type is None
    
    def test_unknown_tags_ignored(self):
        assert extract_tag_attributes(["sale", "", "bestseller"]) == ProductAttributes()


class TestCreateStrategy:
    
    def test_registered_category(self):
        strategy = create_strategy(CategoryId.HEADPHONE)
        
        assert isinstance(strategy, HeadphoneAttributeStrategy)
        assert strategy.get_category() == CategoryId.HEADPHONE
    
    def test_unregistered_category(self):
        assert create_strategy(CategoryId.DAC) is None
