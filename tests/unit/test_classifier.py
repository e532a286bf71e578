"""Unit tests for the rule-based category classifier.

Tests cover:
    - IEM vs headphone tiers and their precedence
    - Misplaced-item overrides
    - Cable, speaker, DAP and DAC/amp clean-up rules
    - Microphone and placeholder exclusion
    - Rule table compilation errors
"""
import pytest

from catalog_resolution.errors import RuleConfigurationError
from catalog_resolution.models import CategoryId, RuleTier
from catalog_resolution.services.classification import classify, detect_product_category, is_junk_product
from catalog_resolution.services.classification.rules import build_brand_model_rules, compile_pattern


class TestStructuralTiers:
    """IEM vs headphone classification."""
    
    def test_brand_fact_exception(self, classifier):
        """STAX in-ear electrostatics are IEMs despite the headphone-only brand."""
        result = classifier.review("STAX SR-003MK2", "STAX", "headphone")
        
        assert result.target_category == CategoryId.IEM
        assert result.tier == RuleTier.BRAND_FACT
        assert result.reclassified
    
    def test_brand_fact(self, classifier):
        result = classifier.review("STAX SR-L700 MK2", "STAX")
        
        assert result.target_category == CategoryId.HEADPHONE
        assert result.matched_pattern == "brand:stax"
    
    def test_brand_model_beats_keyword(self, classifier):
        """A model pattern outranks a contradicting category word."""
        result = classifier.review("Sennheiser IE 600 Headphones", "Sennheiser", "headphone")
        
        assert result.target_category == CategoryId.IEM
        assert result.tier == RuleTier.BRAND_MODEL
    
    def test_brand_model_secondary(self, classifier):
        assert classifier.classify("Sennheiser HD 600", "Sennheiser", "iem") == CategoryId.HEADPHONE
    
    @pytest.mark.parametrize("name,current,expected", [
        ("Generic In-Ear Monitor", "headphone", CategoryId.IEM),
        ("Ziigaat Arcanis IEM", "headphone", CategoryId.IEM),
        ("Generic Over-Ear Headphones", "iem", CategoryId.HEADPHONE),
        ("Generic Open-Back Planar", "iem", CategoryId.HEADPHONE),
    ])
    def test_keyword(self, classifier, name, current, expected):
        result = classifier.review(name, None, current)
        
        assert result.target_category == expected
        assert result.tier == RuleTier.KEYWORD
    
    def test_iem_acronym_is_case_sensitive(self, classifier):
        """Only the upper-case IEM acronym counts."""
        assert classifier.classify("Premium iem Stand", None, "headphone") is None
    
    def test_guarded_keyword_blocked(self, classifier):
        """'Full size' in an IEM shell listing is not a headphone signal."""
        assert classifier.classify("Full Size Shell Kit", None, "iem") is None
    
    def test_matching_category_is_not_reclassified(self, classifier):
        result = classifier.review("Moondrop Aria Earphones", "Moondrop", "iem")
        
        assert result.target_category is None
        assert result.tier == RuleTier.KEYWORD
        assert not result.reclassified
    
    def test_no_signal(self, classifier):
        result = classifier.review("Moondrop Aria", "Moondrop", "iem")
        
        assert result.target_category is None
        assert result.tier == RuleTier.NONE
    
    def test_unknown_category_string(self, classifier):
        """Unrecognized categories are treated as uncategorized."""
        assert classifier.classify("Generic In-Ear Monitor", None, "gadget") == CategoryId.IEM


class TestOverrides:
    """Misplaced-item overrides."""
    
    def test_adapter_listed_as_dac(self, classifier):
        result = classifier.review("3.5mm to 4.4mm Headphone Adapter", None, "dac")
        
        assert result.target_category == CategoryId.CABLE
        assert result.tier == RuleTier.OVERRIDE
    
    def test_override_requires_source_category(self, classifier):
        assert classifier.classify("3.5mm to 4.4mm Headphone Adapter", None, "amp") is None
    
    def test_negative_lookahead(self, classifier):
        assert classifier.classify("iFi GO pod", "iFi", "iem") == CategoryId.DAC
        assert classifier.classify("iFi GO pod Ear Loop", "iFi", "iem") is None
    
    def test_dap_product_override(self, classifier):
        assert classifier.classify("Technics SC-CX700", "Technics", "dap") == CategoryId.SPEAKER
    
    def test_override_beats_brand_fact(self, classifier):
        result = classifier.review("ZMF Storage Case", "ZMF", "headphone")
        
        assert result.target_category == CategoryId.CABLE
        assert result.tier == RuleTier.OVERRIDE
    
    def test_override_beats_keyword(self, classifier):
        """An in-ear keyword would confirm iem; the override moves it."""
        assert classifier.classify("Moondrop RAYS Cable In-Ear", "Moondrop", "iem") == CategoryId.IEM_CABLE


class TestCableRules:
    """Cable sub-category rules."""
    
    @pytest.mark.parametrize("name,brand,current,expected", [
        ("FiiO LS-4 Upgrade Cable", "FiiO", "cable", CategoryId.IEM_CABLE),
        ("USB-C to USB-C Cable", None, "iem_cable", CategoryId.CABLE),
        ("Silver Litz Wire", "TRN", "cable", CategoryId.IEM_CABLE),
        ("8 Core 2-Pin Upgrade", None, "cable", CategoryId.IEM_CABLE),
        ("Silver Cable for HD600", None, "cable", CategoryId.HP_CABLE),
    ])
    def test_cable_subcategory(self, classifier, name, brand, current, expected):
        assert classifier.classify(name, brand, current) == expected
    
    def test_already_correct(self, classifier):
        assert classifier.classify("8 Core 2-Pin Upgrade", None, "iem_cable") is None


class TestSpeakerRules:
    
    def test_real_speaker_kept(self, classifier):
        assert classifier.classify("Bookshelf Speaker Pair", None, "speaker") is None
    
    def test_speaker_cable_moved(self, classifier):
        assert classifier.classify("Speaker Cable 2m", None, "speaker") == CategoryId.CABLE
    
    def test_accessory_moved(self, classifier):
        assert classifier.classify("Isolation Stand", None, "speaker") == CategoryId.CABLE


class TestDapRules:
    
    def test_portable_player_kept(self, classifier):
        assert classifier.classify("Cayin N3 Pro Portable DAP", None, "dap") is None
    
    @pytest.mark.parametrize("name,expected", [
        ("Edifier Active Speaker", CategoryId.SPEAKER),
        ("Marantz Integrated Amplifier", CategoryId.AMP),
        ("Bluesound Node Network Player", CategoryId.DAC),
    ])
    def test_stationary_device_moved(self, classifier, name, expected):
        assert classifier.classify(name, None, "dap") == expected


class TestDacAmpRules:
    
    def test_amp_with_dac_becomes_dac(self, classifier):
        assert classifier.classify("Topping DX3 Pro DAC/Amp", None, "amp") == CategoryId.DAC
    
    def test_pure_amp_kept(self, classifier):
        assert classifier.classify("Schiit Magni Headphone Amp", None, "amp") is None
    
    def test_pure_amp_listed_as_dac(self, classifier):
        assert classifier.classify("Schiit Magni Headphone Amp", None, "dac") == CategoryId.AMP
    
    def test_dac_indicator_blocks_amp(self, classifier):
        assert classifier.classify("Topping DX3 Pro DAC/Amp", None, "dac") is None


class TestExclusions:
    """Microphone and placeholder screening."""
    
    def test_genuine_microphone_with_accessory_words(self, classifier):
        """A guard phrase overrides the 'boom arm' junk indicator."""
        result = classifier.review("ddHiFi USB Condenser Microphone with Boom Arm", "ddHiFi", "microphone")
        
        assert result.excluded is False
        assert result.target_category is None
    
    def test_microphone_accessory_excluded(self, classifier):
        result = classifier.review("Heavy Duty Boom Arm", None, "microphone")
        
        assert result.excluded is True
        assert result.exclusion_reason == "not_a_microphone"
    
    def test_karaoke_always_excluded(self, classifier):
        assert classifier.is_microphone_junk("Karaoke Condenser Microphone") is True
    
    def test_microphone_never_reclassified(self, classifier):
        assert classifier.classify("Shure SM7B Dynamic Microphone", "Shure", "microphone") is None
    
    @pytest.mark.parametrize("title,expected", [
        ("DAC Test", True),
        ("  DAC Test Unit  ", True),
        ("Test Reference", True),
        ("Test Reference Cable", False),
        ("Moondrop DAC Test", False),
        (None, False),
    ])
    def test_junk_product(self, title, expected):
        assert is_junk_product(title) is expected
    
    def test_placeholder_excluded_in_any_category(self, classifier):
        result = classifier.review("DAC Test", None, "iem")
        
        assert result.excluded is True
        assert result.exclusion_reason == "placeholder_listing"


class TestDetectProductCategory:
    
    @pytest.mark.parametrize("name,brand,expected", [
        ("Sennheiser HD 600", "Sennheiser", CategoryId.HEADPHONE),
        ("Generic TWS Earbuds", None, CategoryId.IEM),
        ("Chord Mojo 2", "Chord", None),
    ])
    def test_detect(self, name, brand, expected):
        assert detect_product_category(name, brand) == expected
    
    def test_module_level_classify(self):
        assert classify("STAX SR-003MK2", "STAX", CategoryId.HEADPHONE) == CategoryId.IEM


class TestRuleCompilation:
    
    def test_invalid_pattern(self):
        with pytest.raises(RuleConfigurationError):
            compile_pattern("(unclosed")
    
    def test_duplicate_brand_rule(self):
        with pytest.raises(RuleConfigurationError):
            build_brand_model_rules({"Sony": ([], []), "sony": ([], [])})
