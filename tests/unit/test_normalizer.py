"""Unit tests for the product name normalizer.

Tests cover:
    - Each pipeline step on realistic retailer titles
    - Idempotence and determinism
    - Brand-stripped normalization
"""
import pytest

from catalog_resolution.services.normalization import compact, normalize, strip_brand


class TestNormalize:
    """Tests for normalize()."""
    
    def test_noise_parenthetical_and_digit_split(self):
        """Noise parentheticals are dropped and model numbers split."""
        assert normalize("FiiO FH7 (Prototype)") == "fiio fh 7"
    
    @pytest.mark.parametrize("text", ["", None])
    def test_empty_input(self, text):
        """Empty and missing input normalize to an empty string."""
        assert normalize(text) == ""
    
    def test_full_retailer_title(self):
        """Suffix delimiter, noise, category words and numerals in one title."""
        title = "Moondrop Blessing III In-Ear Monitor (Sample) | Official Store"
        assert normalize(title) == "moondrop blessing 3"
    
    @pytest.mark.parametrize("title,expected", [
        ("Sennheiser HD 6XX MkII", "sennheiser hd 6 xx 2"),
        ("Hifiman Arya Stealth Mark 2", "hifiman arya stealth 2"),
        ("Focal Clear MkIII", "focal clear 3"),
        ("Moondrop Blessing II", "moondrop blessing 2"),
        ("Thieaudio Monarch MK IV", "thieaudio monarch 4"),
    ])
    def test_mark_and_roman_numerals(self, title, expected):
        """Mark/Mk forms and Roman numerals become Arabic numbers."""
        assert normalize(title) == expected
    
    def test_ordinal_suffix(self):
        """Ordinal suffixes attached to a number are stripped."""
        assert normalize("Fostex T50RP 3rd Gen") == "fostex t 50 rp 3 gen"
    
    @pytest.mark.parametrize("title,expected", [
        ("Moondrop Aria 2 ST", "moondrop aria 2 st"),
        ("1 st st", "1 st st"),
        ("Tanchjim One 2 ND", "tanchjim one 2 nd"),
    ])
    def test_standalone_suffix_token_kept(self, title, expected):
        """A separate ST/ND/RD/TH word after a number is not an ordinal."""
        assert normalize(title) == expected
    
    def test_retail_noise_and_category_words(self):
        """Marketing words and category suffixes are removed."""
        assert normalize("Official Genuine Moondrop Aria Earphones") == "moondrop aria"
    
    @pytest.mark.parametrize("title", ["Moondrop Chu2", "Moondrop Chu 2", "moondrop CHU-2"])
    def test_spacing_variants_converge(self, title):
        """Concatenated, spaced and dashed model numbers compare equal."""
        assert normalize(title) == "moondrop chu 2"
    
    def test_model_variant_parentheticals_kept(self):
        """Parentheticals that encode real variants survive."""
        assert normalize("Moondrop Aria (2024)") == "moondrop aria 2024"
        assert normalize("Moondrop Aria (Pro)") == "moondrop aria pro"
    
    def test_blank_prefix_keeps_full_title(self):
        """A title starting with a delimiter is not truncated to nothing."""
        assert normalize("| Moondrop Aria") == "moondrop aria"
    
    def test_bullet_delimiter(self):
        """Bullet separators also end the product name."""
        assert normalize("Tin HiFi T2 Plus • Free Shipping") == "tin hifi t 2 plus"
    
    @pytest.mark.parametrize("title", [
        "FiiO FH7 (Prototype)",
        "Sennheiser HD 6XX MkII",
        "Audio-Technica ATH-M50x Professional Studio Monitor Headphones",
        "64 Audio U12t | In Stock",
        "Kiwi Ears Quartet 2nd Edition",
        "Moondrop Aria 2 ST",
        "  spaced   out  ",
        "mk iii",
        "xiii",
        "!!!",
    ])
    def test_idempotent(self, title):
        """Normalizing a normalized name is a no-op."""
        once = normalize(title)
        assert normalize(once) == once
    
    def test_deterministic(self):
        """Identical input always yields identical output."""
        title = "Letshuoer S12 Pro (Demo) Planar IEM"
        assert normalize(title) == normalize(title)


class TestStripBrand:
    """Tests for strip_brand()."""
    
    def test_leading_brand_removed(self):
        assert strip_brand("sennheiser hd 600", "Sennheiser") == "hd 600"
    
    def test_name_without_brand_unchanged(self):
        """A name that does not start with the brand keeps every token."""
        assert strip_brand("hd 600", "Sennheiser") == "hd 600"
    
    def test_compact_brand_spelling(self):
        """A brand split across tokens is matched on its compact form."""
        assert strip_brand("dd hifi janus 3", "ddHiFi") == "janus 3"
    
    def test_multi_word_brand(self):
        assert strip_brand("64 audio u 12 t", "64 Audio") == "u 12 t"
    
    def test_brand_prefix_match(self):
        """A name carrying only the leading brand word is still stripped."""
        assert strip_brand("moondrop aria", "Moondrop Audio") == "aria"
    
    def test_first_word_fallback_without_brand(self):
        assert strip_brand("zenith board game") == "board game"
    
    def test_never_strips_to_empty(self):
        assert strip_brand("moondrop", "Moondrop") == "moondrop"
        assert strip_brand("moondrop") == "moondrop"
        assert strip_brand("") == ""


class TestCompact:
    """Tests for compact()."""
    
    @pytest.mark.parametrize("text,expected", [
        ("Audio-Technica", "audiotechnica"),
        ("dd HiFi", "ddhifi"),
        (None, ""),
    ])
    def test_compact(self, text, expected):
        assert compact(text) == expected
