"""Declarative classification rule tables.

Rules are plain, immutable records evaluated by the tier runner in
tiers.py. Precedence comes from the order of the tables and of the
tiers, never from voting between tiers.

Sections:
    1. Record types and pattern compilation
    2. IEM vs headphone (brand facts, brand+model rules, keywords)
    3. Cable sub-categories
    4. Speaker cleanup
    5. DAP reclassification
    6. DAC / amp consolidation
    7. Microphone exclusion
    8. Junk and misplaced-item overrides
"""
import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional, Pattern, Sequence, Tuple, Union

from catalog_resolution.errors import RuleConfigurationError
from catalog_resolution.models import CategoryId

PatternSource = Union[str, Pattern[str]]


# ===========================================================================
# 1. RECORD TYPES
# ===========================================================================

def compile_pattern(source: PatternSource) -> Pattern[str]:
    """Compile a case-insensitive rule pattern.
    
    Already compiled patterns pass through untouched, which is how
    case-sensitive rules (e.g. a bare "IEM" acronym) are expressed.
    
    Raises:
        RuleConfigurationError: If the pattern does not compile
    """
    if isinstance(source, re.Pattern):
        return source
    try:
        return re.compile(source, re.IGNORECASE)
    except re.error as e:
        raise RuleConfigurationError(f"Invalid rule pattern {source!r}: {e}") from e


def compile_patterns(sources: Iterable[PatternSource]) -> Tuple[Pattern[str], ...]:
    return tuple(compile_pattern(source) for source in sources)


def first_match(patterns: Sequence[Pattern[str]], text: str) -> Optional[Pattern[str]]:
    """Return the first pattern found in text, in list order."""
    for pattern in patterns:
        if pattern.search(text):
            return pattern
    return None


@dataclass(frozen=True)
class BrandFact:
    """A brand known to produce a single structural category.
    
    Attributes:
        brand: Lowercase brand name
        category: Category implied by the brand
        exceptions: (pattern, category) pairs that override the fact
    """
    brand: str
    category: CategoryId
    exceptions: Tuple[Tuple[Pattern[str], CategoryId], ...] = ()


@dataclass(frozen=True)
class BrandModelRule:
    """Brand-specific model patterns for two competing categories.
    
    Primary patterns (the more specific, in-ear category) are always
    checked before secondary patterns.
    """
    brand: str
    primary_category: CategoryId
    primary_patterns: Tuple[Pattern[str], ...]
    secondary_category: CategoryId
    secondary_patterns: Tuple[Pattern[str], ...]


@dataclass(frozen=True)
class KeywordIndicator:
    """Name patterns implying a category, optionally guarded by blockers.
    
    A category of None marks a guard: a match confirms the current
    category and stops evaluation.
    """
    category: Optional[CategoryId]
    patterns: Tuple[Pattern[str], ...]
    blockers: Tuple[Pattern[str], ...] = ()


@dataclass(frozen=True)
class Override:
    """Explicit (source category, pattern) -> target category mapping."""
    source_category: CategoryId
    pattern: Pattern[str]
    target_category: CategoryId


def indicator(
    category: Optional[CategoryId],
    patterns: Iterable[PatternSource],
    blockers: Iterable[PatternSource] = (),
) -> KeywordIndicator:
    return KeywordIndicator(category, compile_patterns(patterns), compile_patterns(blockers))


def override(source: CategoryId, pattern: PatternSource, target: CategoryId) -> Override:
    return Override(source, compile_pattern(pattern), target)


# ===========================================================================
# 2. IEM VS HEADPHONE
# ===========================================================================

# Brands that exclusively produce full-size headphones
HEADPHONE_ONLY_BRANDS = (
    "stax",
    "zmf",
    "dan clark audio",
    "dca",
    "mrspeakers",
    "abyss",
    "kennerton",
    "sendy audio",
    "t+a",
    "hedd",
    "raal",
    "raal-requisite",
)

# STAX SR-001/002/003 (and MK variants) are in-ear electrostatics
HEADPHONE_BRAND_IEM_EXCEPTIONS = (
    r"\bSR[\s-]?00[123]",
)

# brand: (iem patterns, headphone patterns)
BRAND_MODEL_PATTERNS = {
    "sennheiser": (
        [r"\bIE[\s-]?\d", r"\bMomentum\s*(True|Sport|In)"],
        [r"\bHD[\s-]?\d", r"\bHE[\s-]?\d", r"\bMomentum\s*[34]", r"\bPX[\s-]?1\d\d", r"\bGSP"],
    ),
    "beyerdynamic": (
        [r"\bDT[\s-]?\d+\w*\s*IE\b", r"\bXelento", r"\bByrd", r"\bBlue\s*Byrd"],
        [r"\bDT[\s-]?\d+\w*(?!\s*IE)\b", r"\bAventho", r"\bCustom\s+One\s+Pro", r"\bT[\s-]?[15]\s", r"\bAmiron"],
    ),
    "audio-technica": (
        [r"\bATH[\s-]?E\d", r"\bATH[\s-]?CK", r"\bATH[\s-]?LS", r"\bATH[\s-]?IM", r"\bATH[\s-]?IEX"],
        [
            r"\bATH[\s-]?M\d", r"\bATH[\s-]?R\d", r"\bATH[\s-]?AD\d", r"\bATH[\s-]?A\d",
            r"\bATH[\s-]?W\d", r"\bBPHS", r"\bATH[\s-]?HP", r"\bATH[\s-]?WP",
            r"\bATH[\s-]?AWKT", r"\bATH[\s-]?AWAS",
        ],
    ),
    "hifiman": (
        [r"\bRE[\s-]?\d", r"\bSvanar"],
        [
            r"\bHE[\s-]?\d", r"\bSusvara", r"\bArya", r"\bAnanda", r"\bSundara", r"\bDeva",
            r"\bEdition", r"\bAudivina", r"\bJade", r"\bShangri", r"\bIsvarna",
        ],
    ),
    "audeze": (
        [r"\bLCD[\s-]?i", r"\biSINE", r"\bEuclid"],
        [r"\bLCD[\s-]?[2345X](?![\s-]*i)", r"\bMM[\s-]?\d", r"\bCRBN", r"\bMaxwell"],
    ),
    "meze": (
        [r"\bRAI", r"\bAdvar", r"\bAlba"],
        [r"\b99\b", r"\b109\b", r"\bEmpyrean", r"\bElite\b", r"\bLiric", r"\bPOET"],
    ),
    "grado": (
        [r"\bGR[\s-]?\d", r"\biGe", r"\bGT\d"],
        [r"\bSR[\s-]?\d", r"\bRS[\s-]?\d", r"\bGS[\s-]?\d", r"\bPS[\s-]?\d", r"\bGH[\s-]?\d", r"\bHemp"],
    ),
    "sony": (
        [r"\bWF[\s-]", r"\bIER[\s-]", r"\bXBA[\s-]", r"\bMDR[\s-]?EX"],
        [
            r"\bWH[\s-]", r"\bMDR[\s-]?Z", r"\bMDR[\s-]?M\d", r"\bMDR[\s-]?7506",
            r"\bMDR[\s-]?CD", r"\bMDR[\s-]?SA", r"\bMDR[\s-]?H", r"\bULT\s*WEAR",
        ],
    ),
    "focal": (
        [r"\bSphear", r"\bSpark", r"\bUtopia\s*Go"],
        [
            r"\bElear", r"\bUtopia(?!\s*Go)", r"\bClear", r"\bElegia", r"\bStellia",
            r"\bCelestee", r"\bRadiance", r"\bBathys", r"\bHadenys", r"\bAzurys", r"\bListen",
        ],
    ),
    "shure": (
        [r"\bSE[\s-]?\d", r"\bKSE[\s-]?\d", r"\bAONIC\s*[345]\b"],
        [r"\bSRH[\s-]?\d", r"\bAONIC\s*50"],
    ),
    "final": (
        [r"\b[EABF]\d{3,}", r"\bZE[\s-]?\d", r"\bAdagio"],
        [r"\bD8000", r"\bSonorous", r"\bUX[\s-]?\d"],
    ),
    "fiio": (
        [r"\bFH[\s-]?\d", r"\bFD[\s-]?\d", r"\bFA[\s-]?\d", r"\bFX[\s-]?\d", r"\bFW[\s-]?\d", r"\bJD[\s-]?\d", r"\bJH[\s-]?\d"],
        [r"\bFT[\s-]?\d", r"\bJT[\s-]?\d", r"\bWind", r"\bSNOWSKY"],
    ),
    "fostex": (
        [r"\bTE[\s-]?\d"],
        [r"\bTH[\s-]?\d", r"\bT\d+RP"],
    ),
    "philips": (
        [r"\bSHE[\s-]?\d", r"\bTAT[\s-]?\d"],
        [r"\bFidelio\b", r"\bSHP[\s-]?\d", r"\bTAH[\s-]?\d"],
    ),
    "yamaha": (
        [r"\bEPH[\s-]?\d"],
        [r"\bYH[\s-]?\d", r"\bHPH[\s-]?\d", r"\bHP[\s-]?\d"],
    ),
    "denon": (
        [r"\bPerl", r"\bAH[\s-]?C"],
        [r"\bAH[\s-]?D\d", r"\bD\d{4}"],
    ),
    "harmonicdyne": (
        [r"\bP\.?D\.?1", r"\bPD[\s-]?1"],
        [r"\bATHENA", r"\bBAROQUE", r"\bBlack\s*Hole", r"\bDEVIL", r"\bPoseidon", r"\bZeus", r"\bHelios"],
    ),
    "koss": (
        [r"\bKEB[\s-]?\d", r"\bKE[\s-]?5", r"\bPlug"],
        [r"\bESP", r"\bPortaPro", r"\bKPH[\s-]?\d", r"\bKSC[\s-]?\d", r"\bPro[\s-]?4"],
    ),
}

IEM_NAME_INDICATORS = (
    r"\bin[\s-]?ear\b",
    re.compile(r"\bIEMs?\b"),
    r"\bearphones?\b",
    r"\bearbuds?\b",
    r"\bTWS\b",
    r"\btruly[\s-]?wireless\b",
    r"\btrue[\s-]?wireless\b",
    r"\bin[\s-]?ear\s+monitor",
)

HEADPHONE_NAME_INDICATORS = (
    r"\bover[\s-]?ear\b",
    r"\bon[\s-]?ear\b",
    # "headphone" but not "in-ear headphone" or the "Headphone Zone" retailer
    r"\bheadphones?\b(?!.*\bin[\s-]?ear)(?!.*\bzone\b)",
    r"\bheadband\b",
    r"\bcircumaural\b",
    r"\bsupra[\s-]?aural\b",
)

# Also used in IEM names ("open-back earbuds", "full size shell")
HEADPHONE_NAME_INDICATORS_GUARDED = (
    r"\bopen[\s-]?back\b",
    r"\bclosed[\s-]?back\b",
    r"\bfull[\s-]?size\b",
)

GUARDED_INDICATOR_BLOCKERS = (
    r"\bearbud",
    r"\bearphone",
    r"\bshell\b",
    re.compile(r"\bIEM\b"),
    r"\bin[\s-]?ear\b",
)


# ===========================================================================
# 3. CABLE SUB-CATEGORIES
# ===========================================================================

# Brands that only make IEM cables
IEM_CABLE_BRANDS = frozenset({
    "dunu",
    "hakugei",
    "kinera",
    "trn",
    "nicehck",
    "tripowin",
    "kbear",
    "xinhs",
    "linsoul",
    "yongse",
    "jcally",
    "isn",
    "yinyoo",
    "bgvp",
    "aful",
    "tri",
    "softears",
    "hisenior",
})

IEM_CABLE_INDICATORS = (
    r"\b2[\s-]?pin\b",
    r"\bMMCX\b",
    r"\bQDC\b",
    r"\b0\.78\s*mm\b",
    r"\bIEM\b.*\bcable\b",
    r"\bcable\b.*\bIEM\b",
    r"\bearphone\s+(cable|upgrade)\b",
    r"\b(cable|upgrade)\b.*\bearphone\b",
    r"\bin[\s-]?ear\b.*\bcable\b",
    r"\b(2[\s-]?pin|MMCX)\s+(0\.78|cable|upgrade)",
)

IEM_CABLE_MODEL_PATTERNS = (
    r"\bFiiO\b.*\bLS[\s-]?\d",
    r"\bMoondrop\b.*\b(cable|CDSP|Line\s*K|PCC|MC1|Free\s*DSP|Silver\s*Pill)\b",
    r"\bShanling\b.*\bEL\d",
    r"\bHiBy\b.*\b(cable|upgrade)\b",
    r"\bDUNU\b.*\b(DUW|HULK|LYRE)\b",
)

HP_CABLE_INDICATORS = (
    r"\bheadphone\s+(cable|upgrade)\b",
    r"\b(cable|upgrade)\b.*\bheadphone\b",
    r"\bfor\s+(HD[\s-]?\d|LCD|Audeze|Sennheiser|Focal|HiFiMAN|Beyerdynamic|ZMF|DCA|Dan\s+Clark)",
    r"\b(HD800|HD650|HD600|HD580|HD660|LCD[\s-]?[2345X]|Clear|Utopia|Arya|Sundara|Susvara|TH900|T60RP|T50RP)\b",
    r"\b(mini[\s-]?XLR|4[\s-]?pin\s+XLR)\b.*\b(cable|headphone)\b",
)

HP_CABLE_MODEL_PATTERNS = (
    r"\bApos\s+Flow\s+Headphone\b",
    r"\bDragon\b.*\b(headphone|HD|LCD|Focal|Audeze|Sennheiser)\b",
    r"\bCardas\b.*\b(headphone|Clear\s+Beyond)\b",
    r"\bDekoni\b.*\bcable\b",
    r"\bDan\s+Clark\b.*\b(DUMMER|VIVO)\b",
    r"\bMeze\b.*\b(99|109|Empyrean|Elite|Liric)\b.*\bcable\b",
    r"\bRAAL[\s-]?requisite\b.*\bcable\b",
)

# Checked before connector indicators so a USB cable is never an IEM cable
GENERAL_CABLE_INDICATORS = (
    r"\binterconnect\b",
    r"\bpower\s+c(able|ord)\b",
    r"\bAC\s+power\b",
    r"\bspeaker\s+cable\b",
    r"\bspeaker\s+wire\b",
    r"\bUSB[\s-]?(A|B|C)\b.*\bcable\b",
    r"\bcable\b.*\bUSB[\s-]?(A|B|C)\b",
    r"\bOTG\b",
    r"\bcoaxial\b",
    r"\boptical\b",
    r"\bToslink\b",
    r"\bRCA\b.*\bcable\b",
    r"\bsubwoofer\s+cable\b",
    r"\bumbilical\b",
    r"\bpower\s+link\b",
    r"\bpower\s+splitter\b",
    r"\bclock\b.*\bBNC\b",
    r"\bDC\s+jack\b",
    r"\biEMatch\b",
)


# ===========================================================================
# 4. SPEAKER CLEANUP
# ===========================================================================

SPEAKER_GUARD_INDICATORS = (
    r"\bbookshelf\b",
    r"\btower\b",
    r"\bfloor[\s-]?standing\b",
    r"\bcenter[\s-]?channel\b",
    r"\bsubwoofer\b",
    r"\bsound[\s-]?bar\b",
    r"\bloudspeakers?\b",
    r"\bspeakers?\b(?!\s+(cable|wire))",
    r"\bpowered\s+speaker\b",
    r"\bactive\s+speaker\b",
    r"\bpassive\s+speaker\b",
    r"\bmonitor\b",
    r"\bwoofer\b",
    r"\bspeaker\s+system\b",
    r"\bsatellite\b",
    r"\bsurround\b",
    r"\b(2|3)[\s-]?way\b",
    r"\bdriver\b",
)

SPEAKER_TO_CABLE_INDICATORS = (
    r"\bcables?\b",
    r"\binterconnects?\b",
    r"\bwires?\b",
)

SPEAKER_ACCESSORY_INDICATORS = (
    r"\bstand\b",
    r"\bgrill\b",
    r"\bcover\b",
    r"\bbracket\b",
    r"\bmount\b",
    r"\bremote\b",
)


# ===========================================================================
# 5. DAP RECLASSIFICATION
# ===========================================================================

DAP_GUARD_INDICATORS = (
    r"\bportable\b",
    re.compile(r"\bDAP\b"),
    r"\bdigital\s+audio\s+player\b",
    r"\bpocket\b",
    r"\bhi[\s-]?res\s+player\b",
)

# Stationary devices listed as players, by the category they belong to
STATIONARY_SPEAKER_INDICATORS = (
    r"\bactive\s+speaker\b",
)

STATIONARY_AMP_INDICATORS = (
    r"\bintegrated\s+amplifier\b",
)

STATIONARY_SOURCE_INDICATORS = (
    r"\bmusic\s+server\b",
    r"\bserver\b",
    r"\bstreamer\b",
    r"\btransport\b",
    r"\bnetwork\s+player\b",
    r"\bnetwork\s+music\b",
    r"\brack\s+mount\b",
    r"\bCD\s+(player|transport)\b",
    r"\bSACD\b",
    r"\bRoon\s+Core\b",
)


# ===========================================================================
# 6. DAC / AMP CONSOLIDATION
# ===========================================================================

DAC_INDICATORS = (
    re.compile(r"\bDAC\w*"),
    r"\bdigital[\s-]?to[\s-]?analog\b",
    r"\bconverter\b",
    r"\bDAC/Amp\b",
    r"\bAmp/DAC\b",
    r"\bDAC\s+and\b",
    r"\bDAC\s*&\b",
    r"\bDAC\s*\+\b",
    r"\bStreaming\s+DAC\b",
    r"\bDesktop\s+DAC\b",
    r"\bPortable\s+DAC\b",
    r"\bUSB\s+DAC\b",
    r"\bBluetooth\s+DAC\b",
    r"\bR2R\b",
)

AMP_ONLY_INDICATORS = (
    r"\bpower\s+amp",
    r"\bspeaker\s+amp",
    r"\bintegrated\s+amp",
    r"\btube\s+amp",
    r"\bheadphone\s+amp",
    r"\bamp\b",
    r"\bamplifier\b",
    r"\bpre[\s-]?amp\b",
    r"\benergizer\b",
)


# ===========================================================================
# 7. MICROPHONE EXCLUSION
# ===========================================================================

# Excluded even when a genuine-microphone guard matches
MICROPHONE_UNCONDITIONAL_JUNK = (
    r"\bkaraoke\b",
)

MICROPHONE_JUNK_INDICATORS = (
    r"\bkaraoke\b",
    r"\bportable\s+(bluetooth\s+)?speaker\b",
    r"\bparty\s+speaker\b",
    r"\bsound[\s-]?bar\b",
    r"\b(mic(rophone)?|boom)\s+(arm|boom|stand)\b",
    r"\bmicrophone\s+boom\b",
    r"\bboom\s+arm\b",
    r"\blow[\s-]?profile\s+microphone\s+arm\b",
    r"\baudio\s+(interface|mixer)\b",
    r"\bgaming\s+audio\s+interface\b",
    r"\bmicrophone\s+handle\b",
    r"\bmic(rophone)?\s+adapter\b",
    r"\bshock\s*mount\b",
    r"\bpop\s+filter\b",
    r"\bwindscreen\b",
    r"\bwind\s*shield\b(?!.*\bmic)",
    r"\bphantom\s+power\s+(supply|adapter)\b",
    r"\bmic\s+preamp\b",
    r"\binline\s+preamp\b",
    r"\bdi\s+box\b",
    r"\bdirect\s+box\b",
    r"\bcloudlifter\b",
    r"\bheadphone\b",
    r"\bin[\s-]?ear\s+monitor\b",
    r"\bmic\s+cable\b",
    r"\bXLR\s+cable\b",
    r"\bmicrophone\s+cable\b",
    r"\bcarrying\s+case\b",
    r"\bflight\s+case\b",
    r"\bstorage\s+case\b",
    r"\bpop\s+shield\b",
    r"\bstudio\s+monitor\b",
    r"\bspeaker\b",
    r"\bgift\s+card\b",
    r"\bservice\s+fee",
    r"\btally\s+(light|indicator)\b",
    r"\bfield\s+monitor\b",
    r"\bintercom\b",
    r"\bvoice\s+amplifier\b",
    r"\bcharging\s+(case|dock)\b",
    r"\bcold\s+shoe\b",
    r"\bphone\s+monitor\b",
)

# "USB Condenser Microphone with Boom Arm" is a microphone
MICROPHONE_GUARD_INDICATORS = (
    r"\bcondenser\s+mic",
    r"\bdynamic\s+mic",
    r"\bribbon\s+mic",
    r"\bUSB\s+(condenser\s+)?mic",
    r"\bXLR\s+(condenser\s+|dynamic\s+)?mic",
    r"\bstudio\s+mic",
    r"\brecording\s+mic",
    r"\bstreaming\s+mic",
    r"\bpodcast(ing)?\s+mic",
    r"\bvocal\s+mic",
    r"\blavalier\b",
    r"\blapel\s+mic",
    r"\bshotgun\s+mic",
    r"\bwireless\s+mic(rophone)?\s+(system|kit|set)\b",
    r"\blarge[\s-]?diaphragm\b",
    r"\bsmall[\s-]?diaphragm\b",
    r"\bboundary\s+mic",
    r"\bdrum\s+mic",
    r"\binstrument\s+mic",
    r"\bbroadcast\s+mic",
    r"\btube\s+mic",
    r"\bvalve\s+mic",
    r"\bgooseneck\s+mic",
    r"\bhandheld\s+mic",
    r"\bpencil\s+(condenser\s+)?mic",
)


# ===========================================================================
# 8. JUNK & MISPLACED ITEMS
# ===========================================================================

# Test and placeholder rows
JUNK_PRODUCT_PATTERNS = (
    r"^DAC\s+Test\b",
    r"\bTest\s+DAC\s+Test\b",
    r"^Test\s+Reference$",
)

# (source category, pattern, target category); first match wins
MISPLACED_OVERRIDES = (
    (CategoryId.IEM, r"\biFi\s+GO\s+pod\b(?!.*\b(Ear\s+Loop|Connector|Accessori|Case|Tip|Hook))", CategoryId.DAC),
    (CategoryId.IEM, r"\bMoondrop\s+RAYS\s+Cable\b", CategoryId.IEM_CABLE),
    (CategoryId.IEM, r"\bCollection\s+Tips\b", CategoryId.IEM_TIPS),
    (CategoryId.IEM, r"\bTips\s+Collection\b", CategoryId.IEM_TIPS),
    (CategoryId.DAC, r"\bddHiFi\b.*\bIEM\s+Cable\b", CategoryId.IEM_CABLE),
    (CategoryId.DAC, r"\b3\.5mm\s+to\s+4\.4mm\s+Headphone\s+Adapter\b", CategoryId.CABLE),
    (CategoryId.HEADPHONE, r"\bStorage\s+Case\b", CategoryId.CABLE),
    (CategoryId.HEADPHONE, r"\bCarrying\s+Case\b", CategoryId.CABLE),
    (CategoryId.HEADPHONE, r"\bFloor\s+Stand\b", CategoryId.CABLE),
    (CategoryId.HEADPHONE, r"\bInterspeaker\s+Cable\b", CategoryId.CABLE),
    (CategoryId.HEADPHONE, r"\bSubwoofer\s+Adapter\b", CategoryId.CABLE),
    (CategoryId.HEADPHONE, r"\bCanpur\s+Silver\s+Flash\b", CategoryId.IEM),
)

# Specific DAP listings that belong to another category
DAP_PRODUCT_OVERRIDES = (
    (CategoryId.DAP, r"\bTechnics\s+SC[\s-]?CX700\b", CategoryId.SPEAKER),
    (CategoryId.DAP, r"\bTechnics\s+SU[\s-]?G700", CategoryId.AMP),
    (CategoryId.DAP, r"\bBryston\s+BDA[\s-]?3\.14\b", CategoryId.DAC),
)


# ===========================================================================
# RULE SET
# ===========================================================================

@dataclass(frozen=True)
class CableRules:
    """Cable sub-category tables, in evaluation order."""
    model_indicators: Tuple[KeywordIndicator, ...]
    iem_cable_brands: FrozenSet[str]
    connector_indicators: Tuple[KeywordIndicator, ...]


@dataclass(frozen=True)
class MicrophoneRules:
    unconditional_junk: Tuple[Pattern[str], ...]
    junk_indicators: Tuple[Pattern[str], ...]
    guards: Tuple[Pattern[str], ...]


@dataclass(frozen=True)
class ClassificationRules:
    """Immutable, fully compiled rule set.
    
    Build once (see default_rules()) and pass by reference to every
    classifier that needs it.
    """
    overrides: Tuple[Override, ...]
    brand_facts: Mapping[str, BrandFact]
    brand_model_rules: Mapping[str, BrandModelRule]
    keyword_indicators: Tuple[KeywordIndicator, ...]
    cable: CableRules
    speaker_indicators: Tuple[KeywordIndicator, ...]
    dap_indicators: Tuple[KeywordIndicator, ...]
    amp_to_dac_indicators: Tuple[KeywordIndicator, ...]
    dac_to_amp_indicators: Tuple[KeywordIndicator, ...]
    microphone: MicrophoneRules
    junk_patterns: Tuple[Pattern[str], ...] = field(default=())


def build_brand_model_rules(
    table: Mapping[str, Tuple[Sequence[PatternSource], Sequence[PatternSource]]],
    primary: CategoryId = CategoryId.IEM,
    secondary: CategoryId = CategoryId.HEADPHONE,
) -> Mapping[str, BrandModelRule]:
    """Compile brand -> (primary patterns, secondary patterns) entries.
    
    Raises:
        RuleConfigurationError: On a pattern that fails to compile, or two
            entries for the same brand after lowercasing
    """
    rules = {}
    for brand, (primary_patterns, secondary_patterns) in table.items():
        key = " ".join(brand.lower().split())
        if key in rules:
            raise RuleConfigurationError(f"Duplicate brand+model rule for brand '{key}'")
        rules[key] = BrandModelRule(
            brand=key,
            primary_category=primary,
            primary_patterns=compile_patterns(primary_patterns),
            secondary_category=secondary,
            secondary_patterns=compile_patterns(secondary_patterns),
        )
    return MappingProxyType(rules)


def build_rules() -> ClassificationRules:
    """Compile the built-in tables into a ClassificationRules instance."""
    stax_exceptions = tuple(
        (compile_pattern(source), CategoryId.IEM) for source in HEADPHONE_BRAND_IEM_EXCEPTIONS
    )
    brand_facts = {
        brand: BrandFact(
            brand=brand,
            category=CategoryId.HEADPHONE,
            exceptions=stax_exceptions if brand == "stax" else (),
        )
        for brand in HEADPHONE_ONLY_BRANDS
    }

    return ClassificationRules(
        overrides=tuple(
            override(source, pattern, target)
            for source, pattern, target in MISPLACED_OVERRIDES + DAP_PRODUCT_OVERRIDES
        ),
        brand_facts=MappingProxyType(brand_facts),
        brand_model_rules=build_brand_model_rules(BRAND_MODEL_PATTERNS),
        keyword_indicators=(
            indicator(CategoryId.IEM, IEM_NAME_INDICATORS),
            indicator(CategoryId.HEADPHONE, HEADPHONE_NAME_INDICATORS),
            indicator(
                CategoryId.HEADPHONE,
                HEADPHONE_NAME_INDICATORS_GUARDED,
                blockers=GUARDED_INDICATOR_BLOCKERS,
            ),
        ),
        cable=CableRules(
            model_indicators=(
                indicator(CategoryId.IEM_CABLE, IEM_CABLE_MODEL_PATTERNS),
                indicator(CategoryId.HP_CABLE, HP_CABLE_MODEL_PATTERNS),
                indicator(CategoryId.CABLE, GENERAL_CABLE_INDICATORS),
            ),
            iem_cable_brands=IEM_CABLE_BRANDS,
            connector_indicators=(
                indicator(CategoryId.IEM_CABLE, IEM_CABLE_INDICATORS),
                indicator(CategoryId.HP_CABLE, HP_CABLE_INDICATORS),
            ),
        ),
        speaker_indicators=(
            indicator(None, SPEAKER_GUARD_INDICATORS),
            indicator(CategoryId.CABLE, SPEAKER_TO_CABLE_INDICATORS),
            indicator(CategoryId.CABLE, SPEAKER_ACCESSORY_INDICATORS),
        ),
        dap_indicators=(
            indicator(None, DAP_GUARD_INDICATORS),
            indicator(CategoryId.SPEAKER, STATIONARY_SPEAKER_INDICATORS),
            indicator(CategoryId.AMP, STATIONARY_AMP_INDICATORS),
            indicator(CategoryId.DAC, STATIONARY_SOURCE_INDICATORS),
        ),
        amp_to_dac_indicators=(
            indicator(CategoryId.DAC, DAC_INDICATORS),
        ),
        dac_to_amp_indicators=(
            indicator(CategoryId.AMP, AMP_ONLY_INDICATORS, blockers=DAC_INDICATORS),
        ),
        microphone=MicrophoneRules(
            unconditional_junk=compile_patterns(MICROPHONE_UNCONDITIONAL_JUNK),
            junk_indicators=compile_patterns(MICROPHONE_JUNK_INDICATORS),
            guards=compile_patterns(MICROPHONE_GUARD_INDICATORS),
        ),
        junk_patterns=compile_patterns(JUNK_PRODUCT_PATTERNS),
    )


@lru_cache(maxsize=1)
def default_rules() -> ClassificationRules:
    """Process-wide built-in rule set, compiled on first use."""
    return build_rules()
