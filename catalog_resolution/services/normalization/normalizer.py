"""Product name normalizer - canonicalizes retailer titles for comparison.

This module turns noisy retailer titles like:
    "Moondrop Blessing III In-Ear Monitor (Sample) | Official Store"

into a comparable token stream:
    "moondrop blessing 3"

The pipeline is a pure function of its input: no external state, no
failures, and normalizing an already normalized string is a no-op.
"""
import re
from typing import Optional


# Retailers append marketing subtitles after one of these separators
SUFFIX_DELIMITER_RE = re.compile(r"[|｜¦•]")

# Parenthetical noise; model variants like "(2024)" or "(Pro)" are kept
NOISE_PARENS_RE = re.compile(
    r"\s*\((?:pre-production|custom|universal|demo|sample|prototype|review unit|loaner)\)"
)

RETAIL_NOISE_RE = re.compile(
    r"\b(?:official|authentic|genuine|free shipping|new arrival|in stock|hot sale|latest|original)\b"
)

# Category suffix terms describe the product class, not its identity
SUFFIX_TERMS = (
    "in-ear monitors",
    "in-ear monitor",
    "in ear monitors",
    "in ear monitor",
    "iems",
    "iem",
    "headphones",
    "headphone",
    "earphones",
    "earphone",
    "earbuds",
    "earbud",
    "over-ear",
    "on-ear",
    "open-back",
    "closed-back",
)

SUFFIX_RE = re.compile(
    r"\b(?:"
    + "|".join(
        term.replace("-", r"[-\s]?")
        for term in sorted(SUFFIX_TERMS, key=len, reverse=True)
    )
    + r")\b"
)

DASHES_RE = re.compile(r"[-–—]")
NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
LETTER_DIGIT_RE = re.compile(r"(?<=[a-z])(?=\d)|(?<=\d)(?=[a-z])")
WHITESPACE_RE = re.compile(r"\s+")

ROMAN_NUMERALS = {
    "i": 1,
    "ii": 2,
    "iii": 3,
    "iv": 4,
    "v": 5,
    "vi": 6,
    "vii": 7,
    "viii": 8,
    "ix": 9,
    "x": 10,
    "xi": 11,
    "xii": 12,
    "xiii": 13,
}

MARK_RE = re.compile(r"\b(?:mark|mk)\s*(\d+|[ivx]+)\b")
ROMAN_WORD_RE = re.compile(r"\b(?:xiii|xii|xi|x|ix|viii|vii|vi|v|iv|iii|ii)\b")
# Attached suffixes only; a standalone "st" token is a model word
ORDINAL_RE = re.compile(r"\b(\d+)(?:st|nd|rd|th)\b")

# Each pass is idempotent in practice; the bound guards pathological input
MAX_PASSES = 8


def _convert_mark(match: "re.Match[str]") -> str:
    value = match.group(1)
    if value.isdigit():
        return str(int(value))
    numeral = ROMAN_NUMERALS.get(value)
    # "mark xvi" and other unknown numerals stay untouched
    return str(numeral) if numeral is not None else match.group(0)


def _convert_roman(match: "re.Match[str]") -> str:
    return str(ROMAN_NUMERALS[match.group(0)])


def _collapse(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text).strip()


def _normalize_once(text: str) -> str:
    result = text.lower()

    head = SUFFIX_DELIMITER_RE.split(result, maxsplit=1)[0]
    if head.strip():
        result = head

    result = NOISE_PARENS_RE.sub("", result)
    result = RETAIL_NOISE_RE.sub(" ", result)
    result = SUFFIX_RE.sub(" ", result)

    result = DASHES_RE.sub(" ", result)
    result = NON_ALNUM_RE.sub("", result)
    result = ORDINAL_RE.sub(r"\1", result)
    result = LETTER_DIGIT_RE.sub(" ", result)
    result = _collapse(result)

    result = MARK_RE.sub(_convert_mark, result)
    result = ROMAN_WORD_RE.sub(_convert_roman, result)

    return _collapse(result)


def normalize(text: Optional[str]) -> str:
    """Canonicalize a raw product title.
    
    Steps, in order:
        1. Lowercase
        2. Truncate at the first retailer suffix delimiter
        3. Drop noise parentheticals ("(sample)", "(prototype)", ...)
        4. Drop retail marketing words ("official", "free shipping", ...)
        5. Drop category suffix words ("headphones", "in-ear monitor", ...)
        6. Dashes to spaces, strip remaining punctuation
        7. Strip attached ordinal suffixes ("3rd" -> "3")
        8. Split letter/digit boundaries ("chu2" -> "chu 2")
        9. Collapse whitespace
        10. "Mark"/"Mk" + number or numeral -> bare number ("mkiii" -> "3")
        11. Whole-word Roman numerals ii..xiii -> digits
        12. Collapse whitespace and trim
    
    The pipeline is repeated until the output stops changing so that
    normalize(normalize(x)) == normalize(x) for every input.
    
    Args:
        text: Raw title; None and empty strings yield ""
        
    Returns:
        Normalized name (possibly empty)
    """
    if not text:
        return ""

    result = _normalize_once(text)
    for _ in range(MAX_PASSES):
        again = _normalize_once(result)
        if again == result:
            break
        result = again
    return result


def compact(text: Optional[str]) -> str:
    """Alphanumeric-only lowercase form ("Audio-Technica" -> "audiotechnica")."""
    if not text:
        return ""
    return re.sub(r"[^a-z0-9]", "", text.lower())


def strip_brand(normalized: str, brand: Optional[str] = None) -> str:
    """Remove a leading brand from an already normalized name.
    
    With a brand, the longest leading token run that either repeats the
    brand's leading tokens or spells the brand once spaces are removed
    ("dd hifi" for "ddHiFi") is dropped. A name that does not start
    with the brand is returned unchanged.
    
    Without a brand the first word is dropped.
    
    The result is never empty unless the input was.
    
    Args:
        normalized: Output of normalize()
        brand: Declared brand (raw form is fine)
        
    Returns:
        Brand-stripped normalized name
    """
    tokens = normalized.split()
    if len(tokens) < 2:
        return normalized

    brand_tokens = normalize(brand).split() if brand else []
    if not brand_tokens:
        return " ".join(tokens[1:])

    brand_compact = "".join(brand_tokens)
    strip = 0
    for size in range(1, len(tokens)):
        leading = tokens[:size]
        if leading == brand_tokens[:size] or "".join(leading) == brand_compact:
            strip = size
    if strip == 0:
        return normalized
    return " ".join(tokens[strip:])

