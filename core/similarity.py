"""
Word similarity for dictation checking: Levenshtein distance (rapidfuzz) plus the
German-specific adjustments used by both aligners.
"""
from typing import Optional

from rapidfuzz.distance import Levenshtein

from core.normalization import has_umlaut_notation, normalize


# Typos around umlaut notation are expected; do not over-penalize them.
UMLAUT_BOOST = 1.2
# Edit tolerance for are_similar: short words (<= SHORT_WORD_MAX_LEN chars) allow 1 edit.
SHORT_WORD_MAX_LEN = 3
SHORT_WORD_MAX_EDITS = 1
LONG_WORD_MAX_EDITS = 2

# Compound-part guards for the live matcher.
COMPOUND_MIN_PART_LEN = 3
COMPOUND_MIN_SUFFIX_LEN = 4
COMPOUND_MIN_RATIO = 0.3
# Short words that must be typed as themselves, never accepted as part of a compound.
EXACT_MATCH_WORDS = frozenset(
    ["fährt", "fahrt", "büro", "buro", "in", "ihr", "ist", "es", "der", "die", "das"]
)


def _fold(text: Optional[str]) -> str:
    return normalize(text, preserve_case=False)


def distance(a: Optional[str], b: Optional[str], normalized: bool = False) -> int:
    """
    Unit-cost edit distance between two character sequences.
    normalized=True compares the normalized, case-folded forms, so the result is
    zero exactly when the words are normalized-equal.
    """
    a, b = a or "", b or ""
    if normalized:
        a, b = _fold(a), _fold(b)
    return Levenshtein.distance(a, b)


def similarity(a: Optional[str], b: Optional[str]) -> float:
    """
    1 - distance / longer length on normalized, case-folded forms.
    Returns 1.0 for normalized-equal words (two empty words included).
    """
    return folded_similarity(_fold(a), _fold(b), has_umlaut_notation(a) or has_umlaut_notation(b))


def folded_similarity(na: str, nb: str, umlaut_notation: bool = False) -> float:
    """similarity() for words already normalized and case-folded."""
    if na == nb:
        return 1.0
    longer = max(len(na), len(nb))
    score = 1.0 - Levenshtein.distance(na, nb) / longer
    if umlaut_notation:
        score = min(1.0, score * UMLAUT_BOOST)
    return score


def edit_tolerance(a: str, b: str) -> int:
    """Edits allowed between two normalized words before they stop being similar."""
    if max(len(a), len(b)) <= SHORT_WORD_MAX_LEN:
        return SHORT_WORD_MAX_EDITS
    return LONG_WORD_MAX_EDITS


def are_similar(a: Optional[str], b: Optional[str]) -> bool:
    na, nb = _fold(a), _fold(b)
    if na == nb:
        return True
    if not na or not nb:
        return False
    return Levenshtein.distance(na, nb) <= edit_tolerance(na, nb)


def are_exactly_equal(a: Optional[str], b: Optional[str], preserve_case: bool = False) -> bool:
    """
    Equality after normalization, no leniency. This is the only test behind
    "strictly correct" words, in the statistics and in the live view.
    """
    na = normalize(a, preserve_case=preserve_case)
    nb = normalize(b, preserve_case=preserve_case)
    if na or nb:
        return na == nb
    # Punctuation-only tokens normalize to "": compare them as typed.
    return (a or "").strip() == (b or "").strip()


def is_compound_substring(small: Optional[str], big: Optional[str]) -> bool:
    """True if one word's normalized form is a contiguous part of the other's."""
    ns, nb = _fold(small), _fold(big)
    if not ns or not nb:
        return False
    return ns in nb or nb in ns


def is_compound_part(part: Optional[str], compound: Optional[str]) -> bool:
    """
    Stricter containment for live matching: the typed part must be long enough
    and a meaningful share of the compound ("morgen" / "Montagmorgen").
    """
    p, c = _fold(part), _fold(compound)
    if not p or not c:
        return False
    if p == c:
        return True
    if p in EXACT_MATCH_WORDS or c in EXACT_MATCH_WORDS:
        return False
    if p in c and len(p) >= COMPOUND_MIN_PART_LEN and len(p) / len(c) >= COMPOUND_MIN_RATIO:
        return True
    if c.endswith(p) and len(p) >= COMPOUND_MIN_SUFFIX_LEN:
        return True
    if c.startswith(p) and len(p) >= COMPOUND_MIN_PART_LEN:
        return True
    # Same tail behind a garbled three-letter prefix
    if len(p) >= 6 and len(c) >= 6:
        tail = p[3:]
        if tail == c[3:] and len(tail) >= COMPOUND_MIN_SUFFIX_LEN:
            return True
    return False
