import re
from typing import Optional

# ASCII notations learners type for umlauts and sharp-s: ae a/ a: -> ä, oe o/ o: -> ö,
# ue u/ u: -> ü, s/ -> ß. Matched case-insensitively.
_NOTATION_RE = re.compile(r"([aou])(?:e|/|:)|s/", re.IGNORECASE)
_UMLAUT_NOTATION_RE = re.compile(r"[äöüß]|[aou](?:e|/|:)|s/", re.IGNORECASE)
_PUNCTUATION_RE = re.compile(r"[^\w\s]|_")
_WHITESPACE_RE = re.compile(r"\s+")

_UMLAUTS = {"a": "ä", "o": "ö", "u": "ü"}


def _umlaut_for(match: "re.Match") -> str:
    vowel = match.group(1)
    if vowel is None:
        return "ß"
    umlaut = _UMLAUTS[vowel.lower()]
    return umlaut.upper() if vowel.isupper() else umlaut


def replace_notations(text: str) -> str:
    """Replace alternate umlaut / sharp-s notations with the single canonical letter."""
    return _NOTATION_RE.sub(_umlaut_for, text)


def has_umlaut_notation(text: Optional[str]) -> bool:
    """True if text holds an umlaut or ß, or one of their ASCII notations."""
    if not text:
        return False
    return _UMLAUT_NOTATION_RE.search(text) is not None


def is_punctuation(char: str) -> bool:
    """A single character that is neither a letter, a digit, nor whitespace."""
    return bool(char) and not char.isalnum() and not char.isspace()


def normalize(text: Optional[str], preserve_case: bool = False, strip_punctuation: bool = True) -> str:
    """
    Canonicalize German dictation text for comparison.
    Notations are replaced first; punctuation removal can join letters into a new
    notation ("a-e"), so the replacement runs once more at the end. Idempotent.
    """
    if not text:
        return ""

    text = replace_notations(text)

    if not preserve_case:
        text = text.lower()

    if strip_punctuation:
        text = _PUNCTUATION_RE.sub("", text)
        # Normalize whitespace
        text = _WHITESPACE_RE.sub(" ", text).strip()
        text = replace_notations(text)

    return text
