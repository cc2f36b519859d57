"""
Character-level explanation of one reference word against one typed word.

Cases, first match wins:
  0. normalized-equal (e.g. "schoen" for "schön"): everything typed is correct
  1. differs only by letter case (case-sensitive mode): wrong-case letters flagged
  2. typed word is part of the reference (compound): placeholders around the overlap
  3. reference is part of the typed word: extra characters around the overlap
  4. general forward scan with a short lookahead to re-synchronize

Placeholders stand in for reference characters not typed yet; punctuation is
always shown as itself, never as the placeholder glyph.
"""
from typing import List, Optional, Tuple

from core.keyboard import is_keyboard_adjacent
from core.models import PLACEHOLDER_GLYPH, CharSegment, SegmentKind
from core.normalization import is_punctuation, normalize

LOOKAHEAD = 3

HINT_CAPITALIZATION = "capitalization"
HINT_INITIAL_CAPITAL = "initial_capital"
HINT_ADJACENT_KEY = "adjacent_key"


def _placeholder(ref_char: str) -> CharSegment:
    return CharSegment(
        SegmentKind.PLACEHOLDER,
        ref_char if is_punctuation(ref_char) else PLACEHOLDER_GLYPH,
    )


def _chars_equal(a: str, b: str, preserve_case: bool) -> bool:
    return a == b if preserve_case else a.lower() == b.lower()


def _case_only(ref: str, cand: str) -> Tuple[CharSegment, ...]:
    out = []
    for i, (r, c) in enumerate(zip(ref, cand)):
        if r == c:
            out.append(CharSegment(SegmentKind.CORRECT, c))
        elif i == 0 and r.isupper() and c.islower():
            out.append(CharSegment(SegmentKind.INCORRECT, c, HINT_INITIAL_CAPITAL))
        else:
            out.append(CharSegment(SegmentKind.INCORRECT, c, HINT_CAPITALIZATION))
    return tuple(out)


def _overlap(ref: str, cand: str, ref_start: int, cand_start: int, length: int, preserve_case: bool) -> List[CharSegment]:
    segs = []
    for k in range(length):
        r, c = ref[ref_start + k], cand[cand_start + k]
        kind = SegmentKind.CORRECT if _chars_equal(r, c, preserve_case) else SegmentKind.INCORRECT
        segs.append(CharSegment(kind, c))
    return segs


def _candidate_in_reference(ref: str, cand: str, preserve_case: bool) -> Tuple[CharSegment, ...]:
    start = ref.lower().index(cand.lower())
    segs = [_placeholder(ch) for ch in ref[:start]]
    segs.extend(_overlap(ref, cand, start, 0, len(cand), preserve_case))
    segs.extend(_placeholder(ch) for ch in ref[start + len(cand):])
    return tuple(segs)


def _reference_in_candidate(ref: str, cand: str, preserve_case: bool) -> Tuple[CharSegment, ...]:
    start = cand.lower().index(ref.lower())
    segs = [CharSegment(SegmentKind.EXTRA, ch) for ch in cand[:start]]
    segs.extend(_overlap(ref, cand, 0, start, len(ref), preserve_case))
    segs.extend(CharSegment(SegmentKind.EXTRA, ch) for ch in cand[start + len(ref):])
    return tuple(segs)


def _scan(ref: str, cand: str, preserve_case: bool) -> Tuple[CharSegment, ...]:
    segs: List[CharSegment] = []
    i = j = 0
    while i < len(ref):
        r = ref[i]
        if is_punctuation(r):
            # Punctuation must be typed literally
            if j < len(cand) and cand[j] == r:
                segs.append(CharSegment(SegmentKind.CORRECT, r))
                j += 1
            else:
                segs.append(CharSegment(SegmentKind.PLACEHOLDER, r))
            i += 1
            continue
        if j >= len(cand):
            segs.append(_placeholder(r))
            i += 1
            continue
        c = cand[j]
        if is_punctuation(c):
            segs.append(CharSegment(SegmentKind.INCORRECT, c))
            j += 1
            continue
        if _chars_equal(r, c, preserve_case):
            segs.append(CharSegment(SegmentKind.CORRECT, c))
            i += 1
            j += 1
            continue

        # Typed characters inserted before the expected one?
        skip = next(
            (k for k in range(1, LOOKAHEAD + 1) if j + k < len(cand) and _chars_equal(r, cand[j + k], preserve_case)),
            None,
        )
        if skip is not None:
            segs.extend(CharSegment(SegmentKind.INCORRECT, ch) for ch in cand[j:j + skip])
            j += skip
            continue
        # Reference characters omitted?
        skip = next(
            (k for k in range(1, LOOKAHEAD + 1) if i + k < len(ref) and _chars_equal(ref[i + k], c, preserve_case)),
            None,
        )
        if skip is not None:
            segs.extend(_placeholder(ch) for ch in ref[i:i + skip])
            i += skip
            continue
        hint: Optional[str] = HINT_ADJACENT_KEY if is_keyboard_adjacent(r, c) else None
        segs.append(CharSegment(SegmentKind.INCORRECT, c, hint))
        i += 1
        j += 1

    segs.extend(CharSegment(SegmentKind.EXTRA, ch) for ch in cand[j:])
    return tuple(segs)


def diff_chars(reference_word: Optional[str], candidate_word: Optional[str], preserve_case: bool = False) -> Tuple[CharSegment, ...]:
    """
    Explain candidate_word against reference_word one character at a time.
    The non-placeholder segments always spell candidate_word.
    """
    ref = reference_word or ""
    cand = candidate_word or ""
    if not ref:
        return tuple(CharSegment(SegmentKind.EXTRA, ch) for ch in cand)
    if not cand:
        return tuple(_placeholder(ch) for ch in ref)

    if ref == cand or (
        normalize(ref, preserve_case=preserve_case)
        and normalize(ref, preserve_case=preserve_case) == normalize(cand, preserve_case=preserve_case)
    ):
        return tuple(CharSegment(SegmentKind.CORRECT, ch) for ch in cand)

    ref_lower, cand_lower = ref.lower(), cand.lower()
    # Lower-casing can change length for a few letters (İ); offsets below need 1:1.
    if len(ref_lower) != len(ref) or len(cand_lower) != len(cand):
        return _scan(ref, cand, preserve_case)
    if preserve_case and ref_lower == cand_lower:
        return _case_only(ref, cand)
    if cand_lower in ref_lower:
        return _candidate_in_reference(ref, cand, preserve_case)
    if ref_lower in cand_lower:
        return _reference_in_candidate(ref, cand, preserve_case)
    return _scan(ref, cand, preserve_case)
