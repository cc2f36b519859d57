"""
Transcript error metrics: Word Error Rate (WER) and Character Error Rate (CER).
Both sides are normalized (umlaut notation, case, punctuation) before counting;
edit counts come from rapidfuzz, rate = (S + D + I) / reference length.
"""
from typing import Dict, List, Sequence, Tuple

from rapidfuzz.distance import Levenshtein

from core.normalization import normalize


def edit_counts(ref: Sequence[str], hyp: Sequence[str]) -> Dict[str, int]:
    """Substitutions, deletions and insertions turning ref into hyp (unit costs)."""
    counts = {"substitutions": 0, "deletions": 0, "insertions": 0}
    for op in Levenshtein.editops(ref, hyp):
        if op.tag == "replace":
            counts["substitutions"] += 1
        elif op.tag == "delete":
            counts["deletions"] += 1
        elif op.tag == "insert":
            counts["insertions"] += 1
    return counts


def _error_rate(ref_units: List[str], hyp_units: List[str]) -> float:
    if not ref_units:
        return 0.0 if not hyp_units else 1.0
    return Levenshtein.distance(ref_units, hyp_units) / len(ref_units)


def wer(reference: str, hypothesis: str, normalize_text: bool = True, preserve_case: bool = False) -> float:
    """
    Word Error Rate: (S + D + I) / N where N = number of reference words.
    Returns value in [0, +inf); 0 = perfect transcript.
    """
    if normalize_text:
        reference = normalize(reference, preserve_case=preserve_case)
        hypothesis = normalize(hypothesis, preserve_case=preserve_case)
    return _error_rate((reference or "").split(), (hypothesis or "").split())


def cer(
    reference: str,
    hypothesis: str,
    normalize_text: bool = True,
    preserve_case: bool = False,
    remove_spaces: bool = False,
) -> float:
    """
    Character Error Rate: (S + D + I) / N where N = number of reference characters.
    remove_spaces: compare without word boundaries (split compounds are not penalized).
    """
    if normalize_text:
        reference = normalize(reference, preserve_case=preserve_case)
        hypothesis = normalize(hypothesis, preserve_case=preserve_case)
    reference, hypothesis = reference or "", hypothesis or ""
    if remove_spaces:
        reference = reference.replace(" ", "")
        hypothesis = hypothesis.replace(" ", "")
    return _error_rate(list(reference), list(hypothesis))


def wer_cer(reference: str, hypothesis: str, preserve_case: bool = False) -> Tuple[float, float]:
    """Return (WER, CER) for the pair."""
    return (
        wer(reference, hypothesis, preserve_case=preserve_case),
        cer(reference, hypothesis, preserve_case=preserve_case),
    )
