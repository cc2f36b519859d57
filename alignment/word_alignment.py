"""
Word-level alignment of a finished dictation against its reference.

Weighted edit-distance DP over the two word sequences: a pair that is exactly
equal after normalization costs 0 (match), any other pair costs
1 - similarity (substitution), an unmatched reference word (deletion) or typed
word (insertion) costs 1. Runs once per completed sentence or exercise; the
per-keystroke view uses streaming.live_matcher instead.

Tie-break between equal-cost paths: fewer ops first. Remaining ties are settled
while backtracking from the end, taking a deletion, then an insertion, before a
diagonal step, so matched pairs sit at the earliest indices
(["Haus", "Haus"] vs ["Haus"] gives Match(0, 0), Delete(1)).
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.models import AlignmentOp, OpKind
from core.normalization import has_umlaut_notation, normalize
from core.similarity import folded_similarity

INSERT_COST = 1.0
DELETE_COST = 1.0
# Substitution costs are fractional; compare path costs with a tolerance.
COST_EPSILON = 1e-9

_DIAG, _UP, _LEFT = 0, 1, 2


_Forms = Tuple[str, str, str, bool]


def _word_forms(word: Optional[str], preserve_case: bool) -> _Forms:
    """(exact form, raw stripped text, folded form, umlaut notation) for one word."""
    return (
        normalize(word, preserve_case=preserve_case),
        (word or "").strip(),
        normalize(word, preserve_case=False),
        has_umlaut_notation(word),
    )


def _pair_cost(ref: _Forms, cand: _Forms) -> Tuple[float, bool]:
    """
    Return (cost, exact) for one reference word against one typed word.
    Same result as are_exactly_equal and similarity on the raw words.
    """
    if ref[0] or cand[0]:
        exact = ref[0] == cand[0]
    else:
        exact = ref[1] == cand[1]
    if exact:
        return 0.0, True
    return 1.0 - folded_similarity(ref[2], cand[2], ref[3] or cand[3]), False


def _better(cost: float, nops: int, best_cost: float, best_nops: int) -> bool:
    if cost < best_cost - COST_EPSILON:
        return True
    return abs(cost - best_cost) <= COST_EPSILON and nops < best_nops


def align_words(
    reference_words: Sequence[str],
    candidate_words: Sequence[str],
    preserve_case: bool = False,
) -> Tuple[AlignmentOp, ...]:
    """
    Minimum-cost edit script between reference and candidate words.

    Returns ops in left-to-right order; every reference and candidate index
    appears in exactly one op. Empty reference gives all INSERT, empty
    candidate all DELETE, both empty gives ().
    """
    # Normalize each word once; the table compares cached forms.
    ref = [_word_forms(w, preserve_case) for w in reference_words or []]
    cand = [_word_forms(w, preserve_case) for w in candidate_words or []]
    R, H = len(ref), len(cand)

    # cost[i][j], nops[i][j]: best path aligning ref[:i] with cand[:j]
    cost = [[0.0] * (H + 1) for _ in range(R + 1)]
    nops = [[0] * (H + 1) for _ in range(R + 1)]
    back = [[_DIAG] * (H + 1) for _ in range(R + 1)]
    exact = [[False] * H for _ in range(R)]

    for i in range(1, R + 1):
        cost[i][0] = cost[i - 1][0] + DELETE_COST
        nops[i][0] = i
        back[i][0] = _UP
    for j in range(1, H + 1):
        cost[0][j] = cost[0][j - 1] + INSERT_COST
        nops[0][j] = j
        back[0][j] = _LEFT

    for i in range(1, R + 1):
        for j in range(1, H + 1):
            pair, is_exact = _pair_cost(ref[i - 1], cand[j - 1])
            exact[i - 1][j - 1] = is_exact
            # Candidates in tie-break order; a later one must be strictly better.
            best_cost = cost[i - 1][j] + DELETE_COST
            best_nops = nops[i - 1][j] + 1
            best_step = _UP
            left_cost, left_nops = cost[i][j - 1] + INSERT_COST, nops[i][j - 1] + 1
            if _better(left_cost, left_nops, best_cost, best_nops):
                best_cost, best_nops, best_step = left_cost, left_nops, _LEFT
            diag_cost, diag_nops = cost[i - 1][j - 1] + pair, nops[i - 1][j - 1] + 1
            if _better(diag_cost, diag_nops, best_cost, best_nops):
                best_cost, best_nops, best_step = diag_cost, diag_nops, _DIAG
            cost[i][j], nops[i][j], back[i][j] = best_cost, best_nops, best_step

    # Backtrack
    ops: List[AlignmentOp] = []
    i, j = R, H
    while i > 0 or j > 0:
        step = back[i][j]
        if step == _DIAG:
            kind = OpKind.MATCH if exact[i - 1][j - 1] else OpKind.SUBSTITUTE
            ops.append(AlignmentOp(kind, ref_index=i - 1, cand_index=j - 1))
            i -= 1
            j -= 1
        elif step == _UP:
            ops.append(AlignmentOp(OpKind.DELETE, ref_index=i - 1))
            i -= 1
        else:
            ops.append(AlignmentOp(OpKind.INSERT, cand_index=j - 1))
            j -= 1
    ops.reverse()
    return tuple(ops)


def count_ops(ops: Sequence[AlignmentOp]) -> Dict[str, int]:
    counts = {kind.value: 0 for kind in OpKind}
    for op in ops:
        counts[op.kind.value] += 1
    return counts


def describe_alignment(
    reference_words: Sequence[str],
    candidate_words: Sequence[str],
    ops: Sequence[AlignmentOp],
) -> List[Dict[str, Any]]:
    """Ops with their words attached, for the results view and JSON responses."""
    out: List[Dict[str, Any]] = []
    for op in ops:
        ref_word: Optional[str] = reference_words[op.ref_index] if op.ref_index is not None else None
        cand_word: Optional[str] = candidate_words[op.cand_index] if op.cand_index is not None else None
        entry = op.to_dict()
        entry["ref_word"] = ref_word
        entry["cand_word"] = cand_word
        out.append(entry)
    return out
